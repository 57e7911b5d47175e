"""go.mod parsing."""

import re
from dataclasses import dataclass, field

from ..errors import ManifestParseError

# Directives that may appear in a go.mod but carry nothing we need.
IGNORED_DIRECTIVES = {
    "go",
    "toolchain",
    "godebug",
    "replace",
    "exclude",
    "retract",
    "tool",
    "ignore",
}

BLOCK_OPEN_PATTERN = re.compile(r'^(\w+)\s*\($')


@dataclass
class Requirement:
    """A single ``require`` entry."""
    path: str
    version: str
    indirect: bool = False


@dataclass
class GoModFile:
    """The parts of a go.mod file relevant to dependency checks."""
    module: str | None = None
    requires: list[Requirement] = field(default_factory=list)

    def direct_requirement(self, path: str) -> Requirement | None:
        """Return the non-indirect requirement for ``path``, if any."""
        for req in self.requires:
            if req.path == path and not req.indirect:
                return req
        return None


def _split_comment(line: str) -> tuple[str, str | None]:
    """Split a line into code and trailing ``//`` comment text."""
    in_quote = None
    for i, ch in enumerate(line):
        if in_quote:
            if ch == in_quote:
                in_quote = None
            continue
        if ch in ('"', '`'):
            in_quote = ch
        elif line.startswith("//", i):
            return line[:i].strip(), line[i + 2:].strip()
    return line.strip(), None


def _is_indirect(comment: str | None) -> bool:
    if comment is None:
        return False
    return comment == "indirect" or comment.startswith("indirect;")


def _unquote(token: str) -> str:
    if len(token) >= 2 and token[0] == token[-1] and token[0] in ('"', '`'):
        return token[1:-1]
    return token


def _parse_requirement(tokens: list[str], comment: str | None, lineno: int) -> Requirement:
    if len(tokens) != 2:
        raise ManifestParseError(
            "usage: require module/path v1.2.3", line=lineno
        )
    path, version = _unquote(tokens[0]), _unquote(tokens[1])
    if not version.startswith("v"):
        raise ManifestParseError(
            f"invalid version {version!r} for {path}", line=lineno
        )
    return Requirement(path=path, version=version, indirect=_is_indirect(comment))


def parse_go_mod(data: bytes | str) -> GoModFile:
    """Parse go.mod content into its module path and requirements.

    Raises ManifestParseError for content that cannot be a valid go.mod.
    """
    if isinstance(data, bytes):
        try:
            content = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ManifestParseError(f"not valid UTF-8: {e}") from e
    else:
        content = data

    mod = GoModFile()
    block: str | None = None
    block_start = 0

    for lineno, raw in enumerate(content.splitlines(), start=1):
        line, comment = _split_comment(raw)
        if not line:
            continue

        if block is not None:
            if line == ")":
                block = None
                continue
            if block == "require":
                mod.requires.append(
                    _parse_requirement(line.split(), comment, lineno)
                )
            continue

        if line == ")":
            raise ManifestParseError("unexpected ')'", line=lineno)

        opener = BLOCK_OPEN_PATTERN.match(line)
        if opener:
            block = opener.group(1)
            block_start = lineno
            continue

        tokens = line.split()
        directive = tokens[0]

        if directive == "module":
            if len(tokens) != 2:
                raise ManifestParseError("usage: module module/path", line=lineno)
            mod.module = _unquote(tokens[1])
        elif directive == "require":
            mod.requires.append(_parse_requirement(tokens[1:], comment, lineno))
        elif directive not in IGNORED_DIRECTIVES:
            raise ManifestParseError(f"unknown directive: {directive}", line=lineno)

    if block is not None:
        raise ManifestParseError(
            f"unterminated {block} block", line=block_start
        )

    return mod
