"""Tagged-block codec for SIGAO_MOD regions in shell rc files.

A managed block looks like::

    #<SIGAO_MOD name='direnv-hook' ver='v1.12.2' hash='0123456789abcdef'>
    eval "$(direnv hook bash)"
    #</SIGAO_MOD>

Both tag lines are shell comments, so an rc file stays valid shell. Blocks are
located with a line scanner instead of a single multi-line pattern: an open tag
line starts a candidate and the first following close tag line ends it.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from typing import NamedTuple

from sigao.mods.hashing import fingerprint

logger = logging.getLogger(__name__)

OPEN_TAG_PREFIX = "#<SIGAO_MOD"
CLOSE_TAG = "#</SIGAO_MOD>"

_ATTRIBUTE_RE = re.compile(r"""\s*([A-Za-z_][\w-]*)=(?:'([^']*)'|"([^"]*)")""")
_FORBIDDEN_VALUE_CHARS = frozenset("'\"<>\r\n")


class BlockMatch(NamedTuple):
    start: int
    end: int
    tag_start: int
    tag_end: int
    name: str
    version: str | None
    stored_hash: str | None
    tag: str
    body: str

    @property
    def content(self) -> str:
        return self.body.strip()


def parse_open_tag(line: str) -> dict[str, str] | None:
    """Parse one open tag line into its attributes.

    ``name`` must come first; ``ver`` and ``hash`` are optional. Returns None
    for anything that is not a well-formed open tag.
    """
    stripped = line.strip()
    if not stripped.startswith(OPEN_TAG_PREFIX) or not stripped.endswith(">"):
        return None

    inner = stripped[len(OPEN_TAG_PREFIX) : -1]
    if not inner or not inner[0].isspace():
        return None

    attrs: dict[str, str] = {}
    pos = 0
    while inner[pos:].strip():
        match = _ATTRIBUTE_RE.match(inner, pos)
        if match is None:
            return None
        value = match.group(2) if match.group(2) is not None else match.group(3)
        attrs.setdefault(match.group(1), value)
        pos = match.end()

    if not attrs or next(iter(attrs)) != "name" or not attrs["name"]:
        return None
    return attrs


def _attribute_value(tag: str, key: str) -> str | None:
    for match in _ATTRIBUTE_RE.finditer(tag):
        if match.group(1) == key:
            return match.group(2) if match.group(2) is not None else match.group(3)
    return None


def extract_version(tag: str) -> str | None:
    return _attribute_value(tag, "ver")


def extract_hash(tag: str) -> str | None:
    return _attribute_value(tag, "hash")


def _iter_lines(text: str) -> Iterator[tuple[int, int]]:
    """Yield (start, end) offsets of each line, excluding the newline."""
    pos = 0
    length = len(text)
    while pos < length:
        newline = text.find("\n", pos)
        end = length if newline == -1 else newline
        yield pos, end
        pos = end + 1


def _scan(text: str) -> Iterator[BlockMatch]:
    pending: tuple[int, int, int, dict[str, str], int] | None = None

    for line_start, line_end in _iter_lines(text):
        line = text[line_start:line_end]

        attrs = parse_open_tag(line)
        if attrs is not None:
            if pending is not None:
                logger.debug("Dropping unterminated SIGAO_MOD block %r", pending[3]["name"])
            tag_start = line_start + (len(line) - len(line.lstrip()))
            tag_end = tag_start + len(line.strip())
            pending = (line_start, tag_start, tag_end, attrs, line_end + 1)
            continue

        if pending is None or line.strip() != CLOSE_TAG:
            continue

        block_start, tag_start, tag_end, attrs, body_start = pending
        pending = None
        yield BlockMatch(
            start=block_start,
            end=line_start + line.index(CLOSE_TAG) + len(CLOSE_TAG),
            tag_start=tag_start,
            tag_end=tag_end,
            name=attrs["name"],
            version=attrs.get("ver"),
            stored_hash=attrs.get("hash"),
            tag=text[tag_start:tag_end],
            body=text[body_start:line_start],
        )

    if pending is not None:
        logger.debug("Dropping unterminated SIGAO_MOD block %r", pending[3]["name"])


def find_block(text: str, name: str) -> BlockMatch | None:
    """Return the first complete block called ``name``."""
    for block in _scan(text):
        if block.name == name:
            return block
    return None


def find_all_blocks(text: str) -> list[BlockMatch]:
    return list(_scan(text))


def _check_value(label: str, value: str) -> None:
    if not value:
        raise ValueError(f"SIGAO_MOD {label} must not be empty")
    if any(ch in _FORBIDDEN_VALUE_CHARS for ch in value):
        raise ValueError(f"SIGAO_MOD {label} contains quotes, angle brackets or line breaks: {value!r}")


def render_open_tag(name: str, version: str | None, content_hash: str) -> str:
    _check_value("name", name)
    if version is None:
        return f"{OPEN_TAG_PREFIX} name='{name}' hash='{content_hash}'>"
    _check_value("version", version)
    return f"{OPEN_TAG_PREFIX} name='{name}' ver='{version}' hash='{content_hash}'>"


def add_hash(tag: str, content_hash: str, version: str | None = None) -> str:
    """Append ``hash`` (and ``ver`` when given) to an existing open tag.

    The original tag text is kept as is, so legacy values the writer would
    refuse survive a backfill.
    """
    extra = ""
    if version is not None:
        _check_value("version", version)
        extra = f" ver='{version}'"
    return f"{tag[:-1]}{extra} hash='{content_hash}'>"


def _check_body(content: str) -> None:
    for line in content.split("\n"):
        if line.strip() == CLOSE_TAG or parse_open_tag(line) is not None:
            raise ValueError(f"SIGAO_MOD block body must not contain tag lines: {line.strip()!r}")


def render(name: str, version: str, body: str) -> str:
    """Render a complete block; the body is trimmed and fingerprinted.

    A body line that reads as an open or close tag would split the block on
    the next scan, so it is rejected.
    """
    content = body.strip()
    _check_body(content)
    return f"{render_open_tag(name, version, fingerprint(content))}\n{content}\n{CLOSE_TAG}"
