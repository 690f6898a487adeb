"""Read, upsert, remove and audit SIGAO_MOD blocks inside shell rc files.

Every operation reads the whole file, edits it in memory and writes the whole
file back. Writes go through a temp file in the same directory followed by
``os.replace``, so a crash never leaves a half-written rc file behind.

There is no locking: two processes editing the same file concurrently race and
the last writer wins. Provisioning runs are sequential, so this only matters
if the store is reused somewhere with parallel writers.
"""

from __future__ import annotations

import difflib
import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from sigao.mods import codec
from sigao.mods.hashing import fingerprint

logger = logging.getLogger(__name__)

Position = Literal["start", "end"]
WriteAction = Literal["inserted", "replaced", "unchanged"]

POSITIONS: tuple[str, ...] = ("start", "end")


class BlockWriteError(OSError):
    """Raised when an rc file cannot be read for update or written back."""

    def __init__(self, path: Path, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path


@dataclass(frozen=True)
class BlockState:
    name: str
    content: str
    version: str | None
    stored_hash: str | None
    current_hash: str
    has_drift: bool
    tag: str


@dataclass(frozen=True)
class DriftEntry:
    name: str
    version: str | None
    stored_hash: str | None
    current_hash: str
    has_drift: bool
    line: int


@dataclass(frozen=True)
class WriteResult:
    path: Path
    name: str
    action: WriteAction
    changed: bool
    diff: str


def _has_drift(stored_hash: str | None, current_hash: str) -> bool:
    return stored_hash is not None and stored_hash != current_hash


def _read_optional(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("No managed blocks readable from %s: %s", path, exc)
        return None


def _read_for_update(path: Path, *, missing_ok: bool) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        if missing_ok:
            return ""
        raise BlockWriteError(path, "rc file does not exist") from None
    except (OSError, UnicodeDecodeError) as exc:
        raise BlockWriteError(path, f"failed to read rc file ({exc})") from exc


def unified_diff(old: str, new: str, *, path: Path) -> str:
    return "".join(
        difflib.unified_diff(
            old.splitlines(keepends=True),
            new.splitlines(keepends=True),
            fromfile=str(path),
            tofile=str(path),
        )
    )


def _atomic_write(path: Path, content: str) -> None:
    target = path.resolve() if path.is_symlink() else path
    mode: int | None = None
    if target.exists():
        mode = stat.S_IMODE(target.stat().st_mode)

    tmp_path: Path | None = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=target.parent,
            delete=False,
            prefix=f".{target.name}.",
            suffix=".sigao.tmp",
        ) as tmp_file:
            tmp_file.write(content)
            tmp_path = Path(tmp_file.name)
        if mode is not None:
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, target)
    except OSError as exc:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise BlockWriteError(path, f"failed to write rc file ({exc})") from exc


def _insert(text: str, block: str, position: Position) -> str:
    if not text:
        return f"{block}\n"
    if position == "start":
        separator = "\n" if text.startswith("\n") else "\n\n"
        return f"{block}{separator}{text}"
    if text.endswith("\n\n"):
        separator = ""
    elif text.endswith("\n"):
        separator = "\n"
    else:
        separator = "\n\n"
    return f"{text}{separator}{block}\n"


def _cut(text: str, start: int, end: int) -> str:
    before = text[:start]
    after = text[end:]
    head = before.rstrip("\n")
    tail = after.lstrip("\n")

    if not head:
        return tail
    if not tail:
        return f"{head}\n"

    blank = (len(before) - len(head)) >= 2 or (len(after) - len(tail)) >= 2
    separator = "\n\n" if blank else "\n"
    return f"{head}{separator}{tail}"


def read_block(path: Path, name: str) -> BlockState | None:
    """Return the state of block ``name`` in ``path``, or None when there is none.

    A missing or unreadable file is reported the same way as a missing block.
    """
    text = _read_optional(path)
    if text is None:
        return None

    block = codec.find_block(text, name)
    if block is None:
        return None

    current_hash = fingerprint(block.content)
    return BlockState(
        name=block.name,
        content=block.content,
        version=block.version,
        stored_hash=block.stored_hash,
        current_hash=current_hash,
        has_drift=_has_drift(block.stored_hash, current_hash),
        tag=block.tag,
    )


def upsert_block(
    path: Path,
    name: str,
    content: str,
    version: str,
    *,
    position: Position = "end",
    dry_run: bool = False,
) -> WriteResult:
    """Insert or replace block ``name`` in ``path``.

    An existing block is replaced in place. Otherwise the block is added at
    ``position`` with one blank line between it and the existing text. The
    file is created when missing. Calling twice with the same arguments
    leaves the file byte-identical.
    """
    if position not in POSITIONS:
        raise ValueError(f"position must be one of {', '.join(POSITIONS)}, got {position!r}")

    rendered = codec.render(name, version, content)
    old = _read_for_update(path, missing_ok=True)

    existing = codec.find_block(old, name)
    if existing is not None:
        new = f"{old[:existing.start]}{rendered}{old[existing.end:]}"
        action: WriteAction = "replaced"
    else:
        new = _insert(old, rendered, position)
        action = "inserted"

    changed = new != old
    if not changed:
        action = "unchanged"
    diff = unified_diff(old, new, path=path)

    if changed and not dry_run:
        _atomic_write(path, new)
        logger.debug("%s block %s in %s", action.capitalize(), name, path)

    return WriteResult(path=path, name=name, action=action, changed=changed, diff=diff)


def remove_block(path: Path, name: str, *, dry_run: bool = False) -> bool:
    """Delete block ``name`` and collapse the blank lines around it to at most one.

    Returns False, without touching the file, when the block is not there.
    """
    old = _read_for_update(path, missing_ok=False)
    block = codec.find_block(old, name)
    if block is None:
        return False

    if not dry_run:
        _atomic_write(path, _cut(old, block.start, block.end))
        logger.debug("Removed block %s from %s", name, path)
    return True


def audit_drift(path: Path) -> list[DriftEntry]:
    """Report drift for every block in ``path``; read-only."""
    text = _read_optional(path)
    if text is None:
        return []

    entries: list[DriftEntry] = []
    for block in codec.find_all_blocks(text):
        current_hash = fingerprint(block.content)
        entries.append(
            DriftEntry(
                name=block.name,
                version=block.version,
                stored_hash=block.stored_hash,
                current_hash=current_hash,
                has_drift=_has_drift(block.stored_hash, current_hash),
                line=text.count("\n", 0, block.start) + 1,
            )
        )
    return entries


def backfill_hashes(
    path: Path,
    *,
    fallback_version: str | None = None,
    dry_run: bool = False,
) -> int:
    """Add a ``hash`` attribute to every block written without one.

    Only the open tag is extended; its existing attributes and the body stay
    byte-for-byte as they are. ``fallback_version`` adds ``ver`` to blocks
    that have no ``ver`` attribute at all. Returns the number of blocks
    updated.
    """
    old = _read_for_update(path, missing_ok=False)
    legacy = [block for block in codec.find_all_blocks(old) if block.stored_hash is None]
    if not legacy:
        return 0

    new = old
    for block in reversed(legacy):
        tag = codec.add_hash(
            block.tag,
            fingerprint(block.content),
            fallback_version if block.version is None else None,
        )
        new = f"{new[:block.tag_start]}{tag}{new[block.tag_end:]}"

    if not dry_run:
        _atomic_write(path, new)
        logger.debug("Backfilled %d hash(es) in %s", len(legacy), path)
    return len(legacy)
