"""Managed SIGAO_MOD blocks inside shell rc files."""

from sigao.mods.codec import find_all_blocks, find_block, render
from sigao.mods.hashing import fingerprint
from sigao.mods.registry import get_block_owners, get_file_modifications, get_module_modifications
from sigao.mods.store import (
    BlockState,
    BlockWriteError,
    DriftEntry,
    WriteResult,
    audit_drift,
    backfill_hashes,
    read_block,
    remove_block,
    upsert_block,
)

__all__ = [
    "BlockState",
    "BlockWriteError",
    "DriftEntry",
    "WriteResult",
    "audit_drift",
    "backfill_hashes",
    "find_all_blocks",
    "find_block",
    "fingerprint",
    "get_block_owners",
    "get_file_modifications",
    "get_module_modifications",
    "read_block",
    "remove_block",
    "render",
    "upsert_block",
]
