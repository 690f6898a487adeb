from __future__ import annotations

from sigao.installers.catalog import MODULES
from sigao.mods.registry import (
    BASHRC,
    ZSHRC,
    get_block_owners,
    get_file_modifications,
    get_module_modifications,
    list_modules,
)


def test_every_registered_module_is_in_the_catalog() -> None:
    catalog_ids = {spec.id for spec in MODULES}
    assert set(list_modules()) <= catalog_ids


def test_module_lookup() -> None:
    names = [mod.name for mod in get_module_modifications("direnv")]
    assert names == ["direnv-hook", "direnv-plugin"]
    assert get_module_modifications("no-such-module") == []


def test_file_lookup_is_inverse_of_module_lookup() -> None:
    zsh_only = {(mod.module, mod.name) for mod in get_file_modifications(ZSHRC)} - {
        (mod.module, mod.name) for mod in get_file_modifications(BASHRC)
    }
    assert ("shell", "oh-my-zsh-config") in zsh_only
    assert ("direnv", "direnv-plugin") in zsh_only
    assert all(mod.module == "shell" for mod in get_file_modifications(BASHRC) if mod.name == "bash-enhancements")


def test_block_owners() -> None:
    assert get_block_owners("logo-display") == ["shell", "shell-enhancements"]
    assert get_block_owners("cargo-config") == ["cargo"]
    assert get_block_owners("hand-written") == []
