from __future__ import annotations

import pytest

from sigao.installers import INSTALLERS, get_installer
from sigao.installers.catalog import (
    CATEGORIES,
    MODULES,
    UnknownModuleError,
    get_enabled_modules,
    get_module,
    get_modules_by_tag,
    resolve_install_order,
)


def test_every_catalog_module_has_an_installer() -> None:
    assert {spec.id for spec in MODULES} == set(INSTALLERS)
    for spec in MODULES:
        assert get_installer(spec.id).module_id == spec.id


def test_categories_cover_the_catalog() -> None:
    listed = [module_id for _, module_ids in CATEGORIES for module_id in module_ids]
    assert sorted(listed) == sorted(spec.id for spec in MODULES)


def test_enabled_and_tag_lookups() -> None:
    enabled = [spec.id for spec in get_enabled_modules()]
    assert "dotnet" not in enabled
    assert "python" not in enabled
    assert enabled[:2] == ["shell", "essentials"]
    assert [spec.id for spec in get_modules_by_tag("core")] == ["shell", "essentials"]


def test_resolve_install_order_pulls_in_dependencies_first() -> None:
    order = [spec.id for spec in resolve_install_order(["claude", "essentials"])]
    assert order == ["essentials", "node", "claude"]


def test_resolve_install_order_uses_priority_and_deduplicates() -> None:
    order = [spec.id for spec in resolve_install_order(["shell-enhancements", "direnv", "shell", "direnv"])]
    assert order == ["shell", "direnv", "cargo", "cli-tools", "shell-enhancements"]


def test_unknown_module() -> None:
    with pytest.raises(UnknownModuleError) as excinfo:
        get_module("emacs")
    assert str(excinfo.value) == "Unknown module: emacs"

    with pytest.raises(UnknownModuleError):
        resolve_install_order(["shell", "emacs"])

    with pytest.raises(UnknownModuleError):
        get_installer("emacs")
