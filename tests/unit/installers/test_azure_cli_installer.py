from __future__ import annotations

from dataclasses import replace

import pytest

from sigao.installers.azure_cli import AZURE_CLI_DEB_INSTALL, AzureCliInstaller
from sigao.installers.base import UnsupportedPlatformError


def test_install_on_apt_uses_microsoft_script(make_ctx, fake_runner) -> None:
    AzureCliInstaller().install(make_ctx())

    assert fake_runner.calls == [["sh", "-c", AZURE_CLI_DEB_INSTALL]]


def test_install_on_mac_uses_brew(make_ctx, fake_runner, linux_platform) -> None:
    mac = replace(linux_platform, system="darwin", is_apt=False)

    AzureCliInstaller().install(make_ctx(platform=mac, commands={"brew"}))

    assert fake_runner.calls == [["brew", "install", "azure-cli"]]


def test_install_elsewhere_is_unsupported(make_ctx, linux_platform) -> None:
    fedora = replace(linux_platform, distro="fedora", is_apt=False)

    with pytest.raises(UnsupportedPlatformError):
        AzureCliInstaller().install(make_ctx(platform=fedora))


def test_verify_runs_az_version(make_ctx, fake_runner) -> None:
    fake_runner.responses["az"] = (0, "azure-cli  2.64.0\n")

    assert AzureCliInstaller().verify(make_ctx(commands={"az"}))
    assert not AzureCliInstaller().verify(make_ctx())
