"""Tool installers, keyed by catalog module id."""

from __future__ import annotations

from sigao.installers.azure_cli import AzureCliInstaller
from sigao.installers.base import Installer
from sigao.installers.cargo import CargoInstaller
from sigao.installers.catalog import UnknownModuleError
from sigao.installers.claude import ClaudeInstaller
from sigao.installers.cli_tools import CliToolsInstaller
from sigao.installers.direnv import DirenvInstaller
from sigao.installers.docker import DockerInstaller
from sigao.installers.dotnet import DotnetInstaller
from sigao.installers.essentials import EssentialsInstaller
from sigao.installers.git_config import GitConfigInstaller
from sigao.installers.node import NodeInstaller
from sigao.installers.python import PythonInstaller
from sigao.installers.python_tools import PythonToolsInstaller
from sigao.installers.shell import ShellInstaller
from sigao.installers.shell_enhancements import ShellEnhancementsInstaller

INSTALLERS: dict[str, type[Installer]] = {
    "shell": ShellInstaller,
    "essentials": EssentialsInstaller,
    "git-config": GitConfigInstaller,
    "cargo": CargoInstaller,
    "cli-tools": CliToolsInstaller,
    "direnv": DirenvInstaller,
    "node": NodeInstaller,
    "claude": ClaudeInstaller,
    "docker": DockerInstaller,
    "shell-enhancements": ShellEnhancementsInstaller,
    "azure-cli": AzureCliInstaller,
    "dotnet": DotnetInstaller,
    "python-tools": PythonToolsInstaller,
    "python": PythonInstaller,
}


def get_installer(module_id: str) -> Installer:
    try:
        return INSTALLERS[module_id]()
    except KeyError:
        raise UnknownModuleError(module_id) from None
