"""User configuration for provisioning runs.

Read from ``~/.config/sigao/config.yaml`` (or ``$SIGAO_CONFIG``); environment
variables override the file and CLI flags override both.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from sigao import __version__

SHELL_CHOICES: tuple[str, ...] = ("auto", "bash", "zsh")
LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")
_KEYS = frozenset(
    {"shell", "modules", "mod_version", "log_level", "log_file", "dry_run", "git_name", "git_email"}
)
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ConfigError(ValueError):
    """Raised when the config file or an override holds an invalid value."""


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class SigaoConfig:
    shell: str = "auto"
    modules: tuple[str, ...] = ()
    mod_version: str = __version__
    log_level: str = "INFO"
    log_file: Path | None = None
    dry_run: bool = False
    git_name: str | None = None
    git_email: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SigaoConfig:
        """Parse and validate a config mapping."""
        unknown = sorted(set(data) - _KEYS)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

        modules = data.get("modules") or ()
        if isinstance(modules, str) or not all(isinstance(m, str) for m in modules):
            raise ConfigError("'modules' must be a list of module ids")

        log_file = data.get("log_file")
        config = cls(
            shell=str(data.get("shell", "auto")),
            modules=tuple(modules),
            mod_version=str(data.get("mod_version", __version__)),
            log_level=str(data.get("log_level", "INFO")).upper(),
            log_file=Path(log_file).expanduser() if log_file else None,
            dry_run=bool(data.get("dry_run", False)),
            git_name=_optional_str(data.get("git_name")),
            git_email=_optional_str(data.get("git_email")),
        )
        config.validate()
        return config

    def validate(self) -> None:
        if self.shell not in SHELL_CHOICES:
            raise ConfigError(f"shell must be one of {', '.join(SHELL_CHOICES)}, got {self.shell!r}")
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}")
        if not self.mod_version.strip():
            raise ConfigError("mod_version must not be empty")
        if self.git_email is not None and not _EMAIL_RE.match(self.git_email):
            raise ConfigError(f"git_email is not a valid email address: {self.git_email!r}")


def default_config_path() -> Path:
    override = os.environ.get("SIGAO_CONFIG")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "sigao" / "config.yaml"


def load_config(path: Path | None = None, env: Mapping[str, str] | None = None) -> SigaoConfig:
    config_path = path or default_config_path()
    data: dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError(f"{config_path} must contain a mapping")
        data = loaded or {}

    config = SigaoConfig.from_dict(data)
    return apply_env_overrides(config, os.environ if env is None else env)


def apply_env_overrides(config: SigaoConfig, env: Mapping[str, str]) -> SigaoConfig:
    overrides: dict[str, Any] = {}
    if env.get("SIGAO_SHELL"):
        overrides["shell"] = env["SIGAO_SHELL"]
    if env.get("SIGAO_MOD_VERSION"):
        overrides["mod_version"] = env["SIGAO_MOD_VERSION"]
    if env.get("SIGAO_LOG_LEVEL"):
        overrides["log_level"] = env["SIGAO_LOG_LEVEL"].upper()
    if env.get("SIGAO_GIT_NAME"):
        overrides["git_name"] = env["SIGAO_GIT_NAME"]
    if env.get("SIGAO_GIT_EMAIL"):
        overrides["git_email"] = env["SIGAO_GIT_EMAIL"]
    if not overrides:
        return config

    updated = replace(config, **overrides)
    updated.validate()
    return updated
