"""Rust toolchain via rustup."""

from __future__ import annotations

import os

from sigao.installers.base import InstallContext, StepOutcome

RUSTUP_INSTALL = (
    'curl --proto "=https" --tlsv1.2 -sSf https://sh.rustup.rs'
    " | sh -s -- -y --default-toolchain stable --profile default"
)
CARGO_BINARIES: tuple[str, ...] = ("rustup", "cargo", "rustc")


def cargo_config(env_file_exists: bool) -> str:
    if env_file_exists:
        return '# Rust/Cargo configuration\nsource "$HOME/.cargo/env"'
    return '# Rust/Cargo configuration\nexport PATH="$HOME/.cargo/bin:$PATH"'


class CargoInstaller:
    module_id = "cargo"

    def is_installed(self, ctx: InstallContext) -> bool:
        return all(ctx.command_exists(binary) for binary in CARGO_BINARIES)

    def install(self, ctx: InstallContext) -> None:
        env = dict(os.environ)
        env["CARGO_HOME"] = str(ctx.home / ".cargo")
        env["RUSTUP_HOME"] = str(ctx.home / ".rustup")
        ctx.runner(["sh", "-c", RUSTUP_INSTALL], env=env)

    def configure(self, ctx: InstallContext) -> list[StepOutcome]:
        content = cargo_config((ctx.home / ".cargo" / "env").exists())
        return [ctx.write_block(rc_path, "cargo-config", content) for rc_path in ctx.rc_paths()]

    def verify(self, ctx: InstallContext) -> bool:
        # rustup installs into ~/.cargo/bin, which is not on PATH until a new shell starts.
        cargo_bin = ctx.home / ".cargo" / "bin"
        if all(os.access(cargo_bin / binary, os.X_OK) for binary in CARGO_BINARIES):
            return True
        return self.is_installed(ctx)
