"""Python version management with pyenv."""

from __future__ import annotations

from sigao.installers.base import InstallContext, StepOutcome

PYENV_REPO = "https://github.com/pyenv/pyenv.git"
PYENV_VIRTUALENV_REPO = "https://github.com/pyenv/pyenv-virtualenv.git"

# Headers needed to compile CPython from source on Debian-family systems.
BUILD_DEPENDENCIES: tuple[str, ...] = (
    "make",
    "build-essential",
    "libssl-dev",
    "zlib1g-dev",
    "libbz2-dev",
    "libreadline-dev",
    "libsqlite3-dev",
    "libncursesw5-dev",
    "xz-utils",
    "tk-dev",
    "libxml2-dev",
    "libxmlsec1-dev",
    "libffi-dev",
    "liblzma-dev",
)

PYENV_CONFIG = """# pyenv configuration
export PYENV_ROOT="$HOME/.pyenv"
export PATH="$PYENV_ROOT/bin:$PATH"
eval "$(pyenv init -)"
eval "$(pyenv virtualenv-init -)\""""


class PythonInstaller:
    module_id = "python"

    def is_installed(self, ctx: InstallContext) -> bool:
        return (ctx.home / ".pyenv" / "bin" / "pyenv").exists()

    def install(self, ctx: InstallContext) -> None:
        if ctx.platform.is_apt:
            ctx.install_packages(*BUILD_DEPENDENCIES)

        pyenv_root = ctx.home / ".pyenv"
        if not pyenv_root.is_dir():
            ctx.runner(["git", "clone", "--depth", "1", PYENV_REPO, str(pyenv_root)])

        plugin_dir = pyenv_root / "plugins" / "pyenv-virtualenv"
        if not plugin_dir.is_dir():
            ctx.runner(["git", "clone", "--depth", "1", PYENV_VIRTUALENV_REPO, str(plugin_dir)])

    def configure(self, ctx: InstallContext) -> list[StepOutcome]:
        return [ctx.write_block(rc_path, "pyenv-config", PYENV_CONFIG) for rc_path in ctx.rc_paths()]

    def verify(self, ctx: InstallContext) -> bool:
        return self.is_installed(ctx)
