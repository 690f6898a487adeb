from __future__ import annotations

import json
from pathlib import Path

from sigao.exec import ExecError, ExecResult
from sigao.installers.base import InstallContext, StepOutcome
from sigao.installers.orchestrator import run_installer, run_provisioning, write_report
from sigao.mods.store import read_block


class _StubInstaller:
    def __init__(
        self,
        module_id: str,
        *,
        installed: bool = False,
        verifies: bool = True,
        install_error: Exception | None = None,
        block: str | None = None,
    ):
        self.module_id = module_id
        self.installed = installed
        self.verifies = verifies
        self.install_error = install_error
        self.block = block
        self.calls: list[str] = []

    def is_installed(self, ctx: InstallContext) -> bool:
        self.calls.append("is_installed")
        return self.installed

    def install(self, ctx: InstallContext) -> None:
        self.calls.append("install")
        if self.install_error is not None:
            raise self.install_error
        self.installed = True

    def configure(self, ctx: InstallContext) -> list[StepOutcome]:
        self.calls.append("configure")
        if self.block is None:
            return []
        return [ctx.write_block(ctx.home / ".bashrc", self.block, f"echo {self.module_id}")]

    def verify(self, ctx: InstallContext) -> bool:
        self.calls.append("verify")
        return self.verifies


def test_fresh_install_runs_every_step(make_ctx) -> None:
    ctx = make_ctx()
    stub = _StubInstaller("cargo", block="cargo-config")

    result = run_installer(stub, ctx)

    assert result.status == "installed"
    assert stub.calls == ["is_installed", "install", "configure", "verify"]
    assert [step.step for step in result.steps] == ["install", "cargo-config"]
    state = read_block(ctx.home / ".bashrc", "cargo-config")
    assert state is not None
    assert state.version == "9.9.9"


def test_already_installed_still_configures(make_ctx) -> None:
    ctx = make_ctx()
    stub = _StubInstaller("cargo", installed=True, block="cargo-config")

    result = run_installer(stub, ctx)

    assert result.status == "skipped"
    assert stub.calls == ["is_installed", "configure"]
    assert read_block(ctx.home / ".bashrc", "cargo-config") is not None


def test_dry_run_installs_and_writes_nothing(make_ctx) -> None:
    ctx = make_ctx(dry_run=True)
    stub = _StubInstaller("cargo", block="cargo-config")

    result = run_installer(stub, ctx)

    assert result.status == "skipped"
    assert "install" not in stub.calls
    assert "verify" not in stub.calls
    assert result.steps[0].action == "dry-run"
    assert not (ctx.home / ".bashrc").exists()


def test_install_failure_is_reported_not_raised(make_ctx) -> None:
    ctx = make_ctx()
    failure = ExecError(ExecResult(argv=("curl",), cwd=None, returncode=6, stdout="", stderr="no network"))
    stub = _StubInstaller("cargo", install_error=failure, block="cargo-config")

    result = run_installer(stub, ctx)

    assert result.status == "failed"
    assert "no network" in (result.error or "")
    assert "configure" not in stub.calls


def test_failed_verification_marks_module_failed(make_ctx) -> None:
    result = run_installer(_StubInstaller("cargo", verifies=False), make_ctx())

    assert result.status == "failed"
    assert "did not verify" in (result.error or "")


def test_failed_block_write_makes_result_partial(make_ctx, tmp_path: Path) -> None:
    # A directory where the rc file should be makes every write fail.
    (tmp_path / ".bashrc").mkdir()
    stub = _StubInstaller("cargo", installed=True, block="cargo-config")

    result = run_installer(stub, make_ctx())

    assert result.status == "partial"
    assert result.steps[0].ok is False
    assert "cargo-config" in (result.error or "")


def test_rejected_block_becomes_failed_step(make_ctx, tmp_path: Path) -> None:
    ctx = make_ctx()

    outcome = ctx.write_block(tmp_path / ".bashrc", "cargo-config", "echo a\n#</SIGAO_MOD>\necho b")

    assert outcome.ok is False
    assert outcome.action == "failed"
    assert not (tmp_path / ".bashrc").exists()


def test_rejected_block_makes_result_partial_and_run_continues(make_ctx) -> None:
    ctx = make_ctx()
    bad = _StubInstaller("node", installed=True, block="bad'name")
    good = _StubInstaller("claude", installed=True, block="claude-nvm-default")

    report = run_provisioning(["claude"], ctx, installers={"node": bad, "claude": good})

    assert [r.status for r in report.results] == ["partial", "skipped"]
    assert read_block(ctx.home / ".bashrc", "claude-nvm-default") is not None


def test_provisioning_runs_dependencies_first_and_stops_dependents(make_ctx) -> None:
    ctx = make_ctx()
    node = _StubInstaller("node", install_error=RuntimeError("nvm download failed"))
    claude = _StubInstaller("claude")
    essentials = _StubInstaller("essentials", installed=True)

    report = run_provisioning(
        ["claude", "essentials"],
        ctx,
        installers={"node": node, "claude": claude, "essentials": essentials},
    )

    assert [r.module_id for r in report.results] == ["essentials", "node", "claude"]
    assert [r.status for r in report.results] == ["skipped", "failed", "failed"]
    assert claude.calls == []
    assert ctx.installed_modules == {"essentials"}
    assert not report.ok
    assert report.count("failed") == 2


def test_provisioning_twice_converges(make_ctx) -> None:
    ctx = make_ctx()
    stubs = {"cargo": _StubInstaller("cargo", installed=True, block="cargo-config")}

    run_provisioning(["cargo"], ctx, installers=stubs)
    first = (ctx.home / ".bashrc").read_bytes()
    report = run_provisioning(["cargo"], ctx, installers=stubs)

    assert (ctx.home / ".bashrc").read_bytes() == first
    assert report.results[0].steps[0].action == "unchanged"


def test_step_wrapper_wraps_install(make_ctx) -> None:
    seen: list[str] = []

    def wrapper(message, fn):
        seen.append(message)
        return fn()

    run_installer(_StubInstaller("cargo"), make_ctx(), step_wrapper=wrapper)

    assert seen == ["Installing cargo..."]


def test_write_report_is_sorted_json(make_ctx, tmp_path: Path) -> None:
    report = run_provisioning(
        ["essentials"],
        make_ctx(),
        installers={"essentials": _StubInstaller("essentials", installed=True)},
    )
    out = tmp_path / "reports" / "run.json"

    write_report(report, out)

    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["counts"] == {"failed": 0, "installed": 0, "partial": 0, "skipped": 1}
    assert data["mod_version"] == "9.9.9"
    assert data["results"][0]["module_id"] == "essentials"
