"""Runs installers in dependency order and collects a report."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

from sigao.installers import get_installer
from sigao.installers.base import Installer, InstallContext, InstallResult, StepOutcome
from sigao.installers.catalog import resolve_install_order

logger = logging.getLogger(__name__)

_T = TypeVar("_T")
StepWrapper = Callable[[str, Callable[[], _T]], _T]


class VerificationError(RuntimeError):
    """Raised when a tool is still missing after its install step."""


def _call(wrapper: StepWrapper | None, message: str, fn: Callable[[], _T]) -> _T:
    if wrapper is None:
        return fn()
    return wrapper(message, fn)


def run_installer(
    installer: Installer,
    ctx: InstallContext,
    *,
    step_wrapper: StepWrapper | None = None,
) -> InstallResult:
    """check -> install (when missing) -> configure -> verify.

    Configuration runs even for tools that are already present so repeated
    runs converge on the current block content.
    """
    module_id = installer.module_id
    steps: list[StepOutcome] = []
    try:
        already = installer.is_installed(ctx)
        if already:
            logger.info("%s is already installed", module_id)
        elif ctx.dry_run:
            logger.info("[dry run] would install %s", module_id)
            steps.append(StepOutcome(step="install", path=None, ok=True, action="dry-run"))
        else:
            _call(step_wrapper, f"Installing {module_id}...", lambda: installer.install(ctx))
            steps.append(StepOutcome(step="install", path=None, ok=True, action="installed"))

        steps.extend(installer.configure(ctx))

        if not already and not ctx.dry_run and not installer.verify(ctx):
            raise VerificationError(f"{module_id} did not verify after install")
    except (RuntimeError, OSError) as exc:
        logger.error("%s failed: %s", module_id, exc)
        return InstallResult(module_id=module_id, status="failed", steps=tuple(steps), error=str(exc))

    if not all(step.ok for step in steps):
        failed = ", ".join(step.step for step in steps if not step.ok)
        return InstallResult(
            module_id=module_id,
            status="partial",
            steps=tuple(steps),
            error=f"configuration failed: {failed}",
        )
    status = "skipped" if already or ctx.dry_run else "installed"
    return InstallResult(module_id=module_id, status=status, steps=tuple(steps))


@dataclass(frozen=True)
class ProvisionReport:
    results: tuple[InstallResult, ...]
    dry_run: bool
    mod_version: str

    def count(self, status: str) -> int:
        return sum(1 for result in self.results if result.status == status)

    @property
    def ok(self) -> bool:
        return all(result.status != "failed" for result in self.results)

    def to_dict(self) -> dict[str, Any]:
        return {
            "dry_run": self.dry_run,
            "mod_version": self.mod_version,
            "counts": {
                status: self.count(status) for status in ("installed", "skipped", "partial", "failed")
            },
            "results": [result.to_dict() for result in self.results],
        }


def run_provisioning(
    module_ids: list[str],
    ctx: InstallContext,
    *,
    installers: Mapping[str, Installer] | None = None,
    step_wrapper: StepWrapper | None = None,
) -> ProvisionReport:
    """Install ``module_ids`` plus their dependencies, one module at a time.

    A module whose dependency failed is reported as failed without running.
    ``installers`` overrides the default installer for a module id.
    """
    results: list[InstallResult] = []
    failed: set[str] = set()

    for spec in resolve_install_order(module_ids):
        blocked = [dep for dep in spec.dependencies if dep in failed]
        if blocked:
            logger.error("Skipping %s: dependency %s failed", spec.id, ", ".join(blocked))
            failed.add(spec.id)
            results.append(
                InstallResult(
                    module_id=spec.id,
                    status="failed",
                    error=f"dependency failed: {', '.join(blocked)}",
                )
            )
            continue

        if installers is not None and spec.id in installers:
            installer = installers[spec.id]
        else:
            installer = get_installer(spec.id)

        logger.debug("Running %s (priority %d)", spec.id, spec.priority)
        result = run_installer(installer, ctx, step_wrapper=step_wrapper)
        results.append(result)
        if result.status == "failed":
            failed.add(spec.id)
        else:
            ctx.installed_modules.add(spec.id)

    return ProvisionReport(results=tuple(results), dry_run=ctx.dry_run, mod_version=ctx.mod_version)


def write_report(report: ProvisionReport, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(report.to_dict(), indent=2, sort_keys=True) + "\n", encoding="utf-8")
