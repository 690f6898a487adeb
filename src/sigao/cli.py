"""Sigao CLI - provisioning and SIGAO_MOD block maintenance."""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import asdict, dataclass
from pathlib import Path

import click
import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

from sigao import __version__
from sigao.config import LOG_LEVELS, SHELL_CHOICES, ConfigError, SigaoConfig, load_config
from sigao.installers import INSTALLERS, get_installer
from sigao.installers.base import InstallContext
from sigao.installers.catalog import (
    CATEGORIES,
    MODULES,
    get_enabled_modules,
    get_module,
)
from sigao.installers.orchestrator import ProvisionReport, run_provisioning, write_report
from sigao.logging_utils import configure_logging
from sigao.mods import registry
from sigao.mods.store import (
    POSITIONS,
    BlockWriteError,
    audit_drift,
    backfill_hashes,
    read_block,
    remove_block,
    upsert_block,
)
from sigao.platform import PlatformInfo, detect_platform, infer_shell
from sigao.ui import CHEATSHEET, Spinner, render_banner, should_show_banner, status_text

logger = logging.getLogger(__name__)

cli = typer.Typer(
    name="sigao",
    help="Sigao - developer environment provisioning",
    no_args_is_help=True,
    add_help_option=False,
)
mods_app = typer.Typer(help="Inspect and edit SIGAO_MOD blocks in shell rc files.")
cli.add_typer(mods_app, name="mods")

console = Console()
err_console = Console(stderr=True)


@dataclass(frozen=True)
class CliState:
    config: SigaoConfig


def _state(ctx: typer.Context) -> CliState:
    state = ctx.obj
    if isinstance(state, CliState):
        return state
    return CliState(config=SigaoConfig())


def _refuse(message: str, hint: str | None = None) -> typer.Exit:
    err_console.print(f"[bold red]Refused:[/bold red] {escape(message)}")
    if hint:
        err_console.print(hint)
    return typer.Exit(2)


def _fail(message: str, detail: str | None = None) -> typer.Exit:
    err_console.print(f"[bold red]Error:[/bold red] {escape(message)}")
    if detail:
        err_console.print(f"[dim]{escape(detail)}[/dim]")
    return typer.Exit(1)


def _version_option_callback(value: bool) -> None:
    if value:
        if should_show_banner(sys.argv):
            render_banner()
        typer.echo(__version__)
        raise typer.Exit()


def _help_option_callback(value: bool) -> None:
    """Handle eager --help option (so we can show banner on help)."""
    if value:
        if should_show_banner(sys.argv):
            render_banner()
        ctx = click.get_current_context()
        typer.echo(ctx.get_help())
        raise typer.Exit()


@cli.callback(invoke_without_command=True)
def _cli_callback(
    ctx: typer.Context,
    help: bool = typer.Option(
        False,
        "--help",
        "-h",
        help="Show this message and exit.",
        is_eager=True,
        callback=_help_option_callback,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show Sigao version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="DEBUG, INFO, WARNING or ERROR (default: SIGAO_LOG_LEVEL or config).",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        help="Config file (default: SIGAO_CONFIG or ~/.config/sigao/config.yaml).",
    ),
) -> None:
    """Load configuration and set up logging for every command."""
    _ = help, version
    try:
        config = load_config(config_path)
    except ConfigError as exc:
        raise _refuse(str(exc)) from None

    level = (log_level or config.log_level).upper()
    if level not in LOG_LEVELS:
        raise _refuse(f"unknown log level {level!r}", f"Use one of: {', '.join(LOG_LEVELS)}")

    configure_logging(level, config.log_file)
    ctx.obj = CliState(config=config)


def _resolve_shell(shell: str) -> str | None:
    if shell not in SHELL_CHOICES:
        raise _refuse(f"unsupported shell '{shell}'.", f"Use one of: {', '.join(SHELL_CHOICES)}")
    if shell == "auto":
        return infer_shell(os.environ.get("SHELL", ""))
    return shell


def _resolve_rc_path(ctx: typer.Context, path: Path | None, shell: str | None) -> Path:
    if path is not None:
        return path.expanduser()
    resolved = _resolve_shell(shell or _state(ctx).config.shell)
    if resolved is None:
        raise _refuse(
            "unable to infer shell from $SHELL.",
            "Provide --shell zsh|bash or --path /path/to/rcfile",
        )
    return Path.home() / f".{resolved}rc"


def _print_diff(diff: str) -> None:
    if diff:
        typer.echo(diff, nl=not diff.endswith("\n"))


def _print_report(report: ProvisionReport) -> None:
    table = Table(title="Provisioning summary" + (" (dry run)" if report.dry_run else ""))
    table.add_column("Module", style="bold")
    table.add_column("Status")
    table.add_column("Details")
    for result in report.results:
        if result.error:
            detail = result.error
        else:
            changed = [s.step for s in result.steps if s.action in ("inserted", "replaced")]
            detail = f"updated {', '.join(changed)}" if changed else ""
        table.add_row(result.module_id, status_text(result.status), escape(detail))
    console.print(table)

    counts = ", ".join(
        f"{report.count(status)} {status}" for status in ("installed", "skipped", "partial", "failed")
    )
    console.print(f"[bold]Done:[/bold] {counts}")


def _print_catalog() -> None:
    for category, module_ids in CATEGORIES:
        console.print(f"[bold]{category}[/bold]")
        for module_id in module_ids:
            spec = get_module(module_id)
            marker = "" if spec.enabled else " [dim](disabled by default)[/dim]"
            console.print(f"  [cyan]{spec.id}[/cyan]  {spec.description}{marker}")


def _install_context(
    platform: PlatformInfo,
    shell: str | None,
    mod_version: str,
    dry_run: bool,
    config: SigaoConfig,
) -> InstallContext:
    return InstallContext(
        home=platform.home,
        platform=platform,
        shell=shell,
        mod_version=mod_version,
        dry_run=dry_run,
        git_name=config.git_name,
        git_email=config.git_email,
    )


@cli.command()
def install(
    ctx: typer.Context,
    modules: list[str] | None = typer.Argument(None, help="Module ids to install (see --list)."),
    all_modules: bool = typer.Option(False, "--all", help="Install every module enabled by default."),
    list_modules: bool = typer.Option(False, "--list", help="List available modules and exit."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report what would change without installing or writing."),
    shell: str | None = typer.Option(None, "--shell", help="auto, bash or zsh (default: config or auto)."),
    mod_version: str | None = typer.Option(None, "--mod-version", help="Version stamped on written blocks."),
    report_path: Path | None = typer.Option(None, "--report", help="Also write a JSON report to this path."),
) -> None:
    """Install tools and converge their shell rc blocks."""
    if list_modules:
        _print_catalog()
        return

    config = _state(ctx).config
    if modules and all_modules:
        raise _refuse("pass module ids or --all, not both.")
    if all_modules:
        selected = [spec.id for spec in get_enabled_modules()]
    else:
        selected = list(modules or config.modules)
    if not selected:
        raise _refuse("no modules selected.", "Pass module ids, --all, or set 'modules' in the config file.")

    for module_id in selected:
        if module_id not in INSTALLERS:
            raise _refuse(f"unknown module '{module_id}'.", "Try: sigao install --list")

    platform = detect_platform()
    install_ctx = _install_context(
        platform,
        _resolve_shell(shell or config.shell),
        mod_version or config.mod_version,
        dry_run or config.dry_run,
        config,
    )
    logger.debug("Platform: %s", platform)

    report = run_provisioning(
        selected,
        install_ctx,
        step_wrapper=lambda message, fn: Spinner(message).run(fn),
    )
    _print_report(report)

    if report_path is not None:
        write_report(report, report_path.expanduser())
        console.print(f"[cyan]Report:[/cyan] {report_path}")

    if not report.ok:
        raise typer.Exit(1)


@cli.command()
def check(ctx: typer.Context) -> None:
    """Show which catalog modules are already installed."""
    config = _state(ctx).config
    platform = detect_platform()
    install_ctx = _install_context(platform, _resolve_shell(config.shell), config.mod_version, True, config)

    table = Table(title="Installed tools")
    table.add_column("Module", style="bold")
    table.add_column("Name")
    table.add_column("Installed")
    for spec in MODULES:
        try:
            installed = get_installer(spec.id).is_installed(install_ctx)
        except (RuntimeError, OSError) as exc:
            logger.debug("Check for %s failed: %s", spec.id, exc)
            installed = False
        table.add_row(spec.id, spec.name, "[green]yes[/green]" if installed else "[dim]no[/dim]")
    console.print(table)


@cli.command()
def cheat() -> None:
    """Show a quick reference of the aliases and key bindings sigao sets up."""
    console.print(Markdown(CHEATSHEET))


_PATH_OPTION_HELP = "Target rc file (overrides --shell)."
_SHELL_OPTION_HELP = "bash, zsh or auto (infer from $SHELL)."


@mods_app.command("list")
def mods_list(
    module: str | None = typer.Option(None, "--module", help="Only blocks owned by this module."),
    file_name: str | None = typer.Option(None, "--file", help="Only blocks written to this file, e.g. .zshrc."),
) -> None:
    """List the blocks each module manages."""
    if module is not None and file_name is not None:
        raise _refuse("--module and --file are mutually exclusive.")

    if file_name is not None:
        for mod in registry.get_file_modifications(file_name):
            console.print(f"[cyan]{mod.name}[/cyan] [dim]({mod.module})[/dim]  {mod.description}")
        return

    module_ids = [module] if module is not None else registry.list_modules()
    if module is not None and module not in registry.SHELL_MODIFICATIONS:
        raise _refuse(f"no blocks registered for module '{module}'.")
    for module_id in module_ids:
        console.print(f"[bold]{module_id}[/bold]")
        for mod in registry.get_module_modifications(module_id):
            console.print(f"  [cyan]{mod.name}[/cyan]  {mod.description} [dim]({', '.join(mod.files)})[/dim]")


@mods_app.command("show")
def mods_show(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Block name."),
    path: Path | None = typer.Option(None, "--path", help=_PATH_OPTION_HELP),
    shell: str | None = typer.Option(None, "--shell", help=_SHELL_OPTION_HELP),
) -> None:
    """Show one block with its version and hash status."""
    rc_path = _resolve_rc_path(ctx, path, shell)
    state = read_block(rc_path, name)
    if state is None:
        raise _fail(f"no block named '{name}' in {rc_path}")

    console.print(f"[bold]Block:[/bold] {escape(state.name)}")
    console.print(f"[bold]File:[/bold] {rc_path}")
    console.print(f"[bold]Version:[/bold] {escape(state.version or '-')}")
    console.print(f"[bold]Stored hash:[/bold] {state.stored_hash or '-'}")
    console.print(f"[bold]Current hash:[/bold] {state.current_hash}")
    if state.has_drift:
        console.print("[bold yellow]Drift:[/bold yellow] edited since it was written")
    typer.echo(state.content)


@mods_app.command("audit")
def mods_audit(
    ctx: typer.Context,
    path: Path | None = typer.Option(None, "--path", help=_PATH_OPTION_HELP),
    shell: str | None = typer.Option(None, "--shell", help=_SHELL_OPTION_HELP),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON instead of a table."),
    fail_on_drift: bool = typer.Option(False, "--fail-on-drift", help="Exit 1 when any block has drift."),
) -> None:
    """Report hand edits to managed blocks."""
    rc_path = _resolve_rc_path(ctx, path, shell)
    entries = audit_drift(rc_path)

    if as_json:
        payload = [
            {**asdict(entry), "owners": registry.get_block_owners(entry.name)}
            for entry in entries
        ]
        typer.echo(json.dumps({"path": str(rc_path), "blocks": payload}, indent=2, sort_keys=True))
    elif not entries:
        console.print(f"No SIGAO_MOD blocks in {rc_path}")
    else:
        table = Table(title=f"SIGAO_MOD blocks in {rc_path}")
        table.add_column("Line", justify="right")
        table.add_column("Block", style="bold")
        table.add_column("Version")
        table.add_column("Owner")
        table.add_column("Status")
        for entry in entries:
            if entry.has_drift:
                status = "[bold yellow]drift[/bold yellow]"
            elif entry.stored_hash is None:
                status = "[dim]no hash[/dim]"
            else:
                status = "[green]ok[/green]"
            table.add_row(
                str(entry.line),
                escape(entry.name),
                escape(entry.version or "-"),
                ", ".join(registry.get_block_owners(entry.name)) or "-",
                status,
            )
        console.print(table)

    if fail_on_drift and any(entry.has_drift for entry in entries):
        raise typer.Exit(1)


@mods_app.command("set")
def mods_set(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Block name."),
    content: str | None = typer.Option(None, "--content", help="Block content."),
    from_file: Path | None = typer.Option(None, "--from-file", help="Read block content from a file."),
    version: str | None = typer.Option(None, "--version", help="Version to stamp (default: config mod_version)."),
    position: str = typer.Option(
        "end",
        "--position",
        click_type=click.Choice(POSITIONS),
        help="Where a new block goes.",
    ),
    path: Path | None = typer.Option(None, "--path", help=_PATH_OPTION_HELP),
    shell: str | None = typer.Option(None, "--shell", help=_SHELL_OPTION_HELP),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print a unified diff and do not write."),
) -> None:
    """Insert or replace a block."""
    if (content is None) == (from_file is None):
        raise _refuse("pass exactly one of --content or --from-file.")
    if from_file is not None:
        try:
            content = from_file.read_text(encoding="utf-8")
        except OSError as exc:
            raise _fail(f"could not read {from_file}", str(exc)) from None

    rc_path = _resolve_rc_path(ctx, path, shell)
    try:
        result = upsert_block(
            rc_path,
            name,
            content or "",
            version or _state(ctx).config.mod_version,
            position=position,  # type: ignore[arg-type]
            dry_run=dry_run,
        )
    except ValueError as exc:
        raise _refuse(str(exc)) from None
    except BlockWriteError as exc:
        raise _fail(f"failed to update {rc_path}", str(exc)) from None

    console.print(f"[bold]Target:[/bold] {result.path}")
    console.print("[dim]Mode: dry-run[/dim]" if dry_run else "[dim]Mode: write[/dim]")
    if not result.changed:
        console.print("[green]No changes.[/green]")
        return
    _print_diff(result.diff)
    verb = "Would be" if dry_run else "Block"
    console.print(f"{verb} {result.action}: {escape(name)}")


@mods_app.command("remove")
def mods_remove(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Block name."),
    path: Path | None = typer.Option(None, "--path", help=_PATH_OPTION_HELP),
    shell: str | None = typer.Option(None, "--shell", help=_SHELL_OPTION_HELP),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report without writing."),
) -> None:
    """Remove a block."""
    rc_path = _resolve_rc_path(ctx, path, shell)
    try:
        removed = remove_block(rc_path, name, dry_run=dry_run)
    except BlockWriteError as exc:
        raise _fail(f"failed to update {rc_path}", str(exc)) from None

    if not removed:
        console.print(f"No block named {escape(name)} in {rc_path}")
    elif dry_run:
        console.print(f"Would remove {escape(name)} from {rc_path}")
    else:
        console.print(f"Removed {escape(name)} from {rc_path}")


@mods_app.command("backfill")
def mods_backfill(
    ctx: typer.Context,
    path: Path | None = typer.Option(None, "--path", help=_PATH_OPTION_HELP),
    shell: str | None = typer.Option(None, "--shell", help=_SHELL_OPTION_HELP),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report without writing."),
) -> None:
    """Add hashes to blocks written before hashes existed."""
    rc_path = _resolve_rc_path(ctx, path, shell)
    try:
        count = backfill_hashes(rc_path, fallback_version=_state(ctx).config.mod_version, dry_run=dry_run)
    except ValueError as exc:
        raise _refuse(str(exc)) from None
    except BlockWriteError as exc:
        raise _fail(f"failed to update {rc_path}", str(exc)) from None

    if count == 0:
        console.print("[green]All blocks already carry a hash.[/green]")
    else:
        verb = "Would backfill" if dry_run else "Backfilled"
        console.print(f"{verb} {count} block(s) in {rc_path}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
