#!/usr/bin/env python3
"""
SSOConfig - SSO session management for the shared credentials config file.

Main CLI entry point using Click.
"""

from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ssoconfig.cli.error_handler import ErrorHandler, setup_logging
from ssoconfig.config import loader
from ssoconfig.core.profile_file import ProfileFile, ProfileFileError
from ssoconfig.core.profile_watcher import ProfileWatcher
from ssoconfig.core.section_editor import session_name_from_connection_id
from ssoconfig.core.session_manager import EditResult, SsoSessionManager

console = Console()


def _non_empty(ctx: click.Context, param: click.Parameter, value: str) -> str:
    if not value.strip():
        raise click.BadParameter("must not be empty")
    return value


def _report_result(ctx: click.Context, result: EditResult) -> None:
    if result.success:
        style = "green" if result.changed else "yellow"
        console.print(f"[{style}]{result.message}[/{style}]")
        return

    ctx.obj["errors"].report(f"{result.message}: {result.error}", error_type="file")
    ctx.exit(1)


@click.group()
@click.version_option(package_name="ssoconfig")
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Settings file to use (default: ./.ssoconfig/config.yaml or ~/.ssoconfig/config.yaml)",
)
@click.option(
    "--file", "-f", "profile_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Profile config file to edit (default: $AWS_CONFIG_FILE or ~/.aws/config)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], profile_path: Optional[Path], verbose: bool) -> None:
    """SSOConfig: manage SSO sessions in the shared config file."""
    errors = ErrorHandler()
    try:
        settings = loader.load_config(config_path)
    except loader.ConfigError as e:
        setup_logging("DEBUG" if verbose else "WARNING")
        errors.report(str(e), error_type="configuration")
        ctx.exit(1)

    log_file = Path(settings.logging.log_file).expanduser() if settings.logging.log_file else None
    setup_logging("DEBUG" if verbose else settings.logging.level, log_file)

    path = profile_path or settings.profile_file.path
    profile_file = ProfileFile(path, encoding=settings.profile_file.encoding)
    manager = SsoSessionManager(
        profile_file,
        watcher=ProfileWatcher(),
        notify=settings.notifications.enabled,
    )

    ctx.ensure_object(dict)
    ctx.obj.update({"settings": settings, "manager": manager, "errors": errors})


@cli.command("list")
@click.option("--kind", "-k", help="Only list sections of this kind (e.g. sso-session, profile)")
@click.pass_context
def list_sections(ctx: click.Context, kind: Optional[str]) -> None:
    """List the sections in the config file."""
    manager: SsoSessionManager = ctx.obj["manager"]
    try:
        sections = manager.list_sections(kind)
    except ProfileFileError as e:
        ctx.obj["errors"].report(str(e), error_type="file")
        ctx.exit(1)

    if not sections:
        console.print(f"[yellow]No sections found in {manager.path}[/yellow]")
        return

    table = Table(title=str(manager.path))
    table.add_column("Kind", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Lines", justify="right")
    for section in sections:
        table.add_row(section.kind, section.name or "", f"{section.start + 1}-{section.end}")
    console.print(table)


@cli.command("delete-session")
@click.argument("session_name", callback=_non_empty)
@click.pass_context
def delete_session(ctx: click.Context, session_name: str) -> None:
    """Remove an sso-session and its first dependent role profile."""
    manager: SsoSessionManager = ctx.obj["manager"]
    try:
        dependents = manager.dependent_profiles(session_name)
    except ProfileFileError:
        dependents = []
    if len(dependents) > 1:
        console.print(
            f"[yellow]{len(dependents)} profiles depend on '{session_name}'; "
            f"only {escape(dependents[0].header)} will be removed[/yellow]"
        )
    _report_result(ctx, manager.delete_sso_connection(session_name))


@cli.command("delete-connection")
@click.argument("connection_id", callback=_non_empty)
@click.pass_context
def delete_connection(ctx: click.Context, connection_id: str) -> None:
    """Remove the sso-session referenced by a connection id such as sso-session:NAME."""
    manager: SsoSessionManager = ctx.obj["manager"]
    if not session_name_from_connection_id(connection_id).strip():
        raise click.BadParameter("does not name an sso-session", param_hint="CONNECTION_ID")
    _report_result(ctx, manager.delete_sso_connection_by_id(connection_id))


@cli.command("add-session")
@click.argument("session_name", callback=_non_empty)
@click.option("--start-url", required=True, help="SSO start URL")
@click.option("--region", required=True, help="SSO region")
@click.option("--scope", "scopes", multiple=True, help="Registration scope (repeatable)")
@click.pass_context
def add_session(ctx: click.Context, session_name: str, start_url: str, region: str, scopes: Tuple[str, ...]) -> None:
    """Create or replace an sso-session section."""
    manager: SsoSessionManager = ctx.obj["manager"]
    try:
        result = manager.update_sso_session(session_name, start_url, region, scopes)
    except ValueError as e:
        raise click.BadParameter(str(e))
    _report_result(ctx, result)


@cli.command()
@click.pass_context
def show(ctx: click.Context) -> None:
    """Show the active settings."""
    manager: SsoSessionManager = ctx.obj["manager"]
    console.print("[bold]SSOConfig Settings:[/bold]")
    console.print(ctx.obj["settings"].model_dump_json(indent=2))
    console.print(f"[bold]Profile file:[/bold] {manager.path}")


if __name__ == "__main__":
    cli()
