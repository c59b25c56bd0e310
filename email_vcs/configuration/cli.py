"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import json
import sys
from pathlib import Path

import typer
import uvicorn
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from email_vcs.configuration.driver import get_import_config, get_sync_config
from email_vcs.configuration.exceptions import GitHubAuthenticationConfigurationUndefinedError, RequiredConfigurationElementError
from email_vcs.configuration.models import ImportConfig, SyncConfig
from email_vcs.notify.exceptions import NotifyError
from email_vcs.synchronize.driver import run_import_workflow, run_sync_workflow
from email_vcs.templates import ParseError, parse_markdown
from email_vcs.webhook.app import create_app

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Sync markdown email templates from GitHub to Mandrill.")


def load_sync_config(require_notify_emails: bool = True) -> SyncConfig:
    """Load the sync configuration, exiting with a readable error if it is incomplete."""
    try:
        return get_sync_config(require_notify_emails=require_notify_emails)
    except (RequiredConfigurationElementError, GitHubAuthenticationConfigurationUndefinedError) as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(1) from e


def load_import_config() -> ImportConfig:
    """Load the import configuration, exiting with a readable error if it is incomplete."""
    try:
        return get_import_config()
    except RequiredConfigurationElementError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(1) from e


@typer_app.command(name="serve")
def serve_cli(
    host: Annotated[str, Option(envvar="HOST", help="Interface to bind the webhook server to.")] = "127.0.0.1",
    port: Annotated[int, Option(envvar="PORT", help="Port to bind the webhook server to.")] = 8000,
) -> None:
    """Run the webhook server that syncs templates on every push."""
    # Configuration is validated before the server starts
    load_sync_config()
    typer.echo(f"Listening for GitHub webhooks on http://{host}:{port}/webhook")
    uvicorn.run(create_app(), host=host, port=port)


@typer_app.command(name="sync")
def sync_cli(
    paths: Annotated[list[str], Argument(help="Repository-relative paths of the templates to sync.")],
    notify: Annotated[bool, Option("--notify/--no-notify", envvar="NOTIFY", help="Email a summary of the sync.")] = True,
) -> None:
    """Sync specific template files from GitHub to Mandrill."""
    config = load_sync_config(require_notify_emails=notify)
    typer.echo(f"Syncing {len(paths)} file(s) from {config.repo} ({config.sync_branch})")
    try:
        outcome = asyncio.run(run_sync_workflow(config, paths, notify=notify))
    except NotifyError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1) from e

    for title, synced_paths in (
        ("Added", outcome.actions.added),
        ("Modified", outcome.actions.modified),
        ("Removed", outcome.actions.removed),
    ):
        typer.echo(f"{title}: {', '.join(synced_paths) if synced_paths else 'None'}")
    if outcome.errors:
        typer.echo("Error(s) encountered while syncing:", err=True)
        for err in outcome.errors:
            typer.echo(err, err=True)
        sys.exit(1)


@typer_app.command(name="parse")
def parse_cli(
    template_path: Annotated[Path, Argument(help="Path to a local markdown template.")],
) -> None:
    """Validate a local markdown template and print it as JSON."""
    if not template_path.exists():
        typer.echo(f"Template file not found: {template_path.absolute()}", err=True)
        raise typer.Exit(1)
    try:
        record = parse_markdown(template_path.read_text(encoding="utf-8"))
    except ParseError as e:
        typer.echo(f"Failed to parse template {template_path}: {e}", err=True)
        raise typer.Exit(1) from e
    typer.echo(json.dumps(record.model_dump(mode="json"), indent=2))


@typer_app.command(name="import-templates")
def import_templates_cli(
    output_dir: Annotated[
        Path | None,
        Argument(help="Directory to write templates to (defaults to LOCAL_TEMPLATE_DIR_PATH)."),
    ] = None,
) -> None:
    """Import published Mandrill templates as markdown files."""
    config = load_import_config()
    if output_dir is not None:
        config.local_template_dir_path = output_dir
    written = asyncio.run(run_import_workflow(config))
    if not written:
        typer.echo("No published Mandrill templates found", err=True)
        raise typer.Exit(1)
    for path in written:
        typer.echo(f"Wrote markdown to {path}")


if __name__ == "__main__":
    typer_app()
