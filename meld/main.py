"""
meld — CLI entrypoint.

Usage:
    meld --help
    meld gen
    meld gen --dry-run --agent codex-cli
    meld config check
    meld project list
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from meld import __version__
from meld.core.models.config import VALID_AGENTS
from meld.core.observability.logging_config import (
    LOG_FILE_ENV,
    LOG_FILE_LEVEL_ENV,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="meld")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--hub",
    "hub_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Hub directory holding meld.jsonc (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    hub_dir: Path | None,
) -> None:
    """meld — one hub config, generated settings for every coding agent."""
    from meld.core.config.loader import find_hub_dir

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["hub_dir"] = (hub_dir or find_hub_dir() or Path.cwd()).resolve()

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet, environ=os.environ),
        log_file=os.environ.get(LOG_FILE_ENV),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV),
    )


@cli.command()
@click.option("--dry-run", is_flag=True, help="Preview changes without writing files.")
@click.option(
    "--agent",
    type=click.Choice(VALID_AGENTS),
    default=None,
    help="Generate for a single agent only (skips hub-root files).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def gen(ctx: click.Context, dry_run: bool, agent: str | None, as_json: bool) -> None:
    """Generate all agent configs from meld.jsonc."""
    from meld.core.use_cases.generate import generate

    result = generate(ctx.obj["hub_dir"], dry_run=dry_run, agent=agent, environ=os.environ)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if not result.ok:
        click.secho("❌ Generation failed:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")
        sys.exit(1)

    if result.warnings:
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")
        click.echo()

    quiet = ctx.obj.get("quiet", False)
    if not quiet:
        heading = "Dry run — would generate:" if dry_run else "Generated:"
        click.secho(heading, fg="cyan", bold=True)
        for file in result.files:
            click.echo(f"   {file.path}")
        click.echo()

    verb = "would be generated" if dry_run else "generated"
    click.secho(f"✅ {len(result.files)} file(s) {verb} for {result.hub_name}", fg="green")


@cli.group()
def config() -> None:
    """Hub configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate meld.jsonc without generating anything."""
    from meld.core.use_cases.config_check import check_config

    result = check_config(ctx.obj["hub_dir"], environ=os.environ)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.config is not None  # guaranteed when valid
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Hub: {result.config.ide.workspace_name}")
        click.echo(f"   Projects: {len(result.config.projects)}")
        enabled = result.config.enabled_agents()
        click.echo(f"   Agents: {', '.join(enabled) if enabled else '(none enabled)'}")
        click.echo(f"   MCP servers: {len(result.config.mcp)}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    click.echo()
    if not result.valid:
        sys.exit(1)


@cli.group()
def project() -> None:
    """Registered projects."""


@project.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def project_list(ctx: click.Context, as_json: bool) -> None:
    """List the projects registered in meld.jsonc."""
    from meld.core.config.loader import ConfigError, load_config

    try:
        hub_config = load_config(ctx.obj["hub_dir"])
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"ok": False, "errors": e.errors}, indent=2))
        else:
            click.secho("❌ Failed to load config:", fg="red", bold=True)
            for err in e.errors:
                click.echo(f"   • {err}")
        sys.exit(1)

    projects = hub_config.projects

    if as_json:
        click.echo(json.dumps(
            {name: p.model_dump() for name, p in projects.items()},
            indent=2,
        ))
        return

    if not projects:
        click.echo("No projects registered. Add one under \"projects\" in meld.jsonc.")
        return

    click.secho("Projects:", fg="cyan", bold=True)
    for name, entry in projects.items():
        click.echo()
        click.secho(f"  {name}", bold=True)
        click.echo(f"    Path: {entry.path}")
        if entry.aliases:
            click.echo(f"    Aliases: {', '.join(entry.aliases)}")
        if entry.repo:
            click.echo(f"    Repo: {entry.repo}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
