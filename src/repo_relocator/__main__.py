"""CLI entry point for repo-relocator.

Allows running as a module:
    python -m repo_relocator run --config config.yaml
"""

import logging
import sys
from pathlib import Path

import click

from repo_relocator.config import MODES, Config, ConfigError, load_config, validate_config
from repo_relocator.hosting.github import GitHubError
from repo_relocator.logging import setup_logging
from repo_relocator.migrate.orchestrator import run_migration
from repo_relocator.rewrite import compile_plan, unsafe_literals

config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to config.yaml (defaults to the standard search locations)",
)


def _load(config_path: Path | None) -> Config:
    try:
        return load_config(config_path)
    except ConfigError as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)


def _migrate(config: Config) -> None:
    problems = validate_config(config)
    if problems:
        click.echo(f"Config is not valid: {' and '.join(problems)}", err=True)
        sys.exit(1)

    try:
        totals = run_migration(config)
    except GitHubError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(", ".join(f"{key}={value}" for key, value in totals.items()))
    if totals["failed"]:
        sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log debug output")
def cli(verbose: bool) -> None:
    """Move GitHub repositories between accounts, rewriting their history."""
    setup_logging("relocate", level=logging.DEBUG if verbose else logging.INFO)


@cli.command()
@config_option
@click.option(
    "--mode",
    type=click.Choice(MODES),
    help="Override the configured mode",
)
def run(config_path: Path | None, mode: str | None) -> None:
    """Run the configured migration mode."""
    config = _load(config_path)
    if mode:
        config.mode = mode
    _migrate(config)


@cli.command()
@config_option
def authors(config_path: Path | None) -> None:
    """Collect every author across the account's repositories for review."""
    config = _load(config_path)
    config.mode = "get-authors"
    _migrate(config)


@cli.command()
@config_option
def plan(config_path: Path | None) -> None:
    """Print the compiled rewrite plan without touching any repository."""
    config = _load(config_path)
    compiled = compile_plan(config.rewrite)

    for value in unsafe_literals(config.rewrite):
        click.echo(f"Warning: value is embedded unescaped: {value!r}", err=True)

    if compiled.is_empty:
        click.echo("Nothing to rewrite.")
        return

    if compiled.has_author_rewrite:
        click.echo("# commit callback")
        click.echo(compiled.author_callback, nl=False)
    else:
        click.echo("# no author rewrite (needs an old email or name and a new name or email)")

    if compiled.has_text_replacements:
        click.echo("# replace-text rules")
        click.echo(compiled.text_replacements, nl=False)


if __name__ == "__main__":
    cli()
