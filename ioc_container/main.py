"""
Command-line interface for inspecting a configured container.

The container is bootstrapped from a configuration file, the same way an
application would at startup.
"""

import json
import logging
import sys
from typing import Optional

import typer

from .application.bootstrap import create_container
from .application.container import Container
from .core.exceptions import IocError
from .infrastructure.config.loader import ConfigLoader
from .infrastructure.config.models import ApplicationConfig
from .infrastructure.logging.setup import setup_logging

cli = typer.Typer(
    name="ioc-container",
    help="Resolve and inspect namespaces of a configured IoC container"
)

logger = logging.getLogger(__name__)


def _bootstrap(config_file: Optional[str], log_level: Optional[str], debug: bool) -> Container:
    config_loader = ConfigLoader()
    config = config_loader.load_config(config_file)

    if log_level:
        config.logging.level = log_level.upper()
    if debug:
        config.debug = True
        config.logging.level = "DEBUG"

    setup_logging(config.logging)
    _log_startup(config)

    return create_container(config.container, install=True)


def _log_startup(config: ApplicationConfig) -> None:
    logger.debug(f"Starting {config.name} v{config.version}")
    if config.config_file_path:
        logger.debug(f"Configuration file: {config.config_file_path}")


@cli.command()
def resolve(
    namespace: str = typer.Argument(..., help="Namespace to resolve"),
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c", help="Configuration file path"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level"
    ),
    debug: bool = typer.Option(
        False, "--debug", help="Enable debug logging"
    )
) -> None:
    """Resolve a namespace and print the resolved value."""
    try:
        container = _bootstrap(config_file, log_level, debug)
    except (IocError, OSError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    try:
        value = container.resolve(namespace)
    except IocError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(repr(value))


@cli.command()
def inspect(
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c", help="Configuration file path"
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Print the registrations as JSON"
    )
) -> None:
    """Show bindings, aliases, fakes and autoload roots."""
    try:
        container = _bootstrap(config_file, "WARNING", False)
    except (IocError, OSError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    summary = container.describe()
    if as_json:
        typer.echo(json.dumps(summary, indent=2))
        return

    typer.echo("Bindings:")
    for namespace, info in summary["bindings"].items():
        cached = " (cached)" if info["cached"] else ""
        typer.echo(f"  {namespace} [{info['mode']}]{cached}")
    typer.echo("Aliases:")
    for name, target in summary["aliases"].items():
        typer.echo(f"  {name} -> {target}")
    typer.echo("Fakes:")
    for namespace in summary["fakes"]:
        typer.echo(f"  {namespace}")
    typer.echo("Autoload:")
    for prefix, directory in summary["autoload"].items():
        typer.echo(f"  {prefix} -> {directory}")
    typer.echo(f"Pipeline: {' -> '.join(summary['pipeline'])}")


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        typer.echo("Interrupted", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
