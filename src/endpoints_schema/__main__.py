"""CLI entry point for Endpoints Schema."""

import importlib
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

import click
import structlog

from .api_config import ApiConfig
from .config import Config
from .exceptions import SchemaError
from .logging_setup import configure_logging
from .schema_gen import SchemaRepository, write_schemas


def import_object(path: str) -> Any:
    """Imports ``package.module:Attribute.Nested``."""
    module_name, _, attribute_path = path.partition(":")
    if not module_name or not attribute_path:
        raise click.BadParameter(f"'{path}' is not of the form module:attribute")
    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import module '{module_name}': {e}") from e
    for attribute in attribute_path.split("."):
        try:
            target = getattr(target, attribute)
        except AttributeError as e:
            raise click.BadParameter(f"'{module_name}' has no attribute '{attribute_path}'") from e
    return target


@click.group()
@click.option(
    "--config-file", "-c",
    type=click.Path(exists=True, dir_okay=False, resolve_path=True),
    help="Path to a JSON configuration file.",
    envvar="ENDPOINTS_SCHEMA_CONFIG_FILE"
)
@click.option(
    "--log-level", "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Override the logging level (e.g., DEBUG, INFO).",
)
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"], case_sensitive=False),
    default=None,
    help="Override logging format.",
)
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[str], log_level: Optional[str], log_format: Optional[str]) -> None:
    """Endpoints Schema - derives discovery schemas from Python types."""
    try:
        if config_file:
            cfg = Config.from_file(Path(config_file))
        else:
            cfg = Config()
    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)

    if log_level:
        cfg.logging.level = log_level.upper()
    if log_format:
        cfg.logging.format = log_format.lower()

    configure_logging(cfg.logging)
    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg


@cli.command()
@click.argument("type_paths", nargs=-1, required=True)
@click.option("--api-name", default="api", show_default=True, help="Name of the API owning the schemas.")
@click.option("--api-version", default="v1", show_default=True, help="Version of the API owning the schemas.")
@click.option(
    "--transformer", "-t", "transformer_paths",
    multiple=True,
    help="Transformer class as module:Class. Can be used multiple times."
)
@click.option(
    "--output-file", "-o",
    type=click.Path(dir_okay=False, writable=True, resolve_path=True),
    help="Output file path for the schemas (JSON format)."
)
@click.pass_context
def render(
    ctx: click.Context,
    type_paths: List[str],
    api_name: str,
    api_version: str,
    transformer_paths: List[str],
    output_file: Optional[str],
) -> None:
    """Derives schemas for TYPE_PATHS (module:Type) and prints them as discovery JSON."""
    config: Config = ctx.obj["config"]
    logger = structlog.get_logger(__name__).bind(command="render")

    try:
        api_config = ApiConfig.create(
            api_name, api_version, transformers=[import_object(path) for path in transformer_paths]
        )
        repository = SchemaRepository(flags=config.flags)
        for path in type_paths:
            schema = repository.get_or_add(import_object(path), api_config)
            logger.info("Derived schema.", type_path=path, schema_name=schema.name)
        document = {"schemas": write_schemas(repository, api_config.api_key)}
    except SchemaError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if output_file:
        try:
            with open(output_file, "w") as f:
                json.dump(document, f, indent=2)
            click.echo(f"Schemas written to {output_file}")
        except IOError as e:
            click.echo(f"Error writing output file {output_file}: {e}", err=True)
            sys.exit(1)
    else:
        click.echo(json.dumps(document, indent=2))


@cli.command()
def version() -> None:
    """Show version information."""
    from . import __version__
    click.echo(f"Endpoints Schema v{__version__}")


@cli.command()
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show current configuration."""
    config: Config = ctx.obj["config"]
    click.echo(json.dumps(config.model_dump(mode="json"), indent=2))


if __name__ == "__main__":
    cli()
