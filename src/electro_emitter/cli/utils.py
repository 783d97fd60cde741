"""
CLI utilities.

Shared helpers used across CLI command modules.
"""

import logging
import platform
from pathlib import Path
from typing import NoReturn

import typer
from pydantic import ValidationError

from electro_emitter import __version__
from electro_emitter.core.config import EmitterConfig, load_emitter_config
from electro_emitter.core.errors import ConfigError, EmitterError
from electro_emitter.core.model_loader import LoadedModel, load_model_document

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"electrodb-emitter version {__version__}")
        python = f"{platform.python_implementation()} {platform.python_version()}"
        typer.echo(f"  Python:        {python}")
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


def report_error(error: EmitterError) -> NoReturn:
    """Print ``<kind>: <message>`` on stderr and exit with code 1."""
    typer.echo(f"{error.kind}: {error}", err=True)
    raise typer.Exit(code=1)


def resolve_config(
    config_path: str,
    model: str | None = None,
    output_dir: str | None = None,
    package_name: str | None = None,
    package_version: str | None = None,
) -> EmitterConfig:
    """
    Load emitter.toml and apply CLI overrides on top of it.

    Raises:
        ConfigError: If the file or an override is invalid
    """
    config = load_emitter_config(Path(config_path))
    overrides = {
        "model": Path(model) if model else None,
        "output_dir": Path(output_dir) if output_dir else None,
        "package_name": package_name,
        "package_version": package_version,
    }
    updates = {k: v for k, v in overrides.items() if v is not None}
    try:
        config = EmitterConfig.model_validate({**config.model_dump(), **updates})
    except ValidationError as e:
        raise ConfigError(f"invalid option: {e.errors()[0]['msg']}") from e
    return config


def load_model(config: EmitterConfig) -> LoadedModel:
    """
    Load the model document named by the configuration.

    Raises:
        ConfigError: If no model document is configured
        ModelLoadError: If the document cannot be loaded
    """
    if config.model is None:
        raise ConfigError("No model document given (use --model or set 'model' in emitter.toml)")
    return load_model_document(config.model)
