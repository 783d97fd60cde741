"""
Emitter configuration.

Parses the [emitter] section of emitter.toml:

    [emitter]
    model = "models.yaml"
    output-dir = "generated"
    package-name = "@acme/entities"
    package-version = "2.1.0"

Every key is optional; CLI options override file values.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE = "emitter.toml"


class EmitterConfig(BaseModel):
    """Settings of one emitter run."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    model: Path | None = Field(default=None, description="Model document (YAML)")
    output_dir: Path = Field(default=Path("generated"), alias="output-dir")
    package_name: str = Field(default="entities", alias="package-name")
    package_version: str = Field(default="1.0.0", alias="package-version")

    @field_validator("package_name", "package_version")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    def resolve_paths(self, base_dir: Path) -> EmitterConfig:
        """Make relative paths relative to ``base_dir`` (the config file directory)."""
        updates: dict[str, Path] = {}
        if self.model is not None and not self.model.is_absolute():
            updates["model"] = base_dir / self.model
        if not self.output_dir.is_absolute():
            updates["output_dir"] = base_dir / self.output_dir
        return self.model_copy(update=updates)


def load_emitter_config(toml_path: Path) -> EmitterConfig:
    """
    Load emitter configuration from emitter.toml.

    Args:
        toml_path: Path to emitter.toml

    Returns:
        EmitterConfig with parsed values or defaults when the file is missing

    Raises:
        ConfigError: If the file is not valid TOML or holds invalid settings
    """
    if not toml_path.exists():
        logger.debug("No %s found, using defaults", toml_path)
        return EmitterConfig()

    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{toml_path}: invalid TOML: {e}") from e

    section = data.get("emitter", {})
    if not isinstance(section, dict):
        raise ConfigError(f"{toml_path}: [emitter] must be a table")

    try:
        config = EmitterConfig.model_validate(section)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"{toml_path}: {problems}") from e

    return config.resolve_paths(toml_path.parent)
