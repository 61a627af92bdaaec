"""Settings that tune how patches are converted and applied."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import ConfigError

__all__ = ["DEFAULT_CONFIG_NAME", "PatchSettings", "load_settings"]

DEFAULT_CONFIG_NAME = "unipatch.yaml"
_SECTION = "unipatch"


class PatchSettings(BaseModel):
    """Options shared by :func:`~unipatch.builder.convert` and the applier."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    strict: bool = False
    telemetry: bool = True

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PatchSettings":
        """Validate ``data``, accepting values nested under a ``unipatch`` key."""
        payload = data.get(_SECTION, data) if isinstance(data, Mapping) else data
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ConfigError("Configuration must be a mapping at the top level.")
        try:
            return cls.model_validate(dict(payload))
        except ValidationError as error:
            raise ConfigError(
                f"Invalid unipatch settings: {error.error_count()} error(s)",
                details={"errors": error.errors(include_url=False)},
            ) from error


def load_settings(config_path: Path) -> PatchSettings:
    """Load YAML settings from ``config_path``."""
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except OSError as error:
        raise ConfigError(f"Config file not readable: {config_path}", details={"path": config_path.as_posix()}) from error
    except yaml.YAMLError as error:
        raise ConfigError(f"Failed to parse config: {error}", details={"path": config_path.as_posix()}) from error

    if not isinstance(data, Mapping):
        raise ConfigError("Configuration must be a mapping at the top level.", details={"path": config_path.as_posix()})
    return PatchSettings.from_mapping(data)
