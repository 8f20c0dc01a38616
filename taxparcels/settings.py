"""Configuration management for taxparcels."""

import os
from dataclasses import dataclass, field
from typing import List, Optional, Union

import yaml

from taxparcels.constants import (
    DEFAULT_KEY_PROPERTY,
    ENV_LOG_LEVEL,
    ENV_OUT_DIR,
    GEOJSON_FORMAT,
    ID_PATHS_DELIMITER,
    KML_FORMAT,
)
from taxparcels.errors import ConfigError


def split_id_paths(value: Union[str, List[str], None]) -> List[str]:
    """Accept ``"a.txt,b.txt"`` or a list; blank entries are dropped."""
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(ID_PATHS_DELIMITER)
    return [str(p).strip() for p in value if str(p).strip()]


def env_defaults() -> dict:
    """Config values supplied through TAXPARCELS_* environment variables."""
    defaults = {}
    if os.getenv(ENV_OUT_DIR):
        defaults["out_dir"] = os.environ[ENV_OUT_DIR]
    if os.getenv(ENV_LOG_LEVEL):
        defaults["log_level"] = os.environ[ENV_LOG_LEVEL]
    return defaults


def read_config_file(config_path: str) -> dict:
    if not os.path.exists(config_path):
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Unable to read configuration {config_path}: {exc}") from exc

    if not isinstance(config_data, dict):
        raise ConfigError(f"Configuration {config_path} must be a mapping")
    return config_data


def _optional_str(config_dict: dict, key: str) -> Optional[str]:
    """Return a string setting, treating a YAML null as unset."""
    value = config_dict.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string, got {value!r}")
    return value


@dataclass
class FilterConfig:
    """Settings for one filtering run."""

    geojson_path: Optional[str] = None
    kml_path: Optional[str] = None
    id_paths: List[str] = field(default_factory=list)
    out_dir: str = "."
    key_property: str = DEFAULT_KEY_PROPERTY
    indent: Optional[int] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "FilterConfig":
        """Environment defaults, overridden by the YAML file if one is given."""
        config_data = env_defaults()
        if config_path:
            config_data.update(read_config_file(config_path))
        return cls.from_dict(config_data)

    @classmethod
    def from_file(cls, config_path: str) -> "FilterConfig":
        """Load configuration from a YAML file."""
        return cls.from_dict(read_config_file(config_path))

    @classmethod
    def from_dict(cls, config_dict: dict) -> "FilterConfig":
        """Create configuration from dictionary."""
        indent = config_dict.get("indent")
        if indent is not None:
            try:
                indent = int(indent)
            except (TypeError, ValueError):
                raise ConfigError(f"indent must be an integer, got {indent!r}")

        key_property = _optional_str(config_dict, "key_property")
        return cls(
            geojson_path=_optional_str(config_dict, "geojson_path"),
            kml_path=_optional_str(config_dict, "kml_path"),
            id_paths=split_id_paths(config_dict.get("id_paths")),
            out_dir=_optional_str(config_dict, "out_dir") or ".",
            key_property=DEFAULT_KEY_PROPERTY if key_property is None else key_property,
            indent=indent,
            log_level=(_optional_str(config_dict, "log_level") or "INFO").upper(),
            log_file=_optional_str(config_dict, "log_file"),
        )

    @property
    def input_format(self) -> str:
        self.validate()
        return GEOJSON_FORMAT if self.geojson_path else KML_FORMAT

    @property
    def input_path(self) -> str:
        self.validate()
        return self.geojson_path or self.kml_path

    def validate(self) -> None:
        """Validate the configuration values."""
        if self.geojson_path and self.kml_path:
            raise ConfigError("supply only one of a GeoJSON or a KML input")
        if not self.geojson_path and not self.kml_path:
            raise ConfigError("must supply a GeoJSON or a KML input")
        if not self.id_paths:
            raise ConfigError("must supply at least one parcel ID file")
        if not self.key_property:
            raise ConfigError("key_property must not be empty")

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        config_dict = {
            "id_paths": list(self.id_paths),
            "out_dir": self.out_dir,
        }
        if self.geojson_path:
            config_dict["geojson_path"] = self.geojson_path
        if self.kml_path:
            config_dict["kml_path"] = self.kml_path
        if self.key_property != DEFAULT_KEY_PROPERTY:
            config_dict["key_property"] = self.key_property
        if self.indent is not None:
            config_dict["indent"] = self.indent
        if self.log_level != "INFO":
            config_dict["log_level"] = self.log_level
        if self.log_file:
            config_dict["log_file"] = self.log_file
        return config_dict
