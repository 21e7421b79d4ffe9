"""
Config system - Layered typed configuration with validation.

Sources are merged with precedence (later overrides earlier):
config files (JSON/YAML) > .env file > environment variables > overrides.
"""

import json
import logging
import os
from dataclasses import dataclass, fields
from glob import glob
from pathlib import Path
from typing import Any, Dict, Optional, get_args, get_origin

import yaml
from dotenv import dotenv_values


@dataclass
class RestConfig:
    """
    Settings shared by every controller instance.

    Attributes:
        default_format: Response format used when a request names none
        coerce_params: Convert string parameters to their declared types
        strip_unknown_params: Drop parameters a schema does not declare
        json_indent: Indentation for rendered JSON bodies
        json_sort_keys: Sort object keys in rendered JSON bodies
        pagination_size: Page cap for Pagination schemas registered without
            an explicit size
        log_level: Level applied by configure_logging()
    """

    default_format: str = "json"
    coerce_params: bool = True
    strip_unknown_params: bool = True
    json_indent: Optional[int] = None
    json_sort_keys: bool = False
    pagination_size: int = 100
    log_level: str = "WARNING"


class ConfigError(Exception):
    """Raised when configuration validation fails."""
    pass


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources.

    Example:
        ```python
        config = ConfigLoader.load(paths=["restmap.yaml"], env_file=".env").to_config()
        controller = UsersController.api(config=config)
        ```
    """

    def __init__(self, env_prefix: str = "RESTMAP_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        paths: Optional[list[str]] = None,
        env_prefix: str = "RESTMAP_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ConfigLoader":
        """
        Load configuration from multiple sources with proper merge strategy.

        Args:
            paths: Config file paths (glob patterns supported)
            env_prefix: Prefix for environment variables
            env_file: Path to .env file
            overrides: Manual overrides (highest precedence)

        Returns:
            Configured ConfigLoader instance
        """
        loader = cls(env_prefix=env_prefix)

        for pattern in paths or []:
            loader._load_from_files(pattern)

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env()

        if overrides:
            loader._merge_dict(loader.config_data, overrides)

        return loader

    def _load_from_files(self, pattern: str):
        """Load config from JSON or YAML files."""
        for path_str in sorted(glob(pattern)):
            path = Path(path_str)
            if path.suffix == ".json":
                self._load_json_file(path)
            elif path.suffix in (".yaml", ".yml"):
                self._load_yaml_file(path)
            else:
                raise ConfigError(f"Unsupported config file type: {path}")

    def _load_json_file(self, path: Path):
        with open(path) as f:
            data = json.load(f)
        if data:
            self._merge_dict(self.config_data, data)

    def _load_yaml_file(self, path: Path):
        with open(path) as f:
            data = yaml.safe_load(f)
        if data:
            self._merge_dict(self.config_data, data)

    def _load_env_file(self, path: str):
        """Load prefixed keys from a .env file."""
        if not Path(path).exists():
            return
        for key, value in dotenv_values(path).items():
            if key.startswith(self.env_prefix) and value is not None:
                self._set_key(key, value)

    def _load_from_env(self):
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set_key(key, value)

    def _set_key(self, key: str, value: str):
        """Convert RESTMAP_JSON_INDENT=2 to {"json_indent": 2}."""
        self.config_data[key[len(self.env_prefix):].lower()] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False
        if value.lower() in ("none", "null"):
            return None

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def _merge_dict(self, target: dict, source: dict):
        """Deep merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._merge_dict(target[key], value)
            else:
                target[key] = value

    def get(self, path: str, default: Any = None) -> Any:
        """Get config value by dot-separated path."""
        current = self.config_data
        for part in path.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current

    def to_config(self) -> RestConfig:
        """Instantiate a validated RestConfig; unknown keys are ignored."""
        kwargs = {}
        for field_info in fields(RestConfig):
            if field_info.name not in self.config_data:
                continue
            value = self.config_data[field_info.name]
            if not self._check_type(value, field_info.type):
                raise ConfigError(
                    f"Config field '{field_info.name}' expected {field_info.type}, "
                    f"got {type(value).__name__}"
                )
            kwargs[field_info.name] = value
        return RestConfig(**kwargs)

    def _check_type(self, value: Any, expected_type: Any) -> bool:
        """Basic type checking."""
        origin = get_origin(expected_type)
        if origin is not None:
            args = get_args(expected_type)
            if value is None:
                return type(None) in args
            return any(self._check_type(value, arg) for arg in args if arg is not type(None))

        if expected_type is int and isinstance(value, bool):
            return False
        try:
            return isinstance(value, expected_type)
        except TypeError:
            return True

    def to_dict(self) -> dict:
        return self.config_data.copy()


def configure_logging(level: str = "WARNING") -> None:
    """Apply a basic logging setup for command-line use."""
    numeric = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric, int):
        raise ConfigError(f"Unknown log level: {level}")
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
