"""Layered configuration loader.

Documents are read from the config directory in order, each one
overriding fields of the previous ones:

1. ``default``        - base configuration (required)
2. ``{environment}``  - environment specific (dev, prod, ...), optional
3. ``local``          - untracked local overrides, optional
"""

import tomllib
from pathlib import Path
from typing import Any

import yaml

from ..utils.logging import get_logger
from .models import AppConfig, ValidationError

logger = get_logger(__name__)

DEFAULT_ENVIRONMENT = "dev"
DEFAULT_CONFIG_DIR = Path("cfg")

# Searched in order for each document name
DOCUMENT_SUFFIXES = (".yaml", ".yml", ".toml")


class ConfigError(Exception):
    """Configuration could not be loaded or failed validation."""

    pass


def merge_documents(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into ``base`` field by field.

    Nested mappings are merged recursively; any other value in
    ``override`` (scalars, lists) replaces the one in ``base``.

    Returns:
        A new merged dictionary; the inputs are left untouched
    """
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_documents(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Loads, merges and validates configuration documents."""

    def __init__(self, config_dir: str | Path | None = None):
        """Initialize the config loader.

        Args:
            config_dir: Directory containing config documents. Defaults to ./cfg
        """
        self.config_dir = Path(config_dir) if config_dir is not None else DEFAULT_CONFIG_DIR

    def load(self, environment: str = DEFAULT_ENVIRONMENT, strict: bool = False) -> AppConfig:
        """Load the configuration for an environment.

        Args:
            environment: Name of the environment document to apply
            strict: Enforce production rules (credentials, non-empty roster)

        Returns:
            Validated AppConfig

        Raises:
            ConfigError: If the default document is missing, any document
                cannot be parsed, or the merged result is invalid
        """
        logger.info(f"Loading environment configuration: {environment}")
        data = self.load_merged(environment)

        try:
            config = AppConfig.from_dict(data)
            config.validate(strict=strict)
        except ValidationError as e:
            raise ConfigError(str(e)) from e

        logger.info(
            f"Configuration loaded: {len(config.students)} students, "
            f"smtp={config.smtp.server}:{config.smtp.port}, strict={strict}"
        )
        return config

    def load_merged(self, environment: str = DEFAULT_ENVIRONMENT) -> dict[str, Any]:
        """Resolve and merge the raw documents without validating them."""
        default_path = self.find_document("default")
        if default_path is None:
            raise ConfigError(
                f"Default configuration not found in {self.config_dir} "
                f"(expected one of: {', '.join('default' + s for s in DOCUMENT_SUFFIXES)})"
            )

        data = self._read_document(default_path)
        for name in (environment, "local"):
            path = self.find_document(name)
            if path is None:
                logger.debug(f"Optional configuration '{name}' not present, skipping")
                continue
            data = merge_documents(data, self._read_document(path))
        return data

    def find_document(self, name: str) -> Path | None:
        """Find the first existing file for a document name."""
        for suffix in DOCUMENT_SUFFIXES:
            path = self.config_dir / f"{name}{suffix}"
            if path.is_file():
                return path
        return None

    def _read_document(self, path: Path) -> dict[str, Any]:
        """Parse a YAML or TOML document into a dictionary."""
        logger.info(f"Applying configuration file: {path}")
        try:
            if path.suffix == ".toml":
                with open(path, "rb") as f:
                    data = tomllib.load(f)
            else:
                with open(path, encoding="utf-8") as f:
                    data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except (yaml.YAMLError, tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
            raise ConfigError(f"Cannot parse config file {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping at the top level")
        return data


def load(
    environment: str = DEFAULT_ENVIRONMENT,
    config_dir: str | Path = DEFAULT_CONFIG_DIR,
    strict: bool = False,
) -> AppConfig:
    """Load and validate configuration from ``config_dir``.

    Shortcut for ``ConfigLoader(config_dir).load(environment, strict)``.
    """
    return ConfigLoader(config_dir).load(environment, strict=strict)
