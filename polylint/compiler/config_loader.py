"""Configuration loader for polylint.

Parses configuration into kernel config models. Supports two config sources:

1. **kind: Config YAML**: loaded via explicit path or the
   ``POLYLINT_CONFIG_PATH`` env var.
2. **pyproject.toml [tool.polylint]**: auto-discovery fallback from the
   working directory upwards.

The kernel never touches config file formats directly.
"""

from __future__ import annotations

import os
import re
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from polylint.kernel.config.models import LoggingConfig, PolylintConfig
from polylint.kernel.exceptions import ConfigurationError, ResourceNotFoundError
from polylint.kernel.logging import get_logger

logger = get_logger(__name__)

CONFIG_PATH_ENV = "POLYLINT_CONFIG_PATH"

# Constants for boolean value parsing
_TRUTHY_VALUES = frozenset({"true", "1", "yes", "on", "enabled"})
_FALSY_VALUES = frozenset({"false", "0", "no", "off", "disabled"})


def _parse_bool(value: Any, field: str) -> bool:
    """Parse a boolean that may arrive as a string after env substitution.

    Raises
    ------
    ConfigurationError
        If value is not a recognized boolean
    """
    if isinstance(value, bool):
        return value
    normalized = str(value).lower().strip()
    if normalized in _TRUTHY_VALUES:
        return True
    if normalized in _FALSY_VALUES:
        return False
    raise ConfigurationError(field, f"invalid boolean value {value!r}")


@lru_cache(maxsize=32)
def _load_and_parse_cached(path_str: str) -> PolylintConfig:
    """Cached configuration loader."""
    return ConfigLoader()._load_and_parse(Path(path_str))


class ConfigLoader:
    """Loads and processes polylint configuration files.

    Supports two config sources:

    1. ``kind: Config`` YAML manifests (explicit path or env var)
    2. ``pyproject.toml [tool.polylint]`` (auto-discovery)
    """

    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def load_config_file(self, path: str | Path | None = None) -> PolylintConfig:
        """Load configuration from YAML or pyproject.toml.

        Parameters
        ----------
        path : str | Path | None
            Path to config file. If None, searches using discovery order.

        Returns
        -------
        PolylintConfig
            Parsed configuration with environment variables substituted

        Raises
        ------
        ResourceNotFoundError
            If an explicit path does not exist or nothing is discovered
        ConfigurationError
            If the file is not valid configuration
        """
        config_path = self._find_config_file(path)
        return _load_and_parse_cached(str(config_path.absolute()))

    def _load_and_parse(self, config_path: Path) -> PolylintConfig:
        logger.info("Loading configuration from {path}", path=config_path)

        if config_path.suffix in (".yaml", ".yml"):
            return self._load_yaml_config(config_path)
        return self._load_toml_config(config_path)

    def _load_yaml_config(self, config_path: Path) -> PolylintConfig:
        """Load and parse a kind: Config YAML file.

        Raises
        ------
        ConfigurationError
            If the YAML file is not a valid kind: Config manifest
        """
        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(config_path.name, f"invalid YAML: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                config_path.name, f"expected a mapping, got {type(data).__name__}"
            )

        kind = data.get("kind")
        if kind != "Config":
            raise ConfigurationError(
                config_path.name,
                "YAML config files must use the 'kind: Config' manifest format, "
                f"got 'kind: {kind}'",
            )

        spec = data.get("spec") or {}
        if not isinstance(spec, dict):
            raise ConfigurationError(config_path.name, "'spec' field must be a mapping")

        return self._parse_config(self._substitute_env_vars(spec))

    def _load_toml_config(self, config_path: Path) -> PolylintConfig:
        """Load and parse a TOML config file (pyproject.toml or a flat table)."""
        try:
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(config_path.name, f"invalid TOML: {e}") from e

        if "tool" in data and "polylint" in data.get("tool", {}):
            polylint_data = data["tool"]["polylint"]
        elif config_path.name == "pyproject.toml":
            logger.info("No [tool.polylint] section found in pyproject.toml, using defaults")
            return get_default_config()
        else:
            polylint_data = data

        return self._parse_config(self._substitute_env_vars(polylint_data))

    def _find_config_file(self, path: str | Path | None) -> Path:
        """Find configuration file.

        Discovery order:
        1. Explicit path argument
        2. ``POLYLINT_CONFIG_PATH`` env var
        3. ``pyproject.toml`` with ``[tool.polylint]`` in CWD or a parent

        Raises
        ------
        ResourceNotFoundError
            If no configuration file is found
        """
        if path:
            config_path = Path(path)
            if not config_path.exists():
                raise ResourceNotFoundError("configuration", str(config_path))
            return config_path

        if env_path := os.getenv(CONFIG_PATH_ENV):
            config_path = Path(env_path)
            if config_path.exists():
                logger.debug(
                    "Using config from {var}: {path}", var=CONFIG_PATH_ENV, path=config_path
                )
                return config_path
            logger.warning(
                "{var} set but file not found: {path}", var=CONFIG_PATH_ENV, path=config_path
            )

        current = Path.cwd()
        for directory in (current, *current.parents):
            pyproject = directory / "pyproject.toml"
            if pyproject.is_file() and self._has_polylint_section(pyproject):
                return pyproject

        raise ResourceNotFoundError("configuration", "pyproject.toml [tool.polylint]")

    @staticmethod
    def _has_polylint_section(pyproject: Path) -> bool:
        try:
            with pyproject.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError:
            logger.warning("Skipping unreadable {path}", path=pyproject)
            return False
        return "polylint" in data.get("tool", {})

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively substitute ``${VAR}`` references in configuration."""
        if isinstance(data, str):

            def replacer(match: re.Match[str]) -> str:
                var_name = match.group(1)
                value = os.environ.get(var_name)
                if value is None:
                    logger.debug(
                        "Environment variable ${{{var_name}}} not found, keeping placeholder",
                        var_name=var_name,
                    )
                    return match.group(0)
                return value

            return self.ENV_VAR_PATTERN.sub(replacer, data)

        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}

        if isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]

        return data

    def _parse_config(self, data: dict[str, Any]) -> PolylintConfig:
        """Parse format-agnostic configuration data into PolylintConfig."""
        disable = data.get("disable", [])
        if isinstance(disable, str):
            disable = [rule_id.strip() for rule_id in disable.split(",") if rule_id.strip()]

        logging_data = data.get("logging", {})
        if not isinstance(logging_data, dict):
            raise ConfigurationError("logging", "must be a mapping")

        config = PolylintConfig(
            disable=list(disable),
            policy=data.get("policy"),
            follow_imports=_parse_bool(data.get("follow_imports", True), "follow_imports"),
            logging=self._parse_logging_config(logging_data),
        )
        logger.debug("Loaded configuration disabling {count} rule(s)", count=len(config.disable))
        return config

    def _parse_logging_config(self, logging_data: dict[str, Any]) -> LoggingConfig:
        """Parse logging configuration with environment variable overrides.

        Environment variables take precedence over config file values:
        - POLYLINT_LOG_LEVEL: Log level
        - POLYLINT_LOG_FORMAT: Output format (console, json, structured, rich)
        """
        level = str(logging_data.get("level", "WARNING")).upper()
        format_type = str(logging_data.get("format", "structured")).lower()

        if env_level := os.getenv("POLYLINT_LOG_LEVEL"):
            level = env_level.upper()
            logger.debug("Overriding log level from env: {}", level)

        if env_format := os.getenv("POLYLINT_LOG_FORMAT"):
            format_type = env_format.lower()
            logger.debug("Overriding log format from env: {}", format_type)

        return LoggingConfig(
            level=level,  # type: ignore[arg-type]
            format=format_type,  # type: ignore[arg-type]
            output_file=logging_data.get("output_file"),
            use_color=_parse_bool(logging_data.get("use_color", True), "logging.use_color"),
            include_timestamp=_parse_bool(
                logging_data.get("include_timestamp", True), "logging.include_timestamp"
            ),
        )


def load_config(path: str | Path | None = None) -> PolylintConfig:
    """Load configuration from file or return defaults.

    An explicit ``path`` that does not exist is an error; failing to
    discover any configuration is not.

    Raises
    ------
    ResourceNotFoundError
        If an explicit path does not exist
    ConfigurationError
        If a configuration file is invalid
    """
    loader = ConfigLoader()
    if path:
        return loader.load_config_file(path)
    try:
        return loader.load_config_file(None)
    except ResourceNotFoundError:
        logger.debug("No configuration file found, using defaults")
        return get_default_config()


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when configuration files have been modified.
    """
    _load_and_parse_cached.cache_clear()


def get_default_config() -> PolylintConfig:
    return PolylintConfig()
