"""Configuration data models for polylint."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from polylint.kernel.exceptions import ValidationError

_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_LOG_FORMATS = ("console", "json", "structured", "rich")


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging configuration for polylint.

    Attributes
    ----------
    level : str, default="WARNING"
        Log level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
    format : str, default="structured"
        Output format (console, json, structured, rich)
    output_file : str | None, default=None
        Optional file path to write JSON log records to
    use_color : bool, default=True
        Use ANSI color codes
    include_timestamp : bool, default=True
        Include timestamp in log output

    Examples
    --------
    TOML configuration:

    ```toml
    [tool.polylint.logging]
    level = "DEBUG"
    format = "rich"
    ```

    Environment variable overrides:

    ```bash
    export POLYLINT_LOG_LEVEL=DEBUG
    export POLYLINT_LOG_FORMAT=json
    ```
    """

    level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "structured", "rich"] = "structured"
    output_file: str | None = None
    use_color: bool = True
    include_timestamp: bool = True

    def __post_init__(self) -> None:
        """Validate level and format.

        Raises
        ------
        ValidationError
            If level or format is not recognized
        """
        if self.level not in _LOG_LEVELS:
            raise ValidationError(
                "logging.level", f"must be one of {', '.join(_LOG_LEVELS)}", self.level
            )
        if self.format not in _LOG_FORMATS:
            raise ValidationError(
                "logging.format", f"must be one of {', '.join(_LOG_FORMATS)}", self.format
            )


@dataclass(frozen=True, slots=True)
class PolylintConfig:
    """Complete polylint configuration.

    Attributes
    ----------
    disable : list[str]
        Rule ids that are never run
    policy : str | None
        Path of a conformance policy file (JSON or YAML)
    follow_imports : bool
        Follow ``<link rel="import">`` documents from the entry file
    logging : LoggingConfig
        Logging configuration

    Examples
    --------
    TOML configuration in pyproject.toml:

    ```toml
    [tool.polylint]
    disable = ["element-not-defined"]
    policy = "conformance.json"
    follow_imports = true

    [tool.polylint.logging]
    level = "INFO"
    ```

    The same as a ``kind: Config`` YAML file:

    ```yaml
    kind: Config
    spec:
      disable: [element-not-defined]
      policy: ${POLICY_DIR}/conformance.json
    ```
    """

    disable: list[str] = field(default_factory=list)
    policy: str | None = None
    follow_imports: bool = True
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        """Validate field types.

        Raises
        ------
        ValidationError
            If ``disable`` is not a list of strings or ``policy`` is empty
        """
        if not isinstance(self.disable, list) or not all(
            isinstance(rule_id, str) for rule_id in self.disable
        ):
            raise ValidationError("disable", "must be a list of rule ids", self.disable)
        if self.policy is not None and not self.policy:
            raise ValidationError("policy", "cannot be empty")
