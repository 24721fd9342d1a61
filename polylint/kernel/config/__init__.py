"""Configuration models for polylint."""

from polylint.kernel.config.models import LoggingConfig, PolylintConfig

__all__ = ["LoggingConfig", "PolylintConfig"]
