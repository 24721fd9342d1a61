"""User-space loaders for configuration and conformance policy files."""

from polylint.compiler.config_loader import (
    ConfigLoader,
    clear_config_cache,
    get_default_config,
    load_config,
)
from polylint.compiler.policy_loader import load_policy

__all__ = [
    "ConfigLoader",
    "clear_config_cache",
    "get_default_config",
    "load_config",
    "load_policy",
]
