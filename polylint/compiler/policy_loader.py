"""Load conformance policy files.

A policy file holds a ``requirement`` list, as JSON (the JSConformance dump
format) or YAML::

    requirement:
      - type: BANNED_NAME
        value: [eval]
        error_message: eval is not allowed
"""

from __future__ import annotations

import json
from pathlib import Path

import yaml

from polylint.kernel.conformance.policy import Policy, from_requirements
from polylint.kernel.exceptions import ConfigurationError, ResourceNotFoundError
from polylint.kernel.logging import get_logger

logger = get_logger(__name__)


def load_policy(path: str | Path) -> Policy:
    """Read a policy file and build the policy.

    Parameters
    ----------
    path : str | Path
        JSON or YAML (``.yaml`` / ``.yml``) policy file

    Returns
    -------
    Policy
        Requirements in file order

    Raises
    ------
    ResourceNotFoundError
        If the file does not exist
    ConfigurationError
        If the file cannot be parsed or describes an invalid policy
    """
    policy_path = Path(path)
    if not policy_path.is_file():
        raise ResourceNotFoundError("policy", str(path))

    try:
        text = policy_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(policy_path.name, f"cannot read policy: {e}") from e

    try:
        if policy_path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(policy_path.name, f"invalid policy file: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(policy_path.name, "policy must be a mapping")

    policy = from_requirements(data)
    logger.debug(
        "Loaded {count} requirement(s) from {path}", count=len(policy), path=str(policy_path)
    )
    return policy
