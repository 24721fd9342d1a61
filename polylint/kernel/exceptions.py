"""Core exception hierarchy for polylint.

All polylint exceptions inherit from PolylintError so callers can handle
every configuration or input failure in one place. Lint findings are never
raised; they are returned as diagnostics.
"""

from __future__ import annotations

# ============================================================================
# Base Exception
# ============================================================================


class PolylintError(Exception):
    """Base exception for all polylint errors."""

    pass


# ============================================================================
# Configuration & Validation Errors
# ============================================================================


class ConfigurationError(PolylintError):
    """Raised when configuration is invalid or missing.

    A conformance policy that cannot be built (conflicting path filters,
    unknown requirement type, malformed regular expression) is reported with
    this error before any file is analyzed.

    Examples
    --------
    Example usage::

        raise ConfigurationError("requirement[0]", "unknown type 'BANNED_THING'")
    """

    def __init__(self, component: str, reason: str) -> None:
        """Initialize configuration error.

        Args
        ----
            component: Name of the component with invalid configuration
            reason: Explanation of what's wrong
        """
        super().__init__(f"Configuration error in '{component}': {reason}")
        self.component = component
        self.reason = reason


class ValidationError(PolylintError):
    """Raised when a configuration value fails validation.

    Examples
    --------
    Example usage::

        raise ValidationError("format", "must be one of text, json", value="xml")
    """

    def __init__(self, field: str, constraint: str, value: object = None) -> None:
        """Initialize validation error.

        Args
        ----
            field: Name of the field that failed validation
            constraint: Description of the validation constraint
            value: The invalid value (optional)
        """
        if value is not None:
            msg = f"Validation failed for '{field}': {constraint} (got {value!r})"
        else:
            msg = f"Validation failed for '{field}': {constraint}"
        super().__init__(msg)
        self.field = field
        self.constraint = constraint
        self.value = value


class ParseError(PolylintError):
    """Raised when an input document or script cannot be read at all.

    Syntax problems inside a readable script are not parse errors: they
    surface as diagnostics from the conformance checker.
    """

    pass


# ============================================================================
# Resource Errors
# ============================================================================


class ResourceNotFoundError(PolylintError):
    """Raised when a required file cannot be found.

    Examples
    --------
    Example usage::

        raise ResourceNotFoundError("policy", "conformance.json")
    """

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize resource not found error.

        Args
        ----
            resource_type: Type of resource (e.g., "policy", "document")
            resource_id: Identifier of the missing resource
        """
        super().__init__(f"{resource_type.title()} '{resource_id}' not found")
        self.resource_type = resource_type
        self.resource_id = resource_id


__all__ = [
    "PolylintError",
    "ConfigurationError",
    "ValidationError",
    "ParseError",
    "ResourceNotFoundError",
]
