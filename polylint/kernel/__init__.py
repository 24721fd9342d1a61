"""polylint kernel: expression parsing, component rules and conformance matching.

Nothing in the kernel reads files or parses HTML or configuration formats;
the adapters and the compiler hand it already-built models. The exports are
grouped by concern:

- Exceptions
- Logging
- Diagnostics
- Expressions
- Template tree and component model
- Component lint rules
- Conformance
"""

# Exceptions
from polylint.kernel.exceptions import (
    ConfigurationError,
    ParseError,
    PolylintError,
    ResourceNotFoundError,
    ValidationError,
)

# Logging
from polylint.kernel.logging import configure_logging, get_logger

# Diagnostics
from polylint.kernel.linting.models import Diagnostic, LintReport, Location

# Expressions
from polylint.kernel.expressions import ExpressionType, ParsedExpression, parse_expression

# Template tree and component model
from polylint.kernel.components import (
    ComponentDefinition,
    ComponentModel,
    ObserverDescriptor,
    PropertyDescriptor,
    SourcePosition,
)
from polylint.kernel.dom import Attribute, Document, Element, Node, Text

# Component lint rules
from polylint.kernel.linting.component_rules import (
    ALL_COMPONENT_RULES,
    default_registry,
    run_component_rules,
)
from polylint.kernel.linting.rules import LintRule, RuleRegistry, run_rules

# Conformance
from polylint.kernel.conformance import (
    LintOptions,
    ParsedScript,
    Policy,
    Requirement,
    RequirementType,
    from_requirements,
    lint,
)

__all__ = [
    # Exceptions
    "ConfigurationError",
    "ParseError",
    "PolylintError",
    "ResourceNotFoundError",
    "ValidationError",
    # Logging
    "configure_logging",
    "get_logger",
    # Diagnostics
    "Diagnostic",
    "LintReport",
    "Location",
    # Expressions
    "ExpressionType",
    "ParsedExpression",
    "parse_expression",
    # Template tree and component model
    "Attribute",
    "ComponentDefinition",
    "ComponentModel",
    "Document",
    "Element",
    "Node",
    "ObserverDescriptor",
    "PropertyDescriptor",
    "SourcePosition",
    "Text",
    # Component lint rules
    "ALL_COMPONENT_RULES",
    "LintRule",
    "RuleRegistry",
    "default_registry",
    "run_component_rules",
    "run_rules",
    # Conformance
    "LintOptions",
    "ParsedScript",
    "Policy",
    "Requirement",
    "RequirementType",
    "from_requirements",
    "lint",
]
