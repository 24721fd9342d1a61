"""polylint - static checks for web component bindings and JavaScript conformance.

Checks that component templates only bind to declared properties and
methods, that binding delimiters are balanced, that custom elements are
defined, and that scripts follow a JSConformance-style policy.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("polylint")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"

from polylint.adapters.component_analyzer import load_component_model
from polylint.compiler.policy_loader import load_policy
from polylint.kernel.linting.models import Diagnostic, LintReport, Location
from polylint.runner import lint_paths

__all__ = [
    "Diagnostic",
    "LintReport",
    "Location",
    "__version__",
    "lint_paths",
    "load_component_model",
    "load_policy",
]
