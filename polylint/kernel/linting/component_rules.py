"""Lint rules for component definitions and their template bindings."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

from polylint.kernel.components import (
    ComponentDefinition,
    ComponentModel,
    PropertyDescriptor,
    SourcePosition,
)
from polylint.kernel.dom import Element, Node, all_of, has_attr_value, has_tag_name, walk_prior
from polylint.kernel.expressions import ParsedExpression, parse_expression
from polylint.kernel.linting.bindings import (
    BindingOccurrence,
    attribute_binding_expressions,
    bad_binding_expressions,
    is_a11y_attribute,
    is_problematic_attribute,
    text_binding_expressions,
)
from polylint.kernel.linting.models import Diagnostic, LintReport, Location
from polylint.kernel.linting.rules import LintRule, RuleRegistry, run_rules

# Accessor every component gets from the framework without declaring it
_BUILTIN_PROPERTIES = (PropertyDescriptor(name="isAttached", type="boolean"),)

# Elements the templating system provides itself
_SYNTHESIZED_ELEMENTS = frozenset({
    "dom-module",
    "dom-repeat",
    "dom-if",
    "dom-bind",
    "array-selector",
    "custom-style",
    "test-fixture",
})

_CUSTOM_ELEMENT_NAME = re.compile(r".+-.+")

_BASE_COMPONENT = "Polymer.Base"


def _at_node(rule_id: str, node: Node, message: str) -> Diagnostic:
    return Diagnostic(
        filename=node.document,
        location=node.location,
        message=message,
        fatal=True,
        rule_id=rule_id,
    )


def _at_position(
    rule_id: str,
    position: SourcePosition | None,
    fallback: Node | None,
    component: ComponentDefinition,
    message: str,
) -> Diagnostic:
    """Report at a script position, else at ``fallback``, else at the component."""
    if position is None and fallback is not None:
        return _at_node(rule_id, fallback, message)
    if position is None:
        position = component.position or SourcePosition(component.content_href, Location(0, 0))
    return Diagnostic(
        filename=position.filename,
        location=position.location,
        message=message,
        fatal=True,
        rule_id=rule_id,
    )


def _is_custom_element(node: Node) -> bool:
    return isinstance(node, Element) and _CUSTOM_ELEMENT_NAME.search(node.tag_name) is not None


# ---------------------------------------------------------------------------
# bound-variables-declared
# ---------------------------------------------------------------------------


class BoundVariablesDeclaredRule:
    """Bindings and observers may only use declared properties and methods."""

    rule_id = "bound-variables-declared"
    description = "Binding references an undeclared property or method"

    def check(self, model: ComponentModel, path: str) -> list[Diagnostic]:
        """Check every binding and observer expression of every component."""
        diagnostics: list[Diagnostic] = []
        for component in model.components:
            if not component.tag_name:
                continue
            properties = component.properties + _BUILTIN_PROPERTIES
            attribute_expressions = attribute_binding_expressions(model, component.tag_name)
            implicit = implicit_bindings(attribute_expressions)

            occurrences = attribute_expressions + text_binding_expressions(
                model, component.tag_name
            )
            for occurrence in occurrences:
                diagnostics.extend(
                    self._check_expression(
                        occurrence.parsed,
                        properties,
                        implicit,
                        component,
                        label="Computed Binding",
                        report=lambda message, node=occurrence.node: _at_node(
                            self.rule_id, node, message
                        ),
                        attribute_name=occurrence.attribute_name,
                    )
                )

            for observer in component.observers:
                parsed = parse_expression("{{" + observer.expression + "}}")
                diagnostics.extend(
                    self._check_expression(
                        parsed,
                        properties,
                        implicit,
                        component,
                        label="Observer",
                        report=lambda message, position=observer.position: _at_position(
                            self.rule_id, position, component.script_element, component, message
                        ),
                    )
                )
        return diagnostics

    def _check_expression(
        self,
        parsed: ParsedExpression,
        properties: tuple[PropertyDescriptor, ...],
        implicit: set[str],
        component: ComponentDefinition,
        label: str,
        report: Callable[[str], Diagnostic],
        attribute_name: str | None = None,
    ) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        tag_name = component.tag_name

        for method in parsed.methods:
            matches = [prop for prop in properties if prop.name == method]
            if not matches:
                diagnostics.append(
                    report(f"{label} method '{method}' is not defined on element '{tag_name}'")
                )
            elif not matches[-1].is_function:
                diagnostics.append(
                    report(
                        f"{label} using property '{method}', which is not a function "
                        f"for element '{tag_name}'"
                    )
                )

        declared = {prop.name for prop in properties}
        for key in parsed.keys:
            if key == "" or key in implicit or key in declared:
                continue
            if attribute_name:
                message = (
                    f"Property '{key}' bound to attribute '{attribute_name}' not found "
                    f"in 'properties' for element '{tag_name}'"
                )
            else:
                message = f"Property {key} not found in 'properties' for element '{tag_name}'"
            diagnostics.append(report(message))
        return diagnostics


def implicit_bindings(attribute_expressions: Iterable[BindingOccurrence]) -> set[str]:
    """Keys that need no declaration.

    A key is implicit when more than one attribute binding uses it, or when
    it is bound to a native attribute with the ``$`` marker (a single native
    binding is enough).
    """
    by_key: dict[str, list[BindingOccurrence]] = {}
    for occurrence in attribute_expressions:
        for key in dict.fromkeys(occurrence.parsed.keys):
            if key:
                by_key.setdefault(key, []).append(occurrence)
    return {
        key
        for key, occurrences in by_key.items()
        if len(occurrences) > 1 or any(occurrence.native for occurrence in occurrences)
    }


# ---------------------------------------------------------------------------
# element-not-defined
# ---------------------------------------------------------------------------


class ElementNotDefinedRule:
    """Custom elements used in any document must be registered."""

    rule_id = "element-not-defined"
    description = "Custom element is used but never defined"

    def check(self, model: ComponentModel, path: str) -> list[Diagnostic]:
        """Check every hyphenated tag across all loaded documents."""
        diagnostics: list[Diagnostic] = []
        for node in model.walk_all_documents(_is_custom_element):
            if not isinstance(node, Element):
                continue
            if node.tag_name in model.elements_by_tag_name:
                continue
            if node.tag_name in _SYNTHESIZED_ELEMENTS:
                continue
            diagnostics.append(_at_node(self.rule_id, node, f"<{node.tag_name}> is undefined."))
        return diagnostics


# ---------------------------------------------------------------------------
# native-attribute-binding
# ---------------------------------------------------------------------------


class NativeAttributeBindingRule:
    """Bindings to native or ARIA attributes must use the ``$=`` form."""

    rule_id = "native-attribute-binding"
    description = "Native attribute bound without $="

    def check(self, model: ComponentModel, path: str) -> list[Diagnostic]:
        """Check every attribute binding of every component."""
        diagnostics: list[Diagnostic] = []
        for component in model.components:
            if not component.tag_name:
                continue
            for occurrence in attribute_binding_expressions(model, component.tag_name):
                name = occurrence.attribute_name or ""
                if is_problematic_attribute(name, occurrence.node) or is_a11y_attribute(name):
                    diagnostics.append(
                        _at_node(
                            self.rule_id,
                            occurrence.node,
                            f"The expression {occurrence.expression} bound to the attribute "
                            f"'{name}' should use $= instead of =.",
                        )
                    )
        return diagnostics


# ---------------------------------------------------------------------------
# observer-not-function
# ---------------------------------------------------------------------------


class ObserverNotFunctionRule:
    """A property's ``observer`` must name a method of the same component."""

    rule_id = "observer-not-function"
    description = "Property observer is undefined or not a function"

    def check(self, model: ComponentModel, path: str) -> list[Diagnostic]:
        """Check each property observer against the component's properties."""
        diagnostics: list[Diagnostic] = []
        for component in model.components:
            for prop in component.properties:
                if not prop.observer:
                    continue
                observer = next(
                    (other for other in component.properties if other.name == prop.observer),
                    None,
                )
                if observer is None:
                    diagnostics.append(
                        _at_position(
                            self.rule_id,
                            prop.observer_position,
                            component.script_element,
                            component,
                            f"Observer '{prop.observer}' is undefined.",
                        )
                    )
                elif not observer.is_function:
                    diagnostics.append(
                        _at_position(
                            self.rule_id,
                            observer.position,
                            component.script_element,
                            component,
                            f"Observer '{prop.observer}' is not a function.",
                        )
                    )
        return diagnostics


# ---------------------------------------------------------------------------
# dom-module-after-polymer
# ---------------------------------------------------------------------------


class DomModuleAfterPolymerRule:
    """A component's ``<dom-module>`` must be unique and precede its script."""

    rule_id = "dom-module-after-polymer"
    description = "dom-module is repeated or appears after its Polymer() call"

    def check(self, model: ComponentModel, path: str) -> list[Diagnostic]:
        """Check ordering and uniqueness of dom-module registrations."""
        diagnostics: list[Diagnostic] = []
        for component in model.components:
            if component.tag_name == _BASE_COMPONENT:
                continue
            dom_modules = model.dom_modules(component.tag_name)
            if not dom_modules:
                continue
            if len(dom_modules) > 1:
                diagnostics.extend(
                    _at_node(
                        self.rule_id,
                        dom_module,
                        f"dom-module has a repeated value for id {component.tag_name}.",
                    )
                    for dom_module in dom_modules
                )
                continue
            script = component.script_element
            if script is None:
                continue
            matching_module = all_of(
                has_tag_name("dom-module"), has_attr_value("id", component.tag_name)
            )
            if walk_prior(script, matching_module) is None:
                diagnostics.append(
                    _at_node(
                        self.rule_id,
                        dom_modules[0],
                        f"dom-module for {component.tag_name} should be a parent of it "
                        "or earlier in the document.",
                    )
                )
        return diagnostics


# ---------------------------------------------------------------------------
# unbalanced-delimiters
# ---------------------------------------------------------------------------


class UnbalancedDelimitersRule:
    """Binding delimiters in templates must pair up."""

    rule_id = "unbalanced-delimiters"
    description = "Binding expression has unbalanced delimiters"

    def check(self, model: ComponentModel, path: str) -> list[Diagnostic]:
        """Check every text node and attribute value in component templates."""
        diagnostics: list[Diagnostic] = []
        for component in model.components:
            if not component.tag_name:
                continue
            diagnostics.extend(
                _at_node(
                    self.rule_id,
                    occurrence.node,
                    f"Expression {occurrence.expression} has unbalanced delimiters",
                )
                for occurrence in bad_binding_expressions(model, component.tag_name)
            )
        return diagnostics


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

ALL_COMPONENT_RULES: list[LintRule] = [
    BoundVariablesDeclaredRule(),
    ElementNotDefinedRule(),
    NativeAttributeBindingRule(),
    ObserverNotFunctionRule(),
    DomModuleAfterPolymerRule(),
    UnbalancedDelimitersRule(),
]


def default_registry() -> RuleRegistry:
    """A fresh registry holding every built-in component rule."""
    return RuleRegistry(ALL_COMPONENT_RULES)


def run_component_rules(
    model: ComponentModel,
    path: str,
    disable: Iterable[str] = (),
    registry: RuleRegistry | None = None,
) -> LintReport:
    """Run all enabled component rules and return a report.

    Parameters
    ----------
    model : ComponentModel
        Components and documents of the run
    path : str
        Entry document of the run
    disable : Iterable[str]
        Rule ids to skip
    registry : RuleRegistry | None
        Rules to run; defaults to the built-in rules

    Returns
    -------
    LintReport
        Diagnostics in registry order
    """
    if registry is None:
        registry = default_registry()
    return run_rules(registry.without(disable), model, path)
