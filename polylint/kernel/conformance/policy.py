"""Conformance requirements and the policy that scopes them to paths.

A policy is the already-deserialized form of a JSConformance configuration::

    {"requirement": [
        {"type": "BANNED_NAME", "value": ["eval"],
         "error_message": "eval is not allowed",
         "whitelist": ["third_party/"]}
    ]}

Each requirement may be limited to paths (``only_apply_to`` /
``only_apply_to_regexp``) or exempt paths (``whitelist`` /
``whitelist_regexp``), but not both.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from polylint.kernel.exceptions import ConfigurationError

__all__ = [
    "PathFilter",
    "Policy",
    "Requirement",
    "RequirementSpec",
    "RequirementType",
    "from_requirements",
]


class RequirementType(Enum):
    """Kinds of conformance requirement, numbered as in conformance.proto."""

    CUSTOM = 1
    BANNED_DEPENDENCY = 2
    BANNED_NAME = 3
    BANNED_PROPERTY = 4
    BANNED_PROPERTY_READ = 5
    BANNED_PROPERTY_WRITE = 6
    RESTRICTED_NAME_CALL = 7
    RESTRICTED_METHOD_CALL = 8
    BANNED_CODE_PATTERN = 9
    BANNED_PROPERTY_CALL = 10


def _as_string_list(v: Any) -> list[str] | None:
    if v is None:
        return None
    if isinstance(v, (str, int, float, bool)):
        return [str(v)]
    return [str(item) for item in v]


class RequirementSpec(BaseModel):
    """Raw requirement entry as found in a policy file.

    Scalars are accepted wherever a list is expected and every list element
    is converted to a string. Unknown keys are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    type: str | None = None
    value: list[str] = Field(default_factory=list)
    error_message: str | None = None
    whitelist: list[str] | None = None
    whitelist_regexp: list[str] | None = None
    only_apply_to: list[str] | None = None
    only_apply_to_regexp: list[str] | None = None
    js_module: str | None = None
    rule_id: str | None = None

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, v: Any) -> list[str]:
        return _as_string_list(v) or []

    @field_validator(
        "whitelist", "whitelist_regexp", "only_apply_to", "only_apply_to_regexp", mode="before"
    )
    @classmethod
    def coerce_path_list(cls, v: Any) -> list[str] | None:
        return _as_string_list(v)

    @field_validator("type", "error_message", "js_module", "rule_id", mode="before")
    @classmethod
    def coerce_string(cls, v: Any) -> str | None:
        return None if v is None else str(v)


@dataclass(frozen=True, slots=True)
class PathFilter:
    """Predicate over file paths built from literal prefixes and regexes.

    A literal value matches a path when it equals the path or one of its
    directory prefixes: ``a/b/c.js`` is matched by ``a/b/c.js``, ``a/b/``,
    ``a/b``, ``a/`` and ``a``. Regular expressions match anywhere in the path.
    Windows separators are normalized when the path has no ``/`` at all.
    """

    values: frozenset[str] = frozenset()
    patterns: tuple[re.Pattern[str], ...] = ()

    @classmethod
    def build(
        cls,
        values: Iterable[str] | None,
        regexps: Iterable[str] | None,
        component: str = "requirement",
    ) -> PathFilter | None:
        """Return a filter, or None when neither list is given.

        An empty list still produces a filter (one that matches nothing).

        Raises
        ------
        ConfigurationError
            If a regular expression does not compile
        """
        if values is None and regexps is None:
            return None
        patterns = []
        for source in regexps or ():
            try:
                patterns.append(re.compile(source))
            except re.error as e:
                raise ConfigurationError(
                    component, f"invalid path regular expression {source!r}: {e}"
                ) from e
        return cls(values=frozenset(values or ()), patterns=tuple(patterns))

    def __call__(self, path: str) -> bool:
        if "/" not in path and "\\" in path:
            path = path.replace("\\", "/")

        prefix = path
        while prefix:
            if prefix in self.values:
                return True
            if prefix.endswith("/"):
                prefix = prefix[:-1]
            else:
                last_slash = prefix.rfind("/")
                if last_slash < 0:
                    break
                prefix = prefix[: last_slash + 1]

        return any(pattern.search(path) for pattern in self.patterns)


@dataclass(frozen=True, slots=True)
class Requirement:
    """One conformance rule.

    Attributes
    ----------
    kind : RequirementType
        What the requirement bans
    value : tuple[str, ...]
        Banned names, properties or patterns
    error_message : str | None
        Message reported for each violation
    include : PathFilter | None
        Paths the requirement is limited to
    exclude : PathFilter | None
        Paths exempt from the requirement
    js_module : str | None
        Module implementing a ``CUSTOM`` requirement
    rule_id : str | None
        Identifier carried over from the policy file

    Raises
    ------
    ConfigurationError
        If both ``include`` and ``exclude`` are set, or if ``js_module`` is
        present on anything but a ``CUSTOM`` requirement (or missing on one)
    """

    kind: RequirementType
    value: tuple[str, ...] = ()
    error_message: str | None = None
    include: PathFilter | None = None
    exclude: PathFilter | None = None
    js_module: str | None = None
    rule_id: str | None = None

    def __post_init__(self) -> None:
        component = self.rule_id or self.kind.name
        if self.include is not None and self.exclude is not None:
            raise ConfigurationError(
                component,
                "a requirement cannot specify both whitelist* and only_apply_to*",
            )
        if (self.kind is RequirementType.CUSTOM) != (self.js_module is not None):
            raise ConfigurationError(
                component, "only and all CUSTOM requirements must have a js_module"
            )

    @classmethod
    def from_spec(cls, raw: Mapping[str, Any] | RequirementSpec) -> Requirement:
        """Build a requirement from a raw policy entry.

        Raises
        ------
        ConfigurationError
            If the entry is malformed, names an unknown type, or breaks one of
            the requirement invariants
        """
        if isinstance(raw, RequirementSpec):
            spec = raw
        else:
            try:
                spec = RequirementSpec.model_validate(raw)
            except PydanticValidationError as e:
                raise ConfigurationError("requirement", str(e)) from e

        component = spec.rule_id or "requirement"
        if not spec.type:
            raise ConfigurationError(component, "missing requirement type")
        try:
            kind = RequirementType[spec.type]
        except KeyError:
            raise ConfigurationError(
                component, f"invalid requirement type {spec.type!r}"
            ) from None

        return cls(
            kind=kind,
            value=tuple(spec.value),
            error_message=spec.error_message,
            include=PathFilter.build(spec.only_apply_to, spec.only_apply_to_regexp, component),
            exclude=PathFilter.build(spec.whitelist, spec.whitelist_regexp, component),
            js_module=spec.js_module,
            rule_id=spec.rule_id,
        )

    def applies_to(self, path: str) -> bool:
        if self.include is not None and not self.include(path):
            return False
        return not (self.exclude is not None and self.exclude(path))


class Policy:
    """Ordered, read-only collection of requirements."""

    __slots__ = ("_requirements",)

    def __init__(self, requirements: Iterable[Requirement]) -> None:
        self._requirements: tuple[Requirement, ...] = tuple(requirements)

    @property
    def requirements(self) -> tuple[Requirement, ...]:
        return self._requirements

    def applicable_to(self, path: str) -> list[Requirement]:
        """Requirements that apply to ``path``, in policy order."""
        return [requirement for requirement in self._requirements if requirement.applies_to(path)]

    def __len__(self) -> int:
        return len(self._requirements)

    def __repr__(self) -> str:
        return f"Policy(requirements={len(self._requirements)})"


def from_requirements(config: Mapping[str, Any]) -> Policy:
    """Build a policy from a deserialized ``{"requirement": [...]}`` mapping.

    Raises
    ------
    ConfigurationError
        If ``requirement`` is not a list or any entry is invalid
    """
    entries = config.get("requirement") if isinstance(config, Mapping) else None
    if not isinstance(entries, list):
        raise ConfigurationError("policy", "missing requirement array")
    requirements = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            raise ConfigurationError(f"requirement[{index}]", "entry must be a mapping")
        requirements.append(Requirement.from_spec(entry))
    return Policy(requirements)
