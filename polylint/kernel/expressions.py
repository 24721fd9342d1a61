"""Parser for template binding expressions.

Templates embed bindings as ``{{expr}}`` (two-way) or ``[[expr]]``
(one-way). An expression is either a path (``user.name``, ``!hidden``), a
literal (``'text'``, ``42``) or a computed call (``format(user.*, 'short')``).
This module reduces an expression to the property keys and method names it
references; it never evaluates anything.

Examples
--------
Basic usage::

    from polylint.kernel.expressions import parse_expression

    parsed = parse_expression("{{computeLabel(user.name, 'x')}}")
    parsed.type     # ExpressionType.COMPUTED
    parsed.methods  # ('computeLabel',)
    parsed.keys     # ('user', '')
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

__all__ = [
    "Argument",
    "ExpressionType",
    "ParsedExpression",
    "extract_binding_expression",
    "parse_argument",
    "parse_expression",
    "primary_name",
]

_CURLY_BINDING = re.compile(r"\{\{(.*)\}\}")
_SQUARE_BINDING = re.compile(r"\[\[(.*)\]\]")
_METHOD_CALL = re.compile(r"(\w*)\((.*)\)")
_STRING_LITERAL = re.compile(r"^('|\").*('|\")$")
_NUMBER_LITERAL = re.compile(r"^-?\d*\.?\d+$")
_ESCAPED_CHAR = re.compile(r"\\(.)")

# Placeholder for escaped commas while splitting an argument list
_COMMA_ENTITY = "&comma;"


class ExpressionType(StrEnum):
    """Classification of a parsed binding expression."""

    LITERAL = "literal"
    REFERENCE = "reference"
    COMPUTED = "computed"


@dataclass(frozen=True, slots=True)
class ParsedExpression:
    """A binding expression reduced to what it references.

    Attributes
    ----------
    raw : str
        The original text, unmodified
    type : ExpressionType
        Literal, reference or computed
    keys : tuple[str, ...]
        Primary property name of each path; literals contribute ``""``
    methods : tuple[str, ...]
        The invoked method for computed expressions, otherwise empty
    """

    raw: str
    type: ExpressionType
    keys: tuple[str, ...] = ()
    methods: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Argument:
    """One argument of a computed binding."""

    name: str
    value: str | float | None = None
    literal: bool = False
    structured: bool = False
    wildcard: bool = False


def extract_binding_expression(text: str) -> str | None:
    """Return the inner text of a ``{{...}}`` or ``[[...]]`` binding.

    A trailing ``::event`` suffix of a two-way binding is dropped and the
    result is stripped. Returns None when ``text`` holds neither form.

    Examples
    --------
    >>> extract_binding_expression("Hello {{ user.name::input }}!")
    'user.name'
    >>> extract_binding_expression("plain text") is None
    True
    """
    match = _CURLY_BINDING.search(text) or _SQUARE_BINDING.search(text)
    if match is None:
        return None
    expression = match.group(1)
    if "::" in expression:
        expression = expression[: expression.index("::")]
    return expression.strip()


def primary_name(expression: str | Argument) -> str:
    """Return the property a path is rooted at, or ``""`` for literals.

    Leading ``!`` negations are ignored: ``!user.active`` is rooted at
    ``user``.
    """
    if isinstance(expression, Argument):
        expression = expression.name
    if expression.startswith("!"):
        return primary_name(expression[1:])
    if _is_literal(expression):
        return ""
    return expression.split(".", 1)[0]


def parse_expression(text: str) -> ParsedExpression:
    """Parse a binding expression.

    Never raises: text without binding delimiters is treated as the bare
    expression itself.

    Parameters
    ----------
    text : str
        Delimited binding such as ``{{f(a, b)}}``

    Returns
    -------
    ParsedExpression
        Keys and methods referenced by the expression

    Examples
    --------
    >>> parse_expression("{{f(a,b)}}").keys
    ('a', 'b')
    >>> parse_expression("[[!opened]]").keys
    ('opened',)
    """
    unwrapped = extract_binding_expression(text)
    if unwrapped is None:
        unwrapped = text.strip()

    call = _parse_method(unwrapped)
    if call is not None:
        method, args = call
        return ParsedExpression(
            raw=text,
            type=ExpressionType.COMPUTED,
            keys=tuple(primary_name(arg) for arg in args),
            methods=(method,),
        )

    return ParsedExpression(
        raw=text,
        type=(
            ExpressionType.LITERAL
            if _is_literal(unwrapped.lstrip("!"))
            else ExpressionType.REFERENCE
        ),
        keys=(primary_name(unwrapped),),
        methods=(),
    )


def _parse_method(expression: str) -> tuple[str, list[Argument]] | None:
    """Split ``name(args)`` into the method name and its parsed arguments."""
    match = _METHOD_CALL.search(expression)
    if match is None:
        return None
    method, arg_text = match.group(1), match.group(2)
    if not arg_text.strip():
        return method, []
    raw_args = arg_text.replace("\\,", _COMMA_ENTITY).split(",")
    return method, [parse_argument(raw_arg) for raw_arg in raw_args]


def parse_argument(raw_arg: str) -> Argument:
    """Classify one argument of a computed binding.

    Quoted arguments are string literals, arguments starting with a digit
    are numbers, anything else is a path. Paths containing a dot are
    ``structured``; a trailing ``.*`` marks a ``wildcard`` and is dropped
    from the name.

    Examples
    --------
    >>> parse_argument("obj.*")
    Argument(name='obj', value=None, literal=False, structured=True, wildcard=True)
    """
    arg = raw_arg.strip().replace(_COMMA_ENTITY, ",")
    # Only commas strictly need escaping, but any escaped character is accepted
    arg = _ESCAPED_CHAR.sub(r"\1", arg)

    first = arg[:1]
    if first in ("'", '"'):
        return Argument(name=arg, value=arg[1:-1], literal=True)
    if "0" <= first <= "9":
        return Argument(name=arg, value=_to_number(arg), literal=True)

    structured = arg.find(".") > 0
    if structured and arg.endswith(".*"):
        return Argument(name=arg[:-2], structured=True, wildcard=True)
    return Argument(name=arg, structured=structured)


def _is_literal(expression: str) -> bool:
    return bool(_STRING_LITERAL.match(expression) or _NUMBER_LITERAL.match(expression))


def _to_number(text: str) -> float | None:
    try:
        return float(text)
    except ValueError:
        return None
