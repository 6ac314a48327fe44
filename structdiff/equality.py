"""
structdiff.equality — The equality oracle.

Decides whether two values are indistinguishable for diffing purposes.

    is_equal(1, 1.0)                   → True
    is_equal(True, 1)                  → False   (bool is not a number here)
    is_equal(float("nan"), float("nan")) → True
    is_equal({"a": [1]}, {"a": [1]})   → True    (canonical form comparison)

Containers are compared through a canonical, cycle-tolerant string form.
A container that refers back to one of its ancestors is rendered with the
marker "[Circular]" instead of being walked again, so the comparison
always terminates.  This is deliberately permissive: two cyclic graphs
whose back-references point at different ancestors can compare equal.

Atoms inside that form are written so that values == treats as equal
share one spelling: numbers by exact value (Decimal("1.0"), 1 and 1.0
are all "1"), aware datetimes by their UTC instant.
"""

import json
import logging
import math
from datetime import datetime, timezone
from decimal import Decimal
from fractions import Fraction
from numbers import Number, Rational
from typing import Any, Callable, Optional

from .values import ValueKind, entries, is_container, kind_of

logger = logging.getLogger(__name__)

EqualFn = Callable[[Any, Any], bool]

CIRCULAR = "[Circular]"


def is_equal(a: Any, b: Any, custom_equal: Optional[EqualFn] = None) -> bool:
    """
    True when `a` and `b` should produce no diff.

    `custom_equal`, when given, replaces the whole oracle: it is called
    for every pair and its answer is final.
    """
    if custom_equal is not None:
        return bool(custom_equal(a, b))

    if _atom_equal(a, b):
        return True
    if not (is_container(a) and is_container(b)):
        return False

    try:
        return canonical(a) == canonical(b)
    except Exception as exc:
        # Exotic content (a raising __repr__, absurd nesting depth, ...)
        # degrades to "different" instead of failing the diff.
        logger.debug("canonical form failed, treating values as unequal: %r", exc)
        return False


def _is_nan(value: Any) -> bool:
    if isinstance(value, Decimal):
        return value.is_nan()
    return isinstance(value, float) and math.isnan(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def _atom_equal(a: Any, b: Any) -> bool:
    """Strict equality for atoms; containers only match themselves here."""
    if a is b:
        return True
    if _is_nan(a) and _is_nan(b):
        return True

    # bool subclasses int, so True == 1 must be ruled out explicitly
    if isinstance(a, bool) or isinstance(b, bool):
        return False
    numbers = _is_number(a) and _is_number(b)
    if not numbers and (type(a) is not type(b) or is_container(a)):
        return False

    try:
        return bool(a == b)
    except Exception:
        return False


# ═══════════════════════════════════════════════════════════════════
#  CANONICAL FORM
# ═══════════════════════════════════════════════════════════════════

def canonical(value: Any) -> str:
    """
    Deterministic string form of a value.

    Mapping/record keys and set members are emitted in sorted canonical
    order, so insertion order never matters.  The concrete container
    type is part of the form: a list and a tuple never collide.
    """
    return _serialize(value, set())


def _type_name(value: Any) -> str:
    cls = type(value)
    return f"{cls.__module__}.{cls.__qualname__}"


def _serialize_number(value: Any) -> Optional[str]:
    """
    Exact form of a number, shared by every type that == treats as the
    same value: 1, 1.0, Decimal("1.00") and Fraction(2, 2) all give "1".
    None for numbers that have no exact rational value.
    """
    if isinstance(value, complex):
        if value.imag:
            return f"complex({_serialize_number(value.real)},{_serialize_number(value.imag)})"
        value = value.real
    if _is_nan(value):
        return "NaN"
    if isinstance(value, float) and math.isinf(value) or (
            isinstance(value, Decimal) and value.is_infinite()):
        return "Infinity" if value > 0 else "-Infinity"
    if not isinstance(value, (int, float, Decimal, Rational)):
        return None
    # -0.0 collapses to 0
    exact = Fraction(value)
    if exact.denominator == 1:
        return str(exact.numerator)
    return f"{exact.numerator}/{exact.denominator}"


def _serialize_atom(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if _is_number(value):
        form = _serialize_number(value)
        if form is not None:
            return form
    if isinstance(value, str):
        return json.dumps(value)
    if isinstance(value, (bytes, bytearray)):
        return f"{_type_name(value)}:{bytes(value).hex()}"
    if isinstance(value, datetime) and value.utcoffset() is not None:
        # Aware datetimes are equal when they name the same instant
        return f"{_type_name(value)}:{value.astimezone(timezone.utc).isoformat()}"
    return f"{_type_name(value)}:{value!r}"


def _serialize(value: Any, ancestors: set) -> str:
    kind = kind_of(value)
    if kind is ValueKind.PRIMITIVE:
        return _serialize_atom(value)

    key = id(value)
    if key in ancestors:
        # Strings are always quoted, so the bare marker cannot collide with one
        return CIRCULAR

    ancestors.add(key)
    try:
        if kind is ValueKind.SEQUENCE:
            body = "[" + ",".join(_serialize(item, ancestors) for item in value) + "]"
        elif kind is ValueKind.SET:
            members = sorted(_serialize(member, ancestors) for member in value)
            body = "{" + ",".join(members) + "}"
        else:
            pairs = sorted(
                f"{_serialize(k, ancestors)}:{_serialize(v, ancestors)}"
                for k, v in entries(value).items()
            )
            body = "{" + ",".join(pairs) + "}"
    finally:
        ancestors.discard(key)

    return _type_name(value) + body
