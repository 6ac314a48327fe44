"""
Tests for structdiff.equality — the equality oracle and canonical form.
"""

import sys
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from fractions import Fraction
from types import SimpleNamespace

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from structdiff.core import diff
from structdiff.equality import CIRCULAR, canonical, is_equal


@dataclass
class Point:
    x: int
    y: int


class BadRepr:
    def __repr__(self):
        raise RuntimeError("no repr for you")


class BadEq:
    def __eq__(self, other):
        raise RuntimeError("no eq for you")

    __hash__ = object.__hash__


# ═══════════════════════════════════════════════════════════════════
#  §1  PRIMITIVES
# ═══════════════════════════════════════════════════════════════════

class TestPrimitiveEquality:

    @pytest.mark.parametrize("a,b", [
        (None, None),
        (1, 1),
        (1, 1.0),
        (0.0, -0.0),
        (float("nan"), float("nan")),
        ("abc", "abc"),
        (b"\x00", b"\x00"),
        (True, True),
    ])
    def test_equal(self, a, b):
        assert is_equal(a, b)

    @pytest.mark.parametrize("a,b", [
        (1, 2),
        (True, 1),
        (False, 0),
        (0, None),
        ("1", 1),
        ("", None),
        (b"a", "a"),
        (float("nan"), 0.0),
    ])
    def test_not_equal(self, a, b):
        assert not is_equal(a, b)
        assert not is_equal(b, a)

    def test_raising_eq_is_unequal(self):
        assert not is_equal(BadEq(), BadEq())

    def test_identity_wins(self):
        obj = BadEq()
        assert is_equal(obj, obj)


# ═══════════════════════════════════════════════════════════════════
#  §2  CONTAINERS
# ═══════════════════════════════════════════════════════════════════

class TestContainerEquality:

    def test_lists(self):
        assert is_equal([1, [2, 3]], [1, [2, 3]])
        assert not is_equal([1, 2], [2, 1])

    def test_dict_key_order(self):
        assert is_equal({"a": 1, "b": 2}, {"b": 2, "a": 1})

    def test_sets(self):
        assert is_equal({3, 1, 2}, {1, 2, 3})
        assert is_equal({(1, 2), (3, 4)}, {(3, 4), (1, 2)})

    def test_concrete_type_matters(self):
        assert not is_equal([1, 2], (1, 2))
        assert not is_equal({1}, frozenset({1}))
        assert not is_equal(Point(1, 2), SimpleNamespace(x=1, y=2))

    def test_records(self):
        assert is_equal(Point(1, 2), Point(1, 2))
        assert not is_equal(Point(1, 2), Point(1, 3))
        assert is_equal(SimpleNamespace(a=[1]), SimpleNamespace(a=[1]))

    def test_nested_numbers(self):
        assert is_equal({"n": 1}, {"n": 1.0})
        assert is_equal([float("nan")], [float("nan")])
        assert not is_equal([True], [1])

    def test_container_vs_primitive(self):
        assert not is_equal([], None)
        assert not is_equal({}, 0)

    def test_unserializable_is_unequal(self):
        bad = BadRepr()
        assert not is_equal([bad], [bad])

    def test_same_container_identity(self):
        bad = [BadRepr()]
        assert is_equal(bad, bad)


# ═══════════════════════════════════════════════════════════════════
#  §3  CYCLES AND CANONICAL FORM
# ═══════════════════════════════════════════════════════════════════

class TestCanonical:

    def test_cycle_marker(self):
        a = {"x": 1}
        a["self"] = a
        assert CIRCULAR in canonical(a)

    def test_cyclic_values(self):
        a = [1]
        a.append(a)
        b = [1]
        b.append(b)
        c = [2]
        c.append(c)
        assert is_equal(a, b)
        assert not is_equal(a, c)

    def test_shared_reference_is_not_a_cycle(self):
        shared = [1]
        assert canonical([shared, shared]) == canonical([[1], [1]])

    def test_marker_does_not_collide_with_string(self):
        a = []
        a.append(a)
        assert not is_equal(a, [CIRCULAR])

    def test_deterministic(self):
        assert canonical({"b": {2, 1}, "a": [None]}) == canonical({"a": [None], "b": {1, 2}})

    def test_float_forms(self):
        assert canonical([1.0]) == canonical([1])
        assert canonical([-0.0]) == canonical([0])
        assert canonical([float("inf")]) != canonical([float("-inf")])

    def test_number_forms(self):
        assert canonical([Decimal("1.0")]) == canonical([Decimal("1")]) == canonical([1])
        assert canonical([Fraction(1, 2)]) == canonical([0.5]) == canonical([Decimal("0.5")])
        assert canonical([complex(2, 0)]) == canonical([2])
        assert canonical([Decimal("0.1")]) != canonical([0.1])
        assert canonical([Decimal("Infinity")]) == canonical([float("inf")])
        assert canonical([Decimal("1e400")]) != canonical([float("inf")])


# ═══════════════════════════════════════════════════════════════════
#  §4  CONTAINERS AGREE WITH ATOMS
# ═══════════════════════════════════════════════════════════════════

UTC_NOON = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
PLUS_ONE_NOON = UTC_NOON.astimezone(timezone(timedelta(hours=1)))


class TestContainersMatchAtoms:

    @pytest.mark.parametrize("a,b", [
        (Decimal("1.0"), Decimal("1")),
        (Decimal("2.50"), 2.5),
        (Fraction(3, 1), 3),
        (Decimal("NaN"), Decimal("NaN")),
        (UTC_NOON, PLUS_ONE_NOON),
    ])
    def test_equal_atoms_stay_equal_inside_containers(self, a, b):
        assert is_equal(a, b)
        assert is_equal([a], [b])
        assert is_equal({"t": a}, {"t": b})
        assert diff([a], [b]) is None
        assert diff({"t": a}, {"t": b}) is None

    @pytest.mark.parametrize("a,b", [
        (Decimal("1.5"), Decimal("1")),
        (Decimal("0.1"), 0.1),
        (UTC_NOON, UTC_NOON + timedelta(seconds=1)),
        (UTC_NOON, UTC_NOON.replace(tzinfo=None)),
    ])
    def test_unequal_atoms_stay_unequal_inside_containers(self, a, b):
        assert not is_equal(a, b)
        assert not is_equal({"t": a}, {"t": b})
        assert diff({"t": a}, {"t": b}) is not None

    def test_diff_absent_exactly_when_equal(self):
        bad = BadRepr()
        for a, b in [
            ([bad], [bad]),
            ({"n": Decimal("1.00")}, {"n": 1}),
            ({"n": Decimal("1.01")}, {"n": 1}),
            ([UTC_NOON], [PLUS_ONE_NOON]),
        ]:
            assert (diff(a, b) is None) == is_equal(a, b)


# ═══════════════════════════════════════════════════════════════════
#  §5  CUSTOM EQUALITY
# ═══════════════════════════════════════════════════════════════════

class TestCustomEqual:

    def test_overrides_everything(self):
        assert is_equal(1, 2, custom_equal=lambda a, b: True)
        assert not is_equal(1, 1, custom_equal=lambda a, b: False)

    def test_result_coerced_to_bool(self):
        assert is_equal("a", "b", custom_equal=lambda a, b: 1) is True
