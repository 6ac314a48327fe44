"""
structdiff.values — The closed value model shared by every other module.

Every Python value falls into exactly one ValueKind:

    PRIMITIVE   None, bool, numbers, str, bytes, and anything not below
    RECORD      dataclass instances, types.SimpleNamespace   (attributes)
    MAPPING     dict and any other collections.abc.Mapping    (items)
    SEQUENCE    list, tuple (incl. namedtuple), deque         (indices)
    SET         set, frozenset                                (membership)

str/bytes/bytearray are treated as atoms even though Python considers
them sequences: diffing a string character by character is text
diffing, which this library does not do.
"""

import copy
import dataclasses
from collections import deque
from collections.abc import Mapping, MutableMapping
from enum import Enum, auto
from types import SimpleNamespace
from typing import Any, Iterable, Optional


class ValueKind(Enum):
    """Shape of a value, as far as diffing is concerned."""
    PRIMITIVE = auto()
    RECORD = auto()
    MAPPING = auto()
    SEQUENCE = auto()
    SET = auto()


_ATOMIC_SEQUENCES = (str, bytes, bytearray, memoryview)
_SEQUENCE_TYPES = (list, tuple, deque)
_SET_TYPES = (set, frozenset)


def kind_of(value: Any) -> ValueKind:
    """Classify a value.  Total: every value gets exactly one kind."""
    if isinstance(value, _ATOMIC_SEQUENCES):
        return ValueKind.PRIMITIVE
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, _SET_TYPES):
        return ValueKind.SET
    if isinstance(value, _SEQUENCE_TYPES):
        return ValueKind.SEQUENCE
    if isinstance(value, SimpleNamespace):
        return ValueKind.RECORD
    # is_dataclass() is also true for the class itself; only instances count
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return ValueKind.RECORD
    return ValueKind.PRIMITIVE


def is_container(value: Any) -> bool:
    return kind_of(value) is not ValueKind.PRIMITIVE


def compatible(a: Any, b: Any) -> bool:
    """
    True when two values are containers that can be diffed structurally.

    Both the kind and the concrete type must match.  A list and a tuple
    holding the same items are a kind mismatch: patching one into the
    other by structure would never produce a value == the target.
    """
    return is_container(a) and type(a) is type(b)


# ═══════════════════════════════════════════════════════════════════
#  KEYED ACCESS (MAPPING and RECORD)
# ═══════════════════════════════════════════════════════════════════

_MISSING = object()


def entries(value: Any) -> dict:
    """Key → value view of a MAPPING or RECORD as a fresh dict."""
    if isinstance(value, Mapping):
        return dict(value.items())
    if isinstance(value, SimpleNamespace):
        return dict(vars(value))
    out = {}
    for f in dataclasses.fields(value):
        # init=False fields without a default may never have been set
        item = getattr(value, f.name, _MISSING)
        if item is not _MISSING:
            out[f.name] = item
    return out


def sort_keys(keys: Iterable[Any]) -> list:
    """
    Keys in lexicographic order, so diff output never depends on the
    insertion order of either input.

    Mixed-type keys (e.g. 1 and "a" in the same dict) cannot be ordered
    natively; they are ordered by (type name, repr) instead.
    """
    keys = list(keys)
    try:
        return sorted(keys)
    except TypeError:
        return sorted(keys, key=lambda k: (type(k).__name__, repr(k)))


# ═══════════════════════════════════════════════════════════════════
#  CLONING
# ═══════════════════════════════════════════════════════════════════

def rebuild_sequence(template: Any, items: list) -> Any:
    """Build a sequence of the same concrete type as `template`."""
    if isinstance(template, tuple) and hasattr(type(template), "_make"):
        return type(template)._make(items)
    if isinstance(template, deque):
        return type(template)(items, maxlen=template.maxlen)
    return type(template)(items)


def clone(value: Any, memo: Optional[dict] = None) -> Any:
    """
    Deep, structural copy that preserves each container's concrete type.

    Cycle-safe: `memo` maps id(original) → copy, so a graph that refers
    back to itself is copied into a graph with the same shape.  Atoms are
    shared (they are immutable), except bytearray.
    """
    kind = kind_of(value)
    if kind is ValueKind.PRIMITIVE:
        if type(value) is bytearray:
            return bytearray(value)
        return value

    if memo is None:
        memo = {}
    key = id(value)
    if key in memo:
        return memo[key]

    if kind is ValueKind.SEQUENCE:
        if isinstance(value, tuple):
            items = [clone(item, memo) for item in value]
            # The tuple may have been reached again through its own items
            if key in memo:
                return memo[key]
            result = rebuild_sequence(value, items)
        else:
            result = copy.copy(value)
            memo[key] = result
            result.clear()
            result.extend(clone(item, memo) for item in value)
        memo[key] = result
        return result

    if kind is ValueKind.SET:
        result = type(value)(clone(member, memo) for member in value)
        memo[key] = result
        return result

    if kind is ValueKind.MAPPING:
        if isinstance(value, MutableMapping):
            if isinstance(value, dict):
                # Keeps defaultdict's factory and subclass attributes;
                # a dict copy never shares storage with the original
                result = copy.copy(value)
                result.clear()
            else:
                # A shallow copy of a wrapper may alias its backing store
                result = type(value)()
            memo[key] = result
            for k, v in value.items():
                result[clone(k, memo)] = clone(v, memo)
        else:
            result = type(value)({clone(k, memo): clone(v, memo)
                                  for k, v in value.items()})
            memo[key] = result
        return result

    # RECORD: shallow copy keeps the type (and slots), then replace every
    # attribute.  object.__setattr__ also works on frozen dataclasses.
    result = copy.copy(value)
    memo[key] = result
    for name, item in entries(value).items():
        object.__setattr__(result, name, clone(item, memo))
    return result
