"""
structdiff.patch — Apply a diff forwards (patch) or backwards (unpatch).

These are the inverses of diff:

    patch(a, diff(a, b))   == b
    unpatch(b, diff(a, b)) == a

Neither function mutates its arguments: every container in the result
is a fresh copy of the same concrete type, built by values.clone.

A diff that was not produced from the value it is applied to is not
validated beyond its shape.  Keys named by `deleted` that are already
gone are skipped; a diff whose shape cannot describe the value at all
(an edit script applied to a dict, a keyed diff applied to an int)
raises MalformedDiffError.
"""

import logging
from collections.abc import MutableMapping
from typing import Any, Optional

from .core import SET_VALUES_KEY, DiffResult, LeafChange, dotted
from .equality import is_equal
from .errors import MalformedDiffError
from .lcs import LcsEntry, LcsKind
from .values import ValueKind, clone, kind_of, rebuild_sequence

logger = logging.getLogger(__name__)


def patch(source: Any, delta: Optional[DiffResult]) -> Any:
    """Rebuild the `actual` side of a diff from its `expected` side."""
    return _apply(source, delta, True, ())


def unpatch(target: Any, delta: Optional[DiffResult]) -> Any:
    """Rebuild the `expected` side of a diff from its `actual` side."""
    return _apply(target, delta, False, ())


def _apply(value: Any, delta: Optional[DiffResult], forward: bool, path: tuple) -> Any:
    if delta is None:
        return clone(value)
    if not isinstance(delta, DiffResult):
        raise MalformedDiffError(f"expected a DiffResult, got {type(delta).__name__}", path)

    if delta.value is not None:
        return clone(delta.value.new if forward else delta.value.old)

    if delta.lcs is not None:
        return _apply_script(value, delta.lcs, forward, path)

    kind = kind_of(value)
    if kind is ValueKind.SET:
        return _apply_set(value, delta, forward)
    if kind in (ValueKind.MAPPING, ValueKind.RECORD):
        return _apply_keyed(value, delta, kind, forward, path)

    raise MalformedDiffError(f"cannot apply a keyed diff to {type(value).__name__}", path)


# ═══════════════════════════════════════════════════════════════════
#  SEQUENCES
# ═══════════════════════════════════════════════════════════════════

def _apply_script(value: Any, script: list[LcsEntry], forward: bool, path: tuple) -> Any:
    """
    Replay an edit script: COMMON + ADD rebuilds `b`, COMMON + DELETE
    rebuilds `a`.  The input only contributes its concrete type.
    """
    if kind_of(value) is not ValueKind.SEQUENCE:
        raise MalformedDiffError(
            f"cannot apply an edit script to {type(value).__name__}", path)

    keep = LcsKind.ADD if forward else LcsKind.DELETE
    items = [clone(entry.value) for entry in script
             if entry.kind is LcsKind.COMMON or entry.kind is keep]
    return rebuild_sequence(value, items)


# ═══════════════════════════════════════════════════════════════════
#  SETS
# ═══════════════════════════════════════════════════════════════════

def _apply_set(value: Any, delta: DiffResult, forward: bool) -> Any:
    removed = delta.deleted if forward else delta.added
    inserted = delta.added if forward else delta.deleted
    removed = removed.get(SET_VALUES_KEY, [])
    inserted = inserted.get(SET_VALUES_KEY, [])

    members = [clone(m) for m in value
               if not any(is_equal(m, r) for r in removed)]
    for m in inserted:
        if not any(is_equal(m, existing) for existing in members):
            members.append(clone(m))
    return type(value)(members)


# ═══════════════════════════════════════════════════════════════════
#  MAPPINGS AND RECORDS
# ═══════════════════════════════════════════════════════════════════

def _get(container: Any, key: Any, kind: ValueKind) -> Any:
    if kind is ValueKind.RECORD:
        return getattr(container, key)
    return container[key]


def _has(container: Any, key: Any, kind: ValueKind) -> bool:
    if kind is ValueKind.RECORD:
        return hasattr(container, key)
    return key in container


def _set(container: Any, key: Any, item: Any, kind: ValueKind) -> None:
    if kind is ValueKind.RECORD:
        # Works on frozen dataclasses too; result is our own copy
        object.__setattr__(container, key, item)
    else:
        container[key] = item


def _delete(container: Any, key: Any, kind: ValueKind) -> None:
    if kind is ValueKind.RECORD:
        object.__delattr__(container, key)
    else:
        del container[key]


def _apply_keyed(
    value: Any, delta: DiffResult, kind: ValueKind,
    forward: bool, path: tuple,
) -> Any:
    result = clone(value)
    # Read-only mappings are edited as a dict and rebuilt at the end
    mutable = kind is ValueKind.RECORD or isinstance(result, MutableMapping)
    working = result if mutable else dict(result)

    removed = delta.deleted if forward else delta.added
    inserted = delta.added if forward else delta.deleted

    for key in removed:
        if _has(working, key, kind):
            _delete(working, key, kind)
        else:
            logger.debug("key %r already absent at %s", key, dotted(path) or "(root)")

    for key, item in inserted.items():
        _set(working, key, clone(item), kind)

    for key, change in delta.updated.items():
        child_path = path + (key,)
        if isinstance(change, LeafChange):
            _set(working, key, clone(change.new if forward else change.old), kind)
            continue
        if not _has(working, key, kind):
            raise MalformedDiffError("nested diff for a missing key", child_path)
        child = _apply(_get(working, key, kind), change, forward, child_path)
        _set(working, key, child, kind)

    if mutable:
        return result
    return type(value)(working)
