"""
structdiff.formats — Convert diffs to and from plain Python data.

    to_python(diff({"a": 1}, {"a": 2}))
    → {"added": {}, "deleted": {}, "updated": {"a": {"old": 1, "new": 2}}}

The plain form is what renderers and tests consume.  Reserved fields
use the names "value" (root leaf change) and "_lcs" (edit script).
"""

from collections.abc import Mapping
from typing import Any, Optional

from .core import DiffResult, LeafChange
from .errors import MalformedDiffError
from .lcs import LcsEntry, LcsKind

_KEYED_FIELDS = {"added", "deleted", "updated"}
_LEAF_FIELDS = {"old", "new"}


# ═══════════════════════════════════════════════════════════════════
#  DIFFRESULT → PLAIN DATA
# ═══════════════════════════════════════════════════════════════════

def _leaf_to_python(change: LeafChange) -> dict:
    return {"old": change.old, "new": change.new}


def _entry_to_python(entry: LcsEntry) -> dict:
    out = {"kind": entry.kind.value, "value": entry.value}
    if entry.index_a is not None:
        out["index_a"] = entry.index_a
    if entry.index_b is not None:
        out["index_b"] = entry.index_b
    return out


def to_python(delta: Optional[DiffResult]) -> Optional[dict]:
    """
    Convert a DiffResult into nested dicts.

    None (no difference) stays None.  Stored values are not copied.
    """
    if delta is None:
        return None
    if delta.value is not None:
        return {"value": _leaf_to_python(delta.value)}
    if delta.lcs is not None:
        return {"_lcs": [_entry_to_python(e) for e in delta.lcs]}
    return {
        "added": dict(delta.added),
        "deleted": dict(delta.deleted),
        "updated": {
            key: _leaf_to_python(change) if isinstance(change, LeafChange) else to_python(change)
            for key, change in delta.updated.items()
        },
    }


# ═══════════════════════════════════════════════════════════════════
#  PLAIN DATA → DIFFRESULT
# ═══════════════════════════════════════════════════════════════════

def _leaf_from_python(obj: Any, path: tuple) -> LeafChange:
    if not isinstance(obj, Mapping) or set(obj) != _LEAF_FIELDS:
        raise MalformedDiffError("leaf change needs exactly 'old' and 'new'", path)
    return LeafChange(obj["old"], obj["new"])


def _entry_from_python(obj: Any, path: tuple) -> LcsEntry:
    if not isinstance(obj, Mapping) or "kind" not in obj or "value" not in obj:
        raise MalformedDiffError("edit script entry needs 'kind' and 'value'", path)
    try:
        kind = LcsKind(obj["kind"])
    except ValueError:
        raise MalformedDiffError(f"unknown edit kind {obj['kind']!r}", path) from None
    return LcsEntry(kind, obj["value"], obj.get("index_a"), obj.get("index_b"))


def from_python(obj: Any, path: tuple = ()) -> Optional[DiffResult]:
    """
    Inverse of to_python, for diffs that were built or stored by hand.

    Raises MalformedDiffError when `obj` is not a recognisable diff.
    """
    if obj is None:
        return None
    if not isinstance(obj, Mapping):
        raise MalformedDiffError(f"expected a mapping, got {type(obj).__name__}", path)

    fields = set(obj)
    if fields == {"value"}:
        return DiffResult(value=_leaf_from_python(obj["value"], path))
    if fields == {"_lcs"}:
        return DiffResult(lcs=[_entry_from_python(e, path) for e in obj["_lcs"]])
    if not fields or not fields <= _KEYED_FIELDS:
        raise MalformedDiffError(f"unrecognised diff fields {sorted(map(str, fields))}", path)

    updated = {}
    for key, change in dict(obj.get("updated", {})).items():
        child_path = path + (key,)
        if isinstance(change, Mapping) and set(change) == _LEAF_FIELDS:
            updated[key] = _leaf_from_python(change, child_path)
        else:
            updated[key] = from_python(change, child_path)
    return DiffResult(
        added=dict(obj.get("added", {})),
        deleted=dict(obj.get("deleted", {})),
        updated=updated,
    )

