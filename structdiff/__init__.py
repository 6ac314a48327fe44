"""
Structural Diff (structdiff)
============================

Diff any two Python values, then rebuild either one from the other.

    diff({"a": 1, "b": {"c": 2}}, {"a": 1, "b": {"c": 3}})
        → DiffResult(updated={"b": DiffResult(updated={"c": LeafChange(2 → 3)})})
    diff([1, 2, 3], [1, 2, 4, 5])
        → DiffResult(lcs=[COMMON 1, COMMON 2, DELETE 3, ADD 4, ADD 5])
    diff({1, 2, 3}, {1, 2, 4})
        → DiffResult(added={"values": [4]}, deleted={"values": [3]})

and for every pair of values:

    patch(a, diff(a, b))   == b
    unpatch(b, diff(a, b)) == a

Dicts, dataclasses/SimpleNamespace, lists/tuples, sets and any nesting
of them are diffed structurally; cyclic values are handled.  Lists are
aligned with an exact longest-common-subsequence edit script.
"""

from structdiff.core import (
    # Types
    DiffOptions,
    DiffResult,
    LeafChange,
    SET_VALUES_KEY,
    # Diff
    diff,
)
from structdiff.equality import canonical, is_equal
from structdiff.errors import MalformedDiffError, StructDiffError
from structdiff.formats import from_python, to_python
from structdiff.lcs import LcsEntry, LcsKind, lcs
from structdiff.patch import patch, unpatch
from structdiff.values import ValueKind, clone, kind_of

__version__ = "0.1.0"
__all__ = [
    "DiffOptions", "DiffResult", "LeafChange", "SET_VALUES_KEY",
    "diff", "patch", "unpatch",
    "is_equal", "canonical",
    "lcs", "LcsEntry", "LcsKind",
    "ValueKind", "kind_of", "clone",
    "from_python", "to_python",
    "MalformedDiffError", "StructDiffError",
]
