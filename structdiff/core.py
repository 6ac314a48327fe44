"""
structdiff.core — Structural diff of arbitrary Python values
=============================================================

THE RESULT TYPE
═══════════════

diff(expected, actual) returns None when the two values are
indistinguishable, otherwise a DiffResult:

    added     keys only in `actual`        → the actual value
    deleted   keys only in `expected`      → the expected value
    updated   keys in both, but different  → LeafChange(old, new)
                                             or a nested DiffResult
    value     reserved: a LeafChange for the whole value, used when the
              two sides are not structurally comparable
    lcs       reserved: the edit script for two ordered sequences

Examples:

    diff({"a": 1, "b": {"c": 2}}, {"a": 1, "b": {"c": 3}})
    → DiffResult(updated={"b": DiffResult(updated={"c": LeafChange(2, 3)})})

    diff({1, 2, 3}, {1, 2, 4})
    → DiffResult(added={"values": [4]}, deleted={"values": [3]})

    diff([1, 2, 3], [1, 2, 4, 5])
    → DiffResult(lcs=[COMMON 1, COMMON 2, DELETE 3, ADD 4, ADD 5])

    diff(1, "1")
    → DiffResult(value=LeafChange(1, "1"))


THE ALGORITHM
═════════════

For the pair at `path` (the keys walked from the root):

    1. path is listed in ignore_paths         → None (subtree invisible)
    2. is_equal(expected, actual)             → None
    3. same container kind and concrete type:
         pair already on the comparison stack → None (cycle)
         MAPPING / RECORD  key-by-key, keys in lexicographic order
         SET               membership: added / deleted only
         SEQUENCE          LCS edit script; all-common → None
    4. anything else                          → root LeafChange
    5. keyed comparison with nothing left     → None
    6. step 3 found no difference although
       step 2 said the values differ         → root LeafChange

Step 6 only applies without custom_equal and when no ignored path lies
below `path`: the canonical form behind is_equal can reject a pair whose
parts all compare equal one by one (an atom with a raising __repr__),
and such a pair must still produce a diff.

Step 3's cycle check tracks (id(expected), id(actual)) pairs that are
currently being compared.  Meeting the same pair again while it is still
on the stack means both sides looped back to it, so it is treated as
already-compared-equal.  This is permissive, not a proof of equality.

Values stored in a DiffResult are copies: mutating the inputs after the
call never changes the diff.
"""

import logging
from dataclasses import dataclass, field, replace
from functools import partial
from typing import Any, Iterable, Optional, Union

from .equality import EqualFn, is_equal
from .lcs import LcsEntry, LcsKind, lcs
from .values import ValueKind, clone, compatible, entries, kind_of, sort_keys

logger = logging.getLogger(__name__)

# Key under which SET diffs store their members in added/deleted
SET_VALUES_KEY = "values"


# ═══════════════════════════════════════════════════════════════════
#  OPTIONS
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DiffOptions:
    """
    Knobs for a diff call.

    custom_equal:  (a, b) -> bool replacing the equality oracle for every
                   pair compared, at any depth.
    ignore_paths:  dotted key paths ("server.port") whose subtrees are
                   invisible to the diff.
    """
    custom_equal: Optional[EqualFn] = None
    ignore_paths: frozenset = frozenset()

    def __post_init__(self):
        paths = self.ignore_paths
        if isinstance(paths, str):
            paths = (paths,)
        object.__setattr__(self, "ignore_paths", frozenset(paths or ()))

    def is_ignored(self, path: tuple) -> bool:
        return bool(path) and dotted(path) in self.ignore_paths

    def ignores_below(self, path: tuple) -> bool:
        """True when some ignored path lies strictly inside `path`."""
        if not path:
            return bool(self.ignore_paths)
        prefix = dotted(path) + "."
        return any(p.startswith(prefix) for p in self.ignore_paths)


def dotted(path: Iterable[Any]) -> str:
    """("server", "port") → "server.port"."""
    return ".".join(str(p) for p in path)


# ═══════════════════════════════════════════════════════════════════
#  RESULT TYPES
# ═══════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class LeafChange:
    """A direct substitution: `old` was replaced by `new`."""
    old: Any
    new: Any

    def __repr__(self) -> str:
        return f"LeafChange({self.old!r} → {self.new!r})"


@dataclass
class DiffResult:
    """Structured difference between an expected and an actual value."""
    added: dict = field(default_factory=dict)
    deleted: dict = field(default_factory=dict)
    updated: dict[Any, Union[LeafChange, "DiffResult"]] = field(default_factory=dict)
    value: Optional[LeafChange] = None
    lcs: Optional[list[LcsEntry]] = None

    @property
    def is_empty(self) -> bool:
        return (not self.added and not self.deleted and not self.updated
                and self.value is None and self.lcs is None)

    def __repr__(self) -> str:
        if self.value is not None:
            return f"DiffResult(value={self.value!r})"
        if self.lcs is not None:
            return f"DiffResult(lcs={self.lcs!r})"
        return (f"DiffResult(added={self.added!r}, deleted={self.deleted!r}, "
                f"updated={self.updated!r})")


# ═══════════════════════════════════════════════════════════════════
#  DIFF
# ═══════════════════════════════════════════════════════════════════

def diff(
    expected: Any,
    actual: Any,
    options: Optional[DiffOptions] = None,
    *,
    ignore_paths: Optional[Iterable[str]] = None,
    custom_equal: Optional[EqualFn] = None,
) -> Optional[DiffResult]:
    """
    Compare `expected` against `actual`.

    Returns None when there is no difference, otherwise a DiffResult
    that patch() can apply to `expected` (or unpatch() to `actual`).

    Options can be passed as a DiffOptions or as the two keyword
    arguments, not both.

    Never raises for well-formed input, including cyclic values.
    """
    if options is not None:
        if ignore_paths is not None or custom_equal is not None:
            raise TypeError("pass either a DiffOptions or ignore_paths/custom_equal, not both")
    else:
        options = DiffOptions(custom_equal=custom_equal, ignore_paths=ignore_paths)
    # Pairs currently on the comparison stack; fresh for every call
    visited: set[tuple[int, int]] = set()
    return _diff(expected, actual, (), options, visited)


def _diff(
    expected: Any, actual: Any, path: tuple,
    options: DiffOptions, visited: set,
) -> Optional[DiffResult]:
    if options.is_ignored(path):
        return None
    if is_equal(expected, actual, options.custom_equal):
        return None

    if compatible(expected, actual):
        pair = (id(expected), id(actual))
        if pair in visited:
            logger.debug("cycle at %s, treating pair as equal", dotted(path) or "(root)")
            return None

        visited.add(pair)
        try:
            kind = kind_of(expected)
            if kind is ValueKind.SEQUENCE:
                result = _sequence_diff(expected, actual, options)
            elif kind is ValueKind.SET:
                result = _set_diff(expected, actual, options)
            else:
                result = _keyed_diff(expected, actual, path, options, visited)
        finally:
            visited.discard(pair)

        if result is not None or options.custom_equal is not None or options.ignores_below(path):
            return result
        logger.debug("no structural difference at %s, reporting whole value",
                     dotted(path) or "(root)")

    return DiffResult(value=LeafChange(clone(expected), clone(actual)))


def _keyed_diff(
    expected: Any, actual: Any, path: tuple,
    options: DiffOptions, visited: set,
) -> Optional[DiffResult]:
    """Diff two MAPPINGs or two RECORDs key by key."""
    old = entries(expected)
    new = entries(actual)
    result = DiffResult()

    for key in sort_keys(old.keys() | new.keys()):
        child_path = path + (key,)
        if options.is_ignored(child_path):
            continue

        in_old = key in old
        in_new = key in new
        if in_old and in_new and is_equal(old[key], new[key], options.custom_equal):
            continue

        if not in_new:
            result.deleted[key] = clone(old[key])
        elif not in_old:
            result.added[key] = clone(new[key])
        elif compatible(old[key], new[key]):
            sub = _diff(old[key], new[key], child_path, options, visited)
            if sub is not None:
                result.updated[key] = sub
        else:
            result.updated[key] = LeafChange(clone(old[key]), clone(new[key]))

    # Everything may have been filtered out by ignore_paths or cycles
    if result.is_empty:
        return None
    return result


def _members(container: Any) -> list:
    return sort_keys(container)


def _contains(members: list, candidate: Any, options: DiffOptions) -> bool:
    return any(is_equal(candidate, m, options.custom_equal) for m in members)


def _set_diff(expected: Any, actual: Any, options: DiffOptions) -> Optional[DiffResult]:
    """Membership diff: an element is either present or not, never updated."""
    old = _members(expected)
    new = _members(actual)
    added = [clone(m) for m in new if not _contains(old, m, options)]
    deleted = [clone(m) for m in old if not _contains(new, m, options)]

    # Every member matched one by one; _diff decides what that means
    if not added and not deleted:
        return None

    result = DiffResult()
    if added:
        result.added[SET_VALUES_KEY] = added
    if deleted:
        result.deleted[SET_VALUES_KEY] = deleted
    return result


def _sequence_diff(expected: Any, actual: Any, options: DiffOptions) -> Optional[DiffResult]:
    """Align two sequences; the diff is the raw edit script."""
    script = lcs(expected, actual, partial(is_equal, custom_equal=options.custom_equal))
    if all(entry.kind is LcsKind.COMMON for entry in script):
        return None
    return DiffResult(lcs=[replace(entry, value=clone(entry.value)) for entry in script])
