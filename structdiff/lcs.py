"""
structdiff.lcs — Longest-common-subsequence alignment of two sequences.

The edit script it returns is what the diff engine stores for ordered
containers:

    lcs([1, 2, 3], [1, 2, 4, 5])
    → COMMON 1, COMMON 2, DELETE 3, ADD 4, ADD 5

DP table:

    T[i][j] = length of the LCS of a[:i] and b[:j]

    T[0][*] = T[*][0] = 0
    T[i][j] = T[i-1][j-1] + 1                 if a[i-1] ≡ b[j-1]
            = max(T[i-1][j], T[i][j-1])       otherwise

Backtrack from (|a|, |b|):
    • a[i-1] ≡ b[j-1]                    → COMMON, step diagonally
    • i == 0, or T[i][j-1] ≥ T[i-1][j]  → ADD b[j-1], step left
    • otherwise                          → DELETE a[i-1], step up

Ties go to ADD, so for a replaced element the script reads DELETE old
then ADD new once reversed.  O(|a|·|b|) time and space; exact.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Sequence

from .equality import is_equal


class LcsKind(Enum):
    COMMON = "common"
    DELETE = "delete"
    ADD = "add"


@dataclass(frozen=True, slots=True)
class LcsEntry:
    """
    One step of an edit script.

    COMMON carries the element of `a` and both indices, DELETE the
    element of `a` and index_a, ADD the element of `b` and index_b.
    """
    kind: LcsKind
    value: Any
    index_a: Optional[int] = None
    index_b: Optional[int] = None

    def __repr__(self) -> str:
        where = []
        if self.index_a is not None:
            where.append(f"a[{self.index_a}]")
        if self.index_b is not None:
            where.append(f"b[{self.index_b}]")
        return f"{self.kind.name} {'/'.join(where)}: {self.value!r}"


def lcs(
    a: Sequence[Any],
    b: Sequence[Any],
    equals: Optional[Callable[[Any, Any], bool]] = None,
) -> list[LcsEntry]:
    """
    Align two sequences and classify every element as common, deleted
    (only in `a`) or added (only in `b`).

    `equals` decides element equality; it defaults to the library's
    equality oracle.  It is called exactly once per (i, j) cell.
    """
    if equals is None:
        equals = is_equal

    a = list(a)
    b = list(b)
    m = len(a)
    n = len(b)

    # Precompute matches so backtracking never calls `equals` again
    matches = [[bool(equals(a[i], b[j])) for j in range(n)] for i in range(m)]

    table = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        row = table[i]
        prev = table[i - 1]
        for j in range(1, n + 1):
            if matches[i - 1][j - 1]:
                row[j] = prev[j - 1] + 1
            else:
                row[j] = max(prev[j], row[j - 1])

    # Trace back
    script: list[LcsEntry] = []
    i, j = m, n
    while i > 0 or j > 0:
        if i > 0 and j > 0 and matches[i - 1][j - 1]:
            script.append(LcsEntry(LcsKind.COMMON, a[i - 1], i - 1, j - 1))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or table[i][j - 1] >= table[i - 1][j]):
            script.append(LcsEntry(LcsKind.ADD, b[j - 1], index_b=j - 1))
            j -= 1
        else:
            script.append(LcsEntry(LcsKind.DELETE, a[i - 1], index_a=i - 1))
            i -= 1

    script.reverse()
    return script
