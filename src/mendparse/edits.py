"""Character-level edit scripts between an observed and an expected string."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class EditOp:
    """A single insertion or deletion at an offset of the observed string.

    A substitution is an insertion followed by a deletion at the same
    position.
    """

    position: int
    is_insertion: bool
    char: str

    def __str__(self) -> str:
        sign = "+" if self.is_insertion else "-"
        return f"{sign}{self.char!r}@{self.position}"


@dataclass(frozen=True)
class EditScript:
    ops: tuple[EditOp, ...] = ()
    cost: int = 0

    def __bool__(self) -> bool:
        return bool(self.ops)

    def __len__(self) -> int:
        return len(self.ops)


def _table(s: str, t: str) -> list[list[int]]:
    m, n = len(s), len(t)
    dist = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m + 1):
        dist[i][0] = i
    for j in range(n + 1):
        dist[0][j] = j
    for i in range(1, m + 1):
        for j in range(1, n + 1):
            cost = 0 if s[i - 1] == t[j - 1] else 1
            dist[i][j] = min(
                dist[i - 1][j] + 1,         # deletion
                dist[i][j - 1] + 1,         # insertion
                dist[i - 1][j - 1] + cost,  # substitution
            )
    return dist


def edit_distance(s: str, t: str) -> int:
    """Standard Levenshtein distance between two strings."""
    m, n = len(s), len(t)
    if m == 0:
        return n
    if n == 0:
        return m

    prev = list(range(n + 1))
    curr = [0] * (n + 1)
    for i in range(1, m + 1):
        curr[0] = i
        for j in range(1, n + 1):
            cost = 0 if s[i - 1] == t[j - 1] else 1
            curr[j] = min(prev[j] + 1, curr[j - 1] + 1, prev[j - 1] + cost)
        prev, curr = curr, prev
    return prev[n]


def edit_script(observed: str, expected: str) -> EditScript:
    """Minimal script turning ``observed`` into ``expected``.

    Ops are ordered by position in ``observed``. Ties in the backtrace
    prefer a match or substitution, then deletion, then insertion.
    """
    dist = _table(observed, expected)
    i, j = len(observed), len(expected)
    steps: list[list[EditOp]] = []
    while i > 0 or j > 0:
        if i > 0 and j > 0:
            same = observed[i - 1] == expected[j - 1]
            if dist[i][j] == dist[i - 1][j - 1] + (0 if same else 1):
                if not same:
                    steps.append([
                        EditOp(i - 1, True, expected[j - 1]),
                        EditOp(i - 1, False, observed[i - 1]),
                    ])
                i, j = i - 1, j - 1
                continue
        if i > 0 and dist[i][j] == dist[i - 1][j] + 1:
            steps.append([EditOp(i - 1, False, observed[i - 1])])
            i -= 1
        else:
            steps.append([EditOp(i, True, expected[j - 1])])
            j -= 1
    ops = tuple(op for step in reversed(steps) for op in step)
    return EditScript(ops, dist[len(observed)][len(expected)])


def apply_edits(text: str, ops: Iterable[EditOp], offset: int = 0) -> str:
    """Apply a whole script to ``text``, positions relative to ``offset``."""
    shift = 0
    chars = list(text)
    for op in ops:
        index = offset + op.position + shift
        if op.is_insertion:
            chars.insert(index, op.char)
            shift += 1
        else:
            del chars[index]
            shift -= 1
    return "".join(chars)
