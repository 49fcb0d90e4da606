"""Block differ: edit sequences that turn one group list into another.

Two strategies share the edit model in :mod:`codeflux.diff.models`:

  - ``GREEDY`` walks both lists with two pointers and a one-step lookahead.
    Linear time and deterministic, but its tie-break is a heuristic and the
    result is not guaranteed to be the shortest edit list.
  - ``MINIMAL`` runs the classical edit-distance programme over the typed
    groups and returns an edit list of minimum length. Quadratic in the
    number of groups.

Neither strategy reorders groups. A type change at the same position is
always a Remove followed by an Insert.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Sequence, Union

from ..scanning.models import FileAnalysis, LineGroup
from .models import DiffEdit, Insert, Remove, Resize


class DiffStrategy(Enum):
    GREEDY = "greedy"
    MINIMAL = "minimal"


def diff_groups(old: Sequence[LineGroup], new: Sequence[LineGroup]) -> list[DiffEdit]:
    """Greedy two-pointer diff with one-step lookahead.

    Same type at both pointers: a Resize when lengths differ, nothing
    otherwise. Different types: insert only when skipping the new group
    re-aligns and skipping the old group does not; remove in every other
    case. Whatever is left over on either side is drained as Removes or
    Inserts.

    Example:
        >>> old = [LineGroup(1, 5, LineType.CODE), LineGroup(6, 2, LineType.COMMENT)]
        >>> new = [LineGroup(1, 7, LineType.CODE)]
        >>> diff_groups(old, new)
        [Resize(new_index=0, ...), Remove(old_index=1, ...)]
    """
    edits: list[DiffEdit] = []
    i = j = 0

    while i < len(old) and j < len(new):
        a, b = old[i], new[j]

        if a.line_type == b.line_type:
            if a.length != b.length:
                edits.append(Resize(j, a.line_type, a.length, b.length))
            i += 1
            j += 1
            continue

        can_skip_old = i + 1 < len(old) and old[i + 1].line_type == b.line_type
        can_skip_new = j + 1 < len(new) and new[j + 1].line_type == a.line_type

        if can_skip_new and not can_skip_old:
            edits.append(Insert(j, b.line_type, b.length))
            j += 1
        else:
            edits.append(Remove(i, a.line_type, a.length))
            i += 1

    while i < len(old):
        edits.append(Remove(i, old[i].line_type, old[i].length))
        i += 1

    while j < len(new):
        edits.append(Insert(j, new[j].line_type, new[j].length))
        j += 1

    return edits


def diff_groups_minimal(old: Sequence[LineGroup], new: Sequence[LineGroup]) -> list[DiffEdit]:
    """Shortest edit list between two group sequences.

    Matching two groups of the same type costs nothing when their lengths
    agree and one Resize otherwise; every Remove and Insert costs one. Ties
    prefer a match, then a Remove, then an Insert, so the output is
    deterministic.
    """
    n, m = len(old), len(new)

    # cost[i][j]: fewest edits turning old[i:] into new[j:]
    cost = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(n - 1, -1, -1):
        cost[i][m] = n - i
    for j in range(m - 1, -1, -1):
        cost[n][j] = m - j

    for i in range(n - 1, -1, -1):
        for j in range(m - 1, -1, -1):
            best = min(cost[i + 1][j], cost[i][j + 1]) + 1
            if old[i].line_type == new[j].line_type:
                matched = cost[i + 1][j + 1] + (old[i].length != new[j].length)
                best = min(best, matched)
            cost[i][j] = best

    edits: list[DiffEdit] = []
    i = j = 0
    while i < n or j < m:
        if i < n and j < m and old[i].line_type == new[j].line_type:
            resize = old[i].length != new[j].length
            if cost[i][j] == cost[i + 1][j + 1] + resize:
                if resize:
                    edits.append(Resize(j, old[i].line_type, old[i].length, new[j].length))
                i += 1
                j += 1
                continue

        if i < n and cost[i][j] == cost[i + 1][j] + 1:
            edits.append(Remove(i, old[i].line_type, old[i].length))
            i += 1
        else:
            edits.append(Insert(j, new[j].line_type, new[j].length))
            j += 1

    return edits


_DIFFERS: dict[DiffStrategy, Callable[[Sequence[LineGroup], Sequence[LineGroup]], list[DiffEdit]]] = {
    DiffStrategy.GREEDY: diff_groups,
    DiffStrategy.MINIMAL: diff_groups_minimal,
}


def resolve_strategy(strategy: Union[DiffStrategy, str]) -> DiffStrategy:
    """Accept a strategy member or its configuration name."""
    if isinstance(strategy, DiffStrategy):
        return strategy
    try:
        return DiffStrategy(strategy)
    except ValueError:
        names = ", ".join(s.value for s in DiffStrategy)
        raise ValueError(f"Unknown diff strategy '{strategy}' (expected one of {names})")


def diff_files(
    old: FileAnalysis,
    new: FileAnalysis,
    strategy: Union[DiffStrategy, str] = DiffStrategy.GREEDY,
) -> list[DiffEdit]:
    """Diff the groups of two analyses of the same file."""
    differ = _DIFFERS[resolve_strategy(strategy)]
    return differ(old.groups, new.groups)
