"""Replay edit lists and file changes against line groups.

The applier is the inverse of the differ: given the original groups and the
edits computed for them, it rebuilds the resulting groups. Start offsets are
always recomputed from line 1, so the edits never need to carry them.
"""

from __future__ import annotations

from typing import Optional, Sequence

from ..exceptions import DiffApplyError
from ..logging_config import get_logger
from ..scanning.models import FileAnalysis, LineGroup
from .models import DiffEdit, FileAdd, FileChange, FileDelete, Insert, Modify, Remove, Resize

logger = get_logger(__name__)


def renumber(groups: Sequence[LineGroup]) -> list[LineGroup]:
    """Return ``groups`` with starts recomputed as a running offset from line 1."""
    result: list[LineGroup] = []
    start = 1
    for group in groups:
        result.append(LineGroup(start, group.length, group.line_type))
        start += group.length
    return result


def _reject(reason: str, edit: DiffEdit, strict: bool) -> None:
    if strict:
        raise DiffApplyError(reason, edit=edit)
    logger.warning("Skipping edit %r: %s", edit, reason)


def apply_edits(
    groups: Sequence[LineGroup],
    edits: Sequence[DiffEdit],
    strict: bool = False,
) -> list[LineGroup]:
    """Rebuild the new group list from ``groups`` and their ``edits``.

    At each step the first applicable of these wins:
      a. a Remove of the current old group consumes it;
      b. an Insert at the current output position appends a new group;
      c. a Resize at the current output position replaces the current old group;
      d. the current old group is copied through unchanged;
      e. an Insert past the last old group is appended.

    Args:
        groups: Original groups, in order
        edits: Edits produced by the differ for ``groups``
        strict: Raise on an edit that does not fit ``groups`` instead of
            skipping it with a warning

    Returns:
        Resulting groups with starts renumbered from 1

    Raises:
        DiffApplyError: In strict mode, for a Remove or Resize whose type does
            not match the consumed group, or an edit that can never apply
    """
    out: list[LineGroup] = []
    i_old = 0
    i_op = 0

    while True:
        edit = edits[i_op] if i_op < len(edits) else None
        old = groups[i_old] if i_old < len(groups) else None

        if isinstance(edit, Remove) and edit.old_index == i_old and old is not None:
            if edit.line_type != old.line_type:
                _reject(f"remove of {edit.line_type.value} group but found {old.line_type.value}", edit, strict)
            else:
                i_old += 1
            i_op += 1
            continue

        if isinstance(edit, Insert) and edit.new_index == len(out):
            out.append(LineGroup(0, edit.new_length, edit.line_type))
            i_op += 1
            continue

        if isinstance(edit, Resize) and edit.new_index == len(out) and old is not None:
            if edit.line_type != old.line_type:
                _reject(f"resize of {edit.line_type.value} group but found {old.line_type.value}", edit, strict)
            else:
                out.append(LineGroup(0, edit.new_length, old.line_type))
                i_old += 1
            i_op += 1
            continue

        if edit is not None and _is_stale(edit, i_old, len(out)):
            _reject("edit index already passed", edit, strict)
            i_op += 1
            continue

        if old is not None:
            out.append(old)
            i_old += 1
            continue

        if edit is not None:
            _reject("edit index beyond the end of the groups", edit, strict)
            i_op += 1
            continue

        break

    return renumber(out)


def _is_stale(edit: DiffEdit, i_old: int, out_length: int) -> bool:
    if isinstance(edit, Remove):
        return edit.old_index < i_old
    return edit.new_index < out_length


def apply_to_analysis(
    old: FileAnalysis,
    edits: Sequence[DiffEdit],
    new_path: Optional[str] = None,
    strict: bool = False,
) -> FileAnalysis:
    """Apply ``edits`` to ``old`` and wrap the result as a new analysis."""
    groups = apply_edits(old.groups, edits, strict=strict)
    return FileAnalysis(path=new_path or old.path, groups=tuple(groups))


def apply_change(
    old: FileAnalysis,
    change: FileChange,
    new_path: Optional[str] = None,
    strict: bool = False,
) -> FileAnalysis:
    """Apply any file-level change to ``old``.

    A FileAdd replays the groups it carries, a FileDelete leaves no groups
    and a Modify goes through :func:`apply_edits`.
    """
    if not isinstance(change, (FileAdd, FileDelete, Modify)):
        raise TypeError(f"Unsupported file change: {type(change).__name__}")

    path = new_path or change.new_path or old.path

    if isinstance(change, FileAdd):
        return FileAnalysis(path=path, groups=tuple(renumber(change.groups)))
    if isinstance(change, FileDelete):
        return FileAnalysis(path=path, groups=())
    return apply_to_analysis(old, change.edits, new_path=path, strict=strict)
