"""Rebuild per-commit snapshots from a revision log, and diff two snapshots.

Replaying entries ``0..k`` of a log gives the same path-to-analysis map as a
fresh walk started at commit ``k``.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Union

from ..diff.applier import apply_change
from ..diff.classifier import classify_file_change
from ..diff.engine import DiffStrategy
from ..diff.models import Modify
from ..scanning.models import FileAnalysis
from .models import FileChangeEntry, RevisionLog


def replay_revisions(
    log: RevisionLog,
    upto: Optional[int] = None,
    strict: bool = False,
) -> dict[str, FileAnalysis]:
    """Replay ``log`` from its first entry through entry ``upto`` (default: the last).

    Raises:
        ValueError: If the log does not start with a full analysis, or
            ``upto`` is out of range
        DiffApplyError: In strict mode, if an edit does not fit its file
    """
    if not log.revisions:
        return {}
    last = len(log.revisions) - 1 if upto is None else upto
    if not 0 <= last < len(log.revisions):
        raise ValueError(f"upto must be between 0 and {len(log.revisions) - 1}, got {upto}")

    first = log.revisions[0]
    if first.analysis is None:
        raise ValueError(f"first revision {first.commit} carries no full analysis")

    snapshot = {fa.path: fa for fa in first.analysis}

    for entry in log.revisions[1 : last + 1]:
        for item in entry.changes or ():
            old = snapshot.get(item.path, FileAnalysis(path=item.path))
            new = apply_change(old, item.change, new_path=item.path, strict=strict)
            if new.is_empty:
                snapshot.pop(item.path, None)
            else:
                snapshot[item.path] = new

    return snapshot


def diff_snapshots(
    old: Union[Mapping[str, FileAnalysis], Iterable[FileAnalysis]],
    new: Union[Mapping[str, FileAnalysis], Iterable[FileAnalysis]],
    strategy: Union[DiffStrategy, str] = DiffStrategy.GREEDY,
) -> list[FileChangeEntry]:
    """Changes turning one full analysis into another, sorted by path.

    Files missing on one side count as empty there; unchanged files are left
    out.
    """
    old_map = _as_map(old)
    new_map = _as_map(new)

    entries: list[FileChangeEntry] = []
    for path in set(old_map) | set(new_map):
        change = classify_file_change(
            old_map.get(path, FileAnalysis(path=path)),
            new_map.get(path, FileAnalysis(path=path)),
            strategy,
        )
        if isinstance(change, Modify) and change.is_noop:
            continue
        entries.append(FileChangeEntry(path=path, change=change))

    entries.sort(key=lambda e: (e.path.casefold(), e.path))
    return entries


def _as_map(files: Union[Mapping[str, FileAnalysis], Iterable[FileAnalysis]]) -> dict[str, FileAnalysis]:
    if isinstance(files, Mapping):
        return dict(files)
    return {fa.path: fa for fa in files}
