"""Classify the difference between two analyses of one file."""

from __future__ import annotations

from typing import Union

from ..scanning.models import FileAnalysis
from .engine import DiffStrategy, diff_files
from .models import FileAdd, FileChange, FileDelete, Modify


def classify_file_change(
    old: FileAnalysis,
    new: FileAnalysis,
    strategy: Union[DiffStrategy, str] = DiffStrategy.GREEDY,
) -> FileChange:
    """Return a FileAdd, FileDelete or Modify turning ``old`` into ``new``.

    A file that appears from nothing carries all its groups, and a file
    that disappears carries nothing; neither is diffed. A Modify may have
    no edits at all, which callers treat as a no-op.
    """
    if old.is_empty and not new.is_empty:
        return FileAdd(groups=new.groups, old_path=old.path, new_path=new.path)
    if not old.is_empty and new.is_empty:
        return FileDelete(old_path=old.path, new_path=new.path)
    return Modify(
        edits=tuple(diff_files(old, new, strategy)),
        old_path=old.path,
        new_path=new.path,
    )
