"""Block-level diffing of line groups and replay of the resulting edits."""

from .applier import apply_change, apply_edits, apply_to_analysis, renumber
from .classifier import classify_file_change
from .engine import DiffStrategy, diff_files, diff_groups, diff_groups_minimal, resolve_strategy
from .models import (
    ChangeKind,
    DiffEdit,
    EditKind,
    FileAdd,
    FileChange,
    FileDelete,
    Insert,
    Modify,
    Remove,
    Resize,
)

__all__ = [
    "ChangeKind",
    "DiffEdit",
    "DiffStrategy",
    "EditKind",
    "FileAdd",
    "FileChange",
    "FileDelete",
    "Insert",
    "Modify",
    "Remove",
    "Resize",
    "apply_change",
    "apply_edits",
    "apply_to_analysis",
    "classify_file_change",
    "diff_files",
    "diff_groups",
    "diff_groups_minimal",
    "renumber",
    "resolve_strategy",
]
