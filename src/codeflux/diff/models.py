"""Data models for block diffs: per-group edits and whole-file changes.

Each edit kind names its index after the sequence it addresses. A Remove
points into the original groups, an Insert or Resize points into the
resulting groups. A group never changes type in place; a type change is a
Remove followed by an Insert.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from ..scanning.models import LineGroup, LineType


class EditKind(Enum):
    INSERT = "Insert"
    REMOVE = "Remove"
    RESIZE = "Resize"


class ChangeKind(Enum):
    MODIFY = "Modify"
    FILE_ADD = "FileAdd"
    FILE_DELETE = "FileDelete"


@dataclass(frozen=True)
class Insert:
    """A new group at ``new_index`` of the resulting sequence."""

    new_index: int
    line_type: LineType
    new_length: int

    kind = EditKind.INSERT

    @property
    def delta(self) -> int:
        return self.new_length


@dataclass(frozen=True)
class Remove:
    """The group at ``old_index`` of the original sequence goes away."""

    old_index: int
    line_type: LineType
    old_length: int

    kind = EditKind.REMOVE

    @property
    def delta(self) -> int:
        return -self.old_length


@dataclass(frozen=True)
class Resize:
    """The group landing at ``new_index`` keeps its type but changes length."""

    new_index: int
    line_type: LineType
    old_length: int
    new_length: int

    kind = EditKind.RESIZE

    @property
    def delta(self) -> int:
        return self.new_length - self.old_length


DiffEdit = Union[Insert, Remove, Resize]


@dataclass(frozen=True)
class Modify:
    """The file exists on both sides and changed at block level."""

    edits: Tuple[DiffEdit, ...] = ()
    old_path: Optional[str] = None
    new_path: Optional[str] = None

    kind = ChangeKind.MODIFY

    @property
    def is_noop(self) -> bool:
        return not self.edits


@dataclass(frozen=True)
class FileAdd:
    """The file is new; carries every group of the new file."""

    groups: Tuple[LineGroup, ...] = ()
    old_path: Optional[str] = None
    new_path: Optional[str] = None

    kind = ChangeKind.FILE_ADD


@dataclass(frozen=True)
class FileDelete:
    """The file is gone; carries nothing."""

    old_path: Optional[str] = None
    new_path: Optional[str] = None

    kind = ChangeKind.FILE_DELETE


FileChange = Union[Modify, FileAdd, FileDelete]
