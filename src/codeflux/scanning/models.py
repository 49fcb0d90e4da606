"""Data models for line classification: line types, groups and file analyses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


class LineType(Enum):
    """Classification of a single source line."""

    COMMENT = "Comment"
    COMPLEXITY_INCREASING = "ComplexityIncreasing"
    CODE = "Code"
    CODE_AND_COMMENT = "CodeAndComment"
    EMPTY = "Empty"


@dataclass(frozen=True)
class LineGroup:
    """A maximal contiguous run of lines sharing one classification."""

    start: int  # 1-based index of the group's first line
    length: int
    line_type: LineType

    @property
    def end(self) -> int:
        """1-based index of the group's last line."""
        return self.start + self.length - 1


@dataclass(frozen=True)
class FileAnalysis:
    """Ordered line groups of one file.

    Groups are contiguous, maximal (no two neighbours share a type) and
    their lengths sum to the file's line count.
    """

    path: str  # forward-slash relative path
    groups: Tuple[LineGroup, ...] = ()

    @property
    def line_count(self) -> int:
        return sum(g.length for g in self.groups)

    @property
    def is_empty(self) -> bool:
        return not self.groups


@dataclass
class DirectoryAnalysis:
    """File analyses collected under one root, in no particular order."""

    root: str
    files: list[FileAnalysis] = field(default_factory=list)

    def sorted_files(self) -> list[FileAnalysis]:
        """Files ordered by path, case-insensitively."""
        return sorted(self.files, key=lambda f: (f.path.casefold(), f.path))
