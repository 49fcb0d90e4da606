"""Data models for history analysis: repository changes, revisions and progress."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Tuple

from ..diff.models import FileChange
from ..scanning.models import FileAnalysis


class RepoChangeKind(Enum):
    ADD = "Add"
    MODIFY = "Modify"
    DELETE = "Delete"
    RENAME = "Rename"


@dataclass(frozen=True)
class RepoChange:
    """One path touched between two commits, as reported by the repository."""

    kind: RepoChangeKind
    path: str
    old_path: Optional[str] = None  # only for RENAME


def expand_renames(changes: Iterable[RepoChange]) -> list[RepoChange]:
    """Replace every rename with a delete of the old path and an add of the new one."""
    expanded: list[RepoChange] = []
    for change in changes:
        if change.kind is RepoChangeKind.RENAME:
            if change.old_path:
                expanded.append(RepoChange(RepoChangeKind.DELETE, change.old_path))
            expanded.append(RepoChange(RepoChangeKind.ADD, change.path))
        else:
            expanded.append(change)
    return expanded


@dataclass(frozen=True)
class FileChangeEntry:
    path: str
    change: FileChange


@dataclass(frozen=True)
class RevisionEntry:
    """One commit of a history walk.

    The first entry of a log carries the full ``analysis``; every later
    entry carries only the ``changes`` relative to its predecessor.

    Files with no lines are left out of ``analysis``. A file that becomes
    empty later shows up in ``changes`` as a FileDelete.
    """

    commit: str
    analysis: Optional[Tuple[FileAnalysis, ...]] = None
    changes: Optional[Tuple[FileChangeEntry, ...]] = None

    @property
    def is_snapshot(self) -> bool:
        return self.analysis is not None


@dataclass
class RevisionLog:
    """Chronological revision entries, first commit to last."""

    revisions: list[RevisionEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.revisions)

    @property
    def commits(self) -> list[str]:
        return [r.commit for r in self.revisions]


class ProgressKind(Enum):
    COMMITS_TOTAL = "CommitsTotal"
    COMMIT_STARTED = "CommitStarted"
    FILES_TOTAL = "FilesTotal"
    FILE_PROCESSED = "FileProcessed"
    COMMIT_COMPLETED = "CommitCompleted"


@dataclass(frozen=True)
class ProgressEvent:
    kind: ProgressKind
    total: Optional[int] = None
    value: Optional[int] = None
    commit: Optional[str] = None
    path: Optional[str] = None
