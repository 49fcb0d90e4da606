"""Git history analysis: repository access, the commit walk and log replay."""

from .client import INITIAL_COMMIT, GitCliClient, RepositoryClient, parse_name_status
from .history import HistoryAnalyzer, analyze_history
from .models import (
    FileChangeEntry,
    ProgressEvent,
    ProgressKind,
    RepoChange,
    RepoChangeKind,
    RevisionEntry,
    RevisionLog,
    expand_renames,
)
from .progress import RichProgressObserver, SilentObserver
from .replay import diff_snapshots, replay_revisions
from .retry import NO_RETRY, RetryPolicy, call_with_retry, is_transient

__all__ = [
    "INITIAL_COMMIT",
    "RepositoryClient",
    "GitCliClient",
    "parse_name_status",
    "HistoryAnalyzer",
    "analyze_history",
    "RepoChange",
    "RepoChangeKind",
    "expand_renames",
    "FileChangeEntry",
    "RevisionEntry",
    "RevisionLog",
    "ProgressEvent",
    "ProgressKind",
    "RichProgressObserver",
    "SilentObserver",
    "replay_revisions",
    "diff_snapshots",
    "RetryPolicy",
    "NO_RETRY",
    "call_with_retry",
    "is_transient",
]
