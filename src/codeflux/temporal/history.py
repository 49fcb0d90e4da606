"""History analysis: one full snapshot, then per-commit incremental diffs.

The walk reads every file through explicit commit ids, so it never touches
the working tree. Commits are processed strictly in order; only the
per-file read-and-classify work inside one commit runs on a worker pool.

Usage:
    log = analyze_history("path/to/repo/src", start_ref="initial")
    first = log.revisions[0].analysis    # full analysis at the start commit
    later = log.revisions[1].changes     # changes relative to the start commit
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Callable, Iterable, Optional, TypeVar, Union

from ..config import AnalysisConfig
from ..diff.classifier import classify_file_change
from ..diff.engine import resolve_strategy
from ..diff.models import FileDelete, Modify
from ..exceptions import (
    CodefluxError,
    DirtyWorkingTreeError,
    EmptyCommitRangeError,
    HistoryCancelledError,
)
from ..logging_config import get_logger
from ..scanning.analyzer import analyze_content
from ..scanning.filters import PathFilter
from ..scanning.models import FileAnalysis
from .client import INITIAL_COMMIT, GitCliClient, RepositoryClient
from .models import (
    FileChangeEntry,
    ProgressEvent,
    ProgressKind,
    RepoChangeKind,
    RevisionEntry,
    RevisionLog,
    expand_renames,
)
from .retry import call_with_retry

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")

ProgressCallback = Callable[[ProgressEvent], None]
Snapshot = dict[str, FileAnalysis]


def _path_key(path: str) -> tuple[str, str]:
    return (path.casefold(), path)


class HistoryAnalyzer:
    """Walks a commit range and builds a :class:`RevisionLog`.

    Args:
        client: Read-only repository access
        config: Filters, worker count, retry policy and diff strategy
        progress: Optional observer called with every :class:`ProgressEvent`
        cancel_event: Set it from any thread to stop the walk
        sleep: Backoff function used between retries
    """

    def __init__(
        self,
        client: RepositoryClient,
        config: Optional[AnalysisConfig] = None,
        progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.config = config or AnalysisConfig()
        self.progress = progress
        self.cancel_event = cancel_event or threading.Event()
        self.sleep = sleep

        self.path_filter = PathFilter(self.config.file_extensions, self.config.ignore_patterns)
        self.retry_policy = self.config.retry_policy
        self.strategy = resolve_strategy(self.config.diff_strategy)
        self.workers = self.config.effective_workers
        self._completed = 0

    # ── Entry point ──────────────────────────────────────────────────────

    def run(self, start_ref: str = INITIAL_COMMIT) -> RevisionLog:
        """Analyse every commit from ``start_ref`` to HEAD, both included.

        Raises:
            DirtyWorkingTreeError: If the working tree has local changes
            UnresolvableRefError: If ``start_ref`` or HEAD cannot be resolved
            EmptyCommitRangeError: If the range holds no commits
            RepositoryError: If listing files or changes fails permanently
            HistoryCancelledError: If ``cancel_event`` is set during the walk
        """
        if not self._call(self.client.status_clean):
            raise DirtyWorkingTreeError(getattr(self.client, "working_directory", ""))

        start = self._call(self.client.resolve_commit, start_ref)
        head = self._call(self.client.head_commit)
        commits = self._call(self.client.commits_in_range, start, head)
        if not commits:
            raise EmptyCommitRangeError(start, head)

        logger.info("Analysing %d commits from %s to %s", len(commits), start[:12], head[:12])
        self._emit(ProgressKind.COMMITS_TOTAL, total=len(commits))

        log = RevisionLog()
        snapshot: Snapshot = {}
        previous: Optional[str] = None

        for index, commit in enumerate(commits):
            self._completed = index
            self._check_cancelled(commit, index)
            self._emit(ProgressKind.COMMIT_STARTED, value=index + 1, commit=commit)

            if previous is None:
                entry, snapshot = self._analyze_first(commit)
            else:
                entry, snapshot = self._analyze_next(previous, commit, snapshot)

            log.revisions.append(entry)
            previous = commit
            self._emit(ProgressKind.COMMIT_COMPLETED, value=index + 1, commit=commit)

        return log

    # ── Per-commit work ──────────────────────────────────────────────────

    def _analyze_first(self, commit: str) -> tuple[RevisionEntry, Snapshot]:
        paths = self.path_filter.filter(self._call(self.client.list_files, commit))
        self._emit(ProgressKind.FILES_TOTAL, total=len(paths), commit=commit)

        results = self._map_files(commit, paths, lambda path: self._read_and_classify(commit, path))

        snapshot: Snapshot = {}
        for path, analysis in results:
            if analysis is not None and not analysis.is_empty:
                snapshot[path] = analysis

        files = tuple(snapshot[path] for path in sorted(snapshot, key=_path_key))
        return RevisionEntry(commit=commit, analysis=files), snapshot

    def _analyze_next(
        self, previous: str, commit: str, snapshot: Snapshot
    ) -> tuple[RevisionEntry, Snapshot]:
        changes = expand_renames(self._call(self.client.changes_between, previous, commit))

        last_kind = {c.path: c.kind for c in changes}
        touched = self.path_filter.filter(_distinct(c.path for c in changes))
        self._emit(ProgressKind.FILES_TOTAL, total=len(touched), commit=commit)

        def work(path: str) -> Optional[FileAnalysis]:
            if last_kind.get(path) is RepoChangeKind.DELETE:
                return FileAnalysis(path=path)
            return self._read_and_classify(commit, path)

        results = self._map_files(commit, touched, work)

        next_snapshot = dict(snapshot)
        entries: list[FileChangeEntry] = []
        for path, analysis in results:
            if analysis is None:
                # Read failed and was logged; keep the previous state
                continue
            old = snapshot.get(path, FileAnalysis(path=path))
            change = classify_file_change(old, analysis, self.strategy)

            if isinstance(change, FileDelete) or analysis.is_empty:
                next_snapshot.pop(path, None)
            else:
                next_snapshot[path] = analysis

            if isinstance(change, Modify) and change.is_noop:
                continue
            entries.append(FileChangeEntry(path=path, change=change))

        entries.sort(key=lambda e: _path_key(e.path))
        return RevisionEntry(commit=commit, changes=tuple(entries)), next_snapshot

    def _read_and_classify(self, commit: str, path: str) -> Optional[FileAnalysis]:
        """Worker body: never touches shared state, returns None on failure."""
        try:
            data = self._call(self.client.read_file_at, commit, path)
            return analyze_content(data, path)
        except CodefluxError as e:
            logger.warning("Skipping %s at %s: %s", path, commit[:12], e)
            return None

    # ── Bounded pool ─────────────────────────────────────────────────────

    def _map_files(
        self, commit: str, paths: list[str], work: Callable[[str], R]
    ) -> list[tuple[str, R]]:
        """Run ``work`` for every path on the worker pool.

        At most ``2 * workers`` submissions are unfinished at any time.
        Results come back in ``paths`` order regardless of completion order.
        Progress events are emitted from this thread.
        """
        if not paths:
            return []

        limit = 2 * self.workers
        results: dict[int, R] = {}
        pending: dict[Future, int] = {}

        def collect(done: Iterable[Future]) -> None:
            for future in done:
                index = pending.pop(future)
                results[index] = future.result()
                self._emit(ProgressKind.FILE_PROCESSED, commit=commit, path=paths[index])

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            try:
                for index, path in enumerate(paths):
                    if self.cancel_event.is_set():
                        raise HistoryCancelledError(commit, self._completed)
                    if len(pending) >= limit:
                        done, _ = wait(pending, return_when=FIRST_COMPLETED)
                        collect(done)
                    pending[executor.submit(work, path)] = index

                while pending:
                    if self.cancel_event.is_set():
                        raise HistoryCancelledError(commit, self._completed)
                    done, _ = wait(pending, return_when=FIRST_COMPLETED)
                    collect(done)
            except BaseException:
                for future in pending:
                    future.cancel()
                raise

        return [(paths[i], results[i]) for i in range(len(paths))]

    # ── Helpers ──────────────────────────────────────────────────────────

    def _call(self, func: Callable[..., T], *args) -> T:
        return call_with_retry(self.retry_policy, func, *args, sleep=self.sleep)

    def _check_cancelled(self, commit: str, completed: int) -> None:
        if self.cancel_event.is_set():
            logger.info("History analysis cancelled before %s", commit[:12])
            raise HistoryCancelledError(commit, completed)

    def _emit(self, kind: ProgressKind, **fields) -> None:
        if self.progress is None:
            return
        try:
            self.progress(ProgressEvent(kind=kind, **fields))
        except Exception as e:
            logger.warning("Progress observer failed on %s: %s", kind.value, e)


def _distinct(paths: Iterable[str]) -> list[str]:
    """Unique paths in first-seen order."""
    return list(dict.fromkeys(paths))


def analyze_history(
    working_directory: Union[str, Path],
    start_ref: str = INITIAL_COMMIT,
    *,
    config: Optional[AnalysisConfig] = None,
    progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
) -> RevisionLog:
    """Analyse the history of the repository containing ``working_directory``.

    Only files under ``working_directory`` take part; paths in the log are
    relative to the repository root.
    """
    config = config or AnalysisConfig()
    client = GitCliClient(
        working_directory,
        timeout_seconds=config.git_timeout_seconds,
        git_executable=config.git_executable,
    )
    return HistoryAnalyzer(client, config, progress=progress, cancel_event=cancel_event).run(start_ref)
