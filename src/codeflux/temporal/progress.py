"""Progress observers for history analysis: Rich bars, or nothing."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from .models import ProgressEvent, ProgressKind


class RichProgressObserver:
    """Shows one bar for commits and one for the files of the current commit.

    Use as a context manager and pass the instance as ``progress``:

        with RichProgressObserver() as observer:
            log = analyze_history(".", progress=observer)
    """

    def __init__(self, console: Optional[Console] = None, transient: bool = False):
        self.console = console or Console(stderr=True)
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=transient,
        )
        self._commit_task: Optional[TaskID] = None
        self._file_task: Optional[TaskID] = None

    def __enter__(self) -> RichProgressObserver:
        self._progress.start()
        return self

    def __exit__(self, *exc) -> None:
        self._progress.stop()

    def __call__(self, event: ProgressEvent) -> None:
        progress = self._progress

        if event.kind is ProgressKind.COMMITS_TOTAL:
            self._commit_task = progress.add_task("Commits", total=event.total)
            self._file_task = progress.add_task("Files", total=None)

        elif event.kind is ProgressKind.COMMIT_STARTED:
            if self._commit_task is not None:
                progress.update(self._commit_task, description=f"Commit {(event.commit or '')[:12]}")

        elif event.kind is ProgressKind.FILES_TOTAL:
            if self._file_task is not None:
                progress.reset(self._file_task, total=event.total)

        elif event.kind is ProgressKind.FILE_PROCESSED:
            if self._file_task is not None:
                progress.update(self._file_task, advance=1, description=event.path or "Files")

        elif event.kind is ProgressKind.COMMIT_COMPLETED:
            if self._commit_task is not None:
                progress.update(self._commit_task, completed=event.value)


class SilentObserver:
    """No-op observer for tests and quiet runs."""

    def __call__(self, event: ProgressEvent) -> None:
        pass
