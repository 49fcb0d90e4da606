"""Repository exceptions: git plumbing failures and walk preconditions."""

from typing import Dict, Optional, Sequence

from .base import CodefluxError


class RepositoryError(CodefluxError):
    """Raised when a repository operation fails.

    Carries the logical operation (``list_files``, ``read_file_at`` ...), the
    command that was run and the diagnostic text git wrote to stderr.
    Errors of this exact class are permanent; see
    :class:`TransientRepositoryError`.
    """

    def __init__(
        self,
        operation: str,
        reason: str,
        command: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        details: Dict[str, str] = {"operation": operation}
        if returncode is not None:
            details["returncode"] = str(returncode)
        if stderr:
            details["stderr"] = stderr.strip()
        super().__init__(f"Repository operation '{operation}' failed: {reason}", details=details)
        self.operation = operation
        self.reason = reason
        self.command = list(command) if command else []
        self.returncode = returncode
        self.stderr = stderr


class TransientRepositoryError(RepositoryError):
    """A repository failure that may succeed when retried."""

    pass


class RepositoryTimeoutError(TransientRepositoryError):
    """Raised when a git invocation does not finish within its timeout."""

    def __init__(self, operation: str, timeout: float, command: Optional[Sequence[str]] = None):
        super().__init__(operation, f"timed out after {timeout}s", command=command)
        self.timeout = timeout


class GitNotFoundError(RepositoryError):
    """Raised when the git executable cannot be found."""

    def __init__(self, executable: str):
        super().__init__("spawn", f"git executable not found: {executable}")
        self.executable = executable


class DirtyWorkingTreeError(RepositoryError):
    """Raised when the working tree has uncommitted changes."""

    def __init__(self, working_directory: str):
        super().__init__(
            "status_clean",
            "working tree has local changes; commit or stash them before analysing history",
        )
        self.working_directory = working_directory


class UnresolvableRefError(RepositoryError):
    """Raised when a ref cannot be resolved to a commit."""

    def __init__(self, ref: str, stderr: str = ""):
        super().__init__("resolve_commit", f"cannot resolve '{ref}' to a commit", stderr=stderr)
        self.ref = ref


class EmptyCommitRangeError(RepositoryError):
    """Raised when no commits lie between the start commit and head."""

    def __init__(self, start: str, head: str):
        super().__init__("commits_in_range", f"no commits found between '{start}' and '{head}'")
        self.start = start
        self.head = head


class HistoryCancelledError(CodefluxError):
    """Raised when a history walk is cancelled before completion."""

    def __init__(self, commit: Optional[str] = None, completed: int = 0):
        details = {"completed_commits": str(completed)}
        if commit:
            details["commit"] = commit
        super().__init__("History analysis cancelled", details=details)
        self.commit = commit
        self.completed = completed
