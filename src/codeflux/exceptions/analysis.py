"""Analysis-related exceptions: file access and diff replay."""

from pathlib import Path
from typing import Any, Optional

from .base import CodefluxError


class AnalysisError(CodefluxError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a file cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class DiffApplyError(AnalysisError):
    """Raised when an edit list cannot be replayed against its original groups.

    This always indicates a contract violation: the edits were not produced
    by the differ for these groups, or were altered afterwards.
    """

    def __init__(self, reason: str, edit: Optional[Any] = None):
        details = {"reason": reason}
        if edit is not None:
            details["edit"] = repr(edit)
        super().__init__(f"Cannot apply edits: {reason}", details=details)
        self.reason = reason
        self.edit = edit
