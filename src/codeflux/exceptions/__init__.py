"""Exception hierarchy for codeflux."""

from .analysis import AnalysisError, DiffApplyError, FileAccessError
from .base import CodefluxError
from .config import ConfigurationError, InvalidConfigError, InvalidPathError
from .repository import (
    DirtyWorkingTreeError,
    EmptyCommitRangeError,
    GitNotFoundError,
    HistoryCancelledError,
    RepositoryError,
    RepositoryTimeoutError,
    TransientRepositoryError,
    UnresolvableRefError,
)

__all__ = [
    "CodefluxError",
    "AnalysisError",
    "FileAccessError",
    "DiffApplyError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "RepositoryError",
    "TransientRepositoryError",
    "RepositoryTimeoutError",
    "GitNotFoundError",
    "DirtyWorkingTreeError",
    "UnresolvableRefError",
    "EmptyCommitRangeError",
    "HistoryCancelledError",
]
