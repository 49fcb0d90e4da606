"""Path filtering by file-name globs and ignore regexes.

Both filter kinds are plain strings supplied by the caller. A pattern that
does not compile is reported once as a warning and then left out; it never
aborts a run.
"""

from __future__ import annotations

import fnmatch
import posixpath
import re
from typing import Iterable, Optional, Sequence

from ..logging_config import get_logger
from .analyzer import normalize_path

logger = get_logger(__name__)

DEFAULT_FILE_EXTENSIONS = ("*.cs",)


class PathFilter:
    """Decides which repository-relative paths take part in an analysis.

    A path is kept when its file name matches at least one extension glob
    and no ignore regex matches anywhere in the slash-normalized path. Both
    comparisons are case-insensitive.
    """

    def __init__(
        self,
        file_extensions: Optional[Sequence[str]] = None,
        ignore_patterns: Optional[Sequence[str]] = None,
    ):
        self.file_extensions = list(file_extensions or DEFAULT_FILE_EXTENSIONS)
        self.ignore_patterns = list(ignore_patterns or [])
        self.invalid_patterns: list[str] = []

        self._globs = [
            regex
            for regex in (self._compile_glob(g) for g in self.file_extensions)
            if regex is not None
        ]
        self._ignores = [
            regex
            for regex in (self._compile_ignore(p) for p in self.ignore_patterns)
            if regex is not None
        ]

    def _compile_glob(self, glob: str) -> Optional[re.Pattern]:
        try:
            return re.compile(fnmatch.translate(glob), re.IGNORECASE)
        except re.error as e:
            logger.warning("Invalid file extension glob '%s': %s", glob, e)
            self.invalid_patterns.append(glob)
            return None

    def _compile_ignore(self, pattern: str) -> Optional[re.Pattern]:
        try:
            return re.compile(pattern, re.IGNORECASE)
        except re.error as e:
            logger.warning("Invalid ignore pattern '%s': %s", pattern, e)
            self.invalid_patterns.append(pattern)
            return None

    def matches_extension(self, path: str) -> bool:
        name = posixpath.basename(normalize_path(path))
        return any(regex.match(name) for regex in self._globs)

    def is_ignored(self, path: str) -> bool:
        normalized = normalize_path(path)
        return any(regex.search(normalized) for regex in self._ignores)

    def matches(self, path: str) -> bool:
        """Return True if ``path`` should be analysed."""
        return self.matches_extension(path) and not self.is_ignored(path)

    def filter(self, paths: Iterable[str]) -> list[str]:
        """Keep the matching paths, normalized to forward slashes, in input order."""
        return [normalize_path(p) for p in paths if self.matches(p)]
