"""DirectoryAnalyzer: classifies every matching source file under a root.

Usage:
    analysis = analyze_directory("src", ignore_patterns=[r"^obj/"], file_extensions=["*.cs"])
    for fa in analysis.sorted_files():
        ...

Files that cannot be read are logged and skipped; the run continues with
partial results. Results are unordered, callers sort when they need to.
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Optional, Sequence, Union

from ..exceptions import AnalysisError, InvalidPathError
from ..logging_config import get_logger
from .analyzer import analyze_file
from .filters import PathFilter
from .models import DirectoryAnalysis, FileAnalysis

logger = get_logger(__name__)

# Below this many files the pool overhead is not worth it
_PARALLEL_THRESHOLD = 10


class DirectoryAnalyzer:
    """Enumerates, filters and analyses the files under ``root``."""

    def __init__(
        self,
        root: Union[str, Path],
        ignore_patterns: Optional[Sequence[str]] = None,
        file_extensions: Optional[Sequence[str]] = None,
        max_workers: Optional[int] = None,
    ):
        self.root = Path(root)
        if not self.root.is_dir():
            raise InvalidPathError(self.root, "not an existing directory")
        self.path_filter = PathFilter(file_extensions, ignore_patterns)
        self.max_workers = max_workers or min(os.cpu_count() or 4, 8)

    def discover(self) -> list[tuple[Path, str]]:
        """Return ``(absolute_path, relative_path)`` for every file that passes the filters."""
        found = []
        for file_path in self.root.rglob("*"):
            if not file_path.is_file():
                continue
            relative = file_path.relative_to(self.root).as_posix()
            if self.path_filter.matches(relative):
                found.append((file_path, relative))
        return found

    def analyze(self) -> DirectoryAnalysis:
        candidates = self.discover()
        logger.debug("Analysing %d files under %s", len(candidates), self.root)

        result = DirectoryAnalysis(root=str(self.root))

        if len(candidates) < _PARALLEL_THRESHOLD:
            for file_path, relative in candidates:
                analysis = self._analyze_one(file_path, relative)
                if analysis is not None:
                    result.files.append(analysis)
            return result

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                executor.submit(self._analyze_one, fp, rel): rel for fp, rel in candidates
            }
            for future in as_completed(futures):
                analysis = future.result()
                if analysis is not None:
                    result.files.append(analysis)

        return result

    def _analyze_one(self, file_path: Path, relative: str) -> Optional[FileAnalysis]:
        try:
            return analyze_file(file_path, relative)
        except AnalysisError as e:
            logger.warning("Skipping %s: %s", relative, e)
            return None


def analyze_directory(
    root: Union[str, Path],
    ignore_patterns: Optional[Sequence[str]] = None,
    file_extensions: Optional[Sequence[str]] = None,
    workers: Optional[int] = None,
) -> DirectoryAnalysis:
    """Analyse every matching file under ``root``.

    Raises:
        InvalidPathError: If ``root`` is not an existing directory
    """
    return DirectoryAnalyzer(root, ignore_patterns, file_extensions, workers).analyze()
