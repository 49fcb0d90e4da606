"""
codeflux - source-line classification and structural history

Classifies every line of a source file into typed contiguous runs, diffs
those runs between two versions of a file, replays the diffs, and walks a
git commit range into a compact revision log: one full snapshot followed by
per-commit incremental changes.
"""

__version__ = "0.1.0"

from .config import AnalysisConfig, load_config
from .diff import apply_change, apply_edits, classify_file_change, diff_groups
from .scanning import FileAnalysis, LineGroup, LineType, analyze_content, analyze_directory
from .temporal import HistoryAnalyzer, RevisionLog, analyze_history, replay_revisions

__all__ = [
    "AnalysisConfig",
    "load_config",
    "LineType",
    "LineGroup",
    "FileAnalysis",
    "analyze_content",
    "analyze_directory",
    "diff_groups",
    "apply_edits",
    "apply_change",
    "classify_file_change",
    "analyze_history",
    "HistoryAnalyzer",
    "RevisionLog",
    "replay_revisions",
]
