"""Line classification and run-length file analysis."""

from .analyzer import analyze_content, analyze_file, analyze_lines, split_lines
from .classifier import classify_line
from .directory import DirectoryAnalyzer, analyze_directory
from .filters import PathFilter
from .models import DirectoryAnalysis, FileAnalysis, LineGroup, LineType

__all__ = [
    "LineType",
    "LineGroup",
    "FileAnalysis",
    "DirectoryAnalysis",
    "classify_line",
    "split_lines",
    "analyze_lines",
    "analyze_content",
    "analyze_file",
    "PathFilter",
    "DirectoryAnalyzer",
    "analyze_directory",
]
