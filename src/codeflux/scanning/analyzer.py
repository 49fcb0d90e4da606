"""Run-length encoding of classified lines into line groups."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Union

from ..exceptions import FileAccessError
from .classifier import classify_line
from .models import FileAnalysis, LineGroup, LineType


def normalize_path(path: str) -> str:
    """Return ``path`` with forward slashes."""
    return path.replace("\\", "/")


def split_lines(text: str) -> list[str]:
    """Split text on CRLF, CR or LF.

    A terminator at the very end does not open an extra empty line, and
    empty text has no lines at all.
    """
    if not text:
        return []
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def decode_content(data: bytes) -> str:
    """Decode raw file bytes as UTF-8, dropping a BOM and replacing bad bytes."""
    return data.decode("utf-8-sig", errors="replace")


def analyze_lines(lines: Iterable[str], path: str) -> FileAnalysis:
    """Classify each line and collapse runs of equal type into groups."""
    groups: list[LineGroup] = []

    current_type = LineType.EMPTY
    current_start = 1
    current_length = 0

    for number, line in enumerate(lines, start=1):
        line_type = classify_line(line)

        if line_type == current_type and current_length > 0:
            current_length += 1
            continue

        if current_length > 0:
            groups.append(LineGroup(current_start, current_length, current_type))

        current_type = line_type
        current_start = number
        current_length = 1

    if current_length > 0:
        groups.append(LineGroup(current_start, current_length, current_type))

    return FileAnalysis(path=normalize_path(path), groups=tuple(groups))


def analyze_content(data: Union[bytes, str], path: str) -> FileAnalysis:
    """Analyse file content given as raw bytes or already-decoded text."""
    text = decode_content(data) if isinstance(data, bytes) else data
    return analyze_lines(split_lines(text), path)


def analyze_file(file_path: Path, relative_path: str) -> FileAnalysis:
    """Read ``file_path`` from disk and analyse it under ``relative_path``.

    Raises:
        FileAccessError: If the file cannot be read
    """
    try:
        data = Path(file_path).read_bytes()
    except OSError as e:
        raise FileAccessError(file_path, f"Cannot read file: {e}")
    return analyze_content(data, relative_path)
