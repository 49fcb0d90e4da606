"""Tests for line splitting and run-length file analysis."""

import pytest

from codeflux.exceptions import FileAccessError
from codeflux.scanning.analyzer import analyze_content, analyze_file, analyze_lines, split_lines
from codeflux.scanning.models import LineGroup, LineType


class TestSplitLines:
    def test_empty_text_has_no_lines(self):
        assert split_lines("") == []

    def test_trailing_terminator_does_not_add_a_line(self):
        assert split_lines("var x = 1;\n// comment\n") == ["var x = 1;", "// comment"]

    def test_mixed_terminators(self):
        assert split_lines("a\r\nb\rc\nd") == ["a", "b", "c", "d"]

    def test_blank_lines_are_kept(self):
        assert split_lines("a\n\n\nb") == ["a", "", "", "b"]

    def test_single_newline_is_one_empty_line(self):
        assert split_lines("\n") == [""]


class TestAnalyzeLines:
    def test_runs_collapse_into_groups(self):
        lines = ["using System;", "class A", "{", "// note", "// more", "", "if (x)", "}"]
        analysis = analyze_lines(lines, "src/A.cs")

        assert analysis.groups == (
            LineGroup(1, 3, LineType.CODE),
            LineGroup(4, 2, LineType.COMMENT),
            LineGroup(6, 1, LineType.EMPTY),
            LineGroup(7, 1, LineType.COMPLEXITY_INCREASING),
            LineGroup(8, 1, LineType.CODE),
        )

    def test_groups_are_contiguous_and_cover_all_lines(self):
        lines = ["a;", "", "", "// c", "b; // d", "return;", "x;"]
        analysis = analyze_lines(lines, "f.cs")

        assert analysis.line_count == len(lines)
        expected_start = 1
        for group in analysis.groups:
            assert group.start == expected_start
            assert group.length >= 1
            expected_start = group.end + 1

    def test_neighbouring_groups_differ_in_type(self):
        analysis = analyze_lines(["a;", "b;", "", "c;", "", ""], "f.cs")
        types = [g.line_type for g in analysis.groups]
        assert all(a != b for a, b in zip(types, types[1:]))

    def test_no_lines_means_no_groups(self):
        analysis = analyze_lines([], "empty.cs")
        assert analysis.is_empty
        assert analysis.line_count == 0

    def test_backslashes_in_path_are_normalized(self):
        assert analyze_lines(["a;"], "src\\sub\\A.cs").path == "src/sub/A.cs"


class TestAnalyzeContent:
    def test_bytes_with_bom(self):
        analysis = analyze_content(b"\xef\xbb\xbf// header\nclass A {}\n", "A.cs")
        assert analysis.groups == (
            LineGroup(1, 1, LineType.COMMENT),
            LineGroup(2, 1, LineType.CODE),
        )

    def test_undecodable_bytes_are_replaced(self):
        analysis = analyze_content(b"var s = \"\xff\xfe\";\n", "A.cs")
        assert analysis.groups == (LineGroup(1, 1, LineType.CODE),)

    def test_text_and_bytes_agree(self):
        text = "class A {}\n// comment\n"
        assert analyze_content(text, "A.cs") == analyze_content(text.encode(), "A.cs")

    def test_is_deterministic(self):
        data = b"if (x)\n{\n  y = 1; // set\n}\n"
        assert analyze_content(data, "A.cs") == analyze_content(data, "A.cs")


class TestAnalyzeFile:
    def test_reads_from_disk(self, tmp_path):
        source = tmp_path / "A.cs"
        source.write_text("class A {}\n\n// end\n", encoding="utf-8")

        analysis = analyze_file(source, "A.cs")
        assert [g.line_type for g in analysis.groups] == [
            LineType.CODE,
            LineType.EMPTY,
            LineType.COMMENT,
        ]

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileAccessError) as exc_info:
            analyze_file(tmp_path / "missing.cs", "missing.cs")
        assert "missing.cs" in str(exc_info.value)
