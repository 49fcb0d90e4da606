"""Tests for single-line classification."""

import pytest

from codeflux.scanning.classifier import classify_line
from codeflux.scanning.models import LineType


class TestEmptyLines:
    @pytest.mark.parametrize("line", ["", "   ", "\t", "  \t  ", "\n"])
    def test_whitespace_only_is_empty(self, line):
        assert classify_line(line) == LineType.EMPTY


class TestCommentLines:
    @pytest.mark.parametrize(
        "line",
        [
            "// This is a comment",
            "//",
            "  // Comment with leading spaces",
            "/// XML documentation comment",
            "/* Block comment start",
            " * Block comment continuation",
            "*/",
            "/// <summary>",
        ],
    )
    def test_comment_prefixes(self, line):
        assert classify_line(line) == LineType.COMMENT

    @pytest.mark.parametrize("line", ["//if (condition)", "// var x = 5;", "/* if (condition) */"])
    def test_commented_out_code_is_comment(self, line):
        """Comment prefix wins over anything that follows it."""
        assert classify_line(line) == LineType.COMMENT


class TestComplexityIncreasing:
    @pytest.mark.parametrize(
        "line",
        [
            "if (x > 0)",
            "else",
            "else if (condition)",
            "for (int i = 0; i < 10; i++)",
            "foreach (var item in items)",
            "while (condition)",
            "do",
            "switch (value)",
            "case 1:",
            "try",
            "catch (Exception ex)",
            "finally",
            "throw new Exception();",
            "return value;",
            "break;",
            "continue;",
            "goto label;",
            "yield return item;",
            "await Task.Delay(1000);",
            "lock (obj)",
            "\tif (condition)",
        ],
    )
    def test_keywords(self, line):
        assert classify_line(line) == LineType.COMPLEXITY_INCREASING

    @pytest.mark.parametrize(
        "line",
        ["if (x > 0) // Check positive", "return value; // Return result", "try // Try block"],
    )
    def test_keyword_with_trailing_comment(self, line):
        """A trailing comment does not demote a control-flow line."""
        assert classify_line(line) == LineType.COMPLEXITY_INCREASING

    @pytest.mark.parametrize("line", ["if", "if(", "if ", "if\t", "return;"])
    def test_keyword_terminators(self, line):
        assert classify_line(line) == LineType.COMPLEXITY_INCREASING

    @pytest.mark.parametrize("line", ["ifelse", "ifx", "xif", "returnValue = 1;", "doWork();"])
    def test_keyword_must_be_whole_token(self, line):
        assert classify_line(line) == LineType.CODE


class TestCodeLines:
    @pytest.mark.parametrize(
        "line",
        ["var x = 5;", "}", "{", "namespace Test", "class MyClass", "  x++;", "obj.Property = value;"],
    )
    def test_plain_code(self, line):
        assert classify_line(line) == LineType.CODE

    @pytest.mark.parametrize(
        "line",
        ["var x = 5; // Initialize x", "\tvar x = 5; // Comment", "Method(); // Call method"],
    )
    def test_code_with_trailing_comment(self, line):
        assert classify_line(line) == LineType.CODE_AND_COMMENT

    @pytest.mark.parametrize("line", ["\x00", "€€€", "/", "*", "#region"])
    def test_any_string_is_classified(self, line):
        assert isinstance(classify_line(line), LineType)
