"""Single-line classifier for C-family source code.

Not a parser: each line is judged on its own by an ordered set of rules,
first match wins.
"""

from .models import LineType

COMMENT_PREFIXES = ("//", "/*", "*", "///", "*/")

COMPLEXITY_KEYWORDS = (
    "if",
    "else",
    "for",
    "foreach",
    "while",
    "do",
    "switch",
    "case",
    "catch",
    "finally",
    "try",
    "throw",
    "return",
    "break",
    "continue",
    "goto",
    "yield",
    "await",
    "lock",
)

# Characters allowed right after a keyword for it to count as a token
_KEYWORD_TERMINATORS = (" ", "\t", "(", ";")


def classify_line(line: str) -> LineType:
    """Classify one line of text (without its line terminator)."""
    trimmed = line.strip()

    if not trimmed:
        return LineType.EMPTY

    if trimmed.startswith(COMMENT_PREFIXES):
        return LineType.COMMENT

    if _starts_with_keyword(_strip_line_comment(trimmed)):
        return LineType.COMPLEXITY_INCREASING

    # Rule 2 already caught lines that start with //
    if "//" in trimmed:
        return LineType.CODE_AND_COMMENT

    return LineType.CODE


def _strip_line_comment(line: str) -> str:
    """Cut everything from the first ``//`` and trim the rest."""
    index = line.find("//")
    if index >= 0:
        line = line[:index]
    return line.strip()


def _starts_with_keyword(code: str) -> bool:
    for keyword in COMPLEXITY_KEYWORDS:
        if not code.startswith(keyword):
            continue
        rest = code[len(keyword):]
        if not rest or rest.startswith(_KEYWORD_TERMINATORS):
            return True
    return False
