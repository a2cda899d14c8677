"""Detect the programming language of a code snippet."""

from __future__ import annotations

import re

from .models import LanguageTag
from .rules import Rule, first_match, pattern

# ``$`` anchors at end of input only: a trailing colon anywhere else
# (C++ access specifiers, case labels) is not a Python signature.
_FLAGS = re.IGNORECASE

# Signatures overlap (an arrow token can sit in a C++ comment), so the
# order of this table is the tie-break.
LANGUAGE_RULES: list[Rule] = [
    Rule(pattern(r"public\s+class|System\.out|import\s+java\.", _FLAGS), LanguageTag.JAVA),
    Rule(pattern(r"def\s+\w+\(|print\(|import\s+\w+|:\s*$", _FLAGS), LanguageTag.PYTHON),
    Rule(pattern(r"function\s+\w+|const\s+\w+|let\s+\w+|=>", _FLAGS), LanguageTag.JAVASCRIPT),
    Rule(pattern(r"#include\s*<|std::|int\s+main\s*\(", _FLAGS), LanguageTag.CPP),
]


def detect_language(code: str) -> LanguageTag:
    """Return the first matching LanguageTag, or ``text`` when nothing matches."""
    return first_match(LANGUAGE_RULES, code or "", LanguageTag.TEXT)
