"""Classify a raw user message as code, an error report, or a general question."""

from __future__ import annotations

import re

from .models import Category
from .rules import Rule, contains_any, first_match, pattern

CODE_HINT_PATTERN = (
    r"class\s+\w+"
    r"|public\s+static\s+void\s+main"
    r"|\{.*\}"
    r"|;"
    r"|def\s+\w+"
    r"|function\s+\w+"
    r"|#include\s*<"
)

# Order is precedence: code wins over error keywords
CATEGORY_RULES: list[Rule] = [
    Rule(pattern(CODE_HINT_PATTERN, re.DOTALL), Category.CODE),
    Rule(contains_any("error", "bug", "fail"), Category.ERROR),
]


def classify(text: str) -> Category:
    """Return the Category for ``text``. Total and deterministic."""
    return first_match(CATEGORY_RULES, (text or "").strip(), Category.GENERAL)
