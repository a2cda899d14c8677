"""Templated reply generation.

A backend turns ``(category, text)`` into markdown. ``TemplateBackend`` is
the canned implementation shipped with the app; a real model client only
needs to implement ``ResponseBackend.respond``.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod

from .config import MODERATE_COMPLEXITY_LINES, SUMMARY_MAX_CHARS
from .language import detect_language
from .models import Category, LanguageTag, Reply
from .rules import Rule, contains_any, first_match

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r\n|\n|\r")
_WHITESPACE = re.compile(r"\s+")

GENERIC_ERROR_HINT = "Check the stack trace and locate the exact failing line."

ERROR_HINT_RULES: list[Rule] = [
    Rule(
        contains_any("nullpointer"),
        "A reference is null when used. Initialize it or add a null-check guard.",
    ),
    Rule(
        contains_any("indexoutofbounds"),
        "You're accessing an invalid index. Verify collection sizes and boundaries.",
    ),
    Rule(
        contains_any("syntax"),
        "A token is missing or misplaced. Check brackets, semicolons, and method signatures.",
    ),
    Rule(
        contains_any("classnotfound"),
        "The class file is missing or the import path is incorrect.",
    ),
    Rule(
        contains_any("type"),
        "Type mismatch detected. Check variable assignments and method return types.",
    ),
]

CODE_REVIEW_TEMPLATE = """\
## Code Review Summary
I detected a `{language}` snippet with `{line_count}` lines and `{char_count}` characters.

### What Looks Good
- You have a concrete structure that solves a real problem
- The logic is decomposed into readable operations
- You're thinking about practical implementation

### Improvement Opportunities
- Add clearer variable names for long-term maintainability
- Validate inputs and edge cases (null checks, empty values)
- Keep each method focused on a single responsibility
- Consider adding comments for non-obvious logic

### Best Practice Pattern
```{language}
// 1) Validate input parameters
// 2) Execute core logic
// 3) Return or display results
// 4) Handle edge cases early
```

### Next Steps
1. Test with normal, boundary, and invalid inputs
2. Expected complexity for maintenance: `{complexity}`
3. Ask me to refactor any specific section
"""

ERROR_TEMPLATE = """\
## Error Diagnosis & Solution

### First Interpretation
{hint}

### Fast Debugging Checklist
1. **Read the first error**, not just the last one. That's where the root cause is
2. **Check the exact line number** and surrounding code (10-20 lines)
3. **Verify variable types** and method signatures
4. **Test with minimal input** to isolate the issue
5. **Add temporary logging** right before the failing line

### Information to Share for Best Help
- Programming language & framework
- Complete error message (full stack trace)
- The code section around the failing line (with imports)
- What you expected vs. what actually happened

### Your Message
```
{summary}
```

### Pro Tip
Errors are learning opportunities! Each tells you exactly what went wrong.
"""

GENERAL_TEMPLATE = """\
## Welcome to Your AI Coding Assistant

I'm here to help you learn and solve coding challenges. Here's what I do best:

### What I Can Help With
- **Code Review**: Paste code and ask "What does this do?" or "How can I improve this?"
- **Error Debugging**: Share errors and I'll help you understand and fix them
- **Concept Explanation**: Ask about programming concepts in beginner-friendly terms
- **Code Suggestions**: Request patterns, best practices, or refactoring ideas
- **Learning Roadmaps**: Ask "How do I learn X?" for structured guidance

### Better Prompts = Better Help
Instead of: "How do I code?"
Try: "I want to learn Java OOP. Should I start with classes or inheritance?"

Instead of: "This doesn't work"
Try: "I get IndexOutOfBoundsException on line 25. Here's my code: [...code...]"

### Tips for Best Results
- Share complete, runnable code examples
- Include the full error message
- Mention your current experience level
- Ask follow-up questions, it helps me refine explanations

**What would you like to work on?**
"""


def count_lines(text: str) -> int:
    """Line breaks + 1. Trailing blank lines count: ``"a\\n"`` has 2 lines."""
    return len(_LINE_BREAK.split(text))


def complexity_for(line_count: int) -> str:
    return "moderate" if line_count > MODERATE_COMPLEXITY_LINES else "low"


def summarize(text: str, limit: int = SUMMARY_MAX_CHARS) -> str:
    """Collapse whitespace and cut to ``limit`` characters with a trailing ellipsis."""
    normalized = _WHITESPACE.sub(" ", text).strip()
    if len(normalized) <= limit:
        return normalized
    return normalized[: limit - 3] + "..."


def error_hint(text: str) -> str:
    return first_match(ERROR_HINT_RULES, text.lower(), GENERIC_ERROR_HINT)


def _fence_safe(text: str) -> str:
    """Keep echoed user text from closing the surrounding code fence."""
    return text.replace("```", "'''")


class ResponseBackend(ABC):
    """Capability that turns a classified message into a markdown reply."""

    @abstractmethod
    def respond(
        self,
        category: Category,
        text: str,
        language: LanguageTag | None = None,
    ) -> Reply:
        ...


class TemplateBackend(ResponseBackend):
    """Canned replies filled in from the message text."""

    def respond(
        self,
        category: Category,
        text: str,
        language: LanguageTag | None = None,
    ) -> Reply:
        if category is Category.CODE:
            language = language or detect_language(text)
            markdown = self._code_review(text, language)
        elif category is Category.ERROR:
            language = None
            markdown = ERROR_TEMPLATE.format(hint=error_hint(text), summary=_fence_safe(summarize(text)))
        else:
            language = None
            markdown = GENERAL_TEMPLATE

        logger.debug("Generated %s reply (%d chars)", category.value, len(markdown))
        return Reply(markdown=markdown, category=category, language=language)

    def _code_review(self, text: str, language: LanguageTag) -> str:
        line_count = count_lines(text)
        return CODE_REVIEW_TEMPLATE.format(
            language=language.value,
            line_count=line_count,
            char_count=len(text),
            complexity=complexity_for(line_count),
        )


_default_backend = TemplateBackend()


def generate_response(
    category: Category,
    text: str,
    language: LanguageTag | None = None,
) -> tuple[str, bool]:
    """Return ``(markdown, is_code_block)`` from the default template backend."""
    reply = _default_backend.respond(category, text, language)
    return reply.markdown, reply.is_code_block
