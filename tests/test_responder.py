"""
Tests for templated reply generation.

Covers:
  - Line counting (trailing blank lines count) and complexity threshold
  - Code review template contents and language fence
  - Error hint lookup order and inline summary (fence-safe)
  - Static general template
  - summarize truncation
  - Backend seam (custom ResponseBackend)
"""

import pytest

from cortexchat.models import Category, CodeBlock, Heading3, LanguageTag, Reply
from cortexchat.parser import parse_blocks
from cortexchat.responder import (
    GENERAL_TEMPLATE,
    GENERIC_ERROR_HINT,
    ResponseBackend,
    TemplateBackend,
    complexity_for,
    count_lines,
    error_hint,
    generate_response,
    summarize,
)

from .conftest import JAVA_SNIPPET

# ========================================================================
# Line counting and complexity
# ========================================================================


class TestCountLines:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("a", 1),
            ("a\nb", 2),
            ("a\n", 2),
            ("a\n\n", 3),
            ("a\r\nb", 2),
            ("a\rb\nc", 3),
            ("", 1),
        ],
    )
    def test_line_breaks_plus_one(self, text, expected):
        assert count_lines(text) == expected

    def test_complexity_threshold(self):
        assert complexity_for(25) == "low"
        assert complexity_for(26) == "moderate"


# ========================================================================
# Code replies
# ========================================================================


class TestCodeReply:
    def test_embeds_language_and_counts(self):
        markdown, is_code = generate_response(Category.CODE, JAVA_SNIPPET)
        assert "I detected a `java` snippet with `1` lines" in markdown
        assert f"`{len(JAVA_SNIPPET)}` characters" in markdown
        assert "Expected complexity for maintenance: `low`" in markdown
        assert is_code is False

    def test_trailing_newline_counts_as_line(self):
        markdown, _ = generate_response(Category.CODE, "x = 1;\n")
        assert "`2` lines" in markdown

    def test_moderate_complexity(self):
        code = "\n".join(f"int v{i} = {i};" for i in range(26))
        markdown, _ = generate_response(Category.CODE, code, LanguageTag.CPP)
        assert "`26` lines" in markdown
        assert "`moderate`" in markdown

    def test_skeleton_fence_tagged_with_language(self):
        markdown, _ = generate_response(Category.CODE, "def f():\n    return 1")
        code_blocks = [b for b in parse_blocks(markdown) if isinstance(b, CodeBlock)]
        assert len(code_blocks) == 1
        assert code_blocks[0].language == "python"

    def test_explicit_language_is_used(self):
        reply = TemplateBackend().respond(Category.CODE, "x;", LanguageTag.JAVASCRIPT)
        assert reply.language is LanguageTag.JAVASCRIPT
        assert "`javascript` snippet" in reply.markdown


# ========================================================================
# Error replies
# ========================================================================


class TestErrorReply:
    @pytest.mark.parametrize(
        "text, fragment",
        [
            ("NullPointerException at line 4", "null-check guard"),
            ("IndexOutOfBoundsException error", "invalid index"),
            ("Syntax error near line 2", "brackets"),
            ("ClassNotFoundException thrown", "import path"),
            ("type error in assignment", "Type mismatch"),
        ],
    )
    def test_hints(self, text, fragment):
        assert fragment in error_hint(text)

    def test_first_match_wins(self):
        # Both "nullpointer" and "type" appear; nullpointer is earlier in the table
        assert "null-check" in error_hint("NullPointerException type mismatch")

    def test_generic_hint(self):
        assert error_hint("it fails sometimes") == GENERIC_ERROR_HINT

    def test_summary_embedded(self):
        text = "my build   fails\n\nwith an error"
        markdown, _ = generate_response(Category.ERROR, text)
        assert "my build fails with an error" in markdown
        assert "Fast Debugging Checklist" in markdown

    def test_long_message_truncated_in_summary(self):
        text = "error " * 50
        markdown, _ = generate_response(Category.ERROR, text)
        assert summarize(text) in markdown
        assert summarize(text).endswith("...")

    def test_fenced_message_keeps_template_sections(self):
        markdown, _ = generate_response(Category.ERROR, "```\nTypeError: x is undefined\n```")
        blocks = parse_blocks(markdown)
        assert Heading3(text="Pro Tip") in blocks
        code = [b.code for b in blocks if isinstance(b, CodeBlock)]
        assert code == ["''' TypeError: x is undefined '''"]


# ========================================================================
# General replies
# ========================================================================


class TestGeneralReply:
    def test_static_template(self):
        first, _ = generate_response(Category.GENERAL, "hello")
        second, _ = generate_response(Category.GENERAL, "something else entirely")
        assert first == second == GENERAL_TEMPLATE


# ========================================================================
# summarize
# ========================================================================


class TestSummarize:
    def test_long_line(self):
        result = summarize("x" * 200)
        assert len(result) == 90
        assert result.endswith("...")
        assert result[:87] == "x" * 87

    def test_exact_limit_untouched(self):
        assert summarize("y" * 90) == "y" * 90

    def test_collapses_whitespace(self):
        assert summarize("  a \n\t b  ") == "a b"


# ========================================================================
# Backend seam
# ========================================================================


class EchoBackend(ResponseBackend):
    def respond(self, category, text, language=None):
        return Reply(markdown=f"```\n{text}\n```", is_code_block=True, category=category)


class TestBackendSeam:
    def test_custom_backend(self):
        reply = EchoBackend().respond(Category.GENERAL, "hi")
        assert reply.is_code_block is True

    def test_abstract_backend_not_instantiable(self):
        with pytest.raises(TypeError):
            ResponseBackend()
