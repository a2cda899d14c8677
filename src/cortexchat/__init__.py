"""cortexchat: a chat shell around a templated coding assistant."""

__version__ = "1.0.0"

from .chat import BlankInputError, ChatSession, SendResult
from .classifier import classify
from .language import detect_language
from .parser import parse_blocks
from .responder import ResponseBackend, TemplateBackend, generate_response, summarize
from .titles import infer_title, maybe_infer_title

__all__ = [
    "BlankInputError",
    "ChatSession",
    "SendResult",
    "ResponseBackend",
    "TemplateBackend",
    "classify",
    "detect_language",
    "generate_response",
    "summarize",
    "infer_title",
    "maybe_infer_title",
    "parse_blocks",
]
