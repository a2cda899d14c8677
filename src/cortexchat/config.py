"""Central configuration for limits, timings and UI strings."""

import os

# Title inference. Override the cap with CORTEXCHAT_TITLE_MAX_LENGTH
DEFAULT_TITLE = "New Chat"
TITLE_MAX_LENGTH = int(os.environ.get("CORTEXCHAT_TITLE_MAX_LENGTH", "28"))
TITLE_MAX_WORDS = 4
TITLE_MIN_TOKEN_LENGTH = 3

# Response templates
SUMMARY_MAX_CHARS = 90  # Inline echo of the user's message in error replies
MODERATE_COMPLEXITY_LINES = 25  # Above this a snippet is "moderate"

# Conversation store
MAX_CONVERSATIONS = int(os.environ.get("CORTEXCHAT_MAX_CONVERSATIONS", "100"))

# Presentation
TYPING_DELAY_MS = int(os.environ.get("CORTEXCHAT_TYPING_DELAY_MS", "900"))
LOG_LEVEL = os.environ.get("CORTEXCHAT_LOG_LEVEL", "WARNING").upper()

# UI strings
EMPTY_INPUT_WARNING = "Please enter a message"
TYPING_INDICATOR_TEXT = "AI is typing..."
BULLET_GLYPH = "•"
