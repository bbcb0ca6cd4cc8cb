"""Text generators for narrative analysis."""

from .base import TextGenerator
from .chat_completions import ChatCompletionsGenerator
from .service import advise

__all__ = [
    "TextGenerator",
    "ChatCompletionsGenerator",
    "advise",
]
