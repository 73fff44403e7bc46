"""
Conveo Insights package.

Turns a pasted interview snippet into a short summary and three themes
using a hosted chat-completion service.
"""

from .insights import InsightResult, Theme, normalize_insights
from .prompts import Message, PromptMode, build_messages

__all__ = [
    "InsightResult",
    "Message",
    "PromptMode",
    "Theme",
    "build_messages",
    "normalize_insights",
]
