"""
OpenAI-compatible adapter package.

Exports:
- OpenAICompatAdapter: chat-completions adapter (streaming and non-streaming)
- build_openai_messages: history + new turn to the ``messages`` array
"""

from .client import OpenAICompatAdapter, chat_completions_url
from .messages import build_openai_messages

__all__ = ["OpenAICompatAdapter", "build_openai_messages", "chat_completions_url"]
