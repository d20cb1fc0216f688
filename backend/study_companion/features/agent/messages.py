"""
Agent feature: message content as a tagged union.

Chat models return either a plain string or structured content blocks.
Both are wrapped once here and turned into text only where text is needed.
"""

import json
from dataclasses import dataclass
from typing import Any

from langchain_core.messages import BaseMessage


@dataclass(frozen=True)
class TextContent:
    text: str

    def as_text(self) -> str:
        return self.text


@dataclass(frozen=True)
class StructuredContent:
    value: Any

    def as_text(self) -> str:
        return json.dumps(self.value, ensure_ascii=False)


MessageContent = TextContent | StructuredContent


def content_of(message: BaseMessage) -> MessageContent:
    """Wrap a message's raw content."""
    match message.content:
        case str() as text:
            return TextContent(text)
        case other:
            return StructuredContent(other)


def message_text(message: BaseMessage) -> str:
    return content_of(message).as_text()
