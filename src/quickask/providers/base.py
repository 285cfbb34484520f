"""Messages API request contracts."""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(slots=True, frozen=True)
class ContentBlock:
    text: str
    type: str = "text"

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass(slots=True, frozen=True)
class Message:
    role: Role
    content: tuple[ContentBlock, ...]

    @classmethod
    def user_text(cls, text: str) -> "Message":
        return cls(role=Role.USER, content=(ContentBlock(text=text),))

    def to_payload(self) -> dict[str, Any]:
        return {
            "role": self.role.value,
            "content": [block.to_payload() for block in self.content],
        }


@dataclass(slots=True, frozen=True)
class MessageRequest:
    """Body of a single Messages API call."""

    model: str
    max_tokens: int
    temperature: float
    system: str
    messages: tuple[Message, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.messages:
            raise ValueError("request requires at least one message")

    def to_payload(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "system": self.system,
            "messages": [message.to_payload() for message in self.messages],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_payload(), ensure_ascii=False)
