"""
Conversation state threaded explicitly through a research run.

Messages can only be appended; commit() closes the state, after which further
updates are rejected.
"""

import uuid
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from stockresearch.exceptions import StockResearchError


class StateCommittedError(StockResearchError):
    """Raised when updating a ConversationState that was already committed."""


class Message(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: Literal["user", "assistant", "tool"]
    content: Any
    name: Optional[str] = None


class ConversationState(BaseModel):
    chat_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    messages: list[Message] = Field(default_factory=list)
    committed: bool = False

    def update(self, message: Message) -> Message:
        if self.committed:
            raise StateCommittedError(f"conversation {self.chat_id} is already committed")
        self.messages.append(message)
        return message

    def commit(self) -> list[Message]:
        self.committed = True
        return list(self.messages)


def research_tool_call(subject: str) -> tuple[Message, Message]:
    """Assistant tool-call message and its matching tool result for one research request."""
    call_id = uuid.uuid4().hex
    call = Message(
        role="assistant",
        content=[{"type": "tool-call", "toolName": "showResearch", "toolCallId": call_id, "args": {"symbol": subject}}],
    )
    result = Message(
        role="tool",
        content=[{"type": "tool-result", "toolName": "showResearch", "toolCallId": call_id, "result": {"symbol": subject}}],
    )
    return call, result
