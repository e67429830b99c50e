"""
LLM client contract - chat(messages, tools) -> {content, tool_calls}
"""
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from ..models.runtime import ToolCall, ToolDefinition


@runtime_checkable
class LLMClient(Protocol):
    """Anything that can answer a chat turn."""

    async def chat(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[ToolDefinition]] = None
    ) -> Dict[str, Any]:
        ...


class ChatResponse:
    """Normalized view over a raw chat response mapping."""

    def __init__(self, content: str, tool_calls: Optional[List[ToolCall]] = None):
        self.content = content
        self.tool_calls = tool_calls or []

    @classmethod
    def from_raw(cls, raw: Any) -> "ChatResponse":
        if isinstance(raw, str):
            return cls(raw)
        if not isinstance(raw, dict):
            raw = {"content": getattr(raw, "content", "")}
        calls = [
            call if isinstance(call, ToolCall) else ToolCall.model_validate(call)
            for call in raw.get("tool_calls") or []
        ]
        return cls(str(raw.get("content") or ""), calls)


def last_user_message(messages: List[Dict[str, Any]]) -> str:
    """Content of the most recent user message, or an empty string."""
    for message in reversed(messages):
        if message.get("role") == "user":
            return str(message.get("content") or "")
    return ""
