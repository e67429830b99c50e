"""
Scripted LLM client - deterministic keyword replies for CI and tests
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..models.runtime import ToolDefinition
from .base import last_user_message

DEFAULT_RULES: List[Tuple[Tuple[str, ...], str]] = [
    (("human", "manager", "real person"), "I am escalating this to our team."),
    (("order",), "I can help with your order status."),
    (("subscription", "cancel"), "I can help you with your subscription."),
    (("refund",), "I will process your refund request."),
]

DEFAULT_REPLY = "How can I help you today?"


class ScriptedLLMClient:
    """
    Answers with the first rule whose keyword appears in the last user message.
    Every call is kept in `calls` so tests can inspect the prompts sent.
    """

    def __init__(
        self,
        rules: Optional[Sequence[Tuple[Tuple[str, ...], str]]] = None,
        default_reply: str = DEFAULT_REPLY
    ):
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)
        self.default_reply = default_reply
        self.calls: List[Dict[str, Any]] = []

    async def chat(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[ToolDefinition]] = None
    ) -> Dict[str, Any]:
        self.calls.append({"messages": messages, "tools": tools or []})
        content = last_user_message(messages).lower()

        for keywords, reply in self.rules:
            if any(kw in content for kw in keywords):
                return {"content": reply}

        return {"content": self.default_reply}
