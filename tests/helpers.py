"""
Test doubles shared across test modules.
"""
from typing import Any, Dict, List, Optional

from support_mas.models.scenario import Scenario

CUSTOMER = {
    "customerEmail": "test@example.com",
    "firstName": "Test",
    "lastName": "User",
    "shopifyCustomerId": "cust_test",
}


def make_responder(message: str, escalated: bool = False):
    """Executor double that always answers the same way."""

    async def executor(session_id: str, text: str) -> Dict[str, Any]:
        return {"message": message, "escalated": escalated}

    return executor


def make_scenario(
    scenario_id: str = "TEST-001",
    messages: Optional[List[str]] = None,
    escalated: bool = False,
    contains: Optional[List[str]] = None,
) -> Scenario:
    messages = messages or ["Hello"]
    return Scenario.model_validate({
        "id": scenario_id,
        "name": f"Scenario {scenario_id}",
        "inputs": [{"step": i, "customer_message": m} for i, m in enumerate(messages, start=1)],
        "expected_outcome": {"escalated": escalated, "final_message_contains": contains},
    })


class FakeLLMClient:
    """Returns queued responses in order, then a fixed reply."""

    def __init__(self, responses: Optional[List[Dict[str, Any]]] = None, default: str = "Happy to help."):
        self.responses = list(responses or [])
        self.default = default
        self.calls: List[Dict[str, Any]] = []

    async def chat(self, messages, tools=None):
        self.calls.append({"messages": [dict(m) for m in messages], "tools": tools or []})
        if self.responses:
            return self.responses.pop(0)
        return {"content": self.default}


class FailingLLMClient:
    async def chat(self, messages, tools=None):
        raise RuntimeError("LLM unavailable")
