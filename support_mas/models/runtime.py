"""
Runtime Data Models - customers, sessions, agents and tools
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, Field, field_validator

from .base import WireModel


class CustomerContext(WireModel):
    """Identity of the customer a session is opened for."""

    customer_email: str
    customer_id: str = Field(
        validation_alias=AliasChoices("customer_id", "customerId", "shopifyCustomerId")
    )
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @field_validator("customer_email", "customer_id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class SessionState(WireModel):
    """Mutable state of one live conversation."""

    id: str
    customer: CustomerContext
    status: Literal["active", "escalated"] = "active"
    current_agent: Optional[str] = None
    agent_history: List[str] = Field(default_factory=list)
    turn_count: int = 0
    frustration_score: int = 0
    created_at: str


class TurnResult(WireModel):
    """Reply returned to the caller for one customer message."""

    message: str
    escalated: bool = False
    agent: Optional[str] = None


class RoutingDecision(WireModel):
    agent_id: str
    escalate: bool = False
    reason: str = ""
    intent: Optional[str] = None
    frustration_hits: int = 0


class ToolDefinition(WireModel):
    """Typed tool declaration passed to the LLM client."""

    name: str
    description: str
    parameters: Dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}, "required": []}
    )


class ToolCall(WireModel):
    id: str = ""
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


class AgentReply(WireModel):
    content: str
    tools_called: List[str] = Field(default_factory=list)


class AgentDefinition(WireModel):
    id: str
    name: str
    description: str = ""
    system_prompt: str
    intents: List[str] = Field(default_factory=list)
    tools: List[ToolDefinition] = Field(default_factory=list)


class MASConfig(WireModel):
    """Agent roster the runtime dispatches to."""

    brand_name: str
    agents: List[AgentDefinition] = Field(default_factory=list)
    default_agent_id: str = "general-agent"
    escalation_agent_id: str = "escalation-agent"

    def get_agent(self, agent_id: str) -> Optional[AgentDefinition]:
        return next((a for a in self.agents if a.id == agent_id), None)

    def agent_for_intent(self, intent: str) -> Optional[AgentDefinition]:
        return next((a for a in self.agents if intent in a.intents), None)
