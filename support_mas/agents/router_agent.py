"""
Router Agent - picks the agent for each customer message or decides to escalate
"""
import re
from typing import Any, Dict, List, Optional, Tuple

from .base_agent import BaseAgent
from ..config import settings
from ..llm.base import ChatResponse, LLMClient
from ..models.runtime import MASConfig, RoutingDecision, SessionState

ESCALATION_TRIGGERS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"\b(human|real person|representative|manager|supervisor)\b", re.I), "explicit_human_request"),
    (re.compile(r"\b(lawyer|attorney|legal action|sue|fraud\w*)\b", re.I), "legal_threat"),
]

FRUSTRATION_MARKERS = re.compile(
    r"\b(ridiculous|unacceptable|useless|worst|terrible|awful|fed up)\b", re.I
)

CLASSIFY_PROMPT = """You classify customer-service messages for {brand_name}.
Reply with exactly one intent label from this list and nothing else:
{labels}"""


class RouterAgent(BaseAgent):
    """
    Routes customer messages:
    - Hard escalation triggers (human request, legal threats)
    - Accumulated frustration over the session
    - Intent classification delegated to the LLM client
    """

    def __init__(
        self,
        config: MASConfig,
        llm_client: LLMClient,
        frustration_threshold: Optional[int] = None
    ):
        super().__init__(
            name="Router",
            description="Selects an agent or escalates"
        )
        self.config = config
        self.llm_client = llm_client
        self.frustration_threshold = (
            settings.FRUSTRATION_ESCALATION_THRESHOLD
            if frustration_threshold is None else frustration_threshold
        )

    async def execute(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """Route a message."""
        decision = await self.route(context["session"], context.get("text", ""))
        return {"decision": decision}

    async def route(self, session: SessionState, text: str) -> RoutingDecision:
        """
        Decide who answers the message.

        Args:
            session: Current session state
            text: Raw customer message

        Returns:
            RoutingDecision naming an agent, with `escalate` set for hand-offs
        """
        for pattern, reason in ESCALATION_TRIGGERS:
            if pattern.search(text):
                self.log_info(f"Escalation trigger '{reason}' in session {session.id}")
                return self._escalate(reason)

        hits = len(FRUSTRATION_MARKERS.findall(text))
        if hits and session.frustration_score + hits >= self.frustration_threshold:
            self.log_info(f"Frustration threshold reached in session {session.id}")
            decision = self._escalate("customer_frustration")
            decision.frustration_hits = hits
            return decision

        if not text.strip():
            return RoutingDecision(
                agent_id=self.config.default_agent_id,
                reason="empty_message",
                intent="UNCLEAR",
                frustration_hits=hits
            )

        intent = await self._classify(text)
        if intent == "ESCALATION":
            return self._escalate("classified_escalation")

        agent = self.config.agent_for_intent(intent) if intent else None
        if agent is not None:
            return RoutingDecision(agent_id=agent.id, reason="classified", intent=intent, frustration_hits=hits)

        fallback = session.current_agent or self.config.default_agent_id
        self.log_debug(f"No intent recognised, staying with {fallback}")
        return RoutingDecision(agent_id=fallback, reason="fallback", intent=None, frustration_hits=hits)

    async def _classify(self, text: str) -> Optional[str]:
        labels = self._labels()
        messages = [
            {
                "role": "system",
                "content": CLASSIFY_PROMPT.format(brand_name=self.config.brand_name, labels=", ".join(labels))
            },
            {"role": "user", "content": text},
        ]
        response = ChatResponse.from_raw(await self.llm_client.chat(messages, None))
        return self._parse_intent(response.content, labels)

    def _labels(self) -> List[str]:
        labels: List[str] = []
        for agent in self.config.agents:
            labels.extend(i for i in agent.intents if i not in labels)
        return labels

    def _parse_intent(self, content: str, labels: List[str]) -> Optional[str]:
        upper = content.upper()
        # longest first so SUBSCRIPTION_MODIFY is not read as a shorter label
        for label in sorted(labels, key=len, reverse=True):
            if re.search(rf"\b{re.escape(label)}\b", upper):
                return label
        for agent in self.config.agents:
            if agent.id in content.lower() and agent.intents:
                return agent.intents[0]
        return None

    def _escalate(self, reason: str) -> RoutingDecision:
        return RoutingDecision(
            agent_id=self.config.escalation_agent_id,
            escalate=True,
            reason=reason,
            intent="ESCALATION"
        )
