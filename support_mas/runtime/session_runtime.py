"""
Session Runtime - session lifecycle and per-message dispatch
"""
import itertools
import logging
import re
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from pydantic import ValidationError

from ..agents.executor_agent import AgentExecutor, ToolHandler
from ..agents.router_agent import RouterAgent
from ..config import Settings, settings as default_settings
from ..errors import InvalidCustomerContext, SessionNotFound
from ..llm.base import LLMClient
from ..memory.store import MemoryStore
from ..models.runtime import CustomerContext, MASConfig, SessionState, TurnResult
from ..tracing.tracer import Tracer
from ..utils.helpers import timestamp_now, truncate_text

logger = logging.getLogger(__name__)

ESCALATION_MARKER = re.compile(r"escalat", re.I)

HANDOFF_MESSAGE = (
    "Your conversation has been escalated to our support team. "
    "A specialist will reply here shortly."
)


class SessionRuntime:
    """
    Owns live sessions. For each message:
    route -> run agent -> detect escalation -> trace + memory -> reply.
    """

    def __init__(
        self,
        config: MASConfig,
        llm_client: LLMClient,
        tracer: Optional[Tracer] = None,
        memory: Optional[MemoryStore] = None,
        tool_handlers: Optional[Dict[str, ToolHandler]] = None,
        settings: Optional[Settings] = None
    ):
        settings = settings or default_settings
        self.config = config
        self.llm_client = llm_client
        self.tracer = tracer or Tracer()
        self.memory = memory or MemoryStore()
        self.router = RouterAgent(
            config,
            llm_client,
            frustration_threshold=settings.FRUSTRATION_ESCALATION_THRESHOLD
        )
        self.executor = AgentExecutor(
            llm_client,
            self.tracer,
            tool_handlers=tool_handlers,
            max_tool_rounds=settings.MAX_TOOL_ROUNDS
        )
        self._sessions: Dict[str, SessionState] = {}
        self._sequence = itertools.count(1)

    def start_session(
        self,
        customer_context: Union[CustomerContext, Mapping[str, Any]],
        session_id: Optional[str] = None
    ) -> str:
        """
        Open a session for a customer.

        Args:
            customer_context: Customer identity; email and customer id are required
            session_id: Use this id instead of allocating one

        Returns:
            The session id

        Raises:
            InvalidCustomerContext: if required identity fields are missing
        """
        if not isinstance(customer_context, CustomerContext):
            try:
                customer_context = CustomerContext.model_validate(dict(customer_context))
            except ValidationError as e:
                raise InvalidCustomerContext(f"Invalid customer context: {e}") from e

        session_id = session_id or f"sess_{next(self._sequence)}"
        self._sessions[session_id] = SessionState(
            id=session_id,
            customer=customer_context,
            created_at=timestamp_now()
        )
        self.tracer.init_session(session_id)
        self.memory.set(session_id, "customer", customer_context.model_dump())
        self.memory.set(session_id, "history", [])

        logger.info(f"Session {session_id} started for {customer_context.customer_email}")
        return session_id

    def get_session(self, session_id: str) -> SessionState:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def has_session(self, session_id: str) -> bool:
        return session_id in self._sessions

    def end_session(self, session_id: str):
        self.get_session(session_id)
        del self._sessions[session_id]
        self.memory.delete_session(session_id)
        logger.info(f"Session {session_id} ended")

    async def handle_message(self, session_id: str, text: str) -> TurnResult:
        """
        Handle one customer message.

        Args:
            session_id: Session started with start_session
            text: Raw customer message

        Returns:
            TurnResult with the reply and whether this turn escalated

        Raises:
            SessionNotFound: if the session id is unknown
        """
        session = self.get_session(session_id)
        self.tracer.record(session_id, "message", text=text)

        if session.status == "escalated":
            agent_id = self.config.escalation_agent_id
            self.tracer.record(session_id, "escalation", agent=agent_id, reply=HANDOFF_MESSAGE, handed_off=True)
            self._remember_turn(session, agent_id, text, HANDOFF_MESSAGE)
            return TurnResult(message=HANDOFF_MESSAGE, escalated=True, agent=agent_id)

        decision = await self.router.route(session, text)
        session.frustration_score += decision.frustration_hits
        self.tracer.record(
            session_id,
            "routing",
            agent=decision.agent_id,
            escalate=decision.escalate,
            reason=decision.reason,
            intent=decision.intent
        )

        agent = self.config.get_agent(decision.agent_id) or self.config.get_agent(self.config.default_agent_id)
        history = self.memory.get(session_id, "history", [])
        reply = await self.executor.run(agent, session, text, history)

        escalated = decision.escalate or bool(ESCALATION_MARKER.search(reply.content))
        self.tracer.record(
            session_id,
            "escalation" if escalated else "decision",
            agent=agent.id,
            reply=reply.content,
            tools=reply.tools_called
        )

        if agent.id != self.config.escalation_agent_id:
            session.current_agent = agent.id
        if escalated:
            session.status = "escalated"
            logger.info(f"Session {session_id} escalated ({decision.reason or 'agent reply'})")

        self._remember_turn(session, agent.id, text, reply.content)

        logger.debug(f"Session {session_id} [{agent.id}] -> {truncate_text(reply.content, 80)}")
        return TurnResult(message=reply.content, escalated=escalated, agent=agent.id)

    def _remember_turn(self, session: SessionState, agent_id: str, text: str, reply: str):
        """Count the turn and append it to the session history in memory."""
        session.turn_count += 1
        session.agent_history.append(agent_id)

        self.memory.append(session.id, "history", {"role": "user", "content": text})
        self.memory.append(session.id, "history", {"role": "assistant", "content": reply})
        self.memory.set(session.id, "last_agent", agent_id)
        self.memory.set(session.id, "turn_count", session.turn_count)


def runtime_executor(
    runtime: SessionRuntime,
    customer: Union[CustomerContext, Mapping[str, Any]]
) -> Callable[[str, str], Awaitable[TurnResult]]:
    """
    Adapt a runtime to the simulation executor contract.
    The first message for a simulation session opens a runtime session under
    the same id, so the runtime's trace events land in the simulation trace.
    """

    async def executor(sim_session_id: str, message: str) -> TurnResult:
        if not runtime.has_session(sim_session_id):
            runtime.start_session(customer, session_id=sim_session_id)
        return await runtime.handle_message(sim_session_id, message)

    return executor
