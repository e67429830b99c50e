"""
Executor Agent - runs one agent turn against the LLM client and its tools
"""
import inspect
import json
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from .base_agent import BaseAgent
from ..config import settings
from ..llm.base import ChatResponse, LLMClient
from ..models.runtime import AgentDefinition, AgentReply, SessionState, ToolCall
from ..tracing.tracer import Tracer

ToolHandler = Callable[..., Union[Any, Awaitable[Any]]]


class AgentExecutor(BaseAgent):
    """
    Executes an agent turn by:
    - Building the prompt from the agent definition and session history
    - Calling the LLM client with the agent's tools
    - Running requested tools and feeding results back
    - Recording tool events in the session trace

    LLM errors are not retried and propagate to the caller.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        tracer: Tracer,
        tool_handlers: Optional[Dict[str, ToolHandler]] = None,
        max_tool_rounds: Optional[int] = None
    ):
        super().__init__(
            name="Executor",
            description="Runs agent turns via the LLM client"
        )
        self.llm_client = llm_client
        self.tracer = tracer
        self.tool_handlers = dict(tool_handlers or {})
        self.max_tool_rounds = settings.MAX_TOOL_ROUNDS if max_tool_rounds is None else max_tool_rounds

    async def execute(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """Execute an agent turn."""
        reply = await self.run(
            agent=context["agent"],
            session=context["session"],
            text=context.get("text", ""),
            history=context.get("history", [])
        )
        return {"reply": reply}

    async def run(
        self,
        agent: AgentDefinition,
        session: SessionState,
        text: str,
        history: List[Dict[str, Any]]
    ) -> AgentReply:
        """
        Run one agent turn.

        Args:
            agent: Agent answering the message
            session: Session the turn belongs to
            text: Customer message
            history: Prior user/assistant messages of the session

        Returns:
            The agent's reply and the tools it called
        """
        messages: List[Dict[str, Any]] = [{"role": "system", "content": agent.system_prompt}]
        messages.extend(history)
        messages.append({"role": "user", "content": text})

        tools_called: List[str] = []
        rounds = 0

        while True:
            response = ChatResponse.from_raw(await self.llm_client.chat(messages, agent.tools))

            if not response.tool_calls or rounds >= self.max_tool_rounds:
                if response.tool_calls:
                    self.log_warning(f"{agent.id} exceeded {self.max_tool_rounds} tool rounds")
                return AgentReply(content=response.content, tools_called=tools_called)

            rounds += 1
            messages.append({
                "role": "assistant",
                "content": response.content,
                "tool_calls": [call.model_dump() for call in response.tool_calls]
            })

            for call in response.tool_calls:
                result = await self._invoke_tool(call)
                tools_called.append(call.name)
                self.tracer.record(
                    session.id,
                    "tool",
                    agent=agent.id,
                    tool=call.name,
                    arguments=call.arguments,
                    ok="error" not in result
                )
                messages.append({
                    "role": "tool",
                    "tool_call_id": call.id,
                    "name": call.name,
                    "content": json.dumps(result, default=str)
                })

    async def _invoke_tool(self, call: ToolCall) -> Dict[str, Any]:
        handler = self.tool_handlers.get(call.name)
        if handler is None:
            self.log_warning(f"No handler registered for tool {call.name}")
            return {"error": f"Tool {call.name} is not available"}

        try:
            result = handler(**call.arguments)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            # tool failures go back to the model as data, the turn continues
            self.log_error(f"Tool {call.name} failed: {e}")
            return {"error": str(e)}

        return {"result": result}
