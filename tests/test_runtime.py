"""Tests for the session runtime and the agent executor."""
import pytest

from support_mas.agents.registry import build_default_mas
from support_mas.errors import InvalidCustomerContext, SessionNotFound
from support_mas.memory.store import MemoryStore
from support_mas.runtime.session_runtime import HANDOFF_MESSAGE, SessionRuntime, runtime_executor
from support_mas.tracing.tracer import Tracer

from tests.helpers import CUSTOMER, FailingLLMClient, FakeLLMClient


def build_runtime(client, tool_handlers=None, tracer=None, memory=None):
    return SessionRuntime(
        build_default_mas("test-brand"),
        client,
        tracer=tracer or Tracer(),
        memory=memory or MemoryStore(),
        tool_handlers=tool_handlers
    )


class TestSessionLifecycle:

    def test_start_session_accepts_camel_case_context(self, runtime):
        session_id = runtime.start_session(CUSTOMER)

        session = runtime.get_session(session_id)
        assert session_id == "sess_1"
        assert session.customer.customer_id == "cust_test"
        assert session.status == "active"

    def test_session_ids_are_sequential(self, runtime):
        first = runtime.start_session(CUSTOMER)
        second = runtime.start_session(CUSTOMER)

        assert (first, second) == ("sess_1", "sess_2")

    def test_missing_email_is_rejected(self, runtime):
        with pytest.raises(InvalidCustomerContext):
            runtime.start_session({"shopifyCustomerId": "cust_1"})

    def test_blank_customer_id_is_rejected(self, runtime):
        with pytest.raises(InvalidCustomerContext):
            runtime.start_session({"customerEmail": "a@b.com", "customerId": "   "})

    @pytest.mark.asyncio
    async def test_unknown_session_raises(self, runtime):
        with pytest.raises(SessionNotFound):
            await runtime.handle_message("sess_404", "hello")

    def test_end_session_drops_state_and_memory(self, runtime, memory):
        session_id = runtime.start_session(CUSTOMER)
        runtime.end_session(session_id)

        assert not runtime.has_session(session_id)
        assert session_id not in memory


class TestHandleMessage:

    @pytest.mark.asyncio
    async def test_order_question_gets_reply_without_escalation(self, runtime, tracer, memory):
        session_id = runtime.start_session(CUSTOMER)

        result = await runtime.handle_message(session_id, "Where is my order?")

        assert result.message == "I can help with your order status."
        assert result.escalated is False
        assert [e.type for e in tracer.get_trace(session_id).timeline] == ["message", "routing", "decision"]
        assert len(memory.get(session_id, "history")) == 2
        assert memory.get(session_id, "turn_count") == 1

    @pytest.mark.asyncio
    async def test_human_request_escalates(self, runtime, tracer):
        session_id = runtime.start_session(CUSTOMER)

        result = await runtime.handle_message(session_id, "I want to speak to a human representative")

        assert result.escalated is True
        assert result.agent == "escalation-agent"
        assert "escalat" in result.message.lower()
        assert runtime.get_session(session_id).status == "escalated"
        assert tracer.get_trace(session_id).timeline[-1].type == "escalation"

    @pytest.mark.asyncio
    async def test_escalated_session_gets_handoff_without_llm_call(self, runtime, scripted_client):
        session_id = runtime.start_session(CUSTOMER)
        await runtime.handle_message(session_id, "Get me a manager")
        calls_before = len(scripted_client.calls)

        result = await runtime.handle_message(session_id, "Hello?")

        assert result.escalated is True
        assert result.message == HANDOFF_MESSAGE
        assert len(scripted_client.calls) == calls_before

    @pytest.mark.asyncio
    async def test_reply_mentioning_escalation_marks_turn_escalated(self):
        client = FakeLLMClient([
            {"content": "GENERAL"},
            {"content": "I will escalate this to a colleague."},
        ])
        runtime = build_runtime(client)
        session_id = runtime.start_session(CUSTOMER)

        result = await runtime.handle_message(session_id, "Something odd happened")

        assert result.escalated is True
        assert result.agent == "general-agent"

    @pytest.mark.asyncio
    async def test_history_is_sent_on_later_turns(self):
        client = FakeLLMClient([
            {"content": "ORDER_STATUS"},
            {"content": "Which order?"},
            {"content": "ORDER_STATUS"},
            {"content": "Found it."},
        ])
        runtime = build_runtime(client)
        session_id = runtime.start_session(CUSTOMER)

        await runtime.handle_message(session_id, "Where is my parcel?")
        await runtime.handle_message(session_id, "#1234567")

        agent_messages = client.calls[-1]["messages"]
        assert [m["role"] for m in agent_messages] == ["system", "user", "assistant", "user"]
        assert agent_messages[1]["content"] == "Where is my parcel?"
        assert runtime.get_session(session_id).agent_history == ["order-agent", "order-agent"]

    @pytest.mark.asyncio
    async def test_llm_errors_propagate(self):
        runtime = build_runtime(FailingLLMClient())
        session_id = runtime.start_session(CUSTOMER)

        with pytest.raises(RuntimeError, match="LLM unavailable"):
            await runtime.handle_message(session_id, "Where is my order?")


class TestToolCalls:

    @pytest.mark.asyncio
    async def test_tool_result_is_fed_back_and_traced(self):
        seen = {}

        async def get_order(order_number):
            seen["order_number"] = order_number
            return {"status": "shipped"}

        client = FakeLLMClient([
            {"content": "ORDER_STATUS"},
            {"content": "", "tool_calls": [{"id": "c1", "name": "get_order", "arguments": {"order_number": "#1"}}]},
            {"content": "Your order status is shipped."},
        ])
        tracer = Tracer()
        runtime = build_runtime(client, tool_handlers={"get_order": get_order}, tracer=tracer)
        session_id = runtime.start_session(CUSTOMER)

        result = await runtime.handle_message(session_id, "Where is order #1?")

        assert result.message == "Your order status is shipped."
        assert seen == {"order_number": "#1"}
        tool_events = tracer.get_trace(session_id).events_of("tool")
        assert len(tool_events) == 1
        assert tool_events[0].data["tool"] == "get_order"
        assert tool_events[0].data["ok"] is True
        tool_message = client.calls[-1]["messages"][-1]
        assert tool_message["role"] == "tool"
        assert "shipped" in tool_message["content"]

    @pytest.mark.asyncio
    async def test_missing_handler_reports_unavailable_tool(self):
        client = FakeLLMClient([
            {"content": "REFUND_REQUEST"},
            {"content": "", "tool_calls": [{"id": "c1", "name": "create_refund", "arguments": {}}]},
            {"content": "I could not process the refund right now."},
        ])
        tracer = Tracer()
        runtime = build_runtime(client, tracer=tracer)
        session_id = runtime.start_session(CUSTOMER)

        result = await runtime.handle_message(session_id, "Refund please")

        assert result.message.startswith("I could not")
        assert tracer.get_trace(session_id).events_of("tool")[0].data["ok"] is False

    @pytest.mark.asyncio
    async def test_tool_rounds_are_bounded(self):
        loop_call = {"content": "", "tool_calls": [{"id": "c", "name": "get_order", "arguments": {}}]}
        client = FakeLLMClient([{"content": "ORDER_STATUS"}] + [dict(loop_call) for _ in range(10)])
        runtime = SessionRuntime(
            build_default_mas("test-brand"),
            client,
            tool_handlers={"get_order": lambda: {"status": "pending"}},
        )
        runtime.executor.max_tool_rounds = 2
        session_id = runtime.start_session(CUSTOMER)

        await runtime.handle_message(session_id, "order?")

        # one classification call, then the initial call plus two tool rounds
        assert len(client.calls) == 4


class TestRuntimeExecutor:

    @pytest.mark.asyncio
    async def test_reuses_runtime_session_for_simulation_session(self, runtime):
        executor = runtime_executor(runtime, CUSTOMER)

        await executor("sim_TEST_1", "Where is my order?")
        result = await executor("sim_TEST_1", "Thanks")

        assert runtime.get_session("sim_TEST_1").turn_count == 2
        assert result.escalated is False


class TestHandoffTurns:

    @pytest.mark.asyncio
    async def test_handoff_turn_is_remembered(self, runtime, memory):
        session_id = runtime.start_session(CUSTOMER)
        await runtime.handle_message(session_id, "Get me a manager")

        result = await runtime.handle_message(session_id, "Hello?")

        session = runtime.get_session(session_id)
        assert result.agent == "escalation-agent"
        assert session.turn_count == 2
        assert session.agent_history == ["escalation-agent", "escalation-agent"]
        history = memory.get(session_id, "history")
        assert len(history) == 4
        assert history[-2:] == [
            {"role": "user", "content": "Hello?"},
            {"role": "assistant", "content": HANDOFF_MESSAGE},
        ]
        assert memory.get(session_id, "turn_count") == 2
