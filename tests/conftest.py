"""
Shared fixtures: fresh runtime, engine and harness per test.
"""
import pytest

from support_mas.agents.registry import build_default_mas
from support_mas.config import Settings
from support_mas.context import HarnessContext
from support_mas.llm.scripted_client import ScriptedLLMClient
from support_mas.memory.store import MemoryStore
from support_mas.runtime.session_runtime import SessionRuntime
from support_mas.simulation.engine import SimulationEngine
from support_mas.tracing.tracer import Tracer


@pytest.fixture
def settings() -> Settings:
    return Settings(LLM_PROVIDER="scripted", SLOW_RUN_MS=5000, SHIP_MIN_PASS_RATE=80, SHIP_MIN_SCORE=70)


@pytest.fixture
def tracer() -> Tracer:
    return Tracer()


@pytest.fixture
def memory() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def engine(tracer, settings) -> SimulationEngine:
    return SimulationEngine(tracer, settings=settings)


@pytest.fixture
def scripted_client() -> ScriptedLLMClient:
    return ScriptedLLMClient()


@pytest.fixture
def runtime(tracer, memory, scripted_client, settings) -> SessionRuntime:
    return SessionRuntime(
        build_default_mas("test-brand"),
        scripted_client,
        tracer=tracer,
        memory=memory,
        settings=settings
    )


@pytest.fixture
def ctx(settings) -> HarnessContext:
    return HarnessContext(settings=settings, llm_client=ScriptedLLMClient())
