"""
Harness Context - one owned set of tracer, memory, engine and judge team

The HTTP app, the CLI and each test build their own context instead of
sharing module-level singletons.
"""
import asyncio
import logging
from typing import List, Optional

from .agents.registry import build_default_mas
from .config import Settings, settings as default_settings
from .judge.team import JudgeTeam
from .llm import LLMClient, create_llm_client
from .memory.store import MemoryStore
from .models.runtime import CustomerContext
from .models.verdict import RunResult
from .runtime.session_runtime import SessionRuntime, runtime_executor
from .simulation.engine import SimulationEngine
from .simulation.scenarios import get_all_scenarios
from .tracing.tracer import Tracer

logger = logging.getLogger(__name__)


class HarnessContext:
    """Owns the state of one simulation-and-judge loop."""

    def __init__(self, settings: Optional[Settings] = None, llm_client: Optional[LLMClient] = None):
        self.settings = settings or default_settings
        self.llm_client = llm_client
        self.tracer = Tracer()
        self.memory = MemoryStore()
        self.engine = SimulationEngine(self.tracer, settings=self.settings)
        self.judge_team = JudgeTeam(self.engine, settings=self.settings)
        self._run_lock = asyncio.Lock()

    def register_builtin_scenarios(self) -> int:
        """Register fresh copies of every built-in scenario; returns how many."""
        scenarios = get_all_scenarios()
        for scenario in scenarios:
            self.engine.register_scenario(scenario)
        return len(scenarios)

    def build_runtime(self, llm_client: Optional[LLMClient] = None) -> SessionRuntime:
        """A fresh runtime over this context's tracer and memory."""
        client = llm_client or self.llm_client or create_llm_client(self.settings)
        return SessionRuntime(
            build_default_mas(self.settings.BRAND_NAME),
            client,
            tracer=self.tracer,
            memory=self.memory,
            settings=self.settings
        )

    def ci_customer(self) -> CustomerContext:
        return CustomerContext(
            customer_email=self.settings.CI_CUSTOMER_EMAIL,
            customer_id=self.settings.CI_CUSTOMER_ID,
            first_name=self.settings.CI_FIRST_NAME,
            last_name=self.settings.CI_LAST_NAME
        )

    async def run_all(self, llm_client: Optional[LLMClient] = None) -> List[RunResult]:
        """
        Clear memory, build a fresh runtime and run every registered scenario.
        Concurrent callers queue up; batches never interleave on the engine.
        """
        async with self._run_lock:
            self.memory.clear()
            runtime = self.build_runtime(llm_client)
            results = await self.engine.run_all(runtime_executor(runtime, self.ci_customer()))
        logger.info(f"Ran {len(results)} scenarios")
        return results
