"""
FastAPI Main Application - Support MAS simulation and judge API
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import settings
from .context import HarnessContext
from .llm import LLMClient
from .utils.helpers import timestamp_now

logger = logging.getLogger(__name__)

simulation_router = APIRouter()
judge_router = APIRouter()


def get_context(request: Request) -> HarnessContext:
    return request.app.state.context


def _dump(model) -> dict:
    return model.model_dump(mode="json", by_alias=True)


# Simulation endpoints
@simulation_router.post("/init")
async def init_scenarios(ctx: HarnessContext = Depends(get_context)):
    """Register all built-in scenarios."""
    return {"registered": ctx.register_builtin_scenarios()}


@simulation_router.post("/run-all")
async def run_all(ctx: HarnessContext = Depends(get_context)):
    """
    Run every registered scenario against a fresh runtime.
    Per-scenario errors are reported in the results list.
    """
    results = await ctx.run_all()
    return {
        "results": [r.model_dump(mode="json", by_alias=True, exclude_none=True) for r in results],
        "total": len(results)
    }


@simulation_router.get("/dashboard")
async def dashboard(ctx: HarnessContext = Depends(get_context)):
    return _dump(ctx.engine.export_dashboard_data())


@simulation_router.get("/timeline/{scenario_id}")
async def timeline(scenario_id: str, ctx: HarnessContext = Depends(get_context)):
    found = ctx.engine.get_timeline(scenario_id)
    if found is None:
        return JSONResponse(status_code=404, content={"error": "Not found"})
    return _dump(found)


# Judge endpoints
@judge_router.post("/session")
async def start_judge_session(ctx: HarnessContext = Depends(get_context)):
    return _dump(ctx.judge_team.start_session())


@judge_router.post("/integration")
async def integration_checks(ctx: HarnessContext = Depends(get_context)):
    checks = ctx.judge_team.run_integration_checks()
    return {
        "checks": [_dump(c) for c in checks],
        "passed": sum(1 for c in checks if c.status == "pass")
    }


@judge_router.post("/consensus")
async def consensus(ctx: HarnessContext = Depends(get_context)):
    """Judge every executed scenario and reach consensus for the latest session."""
    session = ctx.judge_team.get_latest_session()
    if session is None or session.status != "active":
        return JSONResponse(status_code=400, content={"error": "No active session"})

    ctx.judge_team.judge_all_scenarios(session.id)
    return _dump(ctx.judge_team.reach_consensus(session.id))


@judge_router.get("/report")
async def report(ctx: HarnessContext = Depends(get_context)):
    return _dump(ctx.judge_team.export_report())


@judge_router.get("/gate")
async def gate(ctx: HarnessContext = Depends(get_context)):
    """CI gate: only SHIP passes."""
    verdict = ctx.judge_team.export_report().verdict
    passed = verdict is not None and verdict.recommendation == "SHIP"
    return JSONResponse(
        status_code=200 if passed else 503,
        content={
            "gate": "PASS" if passed else "FAIL",
            "recommendation": verdict.recommendation if verdict else "PENDING",
            "score": verdict.overall_score if verdict else 0
        }
    )


def create_app(
    context: Optional[HarnessContext] = None,
    llm_client: Optional[LLMClient] = None
) -> FastAPI:
    """
    Build the API application.

    Args:
        context: Harness state to serve; a fresh one is created when omitted
        llm_client: Chat client for run-all when no context is given

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description="Customer-service multi-agent runtime with self-simulation and judge gate",
        version=__version__
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.context = context or HarnessContext(settings=settings, llm_client=llm_client)

    app.include_router(simulation_router, prefix="/simulate", tags=["simulation"])
    app.include_router(judge_router, prefix="/judge", tags=["judge"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "timestamp": timestamp_now()}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=settings.LOG_LEVEL)
    uvicorn.run(app, host="0.0.0.0", port=8000)
