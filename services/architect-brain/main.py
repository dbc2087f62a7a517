"""FastAPI architect brain service: turns a free-text idea into an analysis and plan.

Chains the analysis agent and the plan agent, parsing whatever text they
return into a DomainResult. Agent failures yield static recovery content.
Privacy: submitted ideas are never logged, only their length.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel

from agent_client import AgentClient
from config import settings
from models import DomainResult
from pipeline import OrchestrationPipeline
from reveal import TokenReveal

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

_agent_client: AgentClient | None = None
_pipeline: OrchestrationPipeline | None = None


class AnalyzeRequest(BaseModel):
    idea: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the agent client and pipeline on startup if an API key is configured."""
    global _agent_client, _pipeline

    if not settings.AGENT_API_KEY:
        logger.info("Agent API key not configured (AGENT_API_KEY is empty), idea analysis disabled")
    else:
        logger.info("Using agent endpoint %s", settings.AGENT_API_URL)
        _agent_client = AgentClient()
        _pipeline = OrchestrationPipeline(_agent_client)

    yield

    if _agent_client is not None:
        await _agent_client.aclose()


app = FastAPI(title="Architect Brain", version="1.0.0", lifespan=lifespan)


def _reject(request: AnalyzeRequest) -> JSONResponse | None:
    if _pipeline is None:
        return JSONResponse(
            status_code=503,
            content={"detail": "Idea analysis is not available - no agent API key configured"},
        )
    if not request.idea.strip():
        return JSONResponse(status_code=400, content={"detail": "Empty idea submitted"})
    return None


@app.post("/api/v1/analyze", response_model=DomainResult)
async def analyze(request: AnalyzeRequest):
    """Run the analysis and plan agents over a submitted idea."""
    rejection = _reject(request)
    if rejection is not None:
        return rejection

    logger.info("Analyzing idea: %d chars", len(request.idea))
    return await _pipeline.run(request.idea)


@app.post("/api/v1/analyze/stream")
async def analyze_stream(request: AnalyzeRequest):
    """Like /analyze, but reveals a plain-text summary token by token."""
    rejection = _reject(request)
    if rejection is not None:
        return rejection

    logger.info("Analyzing idea (streamed): %d chars", len(request.idea))
    result = await _pipeline.run(request.idea)
    reveal = TokenReveal(result.summary_text())

    async def body():
        try:
            async for token in reveal:
                yield token
        finally:
            # client gone or stream finished
            reveal.cancel()

    return StreamingResponse(body(), media_type="text/plain")


@app.get("/health")
async def health():
    """Return service status and agent configuration."""
    return {
        "status": "healthy",
        "agents_configured": _pipeline is not None,
        "analysis_agent_id": settings.ANALYSIS_AGENT_ID,
        "plan_agent_id": settings.PLAN_AGENT_ID,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
