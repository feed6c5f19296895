"""
PayStream - Autonomous Payment Agents

Main FastAPI application entry point. Serves the consensus and x402 APIs and
a set of demo resources protected by the x402 paywall.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Mapping

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from paystream.agents import create_default_agents
from paystream.api import router as api_router
from paystream.api.routes import demo
from paystream.core.config import settings
from paystream.core.errors import (
    PaystreamError,
    general_exception_handler,
    http_exception_handler,
    paystream_exception_handler,
)
from paystream.middleware.x402_paywall import PricedRoute, create_x402_paywall
from paystream.services.oracle_service import JudgmentOracle
from paystream.services.orchestrator_service import AgentOrchestrator
from paystream.services.x402_service import X402PaymentAgent

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format=settings.log_format,
)
logger = logging.getLogger(__name__)


def build_orchestrator(oracle: JudgmentOracle | None = None) -> AgentOrchestrator:
    """Create an orchestrator with the default four-agent panel."""
    orchestrator = AgentOrchestrator()
    for agent in create_default_agents(oracle or JudgmentOracle()):
        orchestrator.add_agent(agent)
    return orchestrator


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler for startup and shutdown events.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"{app.state.orchestrator.agent_count()} agents initialized and ready")

    yield

    logger.info("Shutting down...")
    await app.state.payment_agent.aclose()
    logger.info("All connections closed")


def create_app(
    orchestrator: AgentOrchestrator | None = None,
    payment_agent: X402PaymentAgent | None = None,
    priced_routes: Mapping[str, PricedRoute] | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        orchestrator: Consensus orchestrator (default panel when omitted)
        payment_agent: x402 payment agent (default agent when omitted)
        priced_routes: Paywall pricing (demo pricing when omitted)

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=settings.app_name,
        description="""
## Autonomous Payment Agents

- **Consensus**: risk, compliance, treasury and fraud agents evaluate a payment
  concurrently; any rejection vetoes, otherwise a configurable approval
  threshold decides.
- **x402 Payments**: an agent that answers HTTP 402 challenges by opening a
  payment stream or paying per request, then retries once with proof.
        """,
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.orchestrator = orchestrator or build_orchestrator()
    app.state.payment_agent = payment_agent or X402PaymentAgent()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.middleware("http")(create_x402_paywall(priced_routes))

    app.add_exception_handler(PaystreamError, paystream_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
        response_description="Application health status",
    )
    async def health_check() -> dict[str, Any]:
        """Check application health status."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.environment,
            "agents": app.state.orchestrator.agent_count(),
        }

    app.include_router(api_router, prefix="/api/v1")
    app.include_router(demo.router, prefix="/api", tags=["Demo"])

    return app


app = create_app()
