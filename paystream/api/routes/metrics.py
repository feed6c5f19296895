"""
Prometheus metrics API routes.

This module provides a Prometheus-compatible metrics endpoint exposing the
payment agent's counters.
"""

from fastapi import APIRouter, Depends, Response
from fastapi.responses import PlainTextResponse

from paystream.api.dependencies import get_payment_agent
from paystream.services.x402_service import X402PaymentAgent

router = APIRouter()


@router.get(
    "/metrics",
    response_class=PlainTextResponse,
    summary="Prometheus metrics endpoint",
    description="Exposes payment agent counters in Prometheus text format.",
)
async def get_metrics(agent: X402PaymentAgent = Depends(get_payment_agent)) -> Response:
    return PlainTextResponse(agent.stats.get_prometheus_metrics(agent_id=agent.id))
