"""
x402 payment agent API routes.

This module lets callers fetch a resource through the payment agent, which
pays any 402 challenge on the way, and inspect the agent's counters.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from paystream.api.dependencies import get_payment_agent
from paystream.services.x402_service import FetchResult, X402PaymentAgent

router = APIRouter()
logger = logging.getLogger(__name__)


class FetchRequest(BaseModel):
    """Request body for a paid fetch."""

    url: str = Field(..., description="URL of the resource to fetch")
    method: str = Field(default="GET", description="HTTP method")

    model_config = {
        "json_schema_extra": {
            "examples": [{"url": "http://localhost:8000/api/weather", "method": "GET"}]
        }
    }


@router.post(
    "/fetch",
    response_model=FetchResult,
    summary="Fetch a resource, paying x402 challenges",
)
async def fetch_resource(
    body: FetchRequest,
    strict: bool = Query(False, description="Answer 502 instead of a failed result"),
    agent: X402PaymentAgent = Depends(get_payment_agent),
) -> FetchResult:
    result = await agent.fetch(body.url, method=body.method.upper())
    if strict:
        result.raise_for_error()
    return result


@router.get(
    "/stats",
    summary="Payment agent statistics",
)
async def get_stats(agent: X402PaymentAgent = Depends(get_payment_agent)) -> dict[str, Any]:
    return {"agent_id": agent.id, **agent.stats.snapshot()}
