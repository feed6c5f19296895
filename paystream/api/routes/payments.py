"""
Payment consensus API routes.

This module provides endpoints for evaluating a payment request with the
registered agent panel and for listing the panel.
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from paystream.api.dependencies import get_orchestrator
from paystream.schemas.payment import OrchestratorDecision, PaymentRequest
from paystream.services.orchestrator_service import AgentOrchestrator

router = APIRouter()
logger = logging.getLogger(__name__)


class AgentInfo(BaseModel):
    """A registered evaluator."""

    id: str
    role: str


class AgentListResponse(BaseModel):
    """Registered evaluators in registration order."""

    agents: list[AgentInfo]
    approval_threshold: float


@router.post(
    "/evaluate",
    response_model=OrchestratorDecision,
    summary="Evaluate a payment request",
    description="Run every registered agent against the request and return the consensus decision.",
)
async def evaluate_payment(
    payment: PaymentRequest,
    orchestrator: AgentOrchestrator = Depends(get_orchestrator),
) -> OrchestratorDecision:
    decision = await orchestrator.process_payment(payment)
    logger.info(
        f"Payment {payment.id}: {decision.final_action.value} "
        f"(consensus {decision.consensus_score:.2f})"
    )
    return decision


@router.get(
    "/agents",
    response_model=AgentListResponse,
    summary="List registered agents",
)
async def list_agents(
    orchestrator: AgentOrchestrator = Depends(get_orchestrator),
) -> AgentListResponse:
    return AgentListResponse(
        agents=[AgentInfo(id=agent.id, role=agent.role) for agent in orchestrator.agents],
        approval_threshold=orchestrator.approval_threshold,
    )
