"""Request-scoped access to the application's long-lived services."""

from fastapi import Request

from paystream.services.orchestrator_service import AgentOrchestrator
from paystream.services.x402_service import X402PaymentAgent


def get_orchestrator(request: Request) -> AgentOrchestrator:
    return request.app.state.orchestrator


def get_payment_agent(request: Request) -> X402PaymentAgent:
    return request.app.state.payment_agent
