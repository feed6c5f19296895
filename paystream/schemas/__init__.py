"""Pydantic schemas for payment requests and agent decisions."""

from paystream.schemas.payment import (
    Decision,
    OrchestratorDecision,
    PaymentAction,
    PaymentRequest,
    Urgency,
)

__all__ = [
    "Decision",
    "OrchestratorDecision",
    "PaymentAction",
    "PaymentRequest",
    "Urgency",
]
