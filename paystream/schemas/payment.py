"""
Payment request and decision schemas.

All models here are frozen: a request flows unmodified through every
evaluator and a decision is never changed after it is produced.
"""
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum, IntEnum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Urgency(IntEnum):
    """Ordered urgency of a payment request."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()


class PaymentAction(str, Enum):
    """Action recommended by an evaluator or decided by consensus."""

    APPROVE = "approve"
    REJECT = "reject"
    DEFER = "defer"
    REQUEST_REVIEW = "review"

    @classmethod
    def from_keyword(cls, keyword: object) -> "PaymentAction | None":
        """Map an oracle action keyword to an action, or None if unrecognized."""
        if not isinstance(keyword, str):
            return None
        try:
            return cls(keyword.strip().lower())
        except ValueError:
            return None


class PaymentRequest(BaseModel):
    """A request to move money, evaluated by every registered agent."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Unique request identifier")
    sender: str = Field(..., description="Sender identifier")
    recipient: str = Field(..., description="Recipient identifier")
    amount: Decimal = Field(..., ge=0, description="Requested amount")
    description: str = Field("", description="Free-text purpose of the payment")
    urgency: Urgency = Field(Urgency.MEDIUM, description="Urgency of the payment")

    @field_validator("urgency", mode="before")
    @classmethod
    def parse_urgency(cls, v: object) -> object:
        """Accept urgency names such as "high" as well as their ordinal."""
        if isinstance(v, str) and not v.strip().isdigit():
            try:
                return Urgency[v.strip().upper()]
            except KeyError:
                raise ValueError(f"unknown urgency: {v}") from None
        return v


class Decision(BaseModel):
    """One evaluator's recommendation for one payment request."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    agent_id: str = Field(..., description="Identifier of the evaluator")
    action: PaymentAction
    amount: Decimal = Field(..., description="Amount copied from the request")
    recipient: str = Field(..., description="Recipient copied from the request")
    reason: str = Field(..., description="Human-readable reason")
    confidence: float = Field(..., ge=0.0, le=1.0)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def for_request(
        cls,
        request: PaymentRequest,
        agent_id: str,
        action: PaymentAction,
        reason: str,
        confidence: float,
    ) -> "Decision":
        """Build a decision that copies amount and recipient from the request."""
        return cls(
            agent_id=agent_id,
            action=action,
            amount=request.amount,
            recipient=request.recipient,
            reason=reason,
            confidence=confidence,
        )


class OrchestratorDecision(BaseModel):
    """Consensus outcome over all evaluator decisions for one request."""

    model_config = ConfigDict(frozen=True)

    final_action: PaymentAction
    agent_decisions: tuple[Decision, ...] = Field(
        default=(), description="Decisions in evaluator registration order"
    )
    consensus_score: float = Field(..., ge=0.0, le=1.0)
    summary: str
