"""
Consensus orchestrator service.

Fans a payment request out to every registered evaluator concurrently, waits
for all of them, and reduces their decisions to one authoritative action with
a consensus score.
"""

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

from paystream.core.config import settings
from paystream.schemas.payment import (
    Decision,
    OrchestratorDecision,
    PaymentAction,
    PaymentRequest,
)

logger = logging.getLogger(__name__)


class Evaluator(Protocol):
    """Capability surface the orchestrator relies on."""

    id: str
    role: str

    async def evaluate(self, request: PaymentRequest) -> Decision: ...

    async def communicate(self, message: str) -> str: ...


@dataclass(frozen=True)
class DecisionTally:
    """Action counts and mean confidence over a set of decisions."""

    approvals: int = 0
    rejections: int = 0
    defers: int = 0
    reviews: int = 0
    average_confidence: float = 0.0

    @property
    def total(self) -> int:
        return self.approvals + self.rejections + self.defers + self.reviews

    @classmethod
    def from_decisions(cls, decisions: Iterable[Decision]) -> "DecisionTally":
        decisions = list(decisions)
        counts = Counter(decision.action for decision in decisions)
        average = sum(d.confidence for d in decisions) / len(decisions) if decisions else 0.0
        return cls(
            approvals=counts[PaymentAction.APPROVE],
            rejections=counts[PaymentAction.REJECT],
            defers=counts[PaymentAction.DEFER],
            reviews=counts[PaymentAction.REQUEST_REVIEW],
            average_confidence=average,
        )


def analyze_consensus(
    decisions: Sequence[Decision],
    approval_threshold: float,
) -> tuple[PaymentAction, float, str]:
    """
    Reduce decisions to (final action, consensus score, summary).

    Precedence: any rejection vetoes; otherwise approve when the approval rate
    reaches the threshold; otherwise defer if anyone deferred; otherwise
    request review. The result depends only on the tally, not on list order.
    """
    tally = DecisionTally.from_decisions(decisions)
    total = tally.total
    if total == 0:
        return PaymentAction.REQUEST_REVIEW, 0.0, "No agents available"

    approval_rate = tally.approvals / total
    rejection_rate = tally.rejections / total

    if tally.rejections > 0:
        final_action = PaymentAction.REJECT
        consensus_score = rejection_rate
    elif approval_rate >= approval_threshold:
        final_action = PaymentAction.APPROVE
        consensus_score = approval_rate
    else:
        final_action = PaymentAction.DEFER if tally.defers > 0 else PaymentAction.REQUEST_REVIEW
        consensus_score = 1.0 - abs(tally.approvals - tally.rejections) / total

    summary = (
        f"Agents: {tally.approvals} approve, {tally.rejections} reject, "
        f"{tally.defers} defer, {tally.reviews} review. "
        f"Avg confidence: {tally.average_confidence:.2f}"
    )
    return final_action, consensus_score, summary


class AgentOrchestrator:
    """Runs registered evaluators concurrently and reaches consensus."""

    def __init__(self, approval_threshold: float | None = None):
        """
        Initialize the orchestrator.

        Args:
            approval_threshold: Fraction of approvals needed to approve
                (defaults to settings.approval_threshold)
        """
        self.approval_threshold = (
            settings.approval_threshold if approval_threshold is None else approval_threshold
        )
        self._agents: list[Evaluator] = []

    def add_agent(self, agent: Evaluator) -> None:
        logger.info(f"Adding agent: {agent.id} ({agent.role})")
        self._agents.append(agent)

    @property
    def agents(self) -> tuple[Evaluator, ...]:
        return tuple(self._agents)

    def agent_count(self) -> int:
        return len(self._agents)

    async def process_payment(self, request: PaymentRequest) -> OrchestratorDecision:
        """
        Evaluate a payment with every registered agent and reach consensus.

        Args:
            request: Payment request shared, unmodified, by all evaluators

        Returns:
            OrchestratorDecision with decisions in registration order
        """
        logger.info(f"Processing payment {request.id} for {request.amount} CRO")

        agents = list(self._agents)
        # gather preserves argument order regardless of completion order
        decisions = await asyncio.gather(*(agent.evaluate(request) for agent in agents))

        final_action, consensus_score, summary = analyze_consensus(decisions, self.approval_threshold)

        if final_action == PaymentAction.REJECT:
            logger.warning(f"Payment {request.id} rejected by consensus")
        elif not agents:
            logger.warning(f"Payment {request.id} evaluated with no agents registered")

        return OrchestratorDecision(
            final_action=final_action,
            agent_decisions=tuple(decisions),
            consensus_score=consensus_score,
            summary=summary,
        )
