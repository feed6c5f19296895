"""
Base evaluator for payment consensus agents.

Every policy role (risk, compliance, treasury, fraud) shares this shape:
an optional deterministic pre-check, a role-specific prompt, one oracle call,
and a role-specific DecisionParser. The orchestrator only depends on this
interface, never on concrete roles.
"""

import logging
from abc import ABC, abstractmethod
from uuid import uuid4

from paystream.agents.decision_parser import DecisionParser
from paystream.schemas.payment import Decision, PaymentAction, PaymentRequest
from paystream.services.oracle_service import JudgmentOracle

logger = logging.getLogger(__name__)


class BaseEvaluator(ABC):
    """Abstract policy evaluator."""

    #: Human-readable role name, e.g. "Risk Assessor"
    role: str = "Evaluator"
    #: Prefix for generated evaluator ids
    id_prefix: str = "evaluator"
    #: Prefix for the reason recorded when the oracle fails
    error_label: str = "Error"

    def __init__(self, oracle: JudgmentOracle):
        self.oracle = oracle
        self.id = f"{self.id_prefix}-{uuid4().hex[:8]}"

    @property
    @abstractmethod
    def parser(self) -> DecisionParser:
        """Parser configured with this role's thresholds."""

    @abstractmethod
    def build_prompt(self, request: PaymentRequest) -> str:
        """Build the role-specific oracle prompt for a request."""

    def pre_check(self, request: PaymentRequest) -> Decision | None:
        """Return a decision without consulting the oracle, or None to continue."""
        return None

    async def evaluate(self, request: PaymentRequest) -> Decision:
        """
        Produce this evaluator's decision for a payment request.

        Oracle failures never propagate: they become a RequestReview decision
        with zero confidence and a reason naming the failure.
        """
        decision = self.pre_check(request)
        if decision is not None:
            logger.info(f"{self.id}: pre-check decided {decision.action.value} for {request.id}")
            return decision

        try:
            text = await self.oracle.generate(self.build_prompt(request))
        except Exception as e:
            logger.warning(f"{self.id}: oracle failed for {request.id}: {e}")
            return self._decision(request, PaymentAction.REQUEST_REVIEW, f"{self.error_label}: {e}", 0.0)

        parsed = self.parser.parse(text)
        return self._decision(request, parsed.action, parsed.reason, parsed.confidence)

    async def communicate(self, message: str) -> str:
        """Ask the oracle a free-text question in this role's voice."""
        try:
            return await self.oracle.generate(self.communication_prompt(message))
        except Exception as e:
            logger.warning(f"{self.id}: oracle failed during communicate: {e}")
            return str(e)

    def communication_prompt(self, message: str) -> str:
        return f"As a {self.role} Agent, respond to: {message}"

    def _decision(
        self,
        request: PaymentRequest,
        action: PaymentAction,
        reason: str,
        confidence: float,
    ) -> Decision:
        return Decision.for_request(request, self.id, action, reason, confidence)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r}>"
