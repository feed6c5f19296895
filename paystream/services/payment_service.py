"""
Payment proof generation.

Turns a parsed PaymentRequirement into a mode-appropriate PaymentProof and
records the spend in the agent's counters. Settlement is synthetic: stream
ids come from a process-local counter and transaction references are random.
"""

import logging
from decimal import Decimal
from uuid import uuid4

from paystream.core.config import settings
from paystream.core.errors import BudgetExceededError, ChallengeParseError
from paystream.services.metrics_service import AgentStats, AtomicCounter, to_micro_units
from paystream.x402.proof import PaymentProof
from paystream.x402.requirement import PaymentMode, PaymentRequirement

logger = logging.getLogger(__name__)


def new_tx_hash() -> str:
    """Synthesize an opaque, unique transaction reference."""
    return "0x" + (uuid4().hex + uuid4().hex)[:40]


class PaymentProofGenerator:
    """Produces payment proofs and updates spend counters."""

    def __init__(
        self,
        stats: AgentStats,
        daily_budget: Decimal | None = None,
        stream_id_start: int | None = None,
        default_deposit: str | None = None,
        default_rate: str | None = None,
        default_amount: str | None = None,
    ):
        """
        Initialize the generator.

        Args:
            stats: Counters of the agent this generator pays for
            daily_budget: Optional cap on total_spent; unlimited when None
            stream_id_start: First stream id handed out
            default_deposit: Deposit used when a streaming challenge has none
            default_rate: Rate used when a streaming challenge has none
            default_amount: Amount used when a per-request challenge has none
        """
        self.stats = stats
        self.daily_budget = daily_budget
        self._budget_micro = None if daily_budget is None else to_micro_units(daily_budget)
        self._next_stream_id = AtomicCounter(stream_id_start or settings.x402_stream_id_start)
        self.default_deposit = default_deposit or settings.x402_default_deposit
        self.default_rate = default_rate or settings.x402_default_rate
        self.default_amount = default_amount or settings.x402_default_amount

    def cost_of(self, requirement: PaymentRequirement) -> str:
        """Amount that paying this requirement will spend, as a decimal string."""
        if requirement.mode == PaymentMode.STREAMING:
            return requirement.min_deposit or self.default_deposit
        return requirement.amount or self.default_amount

    def _charge(self, amount: str) -> None:
        try:
            micro = to_micro_units(amount)
        except ValueError as e:
            raise ChallengeParseError(
                f"402 challenge has an invalid payment amount: {amount!r}",
                details={"amount": amount},
            ) from e

        if self._budget_micro is None:
            self.stats.record_spend(micro)
        elif not self.stats.total_spent.add_if_within(micro, self._budget_micro):
            raise BudgetExceededError(
                f"Budget exceeded: paying {amount} would exceed the budget of {self.daily_budget}",
                details={
                    "amount": amount,
                    "budget": str(self.daily_budget),
                    "spent": str(self.stats.total_spent_display()),
                },
            )

    def pay(self, requirement: PaymentRequirement) -> PaymentProof:
        """
        Pay a requirement and return the proof.

        The spend is recorded before any stream id or transaction reference is
        issued, so a refused payment leaves no proof behind.

        Raises:
            ChallengeParseError: If the amount or deposit is not a valid decimal
            BudgetExceededError: If a budget is set and the payment would exceed it
        """
        amount = self.cost_of(requirement)
        if requirement.mode == PaymentMode.STREAMING:
            rate = requirement.rate_per_second or self.default_rate
            logger.info(f"Creating payment stream to {requirement.recipient}: deposit {amount}, rate {rate}/sec")
            self._charge(amount)
            return self._open_stream(amount)

        logger.info(f"Making per-request payment to {requirement.recipient}: amount {amount}")
        self._charge(amount)
        return self._pay_per_request(amount)

    def _open_stream(self, deposit: str) -> PaymentProof:
        stream_id = self._next_stream_id.fetch_add(1)
        self.stats.record_stream_opened()
        logger.info(f"Opened stream #{stream_id}")
        return PaymentProof.streaming(stream_id, deposit)

    def _pay_per_request(self, amount: str) -> PaymentProof:
        tx_hash = new_tx_hash()
        logger.info(f"Payment tx {tx_hash[:16]}...")
        return PaymentProof.per_request(tx_hash, amount)
