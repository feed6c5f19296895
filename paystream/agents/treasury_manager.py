"""Treasury and liquidity evaluator."""

from decimal import Decimal

from paystream.agents.base_agent import BaseEvaluator
from paystream.agents.decision_parser import DecisionParser
from paystream.core.config import settings
from paystream.schemas.payment import Decision, PaymentAction, PaymentRequest
from paystream.services.oracle_service import JudgmentOracle


class TreasuryManagerAgent(BaseEvaluator):
    """
    Evaluates whether the treasury can fund a payment.

    A request larger than the available balance is rejected with full
    confidence before the oracle is consulted.
    """

    role = "Treasury Manager"
    id_prefix = "treasury"
    error_label = "Treasury error"

    def __init__(
        self,
        oracle: JudgmentOracle,
        available_balance: float | Decimal | None = None,
        daily_limit: float | Decimal | None = None,
        spent_today: float | Decimal | None = None,
    ):
        super().__init__(oracle)
        self.available_balance = Decimal(str(
            settings.treasury_balance if available_balance is None else available_balance
        ))
        self.daily_limit = Decimal(str(
            settings.treasury_daily_limit if daily_limit is None else daily_limit
        ))
        self.spent_today = Decimal(str(
            settings.treasury_spent_today if spent_today is None else spent_today
        ))
        self._parser = DecisionParser(label="Treasury", flag_field="can_fund")

    @property
    def parser(self) -> DecisionParser:
        return self._parser

    @property
    def remaining_daily(self) -> Decimal:
        return self.daily_limit - self.spent_today

    def pre_check(self, request: PaymentRequest) -> Decision | None:
        if request.amount > self.available_balance:
            return self._decision(
                request, PaymentAction.REJECT, "Insufficient treasury balance", 1.0
            )
        return None

    def build_prompt(self, request: PaymentRequest) -> str:
        return f"""You are a Treasury Manager AI Agent for a payment streaming platform.
Evaluate this payment from a treasury/liquidity perspective:

Payment Details:
- Amount: {request.amount} CRO
- To: {request.recipient}
- Description: {request.description}
- Urgency: {request.urgency.label}

Treasury Status:
- Available Balance: {self.available_balance} CRO
- Daily Limit: {self.daily_limit} CRO
- Spent Today: {self.spent_today} CRO
- Remaining Daily: {self.remaining_daily} CRO

Respond in this exact JSON format:
{{"can_fund": true|false, "action": "approve|reject|defer|review", "reason": "explanation", "suggested_timing": "immediate|scheduled|batched", "confidence": 0.0-1.0}}"""

    def communication_prompt(self, message: str) -> str:
        return (
            f"As a {self.role} Agent with {self.available_balance} CRO available, "
            f"respond to: {message}"
        )
