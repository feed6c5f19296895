"""Risk assessment evaluator."""

from paystream.agents.base_agent import BaseEvaluator
from paystream.agents.decision_parser import DecisionParser
from paystream.core.config import settings
from paystream.schemas.payment import PaymentRequest
from paystream.services.oracle_service import JudgmentOracle


class RiskAssessorAgent(BaseEvaluator):
    """Scores transaction risk; a score above the threshold is a veto."""

    role = "Risk Assessor"
    id_prefix = "risk-assessor"
    error_label = "Error"

    def __init__(
        self,
        oracle: JudgmentOracle,
        risk_threshold: float | None = None,
        review_fraction: float | None = None,
    ):
        super().__init__(oracle)
        self.risk_threshold = settings.risk_threshold if risk_threshold is None else risk_threshold
        self._parser = DecisionParser(
            label="Risk",
            score_field="risk_score",
            threshold=self.risk_threshold,
            review_fraction=settings.review_fraction if review_fraction is None else review_fraction,
        )

    @property
    def parser(self) -> DecisionParser:
        return self._parser

    def build_prompt(self, request: PaymentRequest) -> str:
        return f"""You are a Risk Assessment AI Agent for a payment streaming platform.
Analyze this payment request and provide a risk assessment:

Payment Details:
- From: {request.sender}
- To: {request.recipient}
- Amount: {request.amount} CRO
- Description: {request.description}
- Urgency: {request.urgency.label}

Respond in this exact JSON format:
{{"risk_score": 0.0-1.0, "action": "approve|reject|defer|review", "reason": "brief explanation", "confidence": 0.0-1.0}}

Consider: transaction patterns, amount thresholds, recipient history, and urgency level."""
