"""Fraud detection evaluator."""

from paystream.agents.base_agent import BaseEvaluator
from paystream.agents.decision_parser import DecisionParser
from paystream.core.config import settings
from paystream.schemas.payment import PaymentRequest
from paystream.services.oracle_service import JudgmentOracle

FRAUD_INDICATORS = (
    "Unusual transaction patterns",
    "Velocity abuse (rapid successive transactions)",
    "Address reputation",
    "Amount anomalies",
    "Description red flags",
    "Time-based patterns",
)


class FraudDetectorAgent(BaseEvaluator):
    """Scores fraud likelihood; high scores veto, borderline scores go to review."""

    role = "Fraud Detector"
    id_prefix = "fraud-detector"
    error_label = "Fraud check error"

    def __init__(
        self,
        oracle: JudgmentOracle,
        fraud_threshold: float | None = None,
        review_fraction: float | None = None,
    ):
        super().__init__(oracle)
        self.fraud_threshold = settings.fraud_threshold if fraud_threshold is None else fraud_threshold
        self._parser = DecisionParser(
            label="Fraud",
            score_field="fraud_score",
            threshold=self.fraud_threshold,
            review_fraction=settings.review_fraction if review_fraction is None else review_fraction,
        )

    @property
    def parser(self) -> DecisionParser:
        return self._parser

    def build_prompt(self, request: PaymentRequest) -> str:
        indicators = "\n".join(f"- {indicator}" for indicator in FRAUD_INDICATORS)
        return f"""You are a Fraud Detection AI Agent for a crypto payment platform.
Analyze this payment for potential fraud indicators:

Payment Details:
- From: {request.sender}
- To: {request.recipient}
- Amount: {request.amount} CRO
- Description: {request.description}
- Urgency: {request.urgency.label}

Fraud Indicators to Check:
{indicators}

Respond in this exact JSON format:
{{"fraud_score": 0.0-1.0, "action": "approve|reject|defer|review", "indicators": [], "reason": "explanation", "confidence": 0.0-1.0}}"""
