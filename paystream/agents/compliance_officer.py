"""Regulatory compliance evaluator."""

from paystream.agents.base_agent import BaseEvaluator
from paystream.agents.decision_parser import DecisionParser
from paystream.schemas.payment import PaymentRequest
from paystream.services.oracle_service import JudgmentOracle

DEFAULT_COMPLIANCE_RULES = (
    "AML (Anti-Money Laundering) checks",
    "KYC verification status",
    "Sanctions list screening",
    "Transaction limits per jurisdiction",
    "Regulatory reporting requirements",
)


class ComplianceOfficerAgent(BaseEvaluator):
    """Checks a payment against compliance rules; non-compliance is a veto."""

    role = "Compliance Officer"
    id_prefix = "compliance"
    error_label = "Compliance check error"

    def __init__(self, oracle: JudgmentOracle, compliance_rules: tuple[str, ...] = DEFAULT_COMPLIANCE_RULES):
        super().__init__(oracle)
        self.compliance_rules = tuple(compliance_rules)
        self._parser = DecisionParser(label="Compliance", flag_field="compliant")

    @property
    def parser(self) -> DecisionParser:
        return self._parser

    def build_prompt(self, request: PaymentRequest) -> str:
        rules = "\n".join(f"- {rule}" for rule in self.compliance_rules)
        return f"""You are a Compliance Officer AI Agent for a crypto payment platform.
Evaluate this payment for regulatory compliance:

Payment Details:
- From: {request.sender}
- To: {request.recipient}
- Amount: {request.amount} CRO
- Description: {request.description}

Compliance Rules to Check:
{rules}

Respond in this exact JSON format:
{{"compliant": true|false, "action": "approve|reject|defer|review", "violations": [], "reason": "explanation", "confidence": 0.0-1.0}}"""
