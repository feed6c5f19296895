# Payment consensus evaluators
from paystream.agents.base_agent import BaseEvaluator
from paystream.agents.compliance_officer import ComplianceOfficerAgent
from paystream.agents.decision_parser import DecisionParser, ParsedDecision
from paystream.agents.fraud_detector import FraudDetectorAgent
from paystream.agents.risk_assessor import RiskAssessorAgent
from paystream.agents.treasury_manager import TreasuryManagerAgent
from paystream.services.oracle_service import JudgmentOracle


def create_default_agents(oracle: JudgmentOracle) -> list[BaseEvaluator]:
    """Build the standard evaluator panel, in registration order."""
    return [
        RiskAssessorAgent(oracle),
        ComplianceOfficerAgent(oracle),
        TreasuryManagerAgent(oracle),
        FraudDetectorAgent(oracle),
    ]


__all__ = [
    'BaseEvaluator',
    'ComplianceOfficerAgent',
    'DecisionParser',
    'FraudDetectorAgent',
    'ParsedDecision',
    'RiskAssessorAgent',
    'TreasuryManagerAgent',
    'create_default_agents',
]
