"""
Business logic services package.

Services are imported on-demand to avoid circular import issues.
Individual services should be imported directly from their modules:
  from paystream.services.oracle_service import JudgmentOracle
  from paystream.services.orchestrator_service import AgentOrchestrator
  from paystream.services.x402_service import X402PaymentAgent
"""
