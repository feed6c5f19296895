"""
PayStream - Autonomous Payment Agents

This package contains the application source code for PayStream, which lets
a panel of AI agents reach consensus on whether a payment should be made, and
lets a payment agent negotiate HTTP 402 challenges using the x402 protocol.

Key modules:
    - agents: policy evaluators (risk, compliance, treasury, fraud)
    - x402: payment requirement and payment proof value types
    - services: judgment oracle, consensus orchestrator, x402 payment agent
    - middleware: provider-side x402 paywall
    - api: FastAPI routes and endpoints
    - schemas: Pydantic data model
    - core: configuration, constants and errors
"""

__version__ = "0.1.0"
__author__ = "PayStream Team"
