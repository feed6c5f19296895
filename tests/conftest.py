"""
Pytest configuration and shared fixtures.

This module provides stub oracles, stub evaluators, sample payment requests
and x402 challenge headers shared by the unit and integration tests.
"""

import asyncio
import json
from decimal import Decimal
from typing import Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from paystream.schemas.payment import Decision, PaymentAction, PaymentRequest, Urgency
from paystream.services.oracle_service import JudgmentOracle


@pytest.fixture
def make_oracle() -> Callable[..., MagicMock]:
    """Factory for a mock oracle returning a fixed reply or raising."""

    def _make(reply: str | dict | None = None, error: Exception | None = None) -> MagicMock:
        oracle = MagicMock(spec=JudgmentOracle)
        if error is not None:
            oracle.generate = AsyncMock(side_effect=error)
        else:
            text = json.dumps(reply) if isinstance(reply, dict) else reply
            oracle.generate = AsyncMock(return_value=text)
        return oracle

    return _make


class StubEvaluator:
    """Evaluator returning a fixed action after an optional delay."""

    def __init__(self, agent_id: str, action: PaymentAction, confidence: float = 0.8, delay: float = 0.0):
        self.id = agent_id
        self.role = "Stub"
        self.action = action
        self.confidence = confidence
        self.delay = delay
        self.seen_requests: list[PaymentRequest] = []

    async def evaluate(self, request: PaymentRequest) -> Decision:
        self.seen_requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        return Decision.for_request(request, self.id, self.action, f"stub {self.action.value}", self.confidence)

    async def communicate(self, message: str) -> str:
        return f"{self.id}: {message}"


@pytest.fixture
def make_evaluator() -> Callable[..., StubEvaluator]:
    """Factory for stub evaluators."""
    return StubEvaluator


@pytest.fixture
def sample_payment_request() -> PaymentRequest:
    """Sample payment request for testing."""
    return PaymentRequest(
        sender="0x1234...abcd",
        recipient="0x5678...efgh",
        amount=Decimal("1000"),
        description="Monthly subscription payment",
        urgency=Urgency.MEDIUM,
    )


@pytest.fixture
def streaming_challenge_headers() -> dict[str, str]:
    """Headers of a streaming 402 challenge."""
    return {
        "X-Payment-Required": "true",
        "X-FlowPay-Mode": "streaming",
        "X-FlowPay-Recipient": "0x1f973bc13Fe975570949b09C022dCCB46944F5ED",
        "X-FlowPay-Rate": "0.0001",
        "X-FlowPay-MinDeposit": "1.00",
        "X-FlowPay-Description": "Real-time weather data",
        "X-FlowPay-Network": "cronos-testnet",
        "X-FlowPay-Token": "TCRO",
    }


@pytest.fixture
def per_request_challenge_headers() -> dict[str, str]:
    """Headers of a per-request 402 challenge."""
    return {
        "X-Payment-Required": "true",
        "X-FlowPay-Mode": "per-request",
        "X-FlowPay-Recipient": "0x1f973bc13Fe975570949b09C022dCCB46944F5ED",
        "X-FlowPay-Amount": "0.01",
        "X-FlowPay-Description": "Premium content",
    }


@pytest.fixture
def paywalled_transport() -> Callable[..., httpx.MockTransport]:
    """
    Factory for a transport that challenges unpaid requests.

    Requests carrying a stream id or tx hash header get 200; others get a 402
    with the given challenge headers. Every request is recorded.
    """

    def _make(challenge_headers: dict[str, str], paid_status: int = 200) -> httpx.MockTransport:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if "x-flowpay-stream-id" in request.headers or "x-flowpay-tx-hash" in request.headers:
                return httpx.Response(paid_status, json={"data": "paid content"})
            return httpx.Response(402, headers=challenge_headers, json={"message": "Payment Required"})

        transport = httpx.MockTransport(handler)
        transport.requests = requests
        return transport

    return _make
