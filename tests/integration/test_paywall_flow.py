"""
End-to-end x402 flow.

A payment agent fetches the demo resources of a PayStream app served in-process,
paying the app's own paywall challenges.
"""

import json

import httpx
import pytest

from paystream.main import create_app
from paystream.services.orchestrator_service import AgentOrchestrator
from paystream.services.x402_service import AgentConfig, FetchState, X402PaymentAgent
from paystream.x402 import PaymentMode

BASE_URL = "http://provider.test"


@pytest.fixture
def provider_app():
    return create_app(orchestrator=AgentOrchestrator())


@pytest.fixture
def payment_agent(provider_app):
    client = httpx.AsyncClient(transport=httpx.ASGITransport(app=provider_app), base_url=BASE_URL)
    return X402PaymentAgent(config=AgentConfig(name="integration-agent"), client=client)


class TestPaywallFlow:
    """Client agent against the provider paywall."""

    @pytest.mark.asyncio
    async def test_streaming_resource(self, payment_agent):
        async with payment_agent:
            result = await payment_agent.fetch(f"{BASE_URL}/api/weather")

        assert result.state == FetchState.SUCCEEDED
        assert result.status == 200
        assert result.mode == PaymentMode.STREAMING
        assert result.amount_spent == "0.36"
        body = json.loads(result.body)
        assert body["paidWithStream"] == result.stream_id
        assert payment_agent.stats.total_spent.value == 360_000

    @pytest.mark.asyncio
    async def test_per_request_resource(self, payment_agent):
        async with payment_agent:
            result = await payment_agent.fetch(f"{BASE_URL}/api/premium")

        assert result.success
        assert result.mode == PaymentMode.PER_REQUEST
        body = json.loads(result.body)
        assert body["paidWithTx"] == result.tx_hash
        assert payment_agent.stats.total_spent.value == 10_000

    @pytest.mark.asyncio
    async def test_free_resource(self, payment_agent):
        async with payment_agent:
            result = await payment_agent.fetch(f"{BASE_URL}/api/free")

        assert result.success
        assert result.payment_made is False
        assert payment_agent.stats.total_spent.value == 0

    @pytest.mark.asyncio
    async def test_session_totals(self, payment_agent):
        async with payment_agent:
            for path in ["/api/weather", "/api/premium", "/api/free", "/api/weather"]:
                await payment_agent.fetch(f"{BASE_URL}{path}")

        snapshot = payment_agent.stats.snapshot()
        assert snapshot["requests_made"] == 4
        assert snapshot["payments_made"] == 3
        assert snapshot["active_streams"] == 2
        assert snapshot["total_spent_micro"] == 360_000 * 2 + 10_000
