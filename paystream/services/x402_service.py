"""
X402 payment agent.

Handles the client side of the HTTP 402 payment protocol. One call to
fetch() walks a fixed state machine:

    initial -> challenge_detected -> paid -> retried -> succeeded | failed

A response that is not a 402 succeeds immediately without payment. A 402
whose requirement cannot be parsed fails without paying. After paying, the
request is retried exactly once with the proof attached; whatever that retry
returns, including another 402, is the result. There is no retry loop.
"""

import logging
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping
from uuid import uuid4

from httpx import AsyncClient, HTTPError, InvalidURL, Response
from pydantic import BaseModel, Field

from paystream.core.config import settings
from paystream.core.errors import (
    BudgetExceededError,
    ChallengeParseError,
    OracleError,
    PaymentTransportError,
)
from paystream.services.metrics_service import AgentStats
from paystream.services.oracle_service import JudgmentOracle
from paystream.services.payment_service import PaymentProofGenerator
from paystream.x402.headers import PAYMENT_REQUIRED_STATUS
from paystream.x402.proof import PaymentProof
from paystream.x402.requirement import PaymentMode, PaymentRequirement, parse_requirement

logger = logging.getLogger(__name__)

USER_AGENT = "PayStream/0.1"


class FetchState(str, Enum):
    """States of one outbound paid request."""

    INITIAL = "initial"
    CHALLENGE_DETECTED = "challenge_detected"
    PAID = "paid"
    RETRIED = "retried"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class FetchError(str, Enum):
    """Machine-readable failure codes of a fetch."""

    REQUEST_FAILED = "request_failed"
    UNPARSEABLE_CHALLENGE = "unparseable_challenge"
    BUDGET_EXCEEDED = "budget_exceeded"
    RETRY_FAILED = "retry_failed"


class AgentConfig(BaseModel):
    """Identity and budget of a payment agent."""

    name: str = Field(default_factory=lambda: settings.agent_name)
    wallet_address: str = Field(default_factory=lambda: settings.agent_wallet_address)
    daily_budget: Decimal | None = Field(default_factory=lambda: settings.agent_daily_budget)


class FetchResult(BaseModel):
    """Outcome of a fetch, successful or not."""

    state: FetchState
    transitions: list[FetchState] = Field(default_factory=list)
    status: int | None = None
    body: str = ""
    payment_made: bool = False
    mode: PaymentMode | None = None
    stream_id: int | None = None
    tx_hash: str | None = None
    amount_spent: str | None = None
    error: FetchError | None = None
    message: str = ""

    @property
    def success(self) -> bool:
        return self.state == FetchState.SUCCEEDED

    def raise_for_error(self) -> None:
        """Raise the PaystreamError matching a failed result; no-op on success."""
        if self.success:
            return
        details = {"error": self.error.value if self.error else None, "status": self.status}
        if self.error == FetchError.UNPARSEABLE_CHALLENGE:
            raise ChallengeParseError(self.message, details=details)
        if self.error == FetchError.BUDGET_EXCEEDED:
            raise BudgetExceededError(self.message, details=details)
        raise PaymentTransportError(self.message, details=details)


class X402PaymentAgent:
    """Autonomous agent that pays x402 challenges on the caller's behalf."""

    def __init__(
        self,
        config: AgentConfig | None = None,
        client: AsyncClient | None = None,
        oracle: JudgmentOracle | None = None,
        generator: PaymentProofGenerator | None = None,
    ):
        """
        Initialize the payment agent.

        Args:
            config: Agent identity and budget
            client: HTTP client (a new one is created when omitted)
            oracle: Judgment oracle consulted by should_pay()
            generator: Proof generator (built from config when omitted)
        """
        self.config = config or AgentConfig()
        self.id = f"{self.config.name}-{uuid4().hex[:8]}"
        self.client = client or AsyncClient(timeout=settings.x402_timeout_seconds)
        self.oracle = oracle
        self.stats = AgentStats()
        self.generator = generator or PaymentProofGenerator(
            self.stats, daily_budget=self.config.daily_budget
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "X402PaymentAgent":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def total_spent(self) -> Decimal:
        """Total amount spent by this agent."""
        return self.stats.total_spent_display()

    async def fetch(
        self,
        url: str,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
    ) -> FetchResult:
        """
        Fetch a URL, automatically handling x402 payment requirements.

        Args:
            url: Resource URL
            method: HTTP method
            headers: Extra request headers

        Returns:
            FetchResult in state succeeded or failed
        """
        transitions = [FetchState.INITIAL]
        request_headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
        request_headers.update(headers or {})

        logger.info(f"Fetching: {url}")
        self.stats.record_request()

        try:
            response = await self.client.request(method, url, headers=request_headers)
        except (HTTPError, InvalidURL) as e:
            logger.error(f"Request to {url} failed: {e}")
            return self._failed(transitions, FetchError.REQUEST_FAILED, f"Request failed: {e}")

        if response.status_code != PAYMENT_REQUIRED_STATUS:
            transitions.append(FetchState.SUCCEEDED)
            return FetchResult(
                state=FetchState.SUCCEEDED,
                transitions=transitions,
                status=response.status_code,
                body=response.text,
                message="No payment required",
            )

        transitions.append(FetchState.CHALLENGE_DETECTED)
        logger.info("HTTP 402 Payment Required")

        requirement = parse_requirement(response.headers)
        if requirement is None:
            logger.warning("Could not parse payment requirements from 402 response")
            return self._failed(
                transitions,
                FetchError.UNPARSEABLE_CHALLENGE,
                "402 challenge received but unparseable: no valid x402 headers found",
                status=response.status_code,
            )
        logger.info(f"   {requirement.display()}")

        try:
            proof = self.generator.pay(requirement)
        except ChallengeParseError as e:
            logger.warning(e.message)
            return self._failed(
                transitions, FetchError.UNPARSEABLE_CHALLENGE, e.message, status=response.status_code
            )
        except BudgetExceededError as e:
            logger.warning(e.message)
            return self._failed(
                transitions, FetchError.BUDGET_EXCEEDED, e.message, status=response.status_code
            )
        transitions.append(FetchState.PAID)

        return await self._retry_with_payment(url, method, request_headers, proof, transitions)

    async def _retry_with_payment(
        self,
        url: str,
        method: str,
        request_headers: dict[str, str],
        proof: PaymentProof,
        transitions: list[FetchState],
    ) -> FetchResult:
        logger.info("Retrying request with payment proof...")
        retry_headers = {**request_headers, **proof.to_headers()}

        try:
            response: Response = await self.client.request(method, url, headers=retry_headers)
        except (HTTPError, InvalidURL) as e:
            logger.error(f"Retry request to {url} failed: {e}")
            result = self._failed(transitions, FetchError.RETRY_FAILED, f"Retry request failed: {e}")
            return result.model_copy(update=self._proof_fields(proof))
        transitions.append(FetchState.RETRIED)

        if response.status_code == 200:
            logger.info("HTTP 200 OK - payment accepted")
        else:
            logger.warning(f"Unexpected status after payment: {response.status_code}")

        self.stats.record_payment()
        transitions.append(FetchState.SUCCEEDED)

        return FetchResult(
            state=FetchState.SUCCEEDED,
            transitions=transitions,
            status=response.status_code,
            body=response.text,
            message="Payment completed",
            **self._proof_fields(proof),
        )

    async def simulate_challenge(self, url: str, requirement: PaymentRequirement) -> FetchResult:
        """
        Pay a supplied requirement as if url had answered with a 402.

        No network I/O is performed; the retried response is synthesized.
        """
        transitions = [FetchState.INITIAL, FetchState.CHALLENGE_DETECTED]
        logger.info(f"Fetching (simulated 402): {url}")
        logger.info(f"   {requirement.display()}")
        self.stats.record_request()

        try:
            proof = self.generator.pay(requirement)
        except ChallengeParseError as e:
            logger.warning(e.message)
            return self._failed(transitions, FetchError.UNPARSEABLE_CHALLENGE, e.message, status=402)
        except BudgetExceededError as e:
            logger.warning(e.message)
            return self._failed(transitions, FetchError.BUDGET_EXCEEDED, e.message, status=402)

        transitions.extend([FetchState.PAID, FetchState.RETRIED, FetchState.SUCCEEDED])
        self.stats.record_payment()

        return FetchResult(
            state=FetchState.SUCCEEDED,
            transitions=transitions,
            status=200,
            body=mock_response_body(url),
            message="Payment completed (simulated)",
            **self._proof_fields(proof),
        )

    async def should_pay(self, requirement: PaymentRequirement, context: str) -> bool:
        """
        Ask the judgment oracle whether a requirement is worth paying.

        Defaults to paying when no oracle is configured or the oracle fails.
        """
        if self.oracle is None:
            return True

        cost = requirement.amount or requirement.min_deposit or "unknown"
        budget = self.config.daily_budget if self.config.daily_budget is not None else "unlimited"
        prompt = f"""You are an AI payment agent. Should you pay for this service?

Service: {requirement.description or "API Service"}
Payment Mode: {requirement.mode.value}
Cost: {cost} (rate: {requirement.rate_per_second or "N/A"} /sec)
Your Budget: {budget}
Already Spent: {self.total_spent()}

Context: {context}

Respond with just YES or NO."""

        try:
            reply = await self.oracle.generate(prompt)
        except OracleError as e:
            logger.warning(f"Oracle unavailable for payment decision, paying by default: {e}")
            return True
        return "YES" in reply.strip().upper()

    @staticmethod
    def _proof_fields(proof: PaymentProof) -> dict[str, Any]:
        return {
            "payment_made": True,
            "mode": proof.mode,
            "stream_id": proof.stream_id,
            "tx_hash": proof.tx_hash,
            "amount_spent": proof.amount_paid,
        }

    @staticmethod
    def _failed(
        transitions: list[FetchState],
        error: FetchError,
        message: str,
        status: int | None = None,
    ) -> FetchResult:
        transitions.append(FetchState.FAILED)
        return FetchResult(
            state=FetchState.FAILED,
            transitions=transitions,
            status=status,
            error=error,
            message=message,
        )


def mock_response_body(url: str) -> str:
    """Canned response body for simulated paid requests."""
    if "weather" in url:
        return '{"temperature": 28, "condition": "Sunny", "city": "Lagos", "humidity": 65}'
    if "translate" in url:
        return '{"translated": "Bonjour le monde!", "source": "en", "target": "fr"}'
    if "compute" in url:
        return '{"status": "completed", "result": 42, "compute_time_ms": 1250}'
    return '{"status": "ok", "data": "API response"}'
