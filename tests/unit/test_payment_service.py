"""
Tests for payment proof generation.
"""

import re
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest

from paystream.core.errors import BudgetExceededError, ChallengeParseError
from paystream.services.metrics_service import AgentStats, to_micro_units
from paystream.services.payment_service import PaymentProofGenerator, new_tx_hash
from paystream.x402 import PaymentMode, PaymentRequirement


def _streaming(**kwargs) -> PaymentRequirement:
    return PaymentRequirement(recipient="0xabc", mode=PaymentMode.STREAMING, **kwargs)


def _per_request(**kwargs) -> PaymentRequirement:
    return PaymentRequirement(recipient="0xabc", mode=PaymentMode.PER_REQUEST, **kwargs)


@pytest.fixture
def stats() -> AgentStats:
    return AgentStats()


@pytest.fixture
def generator(stats) -> PaymentProofGenerator:
    return PaymentProofGenerator(
        stats,
        stream_id_start=1000,
        default_deposit="1.00",
        default_rate="0.0001",
        default_amount="0.001",
    )


class TestStreamingPayments:
    """Test stream creation."""

    def test_stream_ids_start_at_1000_and_increase(self, generator):
        first = generator.pay(_streaming(min_deposit="0.36"))
        second = generator.pay(_streaming(min_deposit="0.36"))
        assert first.stream_id == 1000
        assert second.stream_id == 1001

    def test_deposit_is_charged(self, generator, stats):
        proof = generator.pay(_streaming(min_deposit="1.00"))
        assert proof.amount_paid == "1.00"
        assert proof.tx_hash is None
        assert stats.total_spent.value == 1_000_000
        assert stats.active_streams.value == 1

    def test_missing_deposit_uses_default(self, generator, stats):
        proof = generator.pay(_streaming())
        assert proof.amount_paid == "1.00"
        assert stats.total_spent.value == 1_000_000


class TestPerRequestPayments:
    """Test one-shot payments."""

    def test_amount_is_charged(self, generator, stats):
        proof = generator.pay(_per_request(amount="0.01"))
        assert proof.mode == PaymentMode.PER_REQUEST
        assert proof.amount_paid == "0.01"
        assert proof.stream_id is None
        assert stats.total_spent.value == 10_000
        assert stats.active_streams.value == 0

    def test_missing_amount_uses_default(self, generator, stats):
        proof = generator.pay(_per_request())
        assert proof.amount_paid == "0.001"
        assert stats.total_spent.value == 1_000

    def test_tx_hashes_are_unique(self, generator):
        hashes = {generator.pay(_per_request(amount="0.01")).tx_hash for _ in range(20)}
        assert len(hashes) == 20


class TestInvalidAmounts:
    """An amount that is not a finite non-negative decimal is never paid."""

    @pytest.mark.parametrize("amount", ["lots", "1,000", "-5", "NaN", "Infinity", "1E+1000000"])
    def test_invalid_per_request_amount_raises(self, generator, stats, amount):
        with pytest.raises(ChallengeParseError) as exc_info:
            generator.pay(_per_request(amount=amount))

        assert exc_info.value.details == {"amount": amount}
        assert stats.total_spent.value == 0

    def test_invalid_deposit_opens_no_stream(self, generator, stats):
        with pytest.raises(ChallengeParseError):
            generator.pay(_streaming(min_deposit="1,000"))

        assert stats.active_streams.value == 0
        assert generator.pay(_streaming(min_deposit="0.36")).stream_id == 1000

    def test_invalid_amount_cannot_bypass_budget(self, stats):
        generator = PaymentProofGenerator(stats, daily_budget=Decimal("0.50"))
        with pytest.raises(ChallengeParseError):
            generator.pay(_per_request(amount="1,000"))
        assert stats.total_spent.value == 0


class TestBudget:
    """Test the optional spend cap."""

    def test_payment_within_budget(self, stats):
        generator = PaymentProofGenerator(stats, daily_budget=Decimal("1.00"))
        generator.pay(_per_request(amount="0.50"))
        generator.pay(_per_request(amount="0.50"))
        assert stats.total_spent.value == 1_000_000

    def test_payment_over_budget_raises(self, stats):
        generator = PaymentProofGenerator(stats, daily_budget=Decimal("0.50"))
        generator.pay(_per_request(amount="0.40"))

        with pytest.raises(BudgetExceededError) as exc_info:
            generator.pay(_per_request(amount="0.20"))

        assert exc_info.value.details["amount"] == "0.20"
        assert stats.total_spent.value == 400_000

    def test_stream_not_opened_over_budget(self, stats):
        generator = PaymentProofGenerator(stats, daily_budget=Decimal("0.50"), stream_id_start=1000)
        with pytest.raises(BudgetExceededError):
            generator.pay(_streaming(min_deposit="1.00"))
        assert stats.active_streams.value == 0
        assert generator.pay(_streaming(min_deposit="0.36")).stream_id == 1000


class TestConcurrentPayments:
    """Concurrent proof generation against one agent's counters."""

    def test_mixed_modes_from_threads_sum_exactly(self, generator, stats):
        requirements = [_streaming(min_deposit="0.36"), _per_request(amount="0.01"), _per_request()] * 40

        with ThreadPoolExecutor(max_workers=8) as pool:
            proofs = list(pool.map(generator.pay, requirements))

        expected = sum(to_micro_units(generator.cost_of(r)) for r in requirements)
        stream_ids = [p.stream_id for p in proofs if p.mode == PaymentMode.STREAMING]
        assert stats.total_spent.value == expected
        assert len(stream_ids) == 40
        assert sorted(stream_ids) == list(range(1000, 1040))
        assert stats.active_streams.value == 40
        assert len({p.tx_hash for p in proofs if p.tx_hash}) == 80

    def test_budget_holds_under_contention(self, stats):
        generator = PaymentProofGenerator(stats, daily_budget=Decimal("1.00"))

        def attempt(_):
            try:
                generator.pay(_per_request(amount="0.01"))
                return True
            except BudgetExceededError:
                return False

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(attempt, range(300)))

        assert sum(results) == 100
        assert stats.total_spent.value == 1_000_000


class TestCostOf:
    def test_cost_of(self, generator):
        assert generator.cost_of(_streaming(min_deposit="0.36")) == "0.36"
        assert generator.cost_of(_per_request()) == "0.001"


def test_new_tx_hash_format():
    assert re.fullmatch(r"0x[0-9a-f]{40}", new_tx_hash())
