"""
Tests for agent statistics and atomic counters.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest

from paystream.services.metrics_service import (
    AgentStats,
    AtomicCounter,
    from_micro_units,
    to_micro_units,
)


class TestAtomicCounter:
    """Test counter primitives."""

    def test_fetch_add_returns_previous(self):
        counter = AtomicCounter(1000)
        assert counter.fetch_add(1) == 1000
        assert counter.fetch_add(1) == 1001
        assert counter.value == 1002

    def test_add_returns_new_value(self):
        counter = AtomicCounter()
        assert counter.add(5) == 5

    def test_negative_add_rejected(self):
        with pytest.raises(ValueError):
            AtomicCounter().add(-1)

    def test_add_if_within(self):
        counter = AtomicCounter(900)
        assert counter.add_if_within(100, 1000) is True
        assert counter.add_if_within(1, 1000) is False
        assert counter.value == 1000

    def test_concurrent_threads_lose_no_updates(self):
        counter = AtomicCounter()

        def work():
            for _ in range(1000):
                counter.add(1)

        with ThreadPoolExecutor(max_workers=8) as pool:
            for future in [pool.submit(work) for _ in range(8)]:
                future.result()

        assert counter.value == 8000

    def test_concurrent_bounded_adds_never_exceed_ceiling(self):
        counter = AtomicCounter()

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: counter.add_if_within(10, 1000), range(500)))

        assert sum(results) == 100
        assert counter.value == 1000


class TestMicroUnits:
    """Test decimal to micro-unit conversion."""

    @pytest.mark.parametrize(
        "amount,expected",
        [
            ("1.00", 1_000_000),
            ("0.01", 10_000),
            ("0.0001", 100),
            ("0.36", 360_000),
            ("0", 0),
            ("0.0000019", 1),
            (Decimal("2.5"), 2_500_000),
        ],
    )
    def test_to_micro_units(self, amount, expected):
        assert to_micro_units(amount) == expected

    @pytest.mark.parametrize("amount", ["abc", "", "-1", "NaN", "sNaN", "Infinity", "1,000", "1E+1000000"])
    def test_invalid_amounts(self, amount):
        with pytest.raises(ValueError):
            to_micro_units(amount)

    def test_from_micro_units(self):
        assert from_micro_units(1_010_000) == Decimal("1.010000")
        assert str(from_micro_units(0)) == "0.000000"


class TestAgentStats:
    """Test the stats record and its renderings."""

    def test_streaming_payment_adds_one_million(self):
        stats = AgentStats()
        stats.record_spend(to_micro_units("1.00"))
        assert stats.total_spent.value == 1_000_000

    @pytest.mark.asyncio
    async def test_concurrent_tasks_sum_exactly(self):
        stats = AgentStats()

        async def pay(amount: str):
            await asyncio.sleep(0)
            stats.record_spend(to_micro_units(amount))
            stats.record_payment()

        amounts = ["0.01", "1.00", "0.001"] * 50
        await asyncio.gather(*(pay(amount) for amount in amounts))

        assert stats.total_spent.value == 50 * (10_000 + 1_000_000 + 1_000)
        assert stats.payments_made.value == 150

    def test_snapshot(self):
        stats = AgentStats()
        stats.record_request()
        stats.record_request()
        stats.record_payment()
        stats.record_stream_opened()
        stats.record_spend(360_000)

        assert stats.snapshot() == {
            "requests_made": 2,
            "payments_made": 1,
            "total_spent_micro": 360_000,
            "total_spent": "0.360000",
            "active_streams": 1,
        }

    def test_display(self):
        stats = AgentStats()
        stats.record_spend(10_000)
        text = stats.display()
        assert "Spent: 0.010000" in text
        assert "Active Streams: 0" in text

    def test_prometheus_metrics(self):
        stats = AgentStats()
        stats.record_request()
        text = stats.get_prometheus_metrics("agent-1")
        assert "# TYPE paystream_requests_total counter" in text
        assert 'paystream_requests_total{agent="agent-1"} 1' in text
        assert 'paystream_spent_micro_total{agent="agent-1"} 0' in text

    def test_prometheus_metrics_without_label(self):
        text = AgentStats().get_prometheus_metrics()
        assert "paystream_payments_total 0" in text
