"""
Agent statistics with atomic counters.

Each counter owns its own lock and every mutation is a single atomic add.
No invariant spans two counters, so there is no lock over the
whole struct: a reader may see active_streams reflect a payment that
total_spent does not yet include.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from decimal import Decimal, DecimalException, ROUND_DOWN
from typing import Any

from paystream.core.constants import MICRO_UNITS

logger = logging.getLogger(__name__)


class AtomicCounter:
    """Monotonic integer counter safe across threads and tasks."""

    def __init__(self, initial: int = 0):
        self._value = initial
        self._lock = threading.Lock()

    def fetch_add(self, amount: int = 1) -> int:
        """Add amount and return the value before the add."""
        if amount < 0:
            raise ValueError("counters only increase")
        with self._lock:
            previous = self._value
            self._value += amount
            return previous

    def add(self, amount: int = 1) -> int:
        """Add amount and return the new value."""
        return self.fetch_add(amount) + amount

    def add_if_within(self, amount: int, ceiling: int) -> bool:
        """Add amount only if the result stays at or below ceiling."""
        if amount < 0:
            raise ValueError("counters only increase")
        with self._lock:
            if self._value + amount > ceiling:
                return False
            self._value += amount
            return True

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"AtomicCounter({self._value})"


def to_micro_units(amount: str | Decimal) -> int:
    """
    Convert a decimal amount to integer micro-units (value * 10^6, truncated).

    Raises:
        ValueError: If amount is not a finite, non-negative decimal
    """
    try:
        value = Decimal(str(amount).strip())
        if not value.is_finite() or value < 0:
            raise ValueError(f"invalid decimal amount: {amount!r}")
        return int((value * MICRO_UNITS).to_integral_value(rounding=ROUND_DOWN))
    except DecimalException as e:
        # malformed text, or an exponent too large for the context
        raise ValueError(f"invalid decimal amount: {amount!r}") from e


def from_micro_units(micro: int) -> Decimal:
    """Convert micro-units back to a six-decimal amount."""
    return (Decimal(micro) / MICRO_UNITS).quantize(Decimal("0.000001"))


@dataclass
class AgentStats:
    """Process-wide counters for one payment agent."""

    requests_made: AtomicCounter = field(default_factory=AtomicCounter)
    payments_made: AtomicCounter = field(default_factory=AtomicCounter)
    # micro-units
    total_spent: AtomicCounter = field(default_factory=AtomicCounter)
    active_streams: AtomicCounter = field(default_factory=AtomicCounter)

    start_time: float = field(default_factory=time.time)

    def record_request(self) -> None:
        self.requests_made.add()

    def record_payment(self) -> None:
        self.payments_made.add()

    def record_stream_opened(self) -> None:
        self.active_streams.add()

    def record_spend(self, micro_units: int) -> None:
        self.total_spent.add(micro_units)

    def total_spent_display(self) -> Decimal:
        """Total spent, converted back from micro-units."""
        return from_micro_units(self.total_spent.value)

    def snapshot(self) -> dict[str, Any]:
        """Point-in-time view of each counter (not a consistent cut)."""
        return {
            "requests_made": self.requests_made.value,
            "payments_made": self.payments_made.value,
            "total_spent_micro": self.total_spent.value,
            "total_spent": str(self.total_spent_display()),
            "active_streams": self.active_streams.value,
        }

    def display(self) -> str:
        """Display agent stats in a user-friendly format."""
        return "\n".join([
            "📊 Agent Stats:",
            f"   ├─ Requests: {self.requests_made.value}",
            f"   ├─ Payments: {self.payments_made.value}",
            f"   ├─ Spent: {self.total_spent_display()}",
            f"   └─ Active Streams: {self.active_streams.value}",
        ])

    def get_prometheus_metrics(self, agent_id: str = "") -> str:
        """
        Get all counters in Prometheus text format.

        Args:
            agent_id: Optional label value identifying the agent

        Returns:
            Prometheus-formatted metrics string
        """
        label = f'{{agent="{agent_id}"}}' if agent_id else ""
        uptime_seconds = time.time() - self.start_time

        metrics = [
            "# HELP paystream_uptime_seconds Agent uptime in seconds",
            "# TYPE paystream_uptime_seconds gauge",
            f"paystream_uptime_seconds{label} {uptime_seconds:.2f}",
            "",
            "# HELP paystream_requests_total Total number of outbound x402 requests",
            "# TYPE paystream_requests_total counter",
            f"paystream_requests_total{label} {self.requests_made.value}",
            "",
            "# HELP paystream_payments_total Total number of completed payments",
            "# TYPE paystream_payments_total counter",
            f"paystream_payments_total{label} {self.payments_made.value}",
            "",
            "# HELP paystream_spent_micro_total Total amount spent in micro-units",
            "# TYPE paystream_spent_micro_total counter",
            f"paystream_spent_micro_total{label} {self.total_spent.value}",
            "",
            "# HELP paystream_active_streams Payment streams opened by the agent",
            "# TYPE paystream_active_streams gauge",
            f"paystream_active_streams{label} {self.active_streams.value}",
            "",
        ]
        return "\n".join(metrics)
