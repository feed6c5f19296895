"""
Payment requirement parsed from a 402 challenge.

Parsing is strict about its two-field minimum: the payment-required marker
and a recipient must both be present, otherwise there is no requirement at
all. Every other field is optional and carried as the decimal string the
provider sent.
"""

import logging
from enum import Enum
from typing import Mapping

from pydantic import BaseModel, ConfigDict

from paystream.x402 import headers as h

logger = logging.getLogger(__name__)

_STREAMING_MODES = frozenset({"streaming", "stream"})
_FALSE_MARKERS = frozenset({"false", "0"})


class PaymentMode(str, Enum):
    """How a provider wants to be paid."""

    PER_REQUEST = "per-request"
    STREAMING = "streaming"

    @classmethod
    def parse(cls, value: str | None) -> "PaymentMode":
        if value is not None and value.strip().lower() in _STREAMING_MODES:
            return cls.STREAMING
        return cls.PER_REQUEST


class PaymentRequirement(BaseModel):
    """Terms of a payment challenge."""

    model_config = ConfigDict(frozen=True)

    recipient: str
    mode: PaymentMode = PaymentMode.PER_REQUEST
    amount: str | None = None
    rate_per_second: str | None = None
    min_deposit: str | None = None
    description: str | None = None
    network: str | None = None
    token: str | None = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "PaymentRequirement | None":
        """
        Parse x402 payment requirements from HTTP headers.

        Args:
            headers: Challenge headers (any case)

        Returns:
            PaymentRequirement, or None when the marker or recipient is missing
        """
        values = h.normalize(headers)

        marker = values.get(h.PAYMENT_REQUIRED.lower())
        if marker is None or marker.strip().lower() in _FALSE_MARKERS:
            return None

        recipient = values.get(h.FLOWPAY_RECIPIENT.lower())
        if recipient is None or not recipient.strip():
            return None

        return cls(
            recipient=recipient.strip(),
            mode=PaymentMode.parse(values.get(h.FLOWPAY_MODE.lower())),
            amount=values.get(h.FLOWPAY_AMOUNT.lower()),
            rate_per_second=values.get(h.FLOWPAY_RATE.lower()),
            min_deposit=values.get(h.FLOWPAY_MIN_DEPOSIT.lower()),
            description=values.get(h.FLOWPAY_DESCRIPTION.lower()),
            network=values.get(h.FLOWPAY_NETWORK.lower()),
            token=values.get(h.FLOWPAY_TOKEN.lower()),
        )

    def to_headers(self) -> dict[str, str]:
        """Render this requirement as 402 challenge headers."""
        result = {
            h.PAYMENT_REQUIRED: "true",
            h.FLOWPAY_RECIPIENT: self.recipient,
            h.FLOWPAY_MODE: self.mode.value,
        }
        optional = {
            h.FLOWPAY_AMOUNT: self.amount,
            h.FLOWPAY_RATE: self.rate_per_second,
            h.FLOWPAY_MIN_DEPOSIT: self.min_deposit,
            h.FLOWPAY_DESCRIPTION: self.description,
            h.FLOWPAY_NETWORK: self.network,
            h.FLOWPAY_TOKEN: self.token,
        }
        result.update({name: value for name, value in optional.items() if value is not None})
        return result

    def display(self) -> str:
        """Display payment requirement in a user-friendly format."""
        lines = [
            f"├─ Recipient: {self.recipient}",
            f"├─ Mode: {self.mode.value}",
        ]
        if self.rate_per_second is not None:
            lines.append(f"├─ Rate: {self.rate_per_second} {self.token or 'TCRO'}/second")
        if self.min_deposit is not None:
            lines.append(f"├─ Min Deposit: {self.min_deposit} {self.token or 'TCRO'}")
        if self.amount is not None:
            lines.append(f"├─ Amount: {self.amount} {self.token or 'TCRO'}")
        if self.description is not None:
            lines.append(f"└─ Description: {self.description}")
        return "\n   ".join(lines)


def parse_requirement(headers: Mapping[str, str]) -> PaymentRequirement | None:
    """Parse challenge metadata; see PaymentRequirement.from_headers."""
    requirement = PaymentRequirement.from_headers(headers)
    if requirement is None:
        logger.debug("Challenge metadata has no valid x402 requirement")
    return requirement
