"""
Payment proof attached to a retried request.

A proof is mode-locked: a streaming proof always has a stream id and never a
transaction reference, and a per-request proof the reverse. The model
validator enforces this, so an inconsistent proof cannot be constructed.
"""

from typing import Mapping

from pydantic import BaseModel, ConfigDict, model_validator

from paystream.x402 import headers as h
from paystream.x402.requirement import PaymentMode


class PaymentProof(BaseModel):
    """Evidence of payment for one challenge."""

    model_config = ConfigDict(frozen=True)

    mode: PaymentMode
    amount_paid: str
    stream_id: int | None = None
    tx_hash: str | None = None

    @model_validator(mode="after")
    def check_mode_fields(self) -> "PaymentProof":
        if self.mode == PaymentMode.STREAMING:
            if self.stream_id is None or self.tx_hash is not None:
                raise ValueError("streaming proof requires a stream_id and no tx_hash")
        else:
            if not self.tx_hash or self.stream_id is not None:
                raise ValueError("per-request proof requires a tx_hash and no stream_id")
        return self

    @classmethod
    def streaming(cls, stream_id: int, deposit: str) -> "PaymentProof":
        return cls(mode=PaymentMode.STREAMING, stream_id=stream_id, amount_paid=deposit)

    @classmethod
    def per_request(cls, tx_hash: str, amount: str) -> "PaymentProof":
        return cls(mode=PaymentMode.PER_REQUEST, tx_hash=tx_hash, amount_paid=amount)

    def to_headers(self) -> dict[str, str]:
        """Proof headers for the retried request."""
        if self.mode == PaymentMode.STREAMING:
            result = {h.FLOWPAY_STREAM_ID: str(self.stream_id)}
        else:
            result = {h.FLOWPAY_TX_HASH: self.tx_hash}
        result[h.FLOWPAY_AMOUNT_PAID] = self.amount_paid
        return result

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "PaymentProof | None":
        """
        Reconstruct a proof from retry headers.

        A stream id takes precedence over a transaction hash. Returns None when
        neither is present or the stream id is not an integer.
        """
        values = h.normalize(headers)
        amount_paid = values.get(h.FLOWPAY_AMOUNT_PAID.lower(), "0")

        stream_id = values.get(h.FLOWPAY_STREAM_ID.lower())
        if stream_id is not None:
            try:
                return cls.streaming(int(stream_id), amount_paid)
            except ValueError:
                return None

        tx_hash = values.get(h.FLOWPAY_TX_HASH.lower())
        if tx_hash:
            return cls.per_request(tx_hash, amount_paid)
        return None
