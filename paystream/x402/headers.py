"""x402 header names."""

from typing import Mapping

PAYMENT_REQUIRED = "X-Payment-Required"
FLOWPAY_MODE = "X-FlowPay-Mode"
FLOWPAY_RATE = "X-FlowPay-Rate"
FLOWPAY_RECIPIENT = "X-FlowPay-Recipient"
FLOWPAY_MIN_DEPOSIT = "X-FlowPay-MinDeposit"
FLOWPAY_AMOUNT = "X-FlowPay-Amount"
FLOWPAY_TOKEN = "X-FlowPay-Token"
FLOWPAY_NETWORK = "X-FlowPay-Network"
FLOWPAY_DESCRIPTION = "X-FlowPay-Description"

# Proof headers sent with the retried request
FLOWPAY_STREAM_ID = "X-FlowPay-Stream-Id"
FLOWPAY_TX_HASH = "X-FlowPay-Tx-Hash"
FLOWPAY_AMOUNT_PAID = "X-FlowPay-Amount-Paid"

PAYMENT_REQUIRED_STATUS = 402


def normalize(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of headers keyed by lower-case name."""
    return {str(key).lower(): str(value) for key, value in headers.items()}
