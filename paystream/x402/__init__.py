"""
x402 payment protocol value types.

A provider answers an unpaid request with HTTP 402 and a set of headers
describing the payment it requires. The client parses those headers into a
PaymentRequirement, pays, and retries with a PaymentProof attached.
"""

from paystream.x402.proof import PaymentProof
from paystream.x402.requirement import PaymentMode, PaymentRequirement, parse_requirement

__all__ = ["PaymentMode", "PaymentProof", "PaymentRequirement", "parse_requirement"]
