"""
Tests for x402 challenge parsing.
"""

import pytest
from pydantic import ValidationError

from paystream.x402 import PaymentMode, PaymentRequirement, parse_requirement


class TestPaymentMode:
    """Test mode keyword parsing."""

    @pytest.mark.parametrize("value", ["streaming", "STREAMING", "Streaming", " stream "])
    def test_streaming_keywords(self, value):
        assert PaymentMode.parse(value) == PaymentMode.STREAMING

    @pytest.mark.parametrize("value", [None, "", "per-request", "subscription", "Per-Request"])
    def test_everything_else_is_per_request(self, value):
        assert PaymentMode.parse(value) == PaymentMode.PER_REQUEST


class TestParseRequirement:
    """Test PaymentRequirement.from_headers."""

    def test_streaming_challenge(self, streaming_challenge_headers):
        requirement = parse_requirement(streaming_challenge_headers)

        assert requirement is not None
        assert requirement.mode == PaymentMode.STREAMING
        assert requirement.recipient == "0x1f973bc13Fe975570949b09C022dCCB46944F5ED"
        assert requirement.rate_per_second == "0.0001"
        assert requirement.min_deposit == "1.00"
        assert requirement.network == "cronos-testnet"
        assert requirement.token == "TCRO"
        assert requirement.amount is None

    def test_per_request_challenge(self, per_request_challenge_headers):
        requirement = parse_requirement(per_request_challenge_headers)

        assert requirement is not None
        assert requirement.mode == PaymentMode.PER_REQUEST
        assert requirement.amount == "0.01"
        assert requirement.description == "Premium content"

    def test_header_names_are_case_insensitive(self, per_request_challenge_headers):
        lowered = {name.lower(): value for name, value in per_request_challenge_headers.items()}
        assert parse_requirement(lowered) == parse_requirement(per_request_challenge_headers)

    def test_missing_recipient_is_no_requirement(self):
        assert parse_requirement({"X-Payment-Required": "true", "X-FlowPay-Mode": "streaming"}) is None

    def test_blank_recipient_is_no_requirement(self):
        assert parse_requirement({"X-Payment-Required": "true", "X-FlowPay-Recipient": "  "}) is None

    def test_missing_marker_is_no_requirement(self):
        assert parse_requirement({"X-FlowPay-Recipient": "0xabc"}) is None

    @pytest.mark.parametrize("marker", ["false", "FALSE", "0"])
    def test_negative_marker_is_no_requirement(self, marker):
        assert parse_requirement({"X-Payment-Required": marker, "X-FlowPay-Recipient": "0xabc"}) is None

    def test_any_other_marker_value_counts(self):
        requirement = parse_requirement({"X-Payment-Required": "yes", "X-FlowPay-Recipient": "0xabc"})
        assert requirement is not None
        assert requirement.mode == PaymentMode.PER_REQUEST

    def test_parsing_is_idempotent(self, streaming_challenge_headers):
        first = parse_requirement(streaming_challenge_headers)
        second = parse_requirement(streaming_challenge_headers)
        assert first == second

    def test_headers_round_trip(self, streaming_challenge_headers):
        requirement = parse_requirement(streaming_challenge_headers)
        assert PaymentRequirement.from_headers(requirement.to_headers()) == requirement

    def test_requirement_is_frozen(self, streaming_challenge_headers):
        requirement = parse_requirement(streaming_challenge_headers)
        with pytest.raises(ValidationError):
            requirement.recipient = "0xother"


class TestDisplay:
    """Test the human-readable rendering."""

    def test_streaming_display(self, streaming_challenge_headers):
        text = parse_requirement(streaming_challenge_headers).display()
        assert "Mode: streaming" in text
        assert "Rate: 0.0001 TCRO/second" in text
        assert "Min Deposit: 1.00 TCRO" in text
        assert "Description: Real-time weather data" in text

    def test_per_request_display_defaults_token(self, per_request_challenge_headers):
        text = parse_requirement(per_request_challenge_headers).display()
        assert "Amount: 0.01 TCRO" in text
        assert "Rate:" not in text
