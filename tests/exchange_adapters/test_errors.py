"""
Error Classifier Tests.

============================================================
PURPOSE
============================================================
Venue fault reclassification and Binance error mapping.

============================================================
"""

import logging

import pytest
import requests

from exchange_adapters import (
    ConfigurationError,
    ErrorCategory,
    ErrorKind,
    ExchangeNetworkError,
    InvalidArgumentError,
    RetryEligibility,
    TradingApiError,
    VenueApiError,
    VenueRequestError,
    classify,
    map_binance_error,
    venue_call,
)
from exchange_adapters.errors import UNEXPECTED_ERROR_MSG, UNEXPECTED_IO_ERROR_MSG


# ============================================================
# ERROR MAPPING TESTS
# ============================================================

class TestBinanceErrorMapping:
    """Tests for Binance error code mapping."""

    def test_rate_limit(self):
        """Test rate limit mapping."""
        details = map_binance_error(-1003, "Too many requests", 429)

        assert details.category is ErrorCategory.RATE_LIMIT
        assert details.retry_eligible is RetryEligibility.BACKOFF
        assert details.exchange_code == "-1003"
        assert details.http_status == 429

    def test_insufficient_funds(self):
        """Test insufficient funds mapping."""
        details = map_binance_error(-2010, "Account has insufficient balance")

        assert details.category is ErrorCategory.INSUFFICIENT_FUNDS
        assert details.retry_eligible is RetryEligibility.NO_RETRY

    def test_unknown_code_falls_back_to_http_status(self):
        """Unmapped codes use the HTTP status."""
        assert map_binance_error(-9999, "", 429).category is ErrorCategory.RATE_LIMIT
        assert map_binance_error(-9999, "", 401).category is ErrorCategory.AUTHENTICATION
        assert map_binance_error(-9999, "", 502).category is ErrorCategory.EXCHANGE_ERROR
        assert map_binance_error(-9999, "", 400).category is ErrorCategory.UNKNOWN

    def test_to_dict(self):
        """Details serialise for structured logging."""
        data = map_binance_error(-2011, "Unknown order sent.", 400).to_dict()

        assert data["category"] == "ORDER_NOT_FOUND"
        assert data["retry_eligible"] == "NO_RETRY"
        assert data["exchange_message"] == "Unknown order sent."


# ============================================================
# CLASSIFIER TESTS
# ============================================================

class TestClassify:
    """Tests for classify."""

    @pytest.mark.parametrize("error", [
        VenueApiError(-1003, "Too many requests", 429),
        VenueRequestError("Invalid response"),
        requests.ConnectionError("Connection reset"),
        requests.Timeout("read timed out"),
    ])
    def test_venue_and_transport_faults_are_transient(self, error):
        """Venue and transport faults become ExchangeNetworkError."""
        result = classify(error, "get_market_orders")

        assert isinstance(result, ExchangeNetworkError)
        assert result.kind is ErrorKind.NETWORK_TRANSIENT
        assert result.is_retryable()
        assert str(result) == UNEXPECTED_IO_ERROR_MSG
        assert result.cause is error

    def test_timeout_category(self):
        """Timeouts are categorised as TIMEOUT."""
        result = classify(requests.Timeout("slow"))

        assert result.category is ErrorCategory.TIMEOUT

    def test_malformed_response_category(self):
        """Undecodable responses are categorised as MALFORMED_RESPONSE."""
        result = classify(VenueRequestError("not json"))

        assert result.category is ErrorCategory.MALFORMED_RESPONSE

    @pytest.mark.parametrize("error", [
        RuntimeError("boom"),
        KeyError("orderId"),
        TypeError("bad payload"),
    ])
    def test_anything_else_is_unexpected(self, error):
        """Other exceptions become TradingApiError."""
        result = classify(error)

        assert type(result) is TradingApiError
        assert result.kind is ErrorKind.UNEXPECTED
        assert not result.is_retryable()
        assert str(result) == UNEXPECTED_ERROR_MSG
        assert result.cause is error

    def test_unexpected_is_logged_with_traceback(self, caplog):
        """Unexpected faults are logged at ERROR with exc_info."""
        error = RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger="exchange_adapters.errors"):
            classify(error)

        records = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert records
        assert records[0].exc_info is not None

    def test_adapter_errors_pass_through(self):
        """Already-classified errors are returned unchanged."""
        error = ConfigurationError("missing key")

        assert classify(error) is error


# ============================================================
# CALL SITE TESTS
# ============================================================

class TestVenueCall:
    """Tests for the venue_call context manager."""

    def test_reraises_classified(self):
        """Venue faults leave the block as ExchangeNetworkError."""
        fault = VenueApiError(-1121, "Invalid symbol.", 400)

        with pytest.raises(ExchangeNetworkError) as exc_info:
            with venue_call("get_latest_market_price"):
                raise fault

        assert exc_info.value.__cause__ is fault
        assert exc_info.value.category is ErrorCategory.SYMBOL_NOT_FOUND

    def test_unexpected_becomes_trading_api_error(self):
        """Other faults leave the block as TradingApiError."""
        with pytest.raises(TradingApiError) as exc_info:
            with venue_call("get_balance_info"):
                raise RuntimeError("boom")

        assert not isinstance(exc_info.value, ExchangeNetworkError)
        assert exc_info.value.kind is ErrorKind.UNEXPECTED
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.parametrize("payload_read", [
        lambda: {}["balances"],
        lambda: [][0],
        lambda: None["lastPrice"],
        lambda: [["4.0", "1.0"]].get("bids"),
    ])
    def test_malformed_payload_is_transient(self, payload_read):
        """Missing or mistyped payload fields are malformed responses."""
        with pytest.raises(ExchangeNetworkError) as exc_info:
            with venue_call("get_market_orders"):
                payload_read()

        assert exc_info.value.kind is ErrorKind.NETWORK_TRANSIENT
        assert exc_info.value.category is ErrorCategory.MALFORMED_RESPONSE
        assert isinstance(exc_info.value.cause, VenueRequestError)
        assert "get_market_orders" in str(exc_info.value.cause)

    def test_bad_number_in_payload_is_transient(self):
        """A non-numeric venue field is a malformed response."""
        with pytest.raises(ExchangeNetworkError) as exc_info:
            with venue_call("get_latest_market_price"):
                raise InvalidArgumentError("Not a numeric value: 'abc'")

        assert exc_info.value.category is ErrorCategory.MALFORMED_RESPONSE

    def test_adapter_error_unchanged(self):
        """Adapter errors are not rewrapped."""
        error = TradingApiError("already classified")

        with pytest.raises(TradingApiError) as exc_info:
            with venue_call("create_order"):
                raise error

        assert exc_info.value is error

    def test_success_passes_value_through(self):
        """No fault, no interference."""
        with venue_call("get_account"):
            value = 42

        assert value == 42
