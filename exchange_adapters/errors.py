"""
Exchange Adapters - Error Classifier.

============================================================
PURPOSE
============================================================
Reclassify every fault raised at a venue call site into the
adapter's two-tier taxonomy. No raw venue-library or transport
exception type crosses the adapter boundary.

============================================================
TIERS
============================================================
1. NETWORK_TRANSIENT - venue-reported faults (rate limits,
   malformed responses, documented venue errors) and transport
   faults. Raised as ExchangeNetworkError. Caller may retry.
2. UNEXPECTED        - anything else. Logged at ERROR with
   traceback, raised as TradingApiError. Treat as fatal for
   the call.

Venue API errors additionally carry a finer ErrorCategory and
RetryEligibility looked up from the venue error code.

============================================================
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple

import requests

from .types import (
    AdapterError,
    ExchangeNetworkError,
    InvalidArgumentError,
    TradingApiError,
)
from .venue import VenueApiError, VenueError, VenueRequestError


logger = logging.getLogger(__name__)


UNEXPECTED_ERROR_MSG = "Unexpected error has occurred in Binance Exchange Adapter. "
UNEXPECTED_IO_ERROR_MSG = "Failed to connect to Exchange due to unexpected IO error."

# Raised while reading a decoded payload whose shape is not what the venue documents
MALFORMED_PAYLOAD_ERRORS = (KeyError, IndexError, TypeError, AttributeError, InvalidArgumentError)


# ============================================================
# ERROR CATEGORIES
# ============================================================

class ErrorCategory(Enum):
    """Finer classification of venue-reported errors."""

    NETWORK = "NETWORK"
    RATE_LIMIT = "RATE_LIMIT"
    AUTHENTICATION = "AUTHENTICATION"
    INVALID_ORDER = "INVALID_ORDER"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    INVALID_PRICE = "INVALID_PRICE"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    SYMBOL_NOT_FOUND = "SYMBOL_NOT_FOUND"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    EXCHANGE_ERROR = "EXCHANGE_ERROR"
    TIMEOUT = "TIMEOUT"
    UNKNOWN = "UNKNOWN"


class RetryEligibility(Enum):
    """Whether a retry is worthwhile."""

    RETRY = "RETRY"           # Safe to retry
    NO_RETRY = "NO_RETRY"     # Retrying will fail the same way
    BACKOFF = "BACKOFF"       # Retry with exponential backoff


@dataclass(frozen=True)
class ErrorDetails:
    """Classification of a single venue fault."""

    category: ErrorCategory
    retry_eligible: RetryEligibility
    exchange_code: Optional[str] = None
    exchange_message: Optional[str] = None
    http_status: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "retry_eligible": self.retry_eligible.value,
            "exchange_code": self.exchange_code,
            "exchange_message": self.exchange_message,
            "http_status": self.http_status,
        }


# ============================================================
# BINANCE ERROR MAPPING
# ============================================================

# Binance spot error codes
BINANCE_ERROR_MAP: Dict[int, Tuple[ErrorCategory, RetryEligibility]] = {
    # Server / network
    -1000: (ErrorCategory.EXCHANGE_ERROR, RetryEligibility.RETRY),
    -1001: (ErrorCategory.NETWORK, RetryEligibility.RETRY),
    -1006: (ErrorCategory.EXCHANGE_ERROR, RetryEligibility.RETRY),
    -1007: (ErrorCategory.TIMEOUT, RetryEligibility.RETRY),
    -1021: (ErrorCategory.TIMEOUT, RetryEligibility.RETRY),

    # Rate limiting
    -1003: (ErrorCategory.RATE_LIMIT, RetryEligibility.BACKOFF),
    -1015: (ErrorCategory.RATE_LIMIT, RetryEligibility.BACKOFF),

    # Authentication
    -1002: (ErrorCategory.AUTHENTICATION, RetryEligibility.NO_RETRY),
    -1022: (ErrorCategory.AUTHENTICATION, RetryEligibility.NO_RETRY),
    -2014: (ErrorCategory.AUTHENTICATION, RetryEligibility.NO_RETRY),
    -2015: (ErrorCategory.AUTHENTICATION, RetryEligibility.NO_RETRY),

    # Request validation
    -1013: (ErrorCategory.INVALID_QUANTITY, RetryEligibility.NO_RETRY),
    -1100: (ErrorCategory.INVALID_ORDER, RetryEligibility.NO_RETRY),
    -1101: (ErrorCategory.INVALID_ORDER, RetryEligibility.NO_RETRY),
    -1102: (ErrorCategory.INVALID_ORDER, RetryEligibility.NO_RETRY),
    -1111: (ErrorCategory.INVALID_QUANTITY, RetryEligibility.NO_RETRY),
    -1116: (ErrorCategory.INVALID_ORDER, RetryEligibility.NO_RETRY),
    -1117: (ErrorCategory.INVALID_ORDER, RetryEligibility.NO_RETRY),
    -1121: (ErrorCategory.SYMBOL_NOT_FOUND, RetryEligibility.NO_RETRY),

    # Orders
    -2010: (ErrorCategory.INSUFFICIENT_FUNDS, RetryEligibility.NO_RETRY),
    -2011: (ErrorCategory.ORDER_NOT_FOUND, RetryEligibility.NO_RETRY),
    -2013: (ErrorCategory.ORDER_NOT_FOUND, RetryEligibility.NO_RETRY),
}


def map_binance_error(
    code: int,
    message: str = "",
    http_status: Optional[int] = None,
) -> ErrorDetails:
    """
    Classify a Binance error code.

    Args:
        code: Binance error code
        message: Binance error message
        http_status: HTTP status code

    Returns:
        ErrorDetails
    """
    if code in BINANCE_ERROR_MAP:
        category, retry = BINANCE_ERROR_MAP[code]
    elif http_status in (418, 429):
        category, retry = ErrorCategory.RATE_LIMIT, RetryEligibility.BACKOFF
    elif http_status in (401, 403):
        category, retry = ErrorCategory.AUTHENTICATION, RetryEligibility.NO_RETRY
    elif http_status and http_status >= 500:
        category, retry = ErrorCategory.EXCHANGE_ERROR, RetryEligibility.RETRY
    else:
        category, retry = ErrorCategory.UNKNOWN, RetryEligibility.NO_RETRY

    return ErrorDetails(
        category=category,
        retry_eligible=retry,
        exchange_code=str(code),
        exchange_message=message,
        http_status=http_status,
    )


def details_for(error: BaseException) -> ErrorDetails:
    """Classification details for a network-transient fault."""
    if isinstance(error, VenueApiError):
        return map_binance_error(error.code, error.message, error.http_status)
    if isinstance(error, requests.Timeout):
        return ErrorDetails(ErrorCategory.TIMEOUT, RetryEligibility.RETRY)
    if isinstance(error, requests.RequestException):
        return ErrorDetails(ErrorCategory.NETWORK, RetryEligibility.RETRY)
    return ErrorDetails(ErrorCategory.MALFORMED_RESPONSE, RetryEligibility.RETRY)


# ============================================================
# CLASSIFIER
# ============================================================

def is_network_transient(error: BaseException) -> bool:
    """Venue-reported and transport faults are network-transient."""
    return isinstance(error, (VenueError, requests.RequestException))


def classify(error: BaseException, operation: str = "") -> AdapterError:
    """
    Reclassify a fault raised at a venue call site.

    Adapter errors pass through unchanged.

    Args:
        error: The raised exception
        operation: Adapter operation name, for logging

    Returns:
        ExchangeNetworkError or TradingApiError wrapping error
    """
    if isinstance(error, AdapterError):
        return error

    if is_network_transient(error):
        details = details_for(error)
        logger.warning(
            f"{operation or 'venue call'} failed: {error} "
            f"[{details.category.value}/{details.retry_eligible.value}]"
        )
        return ExchangeNetworkError(
            UNEXPECTED_IO_ERROR_MSG,
            cause=error,
            category=details.category,
            retry_eligible=details.retry_eligible,
        )

    logger.error(UNEXPECTED_ERROR_MSG, exc_info=error)
    return TradingApiError(UNEXPECTED_ERROR_MSG, cause=error)


@contextmanager
def venue_call(operation: str) -> Iterator[None]:
    """
    Apply the classifier around a venue call site.

    Missing or mistyped fields in a venue payload are reported as a
    malformed response (network-transient), not as an unexpected error.

    Usage:
        with venue_call("get_market_orders"):
            book = client.get_order_book(symbol, 100)
    """
    try:
        yield
    except AdapterError:
        raise
    except MALFORMED_PAYLOAD_ERRORS as e:
        malformed = VenueRequestError(f"Malformed venue response in {operation}: {e!r}")
        malformed.__cause__ = e
        raise classify(malformed, operation) from e
    except Exception as e:
        raise classify(e, operation) from e
