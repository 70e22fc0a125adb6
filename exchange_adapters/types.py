"""
Exchange Adapters - Types.

============================================================
PURPOSE
============================================================
Canonical trading model shared by every exchange adapter.

Strategy code only ever sees these types. Venue-native
payloads are translated into them at the adapter boundary.

============================================================
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple
from dataclasses import dataclass, field


# ============================================================
# ORDER TYPES
# ============================================================

class OrderType(Enum):
    """Side of an order as seen by the bot."""

    BUY = "BUY"
    SELL = "SELL"

    @property
    def string_value(self) -> str:
        return self.value


# ============================================================
# MARKET DATA
# ============================================================

@dataclass(frozen=True)
class MarketOrder:
    """A single price level of a market order book."""

    type: OrderType
    """Which side of the book the level came from."""

    price: Decimal
    """Level price."""

    quantity: Decimal
    """Quantity available at this price."""

    total: Decimal
    """price x quantity."""


@dataclass(frozen=True)
class MarketOrderBook:
    """
    Point-in-time order book snapshot.

    market_id is kept exactly as the caller supplied it.
    """

    market_id: str
    sell_orders: Tuple[MarketOrder, ...] = ()
    buy_orders: Tuple[MarketOrder, ...] = ()


# ============================================================
# ACCOUNT STATE
# ============================================================

@dataclass(frozen=True)
class OpenOrder:
    """Read-only snapshot of one of our orders resting on the venue."""

    id: str
    """Venue-assigned order id."""

    creation_date: datetime
    """When the venue created the order (UTC)."""

    market_id: str
    """Venue market symbol."""

    type: OrderType
    """Order side."""

    price: Decimal
    """Limit price."""

    quantity: Decimal
    """Outstanding (unfilled) quantity."""

    original_quantity: Decimal
    """Quantity when the order was placed."""

    total: Decimal
    """price x outstanding quantity."""


@dataclass(frozen=True)
class BalanceInfo:
    """
    Wallet balances.

    balances_on_hold is empty when the venue does not report
    reserved funds; callers must read an empty map as unknown,
    not as zero.
    """

    balances_available: Mapping[str, Decimal] = field(default_factory=dict)
    balances_on_hold: Mapping[str, Decimal] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "balances_available", MappingProxyType(dict(self.balances_available)))
        object.__setattr__(self, "balances_on_hold", MappingProxyType(dict(self.balances_on_hold)))


# ============================================================
# ERROR TAXONOMY
# ============================================================

class ErrorKind(Enum):
    """Closed set of failure kinds crossing the adapter boundary."""

    CONFIGURATION = "CONFIGURATION"
    """Missing or invalid configuration. Fatal, never retried."""

    NETWORK_TRANSIENT = "NETWORK_TRANSIENT"
    """Venue or transport fault. The operation may be retried."""

    UNEXPECTED = "UNEXPECTED"
    """Anything else. Treat the call as failed, assume no partial success."""


# ============================================================
# EXCEPTIONS
# ============================================================

class AdapterError(Exception):
    """Base exception for exchange adapters."""

    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class ConfigurationError(AdapterError):
    """Mandatory configuration missing or invalid."""

    kind = ErrorKind.CONFIGURATION


class TradingApiError(AdapterError):
    """A trading operation failed. Do not assume partial success."""

    kind = ErrorKind.UNEXPECTED

    def is_retryable(self) -> bool:
        return self.kind is ErrorKind.NETWORK_TRANSIENT


class ExchangeNetworkError(TradingApiError):
    """
    Venue or network fault.

    The attempted operation did not necessarily fail permanently;
    the caller may retry.
    """

    kind = ErrorKind.NETWORK_TRANSIENT

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        category: Optional["Enum"] = None,
        retry_eligible: Optional["Enum"] = None,
    ):
        super().__init__(message, cause)
        self.category = category
        self.retry_eligible = retry_eligible


class InvalidArgumentError(ValueError):
    """A caller passed a value the adapter cannot represent."""
    pass
