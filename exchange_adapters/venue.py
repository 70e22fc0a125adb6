"""
Exchange Adapters - Venue Client Boundary.

============================================================
PURPOSE
============================================================
Narrow capability interface the adapter depends on.

Any venue client (Binance REST, a mock, a vendor SDK wrapper)
can be substituted as long as it implements VenueClient and
returns Binance-shaped payloads.

CAPABILITIES:
- Order book fetch
- Order lifecycle (open orders, new order, cancel)
- 24h ticker statistics
- Account fetch

============================================================
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


# ============================================================
# VENUE ENUMS
# ============================================================

class VenueOrderSide(Enum):
    """Order side as the venue encodes it."""

    BUY = "BUY"
    SELL = "SELL"


class VenueOrderType(Enum):
    """Venue order types used by the adapter."""

    LIMIT = "LIMIT"


class VenueTimeInForce(Enum):
    """Venue time in force."""

    GTC = "GTC"


class VenueOrderStatus(Enum):
    """Venue order status."""

    NEW = "NEW"
    PARTIALLY_FILLED = "PARTIALLY_FILLED"
    FILLED = "FILLED"
    CANCELED = "CANCELED"
    PENDING_CANCEL = "PENDING_CANCEL"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"


# ============================================================
# VENUE FAULTS
# ============================================================

class VenueError(Exception):
    """Base class for faults raised by venue clients."""
    pass


class VenueApiError(VenueError):
    """The venue answered with an error payload."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: Optional[int] = None,
    ):
        super().__init__(f"APIError(code={code}): {message}")
        self.code = code
        self.message = message
        self.http_status = http_status


class VenueRequestError(VenueError):
    """The venue response could not be understood."""
    pass


# ============================================================
# REQUEST TYPES
# ============================================================

@dataclass(frozen=True)
class OpenOrdersRequest:
    """Request for open orders on one market."""

    symbol: str
    recv_window: int = 5000


@dataclass(frozen=True)
class NewOrderRequest:
    """Request to place an order. Quantity and price are pre-formatted strings."""

    symbol: str
    side: VenueOrderSide
    order_type: VenueOrderType
    time_in_force: VenueTimeInForce
    quantity: str
    price: str
    recv_window: int = 5000

    def to_params(self) -> Dict[str, str]:
        return {
            "symbol": self.symbol,
            "side": self.side.value,
            "type": self.order_type.value,
            "timeInForce": self.time_in_force.value,
            "quantity": self.quantity,
            "price": self.price,
            "recvWindow": str(self.recv_window),
        }


@dataclass(frozen=True)
class CancelOrderRequest:
    """Request to cancel one order."""

    symbol: str
    order_id: str
    recv_window: int = 5000


# ============================================================
# ABSTRACT VENUE CLIENT
# ============================================================

class VenueClient(ABC):
    """
    Venue capability set used by exchange adapters.

    Every method may raise VenueError (or a subclass) or a
    transport exception.
    """

    @abstractmethod
    def get_order_book(self, symbol: str, limit: int) -> Dict[str, Any]:
        """
        Get an order book snapshot.

        Returns:
            {"lastUpdateId": int, "bids": [[price, qty], ...], "asks": [[price, qty], ...]}
        """
        pass

    @abstractmethod
    def get_open_orders(self, request: OpenOrdersRequest) -> List[Dict[str, Any]]:
        """Get open orders for a market."""
        pass

    @abstractmethod
    def new_order(self, request: NewOrderRequest) -> Dict[str, Any]:
        """
        Place an order.

        Returns:
            Venue acknowledgement containing at least "orderId"
        """
        pass

    @abstractmethod
    def cancel_order(self, request: CancelOrderRequest) -> Dict[str, Any]:
        """Cancel an order."""
        pass

    @abstractmethod
    def get_24hr_price_statistics(self, symbol: str) -> Dict[str, Any]:
        """Get 24 hour rolling ticker statistics (contains "lastPrice")."""
        pass

    @abstractmethod
    def get_account(self) -> Dict[str, Any]:
        """Get account information (contains "balances")."""
        pass
