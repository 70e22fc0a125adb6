"""
Exchange Adapters - Mock Venue Client.

============================================================
PURPOSE
============================================================
In-memory VenueClient for tests and dry runs.

FEATURES:
- Records every call with its arguments
- Scriptable Binance-shaped responses
- Error injection (next call or every call of a method)

============================================================
"""

import itertools
import logging
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .venue import (
    CancelOrderRequest,
    NewOrderRequest,
    OpenOrdersRequest,
    VenueApiError,
    VenueClient,
)


logger = logging.getLogger(__name__)


# ============================================================
# MOCK CONFIGURATION
# ============================================================

@dataclass
class MockVenueState:
    """Responses served by the mock."""

    order_books: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    """Order book payload by symbol."""

    open_orders: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    """Open order payloads by symbol."""

    tickers: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    """24h ticker payload by symbol."""

    account: Dict[str, Any] = field(default_factory=lambda: {"balances": []})
    """Account payload."""

    first_order_id: int = 1000
    """First venue order id handed out by new_order."""


@dataclass(frozen=True)
class MockCall:
    """One recorded call."""

    method: str
    args: Tuple[Any, ...]


# ============================================================
# MOCK VENUE CLIENT
# ============================================================

class MockVenueClient(VenueClient):
    """
    Mock venue for testing adapters.

    Unknown symbols return empty books, no open orders, and a
    -1121 "Invalid symbol." error for tickers, as Binance does.
    """

    def __init__(self, state: Optional[MockVenueState] = None):
        self.state = state or MockVenueState()
        self.calls: List[MockCall] = []

        self._order_ids = itertools.count(self.state.first_order_id)
        self._fail_next: Optional[BaseException] = None
        self._fail_always: Dict[str, BaseException] = {}

    # --------------------------------------------------------
    # ERROR INJECTION
    # --------------------------------------------------------

    def fail_next(self, error: BaseException) -> None:
        """Raise error from the next call, whatever it is."""
        self._fail_next = error

    def fail_always(self, method: str, error: BaseException) -> None:
        """Raise error from every call to method."""
        self._fail_always[method] = error

    # --------------------------------------------------------
    # INSPECTION
    # --------------------------------------------------------

    def calls_to(self, method: str) -> List[MockCall]:
        return [call for call in self.calls if call.method == method]

    @property
    def symbols_seen(self) -> List[str]:
        """Every market symbol passed to the venue, in call order."""
        symbols = []
        for call in self.calls:
            for arg in call.args:
                symbol = getattr(arg, "symbol", arg if isinstance(arg, str) else None)
                if symbol is not None:
                    symbols.append(symbol)
        return symbols

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append(MockCall(method, args))

        if self._fail_next is not None:
            error, self._fail_next = self._fail_next, None
            raise error
        if method in self._fail_always:
            raise self._fail_always[method]

    # --------------------------------------------------------
    # VENUE CLIENT
    # --------------------------------------------------------

    def get_order_book(self, symbol: str, limit: int) -> Dict[str, Any]:
        self._record("get_order_book", symbol, limit)
        book = deepcopy(self.state.order_books.get(symbol, {"lastUpdateId": 0, "bids": [], "asks": []}))
        book["bids"] = book.get("bids", [])[:limit]
        book["asks"] = book.get("asks", [])[:limit]
        return book

    def get_open_orders(self, request: OpenOrdersRequest) -> List[Dict[str, Any]]:
        self._record("get_open_orders", request)
        return deepcopy(self.state.open_orders.get(request.symbol, []))

    def new_order(self, request: NewOrderRequest) -> Dict[str, Any]:
        self._record("new_order", request)
        order_id = next(self._order_ids)
        logger.debug(f"Mock order {order_id} accepted: {request}")
        return {
            "symbol": request.symbol,
            "orderId": order_id,
            "status": "NEW",
            "side": request.side.value,
            "type": request.order_type.value,
            "timeInForce": request.time_in_force.value,
            "origQty": request.quantity,
            "price": request.price,
            "executedQty": "0",
        }

    def cancel_order(self, request: CancelOrderRequest) -> Dict[str, Any]:
        self._record("cancel_order", request)
        orders = self.state.open_orders.get(request.symbol, [])
        for order in orders:
            if str(order.get("orderId")) == str(request.order_id):
                orders.remove(order)
                return {**order, "status": "CANCELED"}
        raise VenueApiError(-2011, "Unknown order sent.", 400)

    def get_24hr_price_statistics(self, symbol: str) -> Dict[str, Any]:
        self._record("get_24hr_price_statistics", symbol)
        if symbol not in self.state.tickers:
            raise VenueApiError(-1121, "Invalid symbol.", 400)
        return deepcopy(self.state.tickers[symbol])

    def get_account(self) -> Dict[str, Any]:
        self._record("get_account")
        return deepcopy(self.state.account)
