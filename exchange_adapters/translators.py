"""
Exchange Adapters - Model Translators.

============================================================
PURPOSE
============================================================
Pure functions mapping Binance-shaped payloads into the
canonical trading model.

RULES:
- Stateless, no I/O, no exception handling
- Every number goes through the numeric normalizer

============================================================
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, Mapping, Sequence, Tuple, Union

from .numeric import to_decimal
from .order_types import from_venue_side
from .types import MarketOrder, OpenOrder, OrderType
from .venue import VenueOrderStatus


# Wire order book level: ["4.00000000", "431.00000000"]
OrderBookEntry = Union[Sequence[Any], Mapping[str, Any]]


# ============================================================
# ORDER BOOK
# ============================================================

def market_order_from(entry: OrderBookEntry, order_type: OrderType) -> MarketOrder:
    """
    Translate one order book level.

    Args:
        entry: [price, qty] pair or mapping with "price"/"qty"
        order_type: Side of the book the entry came from

    Returns:
        MarketOrder
    """
    if isinstance(entry, Mapping):
        price = to_decimal(entry["price"])
        quantity = to_decimal(entry["qty"])
    else:
        price = to_decimal(entry[0])
        quantity = to_decimal(entry[1])

    return MarketOrder(
        type=order_type,
        price=price,
        quantity=quantity,
        total=price * quantity,
    )


def market_orders_from(entries: Iterable[OrderBookEntry], order_type: OrderType) -> Tuple[MarketOrder, ...]:
    """Translate a whole side of the book, preserving venue ordering."""
    return tuple(market_order_from(entry, order_type) for entry in entries or ())


# ============================================================
# OPEN ORDERS
# ============================================================

def is_filled(order: Mapping[str, Any]) -> bool:
    """Whether the venue reports the order as fully filled."""
    return order.get("status") == VenueOrderStatus.FILLED.value


def creation_date_from(millis: Union[int, str]) -> datetime:
    """Venue millisecond epoch to an aware UTC datetime, millisecond exact."""
    millis = int(millis)
    seconds, remainder = divmod(millis, 1000)
    return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(microsecond=remainder * 1000)


def open_order_from(order: Mapping[str, Any]) -> OpenOrder:
    """
    Translate a venue order.

    Outstanding quantity is origQty - executedQty and the
    outstanding total is price x outstanding quantity.
    """
    original_quantity = to_decimal(order["origQty"])
    executed_quantity = to_decimal(order["executedQty"])
    price = to_decimal(order["price"])
    outstanding = original_quantity - executed_quantity

    return OpenOrder(
        id=str(order["orderId"]),
        creation_date=creation_date_from(order["time"]),
        market_id=order["symbol"],
        type=from_venue_side(order["side"]),
        price=price,
        quantity=outstanding,
        original_quantity=original_quantity,
        total=price * outstanding,
    )


# ============================================================
# BALANCES
# ============================================================

def balance_value_from(asset_balance: Mapping[str, Any]) -> Decimal:
    """Free plus locked for one asset."""
    return to_decimal(asset_balance["free"]) + to_decimal(asset_balance["locked"])


def balances_from(asset_balances: Iterable[Mapping[str, Any]]) -> Dict[str, Decimal]:
    """
    Aggregate venue balances keyed by asset.

    Raises:
        ValueError: If an asset appears twice
    """
    balances: Dict[str, Decimal] = {}
    for asset_balance in asset_balances or ():
        asset = asset_balance["asset"]
        if asset in balances:
            raise ValueError(f"Duplicate balance entry for asset {asset}")
        balances[asset] = balance_value_from(asset_balance)
    return balances
