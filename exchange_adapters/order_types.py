"""
Exchange Adapters - Order Type Mapper.

Bidirectional mapping between the bot's OrderType and the
venue's order side. Anything else is rejected, never defaulted.
"""

import logging
from typing import Union

from .types import InvalidArgumentError, OrderType
from .venue import VenueOrderSide


logger = logging.getLogger(__name__)


_TO_VENUE = {
    OrderType.BUY: VenueOrderSide.BUY,
    OrderType.SELL: VenueOrderSide.SELL,
}

_FROM_VENUE = {venue_side: order_type for order_type, venue_side in _TO_VENUE.items()}


def to_venue_side(order_type: OrderType) -> VenueOrderSide:
    """
    Map a bot order type to the venue side.

    Raises:
        InvalidArgumentError: If order_type is not BUY or SELL
    """
    venue_side = _TO_VENUE.get(order_type) if isinstance(order_type, OrderType) else None
    if venue_side is None:
        message = (
            f"Invalid order type: {order_type} - Can only be "
            f"{OrderType.BUY.string_value} or {OrderType.SELL.string_value}"
        )
        logger.error(message)
        raise InvalidArgumentError(message)
    return venue_side


def from_venue_side(side: Union[VenueOrderSide, str]) -> OrderType:
    """
    Map a venue side (enum or wire string) to the bot order type.

    Raises:
        InvalidArgumentError: If side is not BUY or SELL
    """
    venue_side = side
    if isinstance(side, str):
        try:
            venue_side = VenueOrderSide(side)
        except ValueError:
            venue_side = None

    order_type = _FROM_VENUE.get(venue_side) if isinstance(venue_side, VenueOrderSide) else None
    if order_type is None:
        message = (
            f"Invalid order side: {side} - Can only be "
            f"{VenueOrderSide.BUY.name} or {VenueOrderSide.SELL.name}"
        )
        logger.error(message)
        raise InvalidArgumentError(message)
    return order_type
