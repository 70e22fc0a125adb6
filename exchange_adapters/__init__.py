"""
Exchange Adapters Package.

============================================================
PURPOSE
============================================================
Uniform trading contract over cryptocurrency exchanges.

AVAILABLE ADAPTERS:
- BinanceExchangeAdapter: Binance spot API (with simulate mode)

VENUE CLIENTS:
- BinanceRestClient: Binance spot REST v3
- MockVenueClient: For testing

LEAF COMPONENTS:
- numeric: exact decimals in, 8-place half-up strings out
- translators: venue payloads -> canonical model
- order_types: BUY/SELL <-> venue side
- errors: venue faults -> ExchangeNetworkError / TradingApiError

============================================================
"""

# Canonical types
from .types import (
    OrderType,
    MarketOrder,
    MarketOrderBook,
    OpenOrder,
    BalanceInfo,
    ErrorKind,
    AdapterError,
    ConfigurationError,
    TradingApiError,
    ExchangeNetworkError,
    InvalidArgumentError,
)

# Configuration
from .config import (
    ExchangeConfig,
    NetworkConfig,
    AdapterConfig,
)

# Venue boundary
from .venue import (
    VenueClient,
    VenueOrderSide,
    VenueOrderStatus,
    VenueError,
    VenueApiError,
    VenueRequestError,
    OpenOrdersRequest,
    NewOrderRequest,
    CancelOrderRequest,
)

# Leaf components
from .numeric import format_decimal, percentage_to_fraction, to_decimal
from .order_types import from_venue_side, to_venue_side
from .translators import (
    balance_value_from,
    balances_from,
    market_order_from,
    market_orders_from,
    open_order_from,
)
from .errors import (
    ErrorCategory,
    RetryEligibility,
    classify,
    map_binance_error,
    venue_call,
)

# Adapters
from .base import ExchangeAdapter, AbstractExchangeAdapter
from .binance import BinanceExchangeAdapter
from .binance_client import BinanceRestClient
from .mock import MockVenueClient, MockVenueState

# Factory
from .factory import AdapterFactory, ExchangeId, create_adapter


__all__ = [
    # Types
    "OrderType",
    "MarketOrder",
    "MarketOrderBook",
    "OpenOrder",
    "BalanceInfo",
    "ErrorKind",
    "AdapterError",
    "ConfigurationError",
    "TradingApiError",
    "ExchangeNetworkError",
    "InvalidArgumentError",
    # Config
    "ExchangeConfig",
    "NetworkConfig",
    "AdapterConfig",
    # Venue
    "VenueClient",
    "VenueOrderSide",
    "VenueOrderStatus",
    "VenueError",
    "VenueApiError",
    "VenueRequestError",
    "OpenOrdersRequest",
    "NewOrderRequest",
    "CancelOrderRequest",
    # Leaf components
    "format_decimal",
    "percentage_to_fraction",
    "to_decimal",
    "from_venue_side",
    "to_venue_side",
    "balance_value_from",
    "balances_from",
    "market_order_from",
    "market_orders_from",
    "open_order_from",
    "ErrorCategory",
    "RetryEligibility",
    "classify",
    "map_binance_error",
    "venue_call",
    # Adapters
    "ExchangeAdapter",
    "AbstractExchangeAdapter",
    "BinanceExchangeAdapter",
    "BinanceRestClient",
    "MockVenueClient",
    "MockVenueState",
    # Factory
    "AdapterFactory",
    "ExchangeId",
    "create_adapter",
]
