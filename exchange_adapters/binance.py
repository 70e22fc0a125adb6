"""
Exchange Adapters - Binance Exchange Adapter.

============================================================
PURPOSE
============================================================
Binance spot implementation of the ExchangeAdapter contract.

SAFETY FEATURES:
- Simulate mode: orders are never sent, ids are fabricated
- Quantities and prices limited to 8 decimal places
- Every venue fault reclassified at the call site
- Credentials masked in logs

NOTES:
- Fees come from config and are static for the adapter's
  lifetime. Binance fees are tiered, so these are an
  approximation.
- Binance does not report on-hold balances; locked funds are
  folded into the available balance.

============================================================
"""

import logging
from decimal import Decimal
from typing import Callable, List, Optional

from .base import AbstractExchangeAdapter
from .binance_client import BinanceRestClient
from .config import AdapterConfig, ExchangeConfig, parse_bool
from .errors import UNEXPECTED_ERROR_MSG, is_network_transient, venue_call
from .logging_utils import mask_config
from .numeric import format_decimal, percentage_to_fraction, to_decimal
from .order_types import to_venue_side
from .simulation import SimulatedOrderIds
from .translators import balances_from, is_filled, market_orders_from, open_order_from
from .types import (
    BalanceInfo,
    ConfigurationError,
    InvalidArgumentError,
    MarketOrderBook,
    OpenOrder,
    OrderType,
    TradingApiError,
)
from .venue import (
    CancelOrderRequest,
    NewOrderRequest,
    OpenOrdersRequest,
    VenueClient,
    VenueOrderType,
    VenueTimeInForce,
)


logger = logging.getLogger(__name__)


ClientFactory = Callable[[AdapterConfig], VenueClient]

ORDER_BOOK_DEPTH = 100


def default_client_factory(config: AdapterConfig) -> VenueClient:
    """Build the Binance REST client."""
    return BinanceRestClient(config.api_key, config.api_secret, config.network)


class BinanceExchangeAdapter(AbstractExchangeAdapter):
    """
    Binance spot exchange adapter.

    Not safe for concurrent use during init(); after init every
    operation may be called from any thread.
    """

    KEY_PROPERTY_NAME = "key"
    SECRET_PROPERTY_NAME = "secret"
    SIMULATE_MODE_PROPERTY_NAME = "simulate-mode"
    BUY_FEE_PROPERTY_NAME = "buy-fee"
    SELL_FEE_PROPERTY_NAME = "sell-fee"

    def __init__(self, client_factory: Optional[ClientFactory] = None):
        """
        Initialize adapter.

        Args:
            client_factory: Builds the venue client from the parsed
                config. Defaults to BinanceRestClient.
        """
        super().__init__()
        self._client_factory = client_factory or default_client_factory
        self._config: Optional[AdapterConfig] = None
        self._client: Optional[VenueClient] = None
        self._simulated_ids = SimulatedOrderIds()

    # --------------------------------------------------------
    # LIFECYCLE
    # --------------------------------------------------------

    def init(self, config: ExchangeConfig) -> None:
        logger.info(f"About to initialise Binance ExchangeConfig: {mask_config(config)}")

        key = self.get_authentication_config_item(config, self.KEY_PROPERTY_NAME)
        secret = self.get_authentication_config_item(config, self.SECRET_PROPERTY_NAME)
        simulate_mode = parse_bool(
            (config.authentication_config or {}).get(self.SIMULATE_MODE_PROPERTY_NAME),
            self.SIMULATE_MODE_PROPERTY_NAME,
            default=True,
        )
        network = self.set_network_config(config)
        buy_fee = self._fee_from(config, self.BUY_FEE_PROPERTY_NAME)
        sell_fee = self._fee_from(config, self.SELL_FEE_PROPERTY_NAME)

        adapter_config = AdapterConfig(
            api_key=key,
            api_secret=secret,
            simulate_mode=simulate_mode,
            buy_fee_percentage=buy_fee,
            sell_fee_percentage=sell_fee,
            network=network,
        )

        self._client = self._client_factory(adapter_config)
        self._config = adapter_config

        logger.info(f"Buy fee % in Decimal format: {buy_fee}")
        logger.info(f"Sell fee % in Decimal format: {sell_fee}")
        if simulate_mode:
            logger.info("Simulate mode is ON: orders will not be sent to Binance")

    def _fee_from(self, config: ExchangeConfig, name: str) -> Decimal:
        value = self.get_optional_config_item(config, name)
        if value is None:
            logger.warning(f"{name} not configured, defaulting to 0%")
            return percentage_to_fraction("0")

        try:
            percentage = to_decimal(value)
        except InvalidArgumentError as e:
            raise ConfigurationError(f"{name} is not a valid percentage: {value!r}", cause=e)

        if percentage < 0 or percentage > 100:
            raise ConfigurationError(f"{name} must be between 0 and 100, got {value}")

        return percentage_to_fraction(percentage)

    def get_impl_name(self) -> str:
        return "Binance API v3"

    @property
    def simulate_mode(self) -> bool:
        return self._require_config().simulate_mode

    def _require_config(self) -> AdapterConfig:
        if self._config is None:
            raise TradingApiError("Binance Exchange Adapter not initialised: call init() first")
        return self._config

    def _require_client(self) -> VenueClient:
        self._require_config()
        return self._client

    # --------------------------------------------------------
    # MARKET DATA
    # --------------------------------------------------------

    def get_market_orders(self, market_id: str) -> MarketOrderBook:
        client = self._require_client()
        symbol = market_id.upper()
        logger.info(f"Fetching order book for market {symbol}")

        with venue_call("get_market_orders"):
            book = client.get_order_book(symbol, ORDER_BOOK_DEPTH)
            sell_orders = market_orders_from(book.get("asks"), OrderType.SELL)
            buy_orders = market_orders_from(book.get("bids"), OrderType.BUY)

        return MarketOrderBook(market_id=market_id, sell_orders=sell_orders, buy_orders=buy_orders)

    def get_latest_market_price(self, market_id: str) -> Decimal:
        client = self._require_client()

        with venue_call("get_latest_market_price"):
            statistics = client.get_24hr_price_statistics(market_id.upper())
            return to_decimal(statistics["lastPrice"])

    # --------------------------------------------------------
    # ORDER OPERATIONS
    # --------------------------------------------------------

    def get_your_open_orders(self, market_id: str) -> List[OpenOrder]:
        client = self._require_client()

        with venue_call("get_your_open_orders"):
            orders = client.get_open_orders(OpenOrdersRequest(market_id.upper()))
            return [open_order_from(order) for order in orders or [] if not is_filled(order)]

    def create_order(
        self,
        market_id: str,
        order_type: OrderType,
        quantity: Decimal,
        price: Decimal,
    ) -> str:
        config = self._require_config()
        side = to_venue_side(order_type)

        # Binance rejects more than 8 decimal places
        request = NewOrderRequest(
            symbol=market_id.upper(),
            side=side,
            order_type=VenueOrderType.LIMIT,
            time_in_force=VenueTimeInForce.GTC,
            quantity=format_decimal(quantity),
            price=format_decimal(price),
        )

        if config.simulate_mode:
            order_id = self._simulated_ids.next_id()
            logger.info(
                f"SIMULATED order {order_id}: {request.side.value} {request.quantity} "
                f"{request.symbol} @ {request.price}"
            )
            return order_id

        with venue_call("create_order"):
            response = self._client.new_order(request)
            logger.debug(f"Create order response: {response}")
            return str(response["orderId"])

    def cancel_order(self, order_id: str, market_id: str) -> bool:
        try:
            symbol = market_id.upper()
            config = self._require_config()
            if config.simulate_mode and self._simulated_ids.issued(order_id):
                logger.info(f"SIMULATED cancel of order {order_id} on {symbol}")
                return True

            self._client.cancel_order(CancelOrderRequest(symbol, str(order_id)))
            logger.debug(f"Order Id: {order_id} from Market Id: {symbol} was cancelled successfully")
            return True

        except Exception as e:
            if is_network_transient(e):
                logger.error(f"Failed to cancel order on exchange. Order Id: {order_id}: {e}")
            else:
                logger.exception(UNEXPECTED_ERROR_MSG)

        return False

    # --------------------------------------------------------
    # ACCOUNT
    # --------------------------------------------------------

    def get_balance_info(self) -> BalanceInfo:
        client = self._require_client()

        with venue_call("get_balance_info"):
            account = client.get_account()
            # Binance reports free + locked only; on-hold is unknown
            return BalanceInfo(balances_available=balances_from(account.get("balances")))

    def get_percentage_of_buy_order_taken_for_exchange_fee(self, market_id: str) -> Decimal:
        return self._require_config().buy_fee_percentage

    def get_percentage_of_sell_order_taken_for_exchange_fee(self, market_id: str) -> Decimal:
        return self._require_config().sell_fee_percentage
