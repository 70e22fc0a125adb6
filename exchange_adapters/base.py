"""
Exchange Adapters - Exchange Adapter Base.

============================================================
PURPOSE
============================================================
Abstract interface for exchange adapters, plus the shared base
every concrete adapter builds on.

DESIGN PRINCIPLES:
- Exchange-agnostic interface
- Any adapter is interchangeable behind ExchangeAdapter
- Fully testable with a mock venue client

============================================================
"""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .config import DEFAULT_NON_FATAL_ERROR_CODES, ExchangeConfig, NetworkConfig
from .types import (
    BalanceInfo,
    ConfigurationError,
    MarketOrderBook,
    OpenOrder,
    OrderType,
)


logger = logging.getLogger(__name__)


# ============================================================
# ABSTRACT EXCHANGE ADAPTER
# ============================================================

class ExchangeAdapter(ABC):
    """
    Uniform trading contract used by strategy code.

    All operations are blocking. Market ids are upper-cased by the
    adapter before any venue call.
    """

    # --------------------------------------------------------
    # LIFECYCLE
    # --------------------------------------------------------

    @abstractmethod
    def init(self, config: ExchangeConfig) -> None:
        """
        Parse configuration and build the venue client.

        Raises:
            ConfigurationError: If mandatory config is missing or invalid
        """
        pass

    @abstractmethod
    def get_impl_name(self) -> str:
        """Human-readable adapter name."""
        pass

    # --------------------------------------------------------
    # MARKET DATA
    # --------------------------------------------------------

    @abstractmethod
    def get_market_orders(self, market_id: str) -> MarketOrderBook:
        """
        Get the current order book.

        Raises:
            TradingApiError: If the fetch fails
        """
        pass

    @abstractmethod
    def get_latest_market_price(self, market_id: str) -> Decimal:
        """Get the last traded price."""
        pass

    # --------------------------------------------------------
    # ORDER OPERATIONS
    # --------------------------------------------------------

    @abstractmethod
    def get_your_open_orders(self, market_id: str) -> List[OpenOrder]:
        """Get our open orders on a market."""
        pass

    @abstractmethod
    def create_order(
        self,
        market_id: str,
        order_type: OrderType,
        quantity: Decimal,
        price: Decimal,
    ) -> str:
        """
        Place a limit order.

        Returns:
            Order id

        Raises:
            InvalidArgumentError: If order_type is not BUY or SELL
            TradingApiError: If placement fails
        """
        pass

    @abstractmethod
    def cancel_order(self, order_id: str, market_id: str) -> bool:
        """
        Cancel an order.

        Returns:
            True if the venue confirmed the cancel, False otherwise.
            Never raises for venue faults.
        """
        pass

    # --------------------------------------------------------
    # ACCOUNT
    # --------------------------------------------------------

    @abstractmethod
    def get_balance_info(self) -> BalanceInfo:
        """Get wallet balances."""
        pass

    @abstractmethod
    def get_percentage_of_buy_order_taken_for_exchange_fee(self, market_id: str) -> Decimal:
        """Fraction of a buy order taken as fee."""
        pass

    @abstractmethod
    def get_percentage_of_sell_order_taken_for_exchange_fee(self, market_id: str) -> Decimal:
        """Fraction of a sell order taken as fee."""
        pass


# ============================================================
# SHARED BASE
# ============================================================

class AbstractExchangeAdapter(ExchangeAdapter):
    """
    Shared base for concrete adapters.

    Owns network config parsing and config item lookup.
    """

    CONNECTION_TIMEOUT_PROPERTY_NAME = "connection-timeout"
    MAX_RETRIES_PROPERTY_NAME = "max-retries"
    NON_FATAL_ERROR_CODES_PROPERTY_NAME = "non-fatal-error-codes"
    NON_FATAL_ERROR_MESSAGES_PROPERTY_NAME = "non-fatal-error-messages"

    def __init__(self):
        self._network_config: Optional[NetworkConfig] = None

    @property
    def network_config(self) -> NetworkConfig:
        return self._network_config or NetworkConfig()

    # --------------------------------------------------------
    # CONFIG ITEMS
    # --------------------------------------------------------

    @staticmethod
    def get_authentication_config_item(config: ExchangeConfig, name: str) -> str:
        """
        Get a mandatory authentication item.

        Raises:
            ConfigurationError: If the item is missing or blank
        """
        value = (config.authentication_config or {}).get(name)
        if value is None or not str(value).strip():
            raise ConfigurationError(f"Authentication config item '{name}' is missing or empty")
        return str(value).strip()

    @staticmethod
    def get_optional_config_item(config: ExchangeConfig, name: str) -> Optional[str]:
        """Get an optional item, None when absent."""
        value = (config.optional_config or {}).get(name)
        if value is None or not str(value).strip():
            return None
        return str(value).strip()

    # --------------------------------------------------------
    # NETWORK CONFIG
    # --------------------------------------------------------

    def set_network_config(self, config: ExchangeConfig) -> NetworkConfig:
        """
        Parse and store the network section.

        Raises:
            ConfigurationError: If a value is not valid
        """
        section: Dict[str, Any] = config.network_config or {}
        defaults = NetworkConfig()

        timeout = section.get(self.CONNECTION_TIMEOUT_PROPERTY_NAME, defaults.connection_timeout)
        try:
            timeout = float(timeout)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid {self.CONNECTION_TIMEOUT_PROPERTY_NAME}: {timeout!r}") from None
        if timeout <= 0:
            raise ConfigurationError(f"{self.CONNECTION_TIMEOUT_PROPERTY_NAME} must be > 0, got {timeout}")

        retries = section.get(self.MAX_RETRIES_PROPERTY_NAME, defaults.max_retries)
        try:
            retries = int(retries)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid {self.MAX_RETRIES_PROPERTY_NAME}: {retries!r}") from None
        if retries < 0:
            raise ConfigurationError(f"{self.MAX_RETRIES_PROPERTY_NAME} must be >= 0, got {retries}")

        codes = section.get(self.NON_FATAL_ERROR_CODES_PROPERTY_NAME)
        if codes is None:
            error_codes = DEFAULT_NON_FATAL_ERROR_CODES
        else:
            if isinstance(codes, str):
                codes = [code for code in codes.split(",") if code.strip()]
            try:
                error_codes = frozenset(int(code) for code in codes)
            except (TypeError, ValueError):
                raise ConfigurationError(
                    f"Invalid {self.NON_FATAL_ERROR_CODES_PROPERTY_NAME}: {codes!r}"
                ) from None

        messages = section.get(self.NON_FATAL_ERROR_MESSAGES_PROPERTY_NAME)
        if messages is None:
            error_messages = defaults.non_fatal_error_messages
        elif isinstance(messages, str):
            error_messages = (messages,)
        else:
            error_messages = tuple(str(message) for message in messages)

        self._network_config = NetworkConfig(
            connection_timeout=timeout,
            max_retries=retries,
            non_fatal_error_codes=error_codes,
            non_fatal_error_messages=error_messages,
        )
        logger.info(
            f"Network config: timeout={timeout}s retries={retries} "
            f"non_fatal_codes={sorted(error_codes)}"
        )
        return self._network_config
