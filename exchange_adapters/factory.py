"""
Exchange Adapter Factory.

============================================================
PURPOSE
============================================================
Factory pattern for creating exchange adapter instances.

============================================================
USAGE
============================================================
```python
# Create and initialise from a YAML file
config = ExchangeConfig.from_yaml(Path("config/exchange.yaml"))
adapter = create_adapter(config)

# Create by id, initialise later
adapter = AdapterFactory.create("binance")
adapter.init(config)

# Binance adapter backed by an in-memory venue
adapter = AdapterFactory.create("mock")
```

============================================================
"""

import logging
from enum import Enum
from typing import Callable, Dict, List, Optional

from .base import ExchangeAdapter
from .binance import BinanceExchangeAdapter
from .config import ExchangeConfig
from .mock import MockVenueClient


logger = logging.getLogger(__name__)


# ============================================================
# EXCHANGE IDENTIFIERS
# ============================================================

class ExchangeId(Enum):
    """Supported exchange identifiers."""

    BINANCE = "binance"
    MOCK = "mock"


AdapterCreator = Callable[[], ExchangeAdapter]


# ============================================================
# ADAPTER FACTORY
# ============================================================

class AdapterFactory:
    """
    Factory for creating exchange adapters.

    Adapters are returned uninitialised; call init() with an
    ExchangeConfig, or use create_adapter().
    """

    _creators: Dict[str, AdapterCreator] = {
        ExchangeId.BINANCE.value: BinanceExchangeAdapter,
        ExchangeId.MOCK.value: lambda: BinanceExchangeAdapter(
            client_factory=lambda config: MockVenueClient()
        ),
    }

    @classmethod
    def register(cls, exchange_id: str, creator: AdapterCreator) -> None:
        """
        Register an adapter creator.

        Args:
            exchange_id: Exchange identifier
            creator: Zero-argument callable returning an adapter
        """
        cls._creators[exchange_id.lower()] = creator

    @classmethod
    def unregister(cls, exchange_id: str) -> None:
        """Unregister an adapter."""
        cls._creators.pop(exchange_id.lower(), None)

    @classmethod
    def list_supported(cls) -> List[str]:
        """List registered exchange ids."""
        return sorted(cls._creators)

    @classmethod
    def create(cls, exchange_id: str) -> ExchangeAdapter:
        """
        Create an exchange adapter.

        Raises:
            ValueError: If exchange not supported
        """
        creator = cls._creators.get(exchange_id.lower())
        if creator is None:
            raise ValueError(
                f"Unsupported exchange: {exchange_id}. "
                f"Supported: {', '.join(cls.list_supported())}"
            )

        adapter = creator()
        logger.info(f"Created {adapter.__class__.__name__} for {exchange_id}")
        return adapter


def create_adapter(config: ExchangeConfig, exchange_id: Optional[str] = None) -> ExchangeAdapter:
    """
    Create and initialise an adapter.

    Args:
        config: Exchange configuration
        exchange_id: Overrides config.adapter

    Returns:
        Initialised ExchangeAdapter

    Raises:
        ValueError: If exchange not supported
        ConfigurationError: If config is invalid
    """
    adapter = AdapterFactory.create(exchange_id or config.adapter)
    adapter.init(config)
    return adapter
