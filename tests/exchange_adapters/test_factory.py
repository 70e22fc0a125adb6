"""Adapter factory tests."""

from decimal import Decimal

import pytest

from exchange_adapters import (
    AdapterFactory,
    BinanceExchangeAdapter,
    ConfigurationError,
    ExchangeConfig,
    ExchangeId,
    OrderType,
    create_adapter,
)


@pytest.fixture(autouse=True)
def isolated_registry(monkeypatch):
    """Give each test its own copy of the factory registry."""
    monkeypatch.setattr(AdapterFactory, "_creators", dict(AdapterFactory._creators))
    return AdapterFactory._creators


class TestAdapterFactory:
    """Tests for AdapterFactory."""

    def test_list_supported_exchanges(self):
        """Test listing supported exchanges."""
        supported = AdapterFactory.list_supported()

        assert ExchangeId.BINANCE.value in supported
        assert ExchangeId.MOCK.value in supported
        assert supported == sorted(supported)

    def test_create_binance_adapter(self):
        """Created adapters are not yet initialised."""
        adapter = AdapterFactory.create("Binance")

        assert isinstance(adapter, BinanceExchangeAdapter)
        assert adapter.get_impl_name() == "Binance API v3"

    def test_create_unsupported_exchange(self):
        """Test creating unsupported exchange."""
        with pytest.raises(ValueError, match="Unsupported exchange"):
            AdapterFactory.create("unsupported_exchange")

    def test_register_and_unregister(self, isolated_registry):
        """Custom creators can be registered."""
        AdapterFactory.register("Custom", BinanceExchangeAdapter)

        assert "custom" in isolated_registry
        assert isinstance(AdapterFactory.create("custom"), BinanceExchangeAdapter)

        AdapterFactory.unregister("custom")

        assert "custom" not in AdapterFactory.list_supported()

    def test_registration_left_behind(self):
        """Registers without cleanup; the next test checks it did not leak."""
        AdapterFactory.register("leftover", BinanceExchangeAdapter)

        assert "leftover" in AdapterFactory.list_supported()

    def test_registry_restored_between_tests(self):
        """Earlier registrations are gone."""
        assert "leftover" not in AdapterFactory.list_supported()
        assert AdapterFactory.list_supported() == ["binance", "mock"]


class TestCreateAdapter:
    """Tests for create_adapter."""

    def test_mock_adapter_is_initialised(self, config_factory):
        """create_adapter runs init with the config."""
        adapter = create_adapter(config_factory(simulate_mode="false"), exchange_id="mock")

        assert adapter.simulate_mode is False
        assert adapter.get_market_orders("BTCUSDT").buy_orders == ()
        assert adapter.create_order("BTCUSDT", OrderType.BUY, Decimal("1"), Decimal("4")) == "1000"

    def test_adapter_id_from_config(self, config_factory):
        """The config's adapter id picks the adapter."""
        config = config_factory(simulate_mode="true")
        config.adapter = "mock"

        adapter = create_adapter(config)

        assert adapter.create_order("BTCUSDT", OrderType.SELL, Decimal("1"), Decimal("4")) == "1"

    def test_invalid_config(self):
        """Configuration errors propagate from init."""
        with pytest.raises(ConfigurationError):
            create_adapter(ExchangeConfig(), exchange_id="mock")
