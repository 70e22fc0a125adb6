"""Shared fixtures for exchange adapter tests."""

import pytest

from exchange_adapters import (
    BinanceExchangeAdapter,
    ExchangeConfig,
    MockVenueClient,
    MockVenueState,
)


# Literal Binance spot payloads

ORDER_BOOK = {
    "lastUpdateId": 1027024,
    "bids": [
        ["4.00000000", "431.00000000"],
        ["3.99000000", "12.50000000"],
    ],
    "asks": [
        ["4.00000200", "12.00000000"],
        ["4.10000000", "3.00000000"],
        ["4.20000000", "1.00000000"],
    ],
}

OPEN_ORDERS = [
    {
        "symbol": "BTCUSDT",
        "orderId": 28,
        "clientOrderId": "6gCrw2kRUAF9CvJDGP16IP",
        "price": "100",
        "origQty": "10",
        "executedQty": "3",
        "cummulativeQuoteQty": "300",
        "status": "PARTIALLY_FILLED",
        "timeInForce": "GTC",
        "type": "LIMIT",
        "side": "BUY",
        "time": 1499827319559,
        "updateTime": 1499827319559,
    },
    {
        "symbol": "BTCUSDT",
        "orderId": 29,
        "clientOrderId": "xyz",
        "price": "110.5",
        "origQty": "2",
        "executedQty": "2",
        "status": "FILLED",
        "timeInForce": "GTC",
        "type": "LIMIT",
        "side": "SELL",
        "time": 1499827320000,
        "updateTime": 1499827320000,
    },
    {
        "symbol": "BTCUSDT",
        "orderId": 30,
        "clientOrderId": "abc",
        "price": "120.00000000",
        "origQty": "1.50000000",
        "executedQty": "0.00000000",
        "status": "NEW",
        "timeInForce": "GTC",
        "type": "LIMIT",
        "side": "SELL",
        "time": 1499827321000,
        "updateTime": 1499827321000,
    },
]

ACCOUNT = {
    "makerCommission": 15,
    "takerCommission": 15,
    "canTrade": True,
    "balances": [
        {"asset": "BTC", "free": "1.5", "locked": "0.5"},
        {"asset": "USDT", "free": "1000.00000000", "locked": "0.00000000"},
    ],
}

TICKER = {
    "symbol": "BTCUSDT",
    "lastPrice": "4.00000200",
    "bidPrice": "4.00000000",
    "askPrice": "4.00000200",
}


def make_config(simulate_mode="false", **optional) -> ExchangeConfig:
    authentication = {"key": "test-api-key", "secret": "test-api-secret"}
    if simulate_mode is not None:
        authentication["simulate-mode"] = simulate_mode
    return ExchangeConfig(
        authentication_config=authentication,
        optional_config=optional or {"buy-fee": "0.1", "sell-fee": "0.2"},
    )


@pytest.fixture
def config_factory():
    """Build an ExchangeConfig: config_factory(simulate_mode="true", **{"buy-fee": "0.1"})."""
    return make_config


@pytest.fixture
def venue():
    """Mock venue loaded with one BTCUSDT market."""
    return MockVenueClient(MockVenueState(
        order_books={"BTCUSDT": ORDER_BOOK},
        open_orders={"BTCUSDT": [dict(order) for order in OPEN_ORDERS]},
        tickers={"BTCUSDT": TICKER},
        account=ACCOUNT,
    ))


@pytest.fixture
def adapter(venue):
    """Live-mode adapter wired to the mock venue."""
    adapter = BinanceExchangeAdapter(client_factory=lambda config: venue)
    adapter.init(make_config(simulate_mode="false"))
    return adapter


@pytest.fixture
def simulated_adapter(venue):
    """Simulate-mode adapter wired to the mock venue."""
    adapter = BinanceExchangeAdapter(client_factory=lambda config: venue)
    adapter.init(make_config(simulate_mode="true"))
    return adapter
