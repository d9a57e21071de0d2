"""Shared test fixtures for quicky."""

import json
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from quicky.config import AppSettings, ExchangeSettings, TradingSettings
from quicky.exchange.client import BybitRestClient
from quicky.exchange.transport import HttpResponse, HttpTransport
from quicky.models import TradingContext


def json_response(payload: dict, status: int = 200) -> HttpResponse:
    """Wrap a payload as the raw HTTP reply a transport would return."""
    return HttpResponse(status=status, body=json.dumps(payload).encode("utf-8"))


def ticker_response(last_price: str = "100.00", symbol: str = "BTCUSD") -> HttpResponse:
    return json_response(
        {
            "ret_code": 0,
            "ret_msg": "OK",
            "ext_code": "",
            "ext_info": "",
            "result": [{"symbol": symbol, "last_price": last_price, "bid_price": last_price}],
            "time_now": "1577444332.192859",
        }
    )


def order_ok_response() -> HttpResponse:
    return json_response({"ret_code": 0, "ret_msg": "OK", "ext_code": "", "ext_info": ""})


@pytest.fixture
def context() -> TradingContext:
    """Testnet context with a 0.01 tick for BTCUSD and 0.2% stop-loss."""
    return TradingContext(
        api_key="live-key",
        api_secret="live-secret",
        testnet_api_key="test-key",
        testnet_api_secret="test-secret",
        tick_steps={"BTCUSD": Decimal("0.01"), "XRPUSD": Decimal("0.0001")},
        stop_loss_pcnt=Decimal("0.2"),
        use_testnet=True,
    )


@pytest.fixture
def transport() -> MagicMock:
    """Transport fake; tests set .get/.post return values or side effects."""
    return MagicMock(spec=HttpTransport)


@pytest.fixture
def client(context: TradingContext, transport: MagicMock) -> BybitRestClient:
    return BybitRestClient(context, transport)


@pytest.fixture
def mock_settings() -> AppSettings:
    """AppSettings with dummy credentials for both environments."""
    return AppSettings(
        log_level="DEBUG",
        exchange=ExchangeSettings(
            api_key="live-key",  # type: ignore[arg-type]
            api_secret="live-secret",  # type: ignore[arg-type]
            testnet_api_key="test-key",  # type: ignore[arg-type]
            testnet_api_secret="test-secret",  # type: ignore[arg-type]
        ),
        trading=TradingSettings(
            use_testnet=True,
            tick_steps={"BTCUSD": Decimal("0.01")},
        ),
    )


@pytest.fixture
def make_json_response():
    return json_response


@pytest.fixture
def make_ticker_response():
    return ticker_response


@pytest.fixture
def make_order_ok_response():
    return order_ok_response
