"""Data models for quick limit order placement.

CRITICAL: All prices, tick sizes and percentages use Decimal. Never use
float for money-moving values.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from types import MappingProxyType

from quicky.config import (
    DEFAULT_STOP_LOSS_PCNT,
    LIVE_BASE_URL,
    TESTNET_BASE_URL,
    AppSettings,
)
from quicky.exceptions import ConfigurationError

ORDER_TYPE_LIMIT = "Limit"
TIME_IN_FORCE_POST_ONLY = "PostOnly"


def _to_decimal(value: object, what: str) -> Decimal:
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ConfigurationError(f"{what} is not a number: {value!r}") from e


class OrderSide(str, Enum):
    """Order direction, spelled the way Bybit expects it."""

    BUY = "Buy"
    SELL = "Sell"

    @classmethod
    def from_quantity(cls, qty: int) -> "OrderSide":
        """Positive quantity buys, negative sells. Zero has no side."""
        if qty == 0:
            raise ValueError("zero quantity has no side")
        return cls.BUY if qty > 0 else cls.SELL


@dataclass(frozen=True)
class TradingContext:
    """Everything known before an order is placed.

    Holds both credential pairs; ``use_testnet`` selects the active one.
    Tick sizes are cached here so no instrument-info request is needed.
    The context is immutable: ``tick_steps`` is frozen into a read-only
    mapping on construction.
    """

    api_key: str
    api_secret: str
    testnet_api_key: str
    testnet_api_secret: str
    tick_steps: Mapping[str, Decimal] = field(default_factory=dict)
    stop_loss_pcnt: Decimal = DEFAULT_STOP_LOSS_PCNT
    use_testnet: bool = True
    live_base_url: str = LIVE_BASE_URL
    testnet_base_url: str = TESTNET_BASE_URL

    def __post_init__(self) -> None:
        steps = {}
        for symbol, step in self.tick_steps.items():
            tick = _to_decimal(step, f"tick size for {symbol}")
            if not tick.is_finite() or tick <= 0:
                raise ConfigurationError(f"tick size for {symbol} must be positive, got {step!r}")
            steps[symbol] = tick

        pcnt = _to_decimal(self.stop_loss_pcnt, "stop-loss percentage")
        if not pcnt.is_finite() or not 0 <= pcnt < 100:
            raise ConfigurationError(
                f"stop-loss percentage must be in [0, 100), got {self.stop_loss_pcnt!r}"
            )

        object.__setattr__(self, "tick_steps", MappingProxyType(steps))
        object.__setattr__(self, "stop_loss_pcnt", pcnt)

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "TradingContext":
        """Build a context from application settings.

        Raises:
            ConfigurationError: If the active environment has no API key or secret.
        """
        exchange = settings.exchange
        trading = settings.trading
        context = cls(
            api_key=exchange.api_key.get_secret_value(),
            api_secret=exchange.api_secret.get_secret_value(),
            testnet_api_key=exchange.testnet_api_key.get_secret_value(),
            testnet_api_secret=exchange.testnet_api_secret.get_secret_value(),
            tick_steps=trading.tick_steps,
            stop_loss_pcnt=trading.stop_loss_pcnt,
            use_testnet=trading.use_testnet,
            live_base_url=exchange.live_base_url,
            testnet_base_url=exchange.testnet_base_url,
        )

        prefix = "BYBIT_TESTNET_" if context.use_testnet else "BYBIT_"
        missing = [
            f"{prefix}{name}"
            for name, value in (
                ("API_KEY", context.active_api_key),
                ("API_SECRET", context.active_api_secret),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Missing credentials for {context.environment}: {', '.join(missing)}"
            )
        return context

    @property
    def active_api_key(self) -> str:
        return self.testnet_api_key if self.use_testnet else self.api_key

    @property
    def active_api_secret(self) -> str:
        return self.testnet_api_secret if self.use_testnet else self.api_secret

    @property
    def base_url(self) -> str:
        return self.testnet_base_url if self.use_testnet else self.live_base_url

    @property
    def environment(self) -> str:
        return "testnet" if self.use_testnet else "live"


@dataclass(frozen=True)
class PriceQuote:
    """Last traded price of a symbol."""

    symbol: str
    last_price: Decimal


@dataclass(frozen=True)
class DerivedOrderPrices:
    """Tick-aligned limit and stop-loss prices for one order."""

    limit_price: Decimal
    stop_loss_price: Decimal


@dataclass(frozen=True)
class SignedOrderRequest:
    """The exact field set transmitted to the order-creation endpoint.

    ``price`` and ``stop_loss`` hold the same text that was signed.
    """

    api_key: str
    price: str
    qty: int
    side: OrderSide
    stop_loss: str
    symbol: str
    timestamp: str
    sign: str
    order_type: str = ORDER_TYPE_LIMIT
    time_in_force: str = TIME_IN_FORCE_POST_ONLY

    def to_body(self) -> dict:
        """Return the JSON body, signature last."""
        return {
            "api_key": self.api_key,
            "order_type": self.order_type,
            "price": self.price,
            "qty": self.qty,
            "side": self.side.value,
            "stop_loss": self.stop_loss,
            "symbol": self.symbol,
            "time_in_force": self.time_in_force,
            "timestamp": self.timestamp,
            "sign": self.sign,
        }


@dataclass(frozen=True)
class OrderOutcome:
    """Confirmation of an accepted order."""

    symbol: str
    side: OrderSide
    qty: int
    quote_price: Decimal
    limit_price: Decimal
    stop_loss_price: Decimal
    ret_msg: str = ""
    status: str = "success"
