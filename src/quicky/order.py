"""Quick limit order placement.

Pipeline for a single order, strictly sequential:

1. Validate the symbol (known tick size) and quantity (non-zero) locally.
2. Fetch the last traded price (first round trip).
3. Derive the limit price one tick inside the quote and the stop-loss.
4. Build the canonical parameter string and sign it with the active secret.
5. Submit the signed order (second round trip) and classify the reply.

Every failure raises one ``QuickyError`` subclass; nothing is retried.
"""

import time
from collections.abc import Callable

import structlog

from quicky.exceptions import (
    IncorrectParameterValueError,
    InternalError,
    NoTickStepAvailableError,
)
from quicky.exchange.client import BybitRestClient
from quicky.logging import get_logger
from quicky.models import (
    ORDER_TYPE_LIMIT,
    TIME_IN_FORCE_POST_ONLY,
    DerivedOrderPrices,
    OrderOutcome,
    OrderSide,
    SignedOrderRequest,
    TradingContext,
)
from quicky.pricing import derive_order_prices, format_price
from quicky.signing import build_param_string, sign_params, verify_signature

logger = get_logger(__name__)


def timestamp_millis(clock: Callable[[], float] = time.time) -> str:
    """Current wall-clock time as milliseconds since the epoch, in decimal text."""
    return str(int(clock() * 1000))


def build_signed_order_request(
    context: TradingContext,
    symbol: str,
    qty: int,
    prices: DerivedOrderPrices,
    timestamp: str,
) -> SignedOrderRequest:
    """Assemble and sign the order-creation payload.

    Args:
        context: Supplies the active API key and secret.
        symbol: Order symbol.
        qty: Signed quantity; its sign picks the side, its magnitude is sent.
        prices: Tick-aligned limit and stop-loss prices.
        timestamp: Milliseconds since the epoch, as text.

    Returns:
        The immutable request, including its signature.

    Raises:
        IncorrectParameterValueError: If ``qty`` is zero.
    """
    if qty == 0:
        raise IncorrectParameterValueError("quantity must be non-zero")
    side = OrderSide.from_quantity(qty)
    params = {
        "api_key": context.active_api_key,
        "order_type": ORDER_TYPE_LIMIT,
        "price": format_price(prices.limit_price),
        "qty": abs(qty),
        "side": side.value,
        "stop_loss": format_price(prices.stop_loss_price),
        "symbol": symbol,
        "time_in_force": TIME_IN_FORCE_POST_ONLY,
        "timestamp": timestamp,
    }
    param_str = build_param_string(params)
    sign = sign_params(param_str, context.active_api_secret)
    if not verify_signature(param_str, context.active_api_secret, sign):
        raise InternalError("order signature failed self-verification")

    return SignedOrderRequest(
        api_key=params["api_key"],
        price=params["price"],
        qty=params["qty"],
        side=side,
        stop_loss=params["stop_loss"],
        symbol=symbol,
        timestamp=timestamp,
        sign=sign,
    )


class QuickLimitOrderPlacer:
    """Places one PostOnly limit order just inside the current price.

    Args:
        context: Immutable trading context (credentials, tick sizes, stop-loss %).
        client: Exchange client used for the quote and the submission.
        clock: Returns seconds since the epoch; injectable for tests.
    """

    def __init__(
        self,
        context: TradingContext,
        client: BybitRestClient,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._context = context
        self._client = client
        self._clock = clock

    def place(self, symbol: str, qty: int) -> OrderOutcome:
        """Place a quick limit order for ``symbol``.

        Positive ``qty`` buys, negative sells.

        Raises:
            NoTickStepAvailableError: Symbol has no known tick size (no request sent).
            IncorrectParameterValueError: ``qty`` is zero (no request sent).
            QuickyError: Any quote-fetch or submission failure, unchanged.
        """
        tick_size = self._context.tick_steps.get(symbol)
        if tick_size is None:
            raise NoTickStepAvailableError(f"no tick size configured for {symbol}")
        if qty == 0:
            raise IncorrectParameterValueError("quantity must be non-zero")

        with structlog.contextvars.bound_contextvars(
            symbol=symbol, testnet=self._context.use_testnet
        ):
            quote = self._client.fetch_last_price(symbol)

            side = OrderSide.from_quantity(qty)
            prices = derive_order_prices(
                quote_price=quote.last_price,
                tick_size=tick_size,
                side=side,
                stop_loss_pcnt=self._context.stop_loss_pcnt,
            )
            request = build_signed_order_request(
                self._context,
                symbol,
                qty,
                prices,
                timestamp_millis(self._clock),
            )

            logger.info(
                "order_submitting",
                side=side.value,
                qty=request.qty,
                quote_price=str(quote.last_price),
                limit_price=request.price,
                stop_loss=request.stop_loss,
            )
            envelope = self._client.create_order(request)
            logger.info("order_accepted", ret_msg=envelope.get("ret_msg", ""))

        return OrderOutcome(
            symbol=symbol,
            side=side,
            qty=request.qty,
            quote_price=quote.last_price,
            limit_price=prices.limit_price,
            stop_loss_price=prices.stop_loss_price,
            ret_msg=str(envelope.get("ret_msg", "")),
        )
