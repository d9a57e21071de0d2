"""Bybit REST client for the quick order pipeline.

Covers the two endpoints the pipeline needs: the public ticker (last
traded price) and private order creation. Every reply is decoded into the
``{ret_code, ret_msg, ...}`` envelope and classified into exactly one
error kind on failure. One round trip per call, never retried.
"""

import json
from decimal import Decimal, InvalidOperation
from urllib.parse import urlencode, urlsplit

from quicky.exceptions import (
    ApiEmptyResultError,
    ApiResponseError,
    CreatingHttpRequestError,
    JsonParsingError,
    NumericJsonParsingError,
    ParsingJsonObjectError,
    ParsingRawUrlError,
)
from quicky.exchange.transport import HttpResponse, HttpTransport
from quicky.logging import get_logger
from quicky.models import PriceQuote, SignedOrderRequest, TradingContext

logger = get_logger(__name__)

TICKERS_PATH = "/v2/public/tickers"
ORDER_CREATE_PATH = "/v2/private/order/create"


class BybitRestClient:
    """Blocking Bybit v2 REST client.

    Args:
        context: Trading context; selects the base URL by environment.
        transport: HTTP transport performing the actual round trips.
    """

    def __init__(self, context: TradingContext, transport: HttpTransport) -> None:
        self._context = context
        self._transport = transport

    def build_url(self, path: str, query: dict[str, str] | None = None) -> str:
        """Join the environment's base URL with ``path`` and ``query``.

        Raises:
            ParsingRawUrlError: If the result is not an absolute http(s) URL.
        """
        url = f"{self._context.base_url.rstrip('/')}{path}"
        if query:
            url = f"{url}?{urlencode(query)}"

        try:
            parts = urlsplit(url)
        except ValueError as e:
            raise ParsingRawUrlError(f"cannot parse url {url!r}: {e}") from e
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ParsingRawUrlError(f"not an absolute http(s) url: {url!r}")
        return url

    def fetch_last_price(self, symbol: str) -> PriceQuote:
        """Fetch the last traded price of ``symbol``.

        Raises:
            ParsingRawUrlError: If the ticker URL is malformed.
            CreatingHttpRequestError: If the request cannot be built.
            TransportError: If the round trip fails.
            JsonParsingError: If the reply is not a ticker envelope.
            ApiResponseError: If ``ret_code`` is non-zero.
            ApiEmptyResultError: If the exchange returns no ticker rows.
            NumericJsonParsingError: If ``last_price`` is not a positive number.
        """
        url = self.build_url(TICKERS_PATH, {"symbol": symbol})
        envelope = self._decode_envelope(self._transport.get(url))
        self._raise_for_ret_code(envelope, endpoint=TICKERS_PATH)

        rows = envelope.get("result")
        if not rows:
            logger.warning("ticker_empty_result", symbol=symbol)
            raise ApiEmptyResultError(f"no ticker rows for {symbol}")
        if not isinstance(rows, list) or not isinstance(rows[0], dict):
            raise JsonParsingError(f"unexpected ticker result shape: {rows!r}")

        raw_price = rows[0].get("last_price")
        try:
            last_price = Decimal(str(raw_price))
        except InvalidOperation as e:
            raise NumericJsonParsingError(f"last_price is not numeric: {raw_price!r}") from e
        if not last_price.is_finite() or last_price <= 0:
            raise NumericJsonParsingError(f"last_price is not a positive number: {raw_price!r}")

        logger.debug("quote_fetched", symbol=symbol, last_price=str(last_price))
        return PriceQuote(symbol=symbol, last_price=last_price)

    def create_order(self, request: SignedOrderRequest) -> dict:
        """Submit a signed order and return the exchange's envelope.

        Raises:
            ParsingJsonObjectError: If the body cannot be serialized.
            CreatingHttpRequestError: If the order URL or request cannot be built.
            TransportError: If the round trip fails.
            JsonParsingError: If the reply cannot be decoded.
            ApiResponseError: If the exchange rejects the order.
        """
        try:
            body = json.dumps(request.to_body(), allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise ParsingJsonObjectError(f"cannot serialize order body: {e}") from e

        try:
            url = self.build_url(ORDER_CREATE_PATH)
        except ParsingRawUrlError as e:
            raise CreatingHttpRequestError(str(e)) from e

        envelope = self._decode_envelope(self._transport.post(url, body))
        self._raise_for_ret_code(envelope, endpoint=ORDER_CREATE_PATH)
        return envelope

    @staticmethod
    def _decode_envelope(response: HttpResponse) -> dict:
        """Decode a reply body into the generic result envelope."""
        try:
            envelope = json.loads(response.body)
        except (UnicodeDecodeError, ValueError) as e:
            logger.warning("response_decode_failed", status=response.status, error=str(e))
            raise JsonParsingError(
                f"cannot decode response (HTTP {response.status}): {e}"
            ) from e

        if not isinstance(envelope, dict):
            raise JsonParsingError(f"response is not a JSON object (HTTP {response.status})")
        ret_code = envelope.get("ret_code")
        if isinstance(ret_code, bool) or not isinstance(ret_code, int):
            raise JsonParsingError(f"response has no integer ret_code: {ret_code!r}")
        return envelope

    @staticmethod
    def _raise_for_ret_code(envelope: dict, endpoint: str) -> None:
        ret_code = envelope["ret_code"]
        if ret_code == 0:
            return
        ret_msg = str(envelope.get("ret_msg", ""))
        logger.error(
            "api_error_response",
            endpoint=endpoint,
            ret_code=ret_code,
            ret_msg=ret_msg,
            ext_code=envelope.get("ext_code"),
        )
        raise ApiResponseError(ret_code=ret_code, ret_msg=ret_msg)
