"""Command-line entry point: place one quick limit order and exit.

Wiring order:
1. AppSettings (environment / .env), overridden by command-line flags
2. Logging setup
3. TradingContext (fails with ConfigurationError on missing credentials,
   non-positive tick sizes or an out-of-range stop-loss percentage)
4. UrllibTransport -> BybitRestClient -> QuickLimitOrderPlacer

Exit status is 0 on success, otherwise the ``StatusCode`` of the failure.
"""

import argparse
import sys
import time
from decimal import Decimal, InvalidOperation

from quicky.config import AppSettings, load_settings
from quicky.exceptions import QuickyError, StatusCode
from quicky.exchange.client import BybitRestClient
from quicky.exchange.transport import UrllibTransport
from quicky.logging import get_logger, setup_logging
from quicky.models import TradingContext
from quicky.order import QuickLimitOrderPlacer

ERROR_MESSAGES: dict[StatusCode, str] = {
    StatusCode.INTERNAL_ERROR_GENERIC: "internal generic error",
    StatusCode.INTERNAL_ERROR_PARSING_RAW_URL: "internal error parsing a raw url",
    StatusCode.INTERNAL_ERROR_CREATING_HTTP_REQUEST: "internal error creating http request",
    StatusCode.INTERNAL_ERROR_PARSING_JSON_OBJECT: "internal error serializing request body",
    StatusCode.INTERNAL_ERROR_NO_TICK_STEP_AVAILABLE: "no tick steps available for specified symbol",
    StatusCode.ERROR_API_RESPONSE: "received error in api response",
    StatusCode.ERROR_JSON_PARSING: "parsing json",
    StatusCode.ERROR_NUMERIC_JSON_PARSING: "numeric json parsing error",
    StatusCode.MALFORMED_API_RESPONSE_FORMAT: "malformed result from API response",
    StatusCode.API_EMPTY_RESULT: "API has empty result",
    StatusCode.ERROR_INCORRECT_PARAMETER_VALUE: "incorrect parameter value (quantity must be non-zero)",
    StatusCode.CONFIGURATION_ERROR: "invalid configuration",
}


def describe_error(error: QuickyError) -> str:
    """Return the human-readable line printed for a failed order."""
    message = ERROR_MESSAGES.get(error.status, ERROR_MESSAGES[StatusCode.INTERNAL_ERROR_GENERIC])
    detail = str(error)
    return f"Error: {message}" + (f" ({detail})" if detail else "")


def _percentage_arg(value: str) -> Decimal:
    try:
        pcnt = Decimal(value)
    except InvalidOperation as e:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from e
    if not pcnt.is_finite() or not 0 <= pcnt < 100:
        raise argparse.ArgumentTypeError(f"must be at least 0 and below 100: {value!r}")
    return pcnt


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quicky",
        description="Place a limit order quickly, one tick inside the last traded price.",
    )
    parser.add_argument("-s", "--symbol", required=True, help="symbol, e.g. XRPUSD")
    parser.add_argument(
        "-q",
        "--qty",
        required=True,
        type=int,
        help="quantity; positive for buy side, negative for sell side",
    )
    env = parser.add_mutually_exclusive_group()
    env.add_argument(
        "--testnet",
        dest="use_testnet",
        action="store_true",
        default=None,
        help="execute against testnet",
    )
    env.add_argument(
        "--live",
        dest="use_testnet",
        action="store_false",
        help="execute against the live exchange",
    )
    parser.add_argument(
        "--sl-pcnt",
        type=_percentage_arg,
        default=None,
        help="stop-loss percentage (0.2 means 0.2%%)",
    )
    parser.set_defaults(use_testnet=None)
    return parser


def apply_overrides(settings: AppSettings, args: argparse.Namespace) -> AppSettings:
    """Return settings with command-line flags applied on top."""
    trading_updates: dict = {}
    if args.use_testnet is not None:
        trading_updates["use_testnet"] = args.use_testnet
    if args.sl_pcnt is not None:
        trading_updates["stop_loss_pcnt"] = args.sl_pcnt
    if not trading_updates:
        return settings
    return settings.model_copy(
        update={"trading": settings.trading.model_copy(update=trading_updates)}
    )


def run(argv: list[str] | None = None, settings: AppSettings | None = None) -> int:
    """Parse arguments, place the order and return the exit status."""
    args = build_parser().parse_args(argv)
    try:
        settings = apply_overrides(settings or load_settings(), args)
    except QuickyError as e:
        print(describe_error(e), file=sys.stderr)
        return int(e.status)

    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("quicky.main")

    start = time.perf_counter()
    try:
        context = TradingContext.from_settings(settings)
        transport = UrllibTransport(timeout=settings.exchange.request_timeout)
        placer = QuickLimitOrderPlacer(context, BybitRestClient(context, transport))
        placer.place(args.symbol, args.qty)
    except QuickyError as e:
        logger.debug("order_failed", status=e.status.name, error=str(e))
        print(describe_error(e), file=sys.stderr)
        return int(e.status)

    elapsed = time.perf_counter() - start
    logger.info("order_done", elapsed_seconds=round(elapsed, 3))
    print("done")
    print(f"(elapsed = {elapsed:.2f} secs)")
    return int(StatusCode.SUCCESS)


def cli() -> None:
    """Console-script entry point."""
    sys.exit(run())


if __name__ == "__main__":
    cli()
