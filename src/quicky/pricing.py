"""Tick-size rounding and quick-order price derivation.

All arithmetic is done in Decimal, so ``round(price * 10^n) / 10^n`` is
exact. Ties round half away from zero (``ROUND_HALF_UP`` in Decimal
terms): 0.125 at a 0.01 tick becomes 0.13, -0.125 becomes -0.13.
"""

from decimal import ROUND_HALF_UP, Decimal

from quicky.exceptions import InternalError
from quicky.models import DerivedOrderPrices, OrderSide

HUNDRED = Decimal("100")


def count_tick_steps(tick_size: Decimal) -> int:
    """Return the number of decimal places implied by a tick size.

    The smallest ``n >= 0`` with ``tick_size * 10**n >= 1``, e.g. 4 for
    0.0001 and 0 for any tick size of 1 or more.

    Args:
        tick_size: Positive, finite tick size.

    Raises:
        ValueError: If the tick size is not positive and finite.
    """
    tick_size = Decimal(str(tick_size))
    if not tick_size.is_finite() or tick_size <= 0:
        raise ValueError(f"tick size must be positive and finite, got {tick_size}")

    count = 0
    scaled = tick_size
    while scaled < 1:
        scaled *= 10
        count += 1
    return count


def round_to_tick(price: Decimal, tick_size: Decimal) -> Decimal:
    """Round a price to the resolution implied by ``tick_size``.

    Only the number of decimal places is taken from the tick size: with a
    0.5 tick the result is rounded to one decimal place, not to a multiple
    of 0.5.
    """
    places = count_tick_steps(tick_size)
    return Decimal(str(price)).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def derive_order_prices(
    quote_price: Decimal,
    tick_size: Decimal,
    side: OrderSide,
    stop_loss_pcnt: Decimal,
) -> DerivedOrderPrices:
    """Compute the quick order's limit and stop-loss prices.

    The limit sits one tick inside the last traded price (below it for a
    buy, above it for a sell) so the PostOnly order rests as a maker. The
    stop-loss sits ``stop_loss_pcnt`` percent away in the losing direction.

    Args:
        quote_price: Last traded price.
        tick_size: Symbol tick size.
        side: Order side.
        stop_loss_pcnt: Stop-loss distance in percent (0.2 means 0.2%).

    Returns:
        Both prices rounded to the tick resolution.

    Raises:
        InternalError: If either rounded price is not positive, e.g. a buy
            quoted at or below one tick.
    """
    if side is OrderSide.BUY:
        limit_price = quote_price - tick_size
        stop_loss_price = quote_price * (1 - stop_loss_pcnt / HUNDRED)
    else:
        limit_price = quote_price + tick_size
        stop_loss_price = quote_price * (1 + stop_loss_pcnt / HUNDRED)

    prices = DerivedOrderPrices(
        limit_price=round_to_tick(limit_price, tick_size),
        stop_loss_price=round_to_tick(stop_loss_price, tick_size),
    )
    if prices.limit_price <= 0 or prices.stop_loss_price <= 0:
        raise InternalError(
            f"derived prices must be positive: limit={prices.limit_price} "
            f"stop_loss={prices.stop_loss_price} from quote={quote_price}"
        )
    return prices


def format_price(price: Decimal) -> str:
    """Render a price in plain notation without trailing zeros.

    ``Decimal("99.80")`` becomes ``"99.8"`` and ``Decimal("100.00")``
    becomes ``"100"``.
    """
    text = format(price, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
