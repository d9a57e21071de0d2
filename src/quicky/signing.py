"""Request signing for Bybit private endpoints.

The signature covers ``key=value`` pairs joined by ``&`` in the fixed
order of ``SIGNED_FIELDS``. The exchange rebuilds the same string to
verify the request, so this order must not change.
"""

import hashlib
import hmac
from collections.abc import Mapping

SIGNED_FIELDS: tuple[str, ...] = (
    "api_key",
    "order_type",
    "price",
    "qty",
    "side",
    "stop_loss",
    "symbol",
    "time_in_force",
    "timestamp",
)


def build_param_string(params: Mapping[str, object]) -> str:
    """Join the signed fields of ``params`` in canonical order.

    Raises:
        KeyError: If any signed field is missing.
    """
    return "&".join(f"{name}={params[name]}" for name in SIGNED_FIELDS)


def sign_params(param_str: str, secret: str) -> str:
    """Return the lower-case hex HMAC-SHA256 of ``param_str`` keyed by ``secret``."""
    return hmac.new(
        secret.encode("utf-8"), param_str.encode("utf-8"), hashlib.sha256
    ).hexdigest()


def verify_signature(param_str: str, secret: str, signature: str) -> bool:
    """Check a signature in constant time."""
    return hmac.compare_digest(sign_params(param_str, secret), signature.lower())
