"""Configuration system using pydantic-settings with environment variable loading."""

from decimal import Decimal
from typing import Annotated, Literal

from pydantic import Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from quicky.exceptions import ConfigurationError

LIVE_BASE_URL = "https://api.bybit.com"
TESTNET_BASE_URL = "https://api-testnet.bybit.com"

DEFAULT_STOP_LOSS_PCNT = Decimal("0.2")


class ExchangeSettings(BaseSettings):
    """Bybit credentials and REST connection settings.

    Both credential pairs are optional here; only the pair for the active
    environment is required, and that check happens when the trading
    context is built.
    """

    model_config = SettingsConfigDict(env_prefix="BYBIT_")

    api_key: SecretStr = SecretStr("")
    api_secret: SecretStr = SecretStr("")
    testnet_api_key: SecretStr = SecretStr("")
    testnet_api_secret: SecretStr = SecretStr("")
    live_base_url: str = LIVE_BASE_URL
    testnet_base_url: str = TESTNET_BASE_URL
    request_timeout: float = 10.0  # seconds, per HTTP round trip


class TradingSettings(BaseSettings):
    """Order pricing parameters."""

    model_config = SettingsConfigDict(env_prefix="TRADING_")

    use_testnet: bool = True  # safety default
    stop_loss_pcnt: Annotated[Decimal, Field(ge=0, lt=100)] = DEFAULT_STOP_LOSS_PCNT  # 0.2 means 0.2%
    # Known tick sizes, so no instrument-info request is needed per order
    tick_steps: dict[str, Annotated[Decimal, Field(gt=0)]] = Field(
        default_factory=lambda: {"XRPUSD": Decimal("0.0001")}
    )


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"  # LOG_FORMAT
    exchange: ExchangeSettings = Field(default_factory=ExchangeSettings)
    trading: TradingSettings = Field(default_factory=TradingSettings)


def load_settings() -> AppSettings:
    """Load settings from the environment and ``.env``.

    Raises:
        ConfigurationError: If any value fails validation.
    """
    try:
        return AppSettings()
    except ValidationError as e:
        raise ConfigurationError(f"invalid settings: {e}") from e
