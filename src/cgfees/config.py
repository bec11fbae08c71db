from __future__ import annotations

import os
import tomllib
from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import Field, SecretStr, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

CONFIG_FILE_ENV = "CGFEES_CONFIG_FILE"
DEFAULT_CONFIG_FILE = Path.home() / ".config" / "coingecko-config" / "config.toml"

# config.toml keeps the key names written by earlier releases of the tool
_CONFIG_FILE_KEYS = {
    "coingecko_api_url": "COINGECKO_API_URL",
    "api_key": "COINGECKO_API_KEY",
}


class ConfigurationError(ValueError):
    """Raised when required runtime configuration is missing or invalid."""


def config_file_path() -> Path:
    raw = os.getenv(CONFIG_FILE_ENV)
    if raw and raw.strip():
        return Path(raw.strip()).expanduser()
    return DEFAULT_CONFIG_FILE


class ConfigFileSettingsSource(PydanticBaseSettingsSource):
    """Read settings from the user's TOML config file, if one exists."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path) -> None:
        super().__init__(settings_cls)
        self.path = path

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        if not self.path.is_file():
            return {}
        try:
            with self.path.open("rb") as handle:
                data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"invalid config file {self.path}: {exc}") from exc
        except OSError as exc:
            raise ConfigurationError(f"cannot read config file {self.path}: {exc}") from exc
        return {_CONFIG_FILE_KEYS.get(key, key): value for key, value in data.items()}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    coingecko_api_url: str = Field(
        default="https://api.coingecko.com/api/v3", alias="COINGECKO_API_URL"
    )
    coingecko_api_key: SecretStr | None = Field(default=None, alias="COINGECKO_API_KEY")
    http_timeout_seconds: float = Field(default=10.0, alias="HTTP_TIMEOUT_SECONDS")

    default_currency: str = Field(default="sgd", alias="DEFAULT_CURRENCY")
    default_fee_rate: Decimal = Field(default=Decimal("0.0006"), alias="DEFAULT_FEE_RATE")

    log_level: str = Field(default="WARNING", alias="LOG_LEVEL")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            ConfigFileSettingsSource(settings_cls, config_file_path()),
            file_secret_settings,
        )

    @field_validator("coingecko_api_url")
    def validate_api_url(cls, value: str) -> str:
        cleaned = value.strip().rstrip("/")
        if not cleaned.startswith(("http://", "https://")):
            raise ValueError("COINGECKO_API_URL must be an http(s) URL")
        return cleaned

    @field_validator("coingecko_api_key", mode="before")
    def blank_api_key_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("http_timeout_seconds")
    def validate_http_timeout_seconds(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("HTTP_TIMEOUT_SECONDS must be > 0")
        return value

    @field_validator("default_currency")
    def validate_default_currency(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned or "," in cleaned:
            raise ValueError("DEFAULT_CURRENCY must be a single currency code")
        return cleaned

    @field_validator("default_fee_rate")
    def validate_default_fee_rate(cls, value: Decimal) -> Decimal:
        if value < 0:
            raise ValueError("DEFAULT_FEE_RATE must be >= 0")
        return value

    def api_key_value(self) -> str | None:
        if self.coingecko_api_key is None:
            return None
        return self.coingecko_api_key.get_secret_value()
