"""Game server configuration via environment variables."""

from typing import TYPE_CHECKING

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from gomoku.server.rate_limit import DEFAULT_MESSAGE_BURST, DEFAULT_MESSAGE_RATE
from gomoku.server.websocket import DEFAULT_MAX_DECODE_ERRORS, TransportLimits
from gomoku.session.manager import DEFAULT_MAX_SEND_FAILURES
from gomoku.session.registry import DEFAULT_MAX_CODE_ATTEMPTS
from shared.validators import CorsEnvSettingsSource, parse_cors_origins

if TYPE_CHECKING:
    from pydantic_settings.sources.base import PydanticBaseSettingsSource


class GameServerSettings(BaseSettings):
    model_config = {"env_prefix": "GOMOKU_"}

    cors_origins: list[str] = ["http://localhost:3000"]
    log_dir: str | None = Field(default=None, min_length=1)
    # Fixed seed makes invite codes and colour draws reproducible (dev/test only).
    rng_seed: int | None = None
    max_send_failures: int = Field(default=DEFAULT_MAX_SEND_FAILURES, ge=1)
    max_code_attempts: int = Field(default=DEFAULT_MAX_CODE_ATTEMPTS, ge=1)
    # per-connection message throttle (messages/sec sustained, burst size)
    message_rate: float = Field(default=DEFAULT_MESSAGE_RATE, gt=0)
    message_burst: int = Field(default=DEFAULT_MESSAGE_BURST, ge=1)
    max_decode_errors: int = Field(default=DEFAULT_MAX_DECODE_ERRORS, ge=1)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        return parse_cors_origins(v)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: "PydanticBaseSettingsSource",
        env_settings: "PydanticBaseSettingsSource",  # noqa: ARG003
        dotenv_settings: "PydanticBaseSettingsSource",
        file_secret_settings: "PydanticBaseSettingsSource",
    ) -> tuple["PydanticBaseSettingsSource", ...]:
        return init_settings, CorsEnvSettingsSource(settings_cls), dotenv_settings, file_secret_settings

    def transport_limits(self) -> TransportLimits:
        return TransportLimits(
            message_rate=self.message_rate,
            message_burst=self.message_burst,
            max_decode_errors=self.max_decode_errors,
        )
