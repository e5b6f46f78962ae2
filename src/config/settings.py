"""Application settings and configuration management."""
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

# Rooms of the default accommodation (Haus St. Martin, Bludenz) that were
# verified against the live price matrix. Last resort only.
DEFAULT_FALLBACK_PRODUCT_IDS = ",".join(
    [
        "b4265783-9c09-44e0-9af1-63ad964d64b9",  # Room 1 - Twin room, shared shower/toilet
        "bda33d85-729b-40ca-ba2b-de4ca5e5841b",  # Room 2 - Family room, bath hallway, toilet
        "78f0ede7-ce03-4806-8556-0d627bff27de",  # Room 3 - Double room, bath, toilet
        "bdd9a73d-7429-4610-9347-168b4b2785d8",  # Double room, bath, toilet
        "980db5a5-ac66-49f3-811f-0da67cc4a972",  # Room 5 - Double room, shared shower/toilet
        "0d0ae603-3fd9-4abd-98e8-eea813fd2d89",  # Room 6 - Double room, shared shower/toilet
    ]
)


def split_ids(raw: str) -> list[str]:
    """Split a comma separated id list, dropping blanks."""
    return [part.strip() for part in (raw or "").split(",") if part.strip()]


class FeratelSettings(BaseSettings):
    """Feratel Deskline web API configuration."""

    api_base_url: str = "https://webapi.deskline.net"
    destination: str = "accbludenz"
    prefix: str = "BLU"
    language: str = "en"
    accommodation_id: str = "5edbae02-da8e-4489-8349-4bb836450b3e"
    currency: str = "EUR"
    request_timeout: float = 15.0
    page_size: int = 32767

    # Headers the backend checks; DW-Source is environment specific
    dw_source: str = "dwapp-accommodation"
    session_id: str = ""  # Fixed DW-SessionId, empty = one UUID per request
    origin: str = "https://direct.bookingandmore.com"
    referer: str = "https://direct.bookingandmore.com/"
    accept_language: str = "en-GB,en-US;q=0.9,en;q=0.8"
    user_agent: str = "FeratelPriceAPI/1.0"

    # Comma separated product ids
    product_ids: str = ""  # Operator list, tried before any discovery call
    fallback_product_ids: str = DEFAULT_FALLBACK_PRODUCT_IDS  # Tried after every discovery call
    resolve_names: bool = True

    model_config = SettingsConfigDict(env_prefix="FERATEL_")


class OccupancySettings(BaseSettings):
    """Occupancy normalization policy."""

    default_units: int = 1
    default_adults: int = 2
    default_child_age: int = 8  # Used when only a child count is sent
    max_units: int = 20
    max_adults: int = 10
    max_child_age: int = 17
    max_children: int = 10

    model_config = SettingsConfigDict(env_prefix="OCCUPANCY_")


class PriceMatrixSettings(BaseSettings):
    """Price matrix query ranges for the first (windowed) attempt."""

    arrival_range: int = 1
    nights_range: int = 1

    model_config = SettingsConfigDict(env_prefix="PRICE_MATRIX_")


class APISettings(BaseSettings):
    """Inbound HTTP server configuration."""

    host: str = "0.0.0.0"
    port: int = 10000
    expose_debug: bool = True
    cors_origins: str = ""  # Comma separated, empty disables CORS

    model_config = SettingsConfigDict(env_prefix="API_")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"
    access_log: bool = True

    model_config = SettingsConfigDict(env_prefix="LOG_")


class Settings(BaseSettings):
    """Main application settings."""

    environment: Literal["dev", "staging", "prod"] = "dev"

    # Sub-settings
    feratel: FeratelSettings = FeratelSettings()
    occupancy: OccupancySettings = OccupancySettings()
    price_matrix: PriceMatrixSettings = PriceMatrixSettings()
    api: APISettings = APISettings()
    logging: LoggingSettings = LoggingSettings()

    # Un-prefixed variables of existing deployments (ACCOMMODATION_ID, DW_SOURCE, ...)
    # override the nested feratel.* / api.* values when set
    accommodation_id: str = ""
    dw_source: str = ""
    dw_session_id: str = ""
    port: int = 0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    def feratel_accommodation_id(self) -> str:
        """Accommodation id, top-level ACCOMMODATION_ID first."""
        return (self.accommodation_id or self.feratel.accommodation_id or "").strip()

    def feratel_dw_source(self) -> str:
        """DW-Source header value, top-level DW_SOURCE first."""
        return (self.dw_source or self.feratel.dw_source or "").strip()

    def feratel_fixed_session_id(self) -> str:
        """Fixed DW-SessionId, empty when a fresh id should be generated per request."""
        return (self.dw_session_id or self.feratel.session_id or "").strip()

    def configured_product_ids(self) -> list[str]:
        """Operator-configured product ids (FERATEL_PRODUCT_IDS)."""
        return split_ids(self.feratel.product_ids)

    def fallback_product_ids(self) -> list[str]:
        """Last-resort product ids (FERATEL_FALLBACK_PRODUCT_IDS)."""
        return split_ids(self.feratel.fallback_product_ids)

    def api_port(self) -> int:
        """Listen port, top-level PORT first."""
        return self.port or self.api.port

    def api_cors_origins(self) -> list[str]:
        """Allowed CORS origins (API_CORS_ORIGINS)."""
        return split_ids(self.api.cors_origins)

    @property
    def feratel_accommodation_url(self) -> str:
        """Base URL of the configured accommodation resource."""
        return (
            f"{self.feratel.api_base_url.rstrip('/')}/{self.feratel.destination}/"
            f"{self.feratel.language}/accommodations/{self.feratel.prefix}/"
            f"{self.feratel_accommodation_id()}"
        )


# Global settings instance
settings = Settings()
