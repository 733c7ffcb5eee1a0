"""Application configuration."""

import os
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ursol.utils.logging import get_logger

LOGGER = get_logger(__name__)


# Find .env file - check multiple possible locations
def find_env_file() -> Optional[Path]:
    """Find .env file in multiple possible locations."""
    current_dir = os.path.dirname(os.path.abspath(__file__))

    possible_paths = [
        os.path.join(current_dir, ".env"),
        os.path.join(os.path.dirname(current_dir), ".env"),
        os.path.join(os.path.dirname(os.path.dirname(current_dir)), ".env"),
    ]

    for path_str in possible_paths:
        if os.path.exists(path_str):
            path = Path(path_str)
            LOGGER.info(f"Found .env file at: {path}")
            return path

    LOGGER.debug("No .env file found in expected locations")
    return None


ENV_FILE = find_env_file()


def _settings_config(**overrides) -> SettingsConfigDict:
    return SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="",
        **overrides,
    )


class DatabaseSettings(BaseSettings):
    """Database connection and pool settings."""

    url: str = Field(default="sqlite+aiosqlite:///:memory:", validation_alias="DATABASE_URL")
    pool_size: int = Field(default=10, validation_alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(default=20, validation_alias="DATABASE_MAX_OVERFLOW")
    echo: bool = Field(default=False, validation_alias="DATABASE_ECHO")

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    model_config = _settings_config()


class WorldcoinSettings(BaseSettings):
    """Worldcoin developer portal credentials and World ID behaviour."""

    app_id: str = Field(default="", validation_alias="APP_ID")
    dev_portal_api_key: str = Field(default="", validation_alias="DEV_PORTAL_API_KEY")
    api_url: str = Field(default="https://developer.worldcoin.org", validation_alias="WORLDCOIN_API_URL")
    staging_app_id: str = Field(default="app_staging_ursol_minikit", validation_alias="WORLD_ID_STAGING_APP_ID")
    mock_fallback: bool = Field(default=True, validation_alias="WORLD_ID_MOCK_FALLBACK")

    @property
    def has_credentials(self) -> bool:
        """Transaction lookups need both the app id and the portal API key."""
        return bool(self.app_id and self.dev_portal_api_key)

    @property
    def verify_app_id(self) -> str:
        return self.app_id or self.staging_app_id

    model_config = _settings_config()


class LedgerSettings(BaseSettings):
    """Simulated ledger addresses and event polling."""

    treasury_address: str = Field(
        default="0x742d35cc6639c0532fda7df8e0fd7b30a9b7a34c", validation_alias="LEDGER_TREASURY_ADDRESS"
    )
    usdc_token_address: str = Field(
        default="0xA0b86a33E6441b4c2b3Eb0e25e9b3F9b5d4F8A4B", validation_alias="LEDGER_USDC_TOKEN_ADDRESS"
    )
    default_token_address: str = Field(
        default="0x163F8C2467924BE0AE7B5347228CABF260318753", validation_alias="LEDGER_DEFAULT_TOKEN_ADDRESS"
    )
    policy_contract_address: str = Field(
        default="0x0748e0Ea581Fc3e9A97A68a3FC6F18Fc78743f9a", validation_alias="LEDGER_POLICY_CONTRACT_ADDRESS"
    )
    poll_enabled: bool = Field(default=True, validation_alias="LEDGER_POLL_ENABLED")
    poll_interval: float = Field(default=60.0, validation_alias="LEDGER_POLL_INTERVAL")

    def token_address_for(self, currency: Optional[str]) -> str:
        return self.usdc_token_address if currency == "USDC" else self.default_token_address

    model_config = _settings_config()


class Settings(BaseSettings):
    """Unified application settings with nested models."""

    # Application Settings
    app_name: str = Field(default="URSOL Insurance", validation_alias="APP_NAME")
    app_version: str = "0.1.0"
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    debug: bool = Field(default=True, validation_alias="DEBUG")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    cors_origins: list[str] = Field(
        default=["http://localhost:5000", "http://127.0.0.1:5000"],
        validation_alias="CORS_ORIGINS",
    )

    # API Settings
    api_prefix: str = "/api"
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=5000, validation_alias="PORT")

    # Timeout Settings (seconds)
    http_timeout: float = Field(default=10.0, validation_alias="HTTP_TIMEOUT")

    # Demo data
    demo_user_id: str = Field(default="demo-user-1", validation_alias="DEMO_USER_ID")
    seed_demo_data: bool = Field(default=True, validation_alias="SEED_DEMO_DATA")

    # Nested Settings - Initialize with env file explicitly
    db: DatabaseSettings = Field(default_factory=lambda: DatabaseSettings())
    worldcoin: WorldcoinSettings = Field(default_factory=lambda: WorldcoinSettings())
    ledger: LedgerSettings = Field(default_factory=lambda: LedgerSettings())

    model_config = _settings_config()

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def world_id_mock_enabled(self) -> bool:
        """The optimistic World ID fallback is a development convenience only."""
        return self.is_development and self.worldcoin.mock_fallback

    @property
    def database_url(self) -> str:
        return self.db.url

    @property
    def database_echo(self) -> bool:
        return self.db.echo


# Initialize settings
settings = Settings()

LOGGER.info(f"Settings initialized with environment: {settings.environment}")
LOGGER.info(f"Worldcoin credentials configured: {settings.worldcoin.has_credentials}")
