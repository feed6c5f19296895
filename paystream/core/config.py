"""
Application configuration and settings management.

This module loads configuration from environment variables and provides
a centralized settings object for the entire application.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    APPROVAL_THRESHOLD,
    DEFAULT_APP_PORT,
    FRAUD_THRESHOLD,
    ORACLE_DEFAULT_MODEL,
    ORACLE_MAX_TOKENS,
    ORACLE_TEMPERATURE,
    ORACLE_TIMEOUT_SECONDS,
    REVIEW_FRACTION,
    RISK_THRESHOLD,
    TREASURY_BALANCE,
    TREASURY_DAILY_LIMIT,
    X402_DEFAULT_AMOUNT,
    X402_DEFAULT_DEPOSIT,
    X402_DEFAULT_RATE,
    X402_STREAM_ID_START,
    X402_TIMEOUT_SECONDS,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "PayStream"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = Field(default="development", description="deployment environment")

    # API Server
    host: str = "0.0.0.0"
    port: int = DEFAULT_APP_PORT
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000", "http://localhost:8000"])

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from string or list.

        Args:
            v: CORS origins as string (comma-separated) or list

        Returns:
            list[str]: List of CORS origin URLs
        """
        if isinstance(v, str):
            if not v.strip():
                return ["http://localhost:3000", "http://localhost:8000"]
            return [origin.strip() for origin in v.split(",")]
        return v

    # Judgment oracle (LLM)
    anthropic_api_key: str | None = Field(default=None, description="Anthropic API key for Claude")
    openai_api_key: str | None = Field(default=None, description="OpenAI API key")
    default_model: str = ORACLE_DEFAULT_MODEL
    oracle_temperature: float = ORACLE_TEMPERATURE
    oracle_max_tokens: int = ORACLE_MAX_TOKENS
    oracle_timeout_seconds: float = ORACLE_TIMEOUT_SECONDS

    # Consensus
    approval_threshold: float = APPROVAL_THRESHOLD
    risk_threshold: float = RISK_THRESHOLD
    fraud_threshold: float = FRAUD_THRESHOLD
    review_fraction: float = REVIEW_FRACTION

    @field_validator("approval_threshold", "risk_threshold", "fraud_threshold", "review_fraction")
    @classmethod
    def validate_fraction(cls, v: float) -> float:
        """Thresholds are fractions in [0, 1]."""
        if not 0.0 <= v <= 1.0:
            raise ValueError("threshold must be between 0 and 1")
        return v

    # Treasury
    treasury_balance: float = TREASURY_BALANCE
    treasury_daily_limit: float = TREASURY_DAILY_LIMIT
    treasury_spent_today: float = 0.0

    # x402 payment agent
    x402_timeout_seconds: float = X402_TIMEOUT_SECONDS
    x402_default_deposit: str = X402_DEFAULT_DEPOSIT
    x402_default_rate: str = X402_DEFAULT_RATE
    x402_default_amount: str = X402_DEFAULT_AMOUNT
    x402_stream_id_start: int = X402_STREAM_ID_START
    agent_name: str = "paystream-agent"
    agent_wallet_address: str = Field(
        default="0x742d35Cc6634C0532925a3b844Bc9e7595f0bEb0",
        description="Agent wallet address"
    )
    agent_daily_budget: Decimal | None = Field(
        default=None,
        description="Optional daily spending budget; unlimited when unset"
    )

    @field_validator("x402_stream_id_start")
    @classmethod
    def validate_stream_id_start(cls, v: int) -> int:
        """Stream ids start above zero."""
        if v <= 0:
            raise ValueError("x402_stream_id_start must be positive")
        return v

    # Provider paywall
    paywall_recipient: str = Field(
        default="0x1f973bc13Fe975570949b09C022dCCB46944F5ED",
        description="Recipient address advertised in 402 challenges"
    )
    paywall_network: str = "cronos-testnet"
    paywall_token: str = "TCRO"

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
