"""Configuration system for paycal.

This module provides Pydantic Settings-based configuration with environment
variable support and defaults matching the behavior of the pay & bill
calendar.

Usage:
    from paycal_core.config import PaycalConfig

    # Load from environment variables and .env file
    config = PaycalConfig()

    # Access projection thresholds
    print(config.projection.caution_threshold)
    print(config.projection.reserve_buffer)

    # Access payoff settings
    print(config.payoff.max_months)
"""

from decimal import Decimal

import structlog
from pydantic import Field, ValidationError as PydanticValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

logger = structlog.get_logger()


class ProjectionSettings(BaseSettings):
    """Cash-flow projection settings.

    Environment Variables:
        PAYCAL_PROJECTION_CAUTION_THRESHOLD: Balance below which a day is "caution"
        PAYCAL_PROJECTION_RESERVE_BUFFER: Cushion kept when recommending reserves
        PAYCAL_PROJECTION_PAY_SEARCH_WINDOW_DAYS: Days searched either side of a
            month for boundary-spanning pay periods
        PAYCAL_PROJECTION_PAID_BILLS_REDUCE_BALANCE: Subtract paid bills from the
            running balance
        PAYCAL_PROJECTION_INCLUDE_OVERDUE_ONE_OFFS: Keep one-off expenses whose
            date has already passed
    """

    model_config = SettingsConfigDict(
        env_prefix="PAYCAL_PROJECTION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    caution_threshold: Decimal = Field(
        default=Decimal("200"),
        ge=0,
        description="Running balance below this (and >= 0) is classified as caution",
    )
    reserve_buffer: Decimal = Field(
        default=Decimal("100"),
        ge=0,
        description="Buffer kept on top of upcoming bills when recommending a reserve",
    )
    pay_search_window_days: int = Field(
        default=30,
        ge=0,
        le=366,
        description="Days before/after a month searched for pay dates",
    )
    paid_bills_reduce_balance: bool = Field(
        default=False,
        description="Whether bills marked paid still move the projected balance",
    )
    include_overdue_one_offs: bool = Field(
        default=True,
        description="Keep one-off expenses dated before the as-of date",
    )


class PayoffSettings(BaseSettings):
    """Debt payoff simulation settings.

    Environment Variables:
        PAYCAL_PAYOFF_MAX_MONTHS: Simulation cap in months
    """

    model_config = SettingsConfigDict(
        env_prefix="PAYCAL_PAYOFF_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_months: int = Field(
        default=120,
        gt=0,
        le=1200,
        description="Maximum number of simulated months",
    )


class PaycalConfig(BaseSettings):
    """Root configuration for paycal.

    Environment Variables:
        PAYCAL_ENV: Environment name (development, staging, production, test)
        PAYCAL_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)

    Example:
        config = PaycalConfig(
            projection=ProjectionSettings(caution_threshold=Decimal("300")),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="PAYCAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production, test)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    projection: ProjectionSettings = Field(default_factory=ProjectionSettings)
    payoff: PayoffSettings = Field(default_factory=PayoffSettings)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def is_debug(self) -> bool:
        return self.log_level == "DEBUG"


def load_config(**overrides) -> PaycalConfig:
    """Load configuration from the environment, wrapping validation failures.

    Args:
        **overrides: Field values that take precedence over the environment.

    Returns:
        A validated PaycalConfig.

    Raises:
        ConfigurationError: If any setting is invalid.
    """
    try:
        config = PaycalConfig(**overrides)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        config_key = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigurationError(
            f"Invalid paycal configuration: {first.get('msg')}",
            config_key=config_key or None,
            actual=first.get("input"),
            details={"errors": exc.error_count()},
        ) from exc

    logger.debug(
        "config_loaded",
        env=config.env,
        log_level=config.log_level,
        caution_threshold=str(config.projection.caution_threshold),
        reserve_buffer=str(config.projection.reserve_buffer),
    )
    return config
