"""Application configuration with comprehensive validation."""
from typing import Literal
from functools import lru_cache
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# CONSENSUS METHOD NAMES
# =============================================================================
# Accepted values for DEFAULT_CONSENSUS_METHOD. Hyphens normalize to underscores.
# =============================================================================

CONSENSUS_METHOD_NAMES = (
    "weighted_average",
    "median",
    "conservative",
    "delphi",
)


class Settings(BaseSettings):
    """TRL engine settings with production-grade validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "TRL Assessment Engine"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"

    # API
    API_V1_PREFIX: str = "/api/v1"

    # Workflow defaults (applied by create_workflow_context)
    DEFAULT_CONSENSUS_METHOD: str = "weighted_average"
    DEFAULT_MINIMUM_REVIEWERS: int = Field(default=2, ge=1, le=50)
    DEFAULT_REQUIRE_ALL_SCORES: bool = True

    # Disagreement detection
    DISAGREEMENT_THRESHOLD_LEVELS: float = Field(default=1.0, gt=0, le=8)
    SIGNIFICANT_DISAGREEMENT_LEVELS: float = Field(default=2.0, gt=0, le=8)

    # Delphi consensus
    DELPHI_MAX_ROUNDS: int = Field(default=3, ge=1, le=20)
    DELPHI_OUTLIER_STD_DEVS: float = Field(default=1.5, gt=0, le=5)
    DELPHI_CONVERGENCE_DELTA: float = Field(default=0.1, ge=0, le=1)
    DELPHI_MIN_STD_DEV: float = Field(default=0.5, ge=0, le=5)

    @model_validator(mode="after")
    def validate_disagreement_thresholds(self):
        """A significant disagreement must also be a disagreement."""
        if self.SIGNIFICANT_DISAGREEMENT_LEVELS < self.DISAGREEMENT_THRESHOLD_LEVELS:
            raise ValueError(
                "SIGNIFICANT_DISAGREEMENT_LEVELS must be >= DISAGREEMENT_THRESHOLD_LEVELS, "
                f"got {self.SIGNIFICANT_DISAGREEMENT_LEVELS} < {self.DISAGREEMENT_THRESHOLD_LEVELS}"
            )
        return self

    @model_validator(mode="after")
    def validate_consensus_method(self):
        """Normalise the default consensus method and reject unknown names."""
        method = self.DEFAULT_CONSENSUS_METHOD.strip().lower().replace("-", "_")
        if method not in CONSENSUS_METHOD_NAMES:
            raise ValueError(
                f"DEFAULT_CONSENSUS_METHOD must be one of {', '.join(CONSENSUS_METHOD_NAMES)}, "
                f"got {self.DEFAULT_CONSENSUS_METHOD!r}"
            )
        self.DEFAULT_CONSENSUS_METHOD = method
        return self

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure production has safe settings."""
        if self.APP_ENV == "production" and self.DEBUG:
            raise ValueError("DEBUG must be False in production")
        return self

@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
