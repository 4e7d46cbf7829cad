"""Application configuration using pydantic-settings pattern."""

from functools import lru_cache

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings


class WeekConfidenceScale(BaseModel):
    """Confidence constants for the pattern-driven week tiers.

    Metadata tier confidence is ``metadata_base - priority * priority_step``.
    Pattern fallback confidence is ``pattern_base + (6 - priority) * priority_step``.
    For any given priority the metadata tier must outrank the pattern fallback.
    """

    metadata_base: int = Field(default=110, ge=0, le=110)
    pattern_base: int = Field(default=40, ge=0, le=110)
    priority_step: int = Field(default=5, ge=0, le=20)

    @model_validator(mode="after")
    def _metadata_outranks_patterns(self) -> "WeekConfidenceScale":
        for priority in range(1, 7):
            if self.metadata_confidence(priority) <= self.pattern_confidence(priority):
                raise ValueError(
                    f"metadata confidence must exceed pattern confidence "
                    f"at priority {priority}"
                )
        return self

    def metadata_confidence(self, priority: int) -> int:
        """Confidence for an explicit title reference of the given priority."""
        return max(0, self.metadata_base - priority * self.priority_step)

    def pattern_confidence(self, priority: int) -> int:
        """Confidence for a pattern-fallback hit of the given priority."""
        return max(0, self.pattern_base + (6 - priority) * self.priority_step)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Recording Identity Engine"
    app_version: str = "0.1.0"
    app_env: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # Google (roster, file store, ledger)
    google_credentials_path: str | None = Field(default=None)

    # Week inference
    week_review_threshold: int = Field(
        default=70,
        ge=0,
        le=110,
        description="Week inferences below this confidence go to human review",
    )
    week_confidence: WeekConfidenceScale = Field(default_factory=WeekConfidenceScale)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
