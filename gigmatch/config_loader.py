import logging
import math
import os
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from gigmatch.exceptions import ConfigError

logger = logging.getLogger(__name__)


class ScoringWeights(BaseModel):
    """Weights for the five primary match factors."""
    skill: float = Field(0.30, ge=0)
    location: float = Field(0.25, ge=0)
    availability: float = Field(0.20, ge=0)
    rating: float = Field(0.15, ge=0)
    competency: float = Field(0.10, ge=0)

    @model_validator(mode="after")
    def _warn_on_unnormalized(self) -> "ScoringWeights":
        total = self.skill + self.location + self.availability + self.rating + self.competency
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            logger.warning(f"Scoring weights sum to {total:.3f}, not 1.0; scores will be scaled accordingly")
        return self


class BoostConfig(BaseModel):
    """Subscription-gated bonus added on top of the weighted sum."""
    eligible_tiers: List[str] = Field(default_factory=lambda: ["pro"])
    ai_boost: float = Field(0.10, ge=0)
    priority_listing_boost: float = Field(0.05, ge=0)


class MatchingConfig(BaseModel):
    """
    Configuration for the MatchingService.

    Search defaults apply when the caller does not pass radius/limit.
    """
    default_radius_km: float = Field(10.0, gt=0)
    default_limit: int = Field(20, ge=0)
    include_inactive: bool = False

    # Talent -> event direction only keeps events strictly above this score
    reverse_min_score: float = 0.3

    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    boost: BoostConfig = Field(default_factory=BoostConfig)


class SubscriptionConfig(BaseModel):
    free_tier: str = "free-basic"
    free_leads_per_month: int = Field(5, ge=0)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class AppConfig(BaseModel):
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    subscriptions: SubscriptionConfig = Field(default_factory=SubscriptionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def configure_logging(config: Optional[LoggingConfig] = None) -> None:
    """Apply basicConfig for the process; later calls are no-ops."""
    config = config or LoggingConfig()
    level = getattr(logging, config.level.upper(), None)
    if not isinstance(level, int):
        logger.warning(f"Unknown log level {config.level!r}; using INFO")
        level = logging.INFO
    logging.basicConfig(level=level, format=config.format)


_ENV_OVERRIDES = (
    ("GIGMATCH_DEFAULT_RADIUS_KM", "matching", "default_radius_km"),
    ("GIGMATCH_DEFAULT_LIMIT", "matching", "default_limit"),
    ("GIGMATCH_LOG_LEVEL", "logging", "level"),
)


def _apply_env_overrides(data: dict) -> dict:
    for env_name, section, key in _ENV_OVERRIDES:
        value = os.environ.get(env_name)
        if not value:
            continue
        if data.get(section) is None:
            data[section] = {}
        data[section][key] = value
    return data


def load_config(config_path: Optional[str] = "config.yaml") -> AppConfig:
    data = {}

    if config_path is not None:
        if not os.path.exists(config_path):
            # Fall back to the repository-level config.yaml
            base_dir = os.path.dirname(os.path.abspath(__file__))
            fallback = os.path.join(base_dir, "..", "config.yaml")
            if os.path.exists(fallback):
                config_path = fallback
            else:
                logger.info(f"No config file at {config_path}; using defaults")
                config_path = None

    if config_path is not None:
        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Could not read config {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config {config_path} must be a mapping, got {type(data).__name__}")

    data = _apply_env_overrides(data)

    try:
        return AppConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
