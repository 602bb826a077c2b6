from dataclasses import dataclass
from typing import Optional

from gigmatch.config_loader import AppConfig, configure_logging, load_config
from gigmatch.scorer import MatchingService


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    The HTTP layer builds one of these at startup and hands the matching
    service to its request handlers.
    """
    config: AppConfig
    matching_service: MatchingService

    @classmethod
    def build(cls, config: Optional[AppConfig] = None) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration (defaults if omitted)

        Returns:
            Fully wired AppContext instance with logging configured
        """
        config = config or AppConfig()
        configure_logging(config.logging)

        matching_service = MatchingService(
            config=config.matching,
            subscription_config=config.subscriptions
        )

        return cls(config=config, matching_service=matching_service)

    @classmethod
    def from_file(cls, config_path: str = "config.yaml") -> "AppContext":
        return cls.build(load_config(config_path))
