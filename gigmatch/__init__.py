"""
GigMatch matching core.

Ranks talent for gig events (and events for talent) from records the caller
has already loaded. No storage, HTTP or authentication lives here.
"""

from gigmatch.config_loader import AppConfig, MatchingConfig, load_config
from gigmatch.exceptions import (
    ConfigError,
    GigMatchError,
    InvalidDocumentError,
    LeadLimitReachedError,
)
from gigmatch.scorer import MatchingService, filter_by_subscription, find_matches

__all__ = [
    'AppConfig',
    'MatchingConfig',
    'load_config',
    'MatchingService',
    'find_matches',
    'filter_by_subscription',
    'GigMatchError',
    'ConfigError',
    'InvalidDocumentError',
    'LeadLimitReachedError',
]
