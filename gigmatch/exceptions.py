#!/usr/bin/env python3
"""
Exceptions raised by the matching core.

Scoring factors never raise for missing optional fields; these cover
configuration problems, unusable top-level documents, and lead quota checks.
"""

from typing import Optional


class GigMatchError(Exception):
    """Base exception for matching core errors."""
    pass


class ConfigError(GigMatchError):
    """Raised when configuration cannot be read or validated."""
    pass


class InvalidDocumentError(GigMatchError):
    """Raised when an event, talent or user record is missing or unusable."""

    def __init__(self, kind: str, reason: str):
        self.kind = kind
        self.reason = reason
        super().__init__(f"Invalid {kind}: {reason}")


class LeadLimitReachedError(GigMatchError):
    """Raised when a free-tier talent has used all monthly leads."""

    def __init__(self, tier: str, leads_used: int, leads_remaining: Optional[int] = 0):
        self.tier = tier
        self.leads_used = leads_used
        self.leads_remaining = leads_remaining
        super().__init__(
            "You have reached your monthly application limit. "
            "Upgrade your subscription for unlimited applications."
        )
