#!/usr/bin/env python3
"""
Scoring Module - Talent/event match scoring.

Public API:
- MatchingService: ranking orchestrator (event -> talent and talent -> event)
- TalentMatch / EventMatch / MatchFactors: result dataclasses
- calculate_*: individual factor functions
- filter_by_subscription: post-ranking viewer filter

Layout:
- models.py: Result data structures
- factors.py: Per-factor scoring and the weighted sum
- filters.py: Subscription post-filter and open-event pre-selection
- service.py: MatchingService orchestrator
"""

from gigmatch.scorer.models import EventMatch, MatchFactors, TalentMatch
from gigmatch.scorer.factors import (
    calculate_ai_boost,
    calculate_availability_match,
    calculate_competency_match,
    calculate_location_match,
    calculate_rating_match,
    calculate_skill_match,
)
from gigmatch.scorer.filters import filter_by_subscription
from gigmatch.scorer.service import MatchingService, find_matches

__all__ = [
    'MatchingService',
    'find_matches',
    'TalentMatch',
    'EventMatch',
    'MatchFactors',
    'calculate_skill_match',
    'calculate_location_match',
    'calculate_availability_match',
    'calculate_rating_match',
    'calculate_competency_match',
    'calculate_ai_boost',
    'filter_by_subscription',
]
