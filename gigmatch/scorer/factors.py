#!/usr/bin/env python3
"""
Match Factors - Per-factor scoring between one talent and one event.

Factors:
- skill: category / musician type / genre overlap (weighted sub-checks)
- location: Haversine distance banded against the search radius
- availability: free-text keywords against the event's day of week
- rating: review average plus trust bonuses
- competency: level table, adjusted for corporate events
- ai boost: subscription-gated additive bonus (not weighted)

Missing optional data never raises here; each factor falls back to a
neutral value instead. Free-text checks are plain case-insensitive
substring tests.
"""

import logging
import math
from typing import Optional

from gigmatch.config_loader import BoostConfig, ScoringWeights
from gigmatch.geo import distance_band_score, haversine_km
from gigmatch.schemas import EventPosting, TalentProfile
from gigmatch.scorer.models import MatchFactors

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 0.5
DEFAULT_RADIUS_KM = 10.0

CATEGORY_WEIGHT = 0.4
MUSICIAN_TYPE_WEIGHT = 0.4
GENRE_WEIGHT = 0.2

COMPETENCY_LEVELS = {
    'beginner': 0.3,
    'intermediate': 0.6,
    'pro': 0.8,
    'expert': 1.0,
}
CORPORATE_BEGINNER_MULTIPLIER = 0.7
CORPORATE_EXPERT_MULTIPLIER = 1.1

SATURDAY, SUNDAY = 5, 6


def _contains(text: str, fragment: str) -> bool:
    return fragment.lower() in text.lower()


def round_score(score: float) -> float:
    """Round to 2 decimals, halves rounding up."""
    return math.floor(score * 100 + 0.5) / 100


def calculate_skill_match(talent, event) -> float:
    """
    Skill overlap between a talent and the event's requirements.

    Each sub-check counts only when the event states that requirement, and
    the result is normalized over the checks actually evaluated.

    Returns:
        Score between 0-1 (0 when the event states no requirement)
    """
    talent = TalentProfile.coerce(talent, "talent")
    event = EventPosting.coerce(event, "event")

    score = 0.0
    evaluated = 0.0

    if event.musician_category:
        evaluated += CATEGORY_WEIGHT
        if talent.category == event.musician_category:
            score += CATEGORY_WEIGHT

    musician_types = [t for t in event.musician_types if t]
    if musician_types:
        evaluated += MUSICIAN_TYPE_WEIGHT
        talent_terms = ([talent.subcategory] if talent.subcategory else []) + talent.skills
        if any(_contains(term, t) for t in musician_types for term in talent_terms):
            score += MUSICIAN_TYPE_WEIGHT

    if event.genre:
        evaluated += GENRE_WEIGHT
        if any(_contains(skill, event.genre) for skill in talent.skills):
            score += GENRE_WEIGHT

    return score / evaluated if evaluated > 0 else 0.0


def calculate_location_match(talent, event, radius: Optional[float] = DEFAULT_RADIUS_KM) -> float:
    """
    Location proximity score.

    Args:
        talent: Talent profile (or store document)
        event: Event posting (or store document)
        radius: Search radius in km

    Returns:
        Neutral 0.5 when either side lacks coordinates, else a radius band score
    """
    talent = TalentProfile.coerce(talent, "talent")
    event = EventPosting.coerce(event, "event")

    if talent.coordinates is None or event.coordinates is None:
        return NEUTRAL_SCORE

    if radius is None:
        radius = DEFAULT_RADIUS_KM

    distance = haversine_km(talent.coordinates, event.coordinates)
    return distance_band_score(distance, radius)


def calculate_availability_match(talent, event) -> float:
    """Keyword match between the talent's availability text and the event day."""
    talent = TalentProfile.coerce(talent, "talent")
    event = EventPosting.coerce(event, "event")

    if not talent.availability:
        return NEUTRAL_SCORE

    availability = talent.availability.lower()

    if 'flexible' in availability or 'anytime' in availability:
        return 1.0

    # Without a usable date the event is treated as a weekday
    if event.date is not None and event.date.weekday() in (SATURDAY, SUNDAY):
        if 'weekend' in availability:
            return 1.0
        if 'saturday' in availability or 'sunday' in availability:
            return 0.9
    else:
        if 'weekday' in availability:
            return 1.0
        if 'evening' in availability:
            return 0.8

    return NEUTRAL_SCORE


def calculate_rating_match(talent) -> float:
    """Rating average on a 0-1 scale plus review-count and verification bonuses, capped at 1."""
    talent = TalentProfile.coerce(talent, "talent")

    score = talent.rating.average / 5
    total_reviews = talent.rating.total_reviews

    # Trust bonus for having reviews
    if total_reviews >= 10:
        score += 0.1
    elif total_reviews >= 5:
        score += 0.05
    elif total_reviews >= 1:
        score += 0.02

    if talent.is_verified:
        score += 0.1

    return min(score, 1.0)


def calculate_competency_match(talent, event) -> float:
    talent = TalentProfile.coerce(talent, "talent")
    event = EventPosting.coerce(event, "event")

    level = talent.competency_level
    score = COMPETENCY_LEVELS.get(level, NEUTRAL_SCORE)

    if event.type and 'corporate' in event.type.lower():
        if level == 'beginner':
            score *= CORPORATE_BEGINNER_MULTIPLIER
        elif level == 'expert':
            score *= CORPORATE_EXPERT_MULTIPLIER

    return min(score, 1.0)


def calculate_ai_boost(talent, boost: Optional[BoostConfig] = None) -> float:
    """
    Subscription boost added on top of the weighted score.

    Not weighted and not clamped: a pro talent with priority listing gets 0.15.
    """
    talent = TalentProfile.coerce(talent, "talent")
    boost = boost or BoostConfig()

    subscription = talent.subscription
    if subscription is None:
        return 0.0

    total = 0.0
    if subscription.tier in boost.eligible_tiers and subscription.features.ai_boosted:
        total += boost.ai_boost
    if subscription.features.priority_listing:
        total += boost.priority_listing_boost

    return total


def weighted_score(factors: MatchFactors, weights: Optional[ScoringWeights] = None) -> float:
    """Weighted sum of the five primary factors (ai_boost excluded)."""
    weights = weights or ScoringWeights()
    return (
        factors.skill_match * weights.skill +
        factors.location_match * weights.location +
        factors.availability_match * weights.availability +
        factors.rating_match * weights.rating +
        factors.competency_match * weights.competency
    )
