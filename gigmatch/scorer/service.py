#!/usr/bin/env python3
"""
Matching Service - Rank talents for an event, or events for a talent.

Takes records the caller already fetched from storage (plain documents or
schema models) and returns ranked, in-memory results:
- find_matches: event -> talent, weighted factors plus AI boost
- find_events_for_talent: talent -> event, weighted factors only

Performs no I/O and holds only configuration, so one instance can be
shared between concurrent requests.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Union

from gigmatch.config_loader import MatchingConfig, SubscriptionConfig
from gigmatch.schemas import EventPosting, TalentProfile
from gigmatch.scorer import factors as factor_calculations
from gigmatch.scorer.filters import select_open_events
from gigmatch.scorer.models import EventMatch, MatchFactors, TalentMatch
from gigmatch import subscriptions

logger = logging.getLogger(__name__)


class MatchingService:
    """
    Service for scoring and ranking talent/event pairs.

    Overall score = weighted sum of skill, location, availability, rating and
    competency factors, plus the subscription AI boost. The total is rounded
    to 2 decimals and left unclamped, so a boosted perfect match
    scores 1.15.
    """

    def __init__(
        self,
        config: Optional[MatchingConfig] = None,
        subscription_config: Optional[SubscriptionConfig] = None
    ):
        self.config = config or MatchingConfig()
        self.subscription_config = subscription_config or SubscriptionConfig()

    def _radius(self, radius: Optional[float]) -> float:
        return self.config.default_radius_km if radius is None else radius

    def _limit(self, limit: Optional[int]) -> int:
        return self.config.default_limit if limit is None else limit

    def calculate_factors(self, talent, event, radius: Optional[float] = None) -> MatchFactors:
        """Five primary factors for a pair, without the AI boost."""
        talent = TalentProfile.coerce(talent, "talent")
        event = EventPosting.coerce(event, "event")

        return MatchFactors(
            skill_match=factor_calculations.calculate_skill_match(talent, event),
            location_match=factor_calculations.calculate_location_match(talent, event, self._radius(radius)),
            availability_match=factor_calculations.calculate_availability_match(talent, event),
            rating_match=factor_calculations.calculate_rating_match(talent),
            competency_match=factor_calculations.calculate_competency_match(talent, event),
        )

    def score_talent(self, talent, event, radius: Optional[float] = None) -> TalentMatch:
        """Score one talent against an event, including the AI boost."""
        talent = TalentProfile.coerce(talent, "talent")
        event = EventPosting.coerce(event, "event")

        factors = self.calculate_factors(talent, event, radius)
        factors.ai_boost = factor_calculations.calculate_ai_boost(talent, self.config.boost)

        raw_score = factor_calculations.weighted_score(factors, self.config.weights) + factors.ai_boost
        score = factor_calculations.round_score(raw_score)

        logger.debug(f"Talent {talent.id}: skill={factors.skill_match:.2f}, "
                     f"location={factors.location_match:.2f}, "
                     f"availability={factors.availability_match:.2f}, "
                     f"rating={factors.rating_match:.2f}, "
                     f"competency={factors.competency_match:.2f}, "
                     f"boost={factors.ai_boost:.2f}, score={score:.2f}")

        return TalentMatch(talent=talent, event=event, score=score, factors=factors)

    def find_matches(
        self,
        event,
        candidates: Iterable,
        radius: Optional[float] = None,
        limit: Optional[int] = None,
        include_inactive: Optional[bool] = None
    ) -> List[TalentMatch]:
        """
        Rank candidate talents for an event.

        Args:
            event: Event posting (or store document)
            candidates: Talent records already fetched by the caller
            radius: Search radius in km; only affects the location factor
            limit: Maximum results to return
            include_inactive: Also score talents flagged isActive=false

        Returns:
            List of TalentMatch sorted by score (highest first, ties in
            candidate order), truncated to limit
        """
        event = EventPosting.coerce(event, "event")
        radius = self._radius(radius)
        limit = self._limit(limit)
        if include_inactive is None:
            include_inactive = self.config.include_inactive

        matches = []
        skipped_inactive = 0

        for candidate in candidates:
            talent = TalentProfile.coerce(candidate, "talent")
            if not include_inactive and not talent.is_active:
                skipped_inactive += 1
                continue
            matches.append(self.score_talent(talent, event, radius))

        matches.sort(key=lambda m: m.score, reverse=True)

        logger.info(f"Scored {len(matches)} talents for event {event.id} "
                    f"(skipped {skipped_inactive} inactive), returning top {min(limit, len(matches))}")

        return matches[:limit]

    def calculate_event_match_score(self, talent, event, radius: Optional[float] = None) -> float:
        """Unrounded talent -> event score: the weighted five-factor sum, no boost."""
        factors = self.calculate_factors(talent, event, radius)
        return factor_calculations.weighted_score(factors, self.config.weights)

    def find_events_for_talent(
        self,
        talent,
        events: Iterable,
        radius: Optional[float] = None,
        limit: Optional[int] = None,
        category: Optional[str] = None,
        skills: Optional[Union[str, Sequence[str]]] = None,
        enforce_lead_quota: bool = True
    ) -> List[EventMatch]:
        """
        Rank open events for a talent (reverse matching).

        Events are pre-selected (open, optional category/skills filter) and
        truncated to limit in the order supplied, then scored. Only events
        scoring above reverse_min_score are returned, highest first.

        Raises:
            LeadLimitReachedError: the talent's free-tier quota is used up (skipped
                when enforce_lead_quota is False)
        """
        talent = TalentProfile.coerce(talent, "talent")
        radius = self._radius(radius)
        limit = self._limit(limit)

        if enforce_lead_quota and talent.subscription is not None:
            subscriptions.ensure_can_apply(talent.subscription, self.subscription_config)

        candidates = select_open_events(events, category=category, skills=skills)[:limit]

        event_matches = []
        for event in candidates:
            factors = self.calculate_factors(talent, event, radius)
            raw_score = factor_calculations.weighted_score(factors, self.config.weights)
            if raw_score <= self.config.reverse_min_score:
                continue
            event_matches.append(EventMatch(
                event=event,
                match_score=factor_calculations.round_score(raw_score),
                match_factors=factors,
            ))

        event_matches.sort(key=lambda m: m.match_score, reverse=True)

        logger.info(f"Matched {len(event_matches)}/{len(candidates)} open events for talent {talent.id}")
        return event_matches


def find_matches(
    event,
    candidates: Iterable,
    radius: Optional[float] = None,
    limit: Optional[int] = None,
    include_inactive: Optional[bool] = None
) -> List[TalentMatch]:
    """find_matches with default configuration (radius 10 km, limit 20)."""
    return MatchingService().find_matches(
        event, candidates, radius=radius, limit=limit, include_inactive=include_inactive
    )
