#!/usr/bin/env python3
"""
Scoring Models - Data structures for match results.

Results are built fresh per query and never persisted.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from gigmatch.schemas import EventPosting, TalentProfile


def _document(model: Any) -> Any:
    if hasattr(model, "model_dump"):
        return model.model_dump(by_alias=True, exclude_none=True)
    return model


@dataclass
class MatchFactors:
    """Per-factor breakdown. All in [0, 1] except ai_boost (additive bonus)."""
    skill_match: float = 0.0
    location_match: float = 0.0
    availability_match: float = 0.0
    rating_match: float = 0.0
    competency_match: float = 0.0
    ai_boost: Optional[float] = None

    def to_dict(self) -> Dict[str, float]:
        factors = {
            'skillMatch': self.skill_match,
            'locationMatch': self.location_match,
            'availabilityMatch': self.availability_match,
            'ratingMatch': self.rating_match,
            'competencyMatch': self.competency_match,
        }
        if self.ai_boost is not None:
            factors['aiBoost'] = self.ai_boost
        return factors


@dataclass
class TalentMatch:
    """A talent ranked for an event (event -> talent direction)."""
    talent: TalentProfile
    event: EventPosting
    score: float = 0.0
    factors: MatchFactors = field(default_factory=MatchFactors)

    @property
    def match_score(self) -> float:
        return self.score

    def to_dict(self) -> Dict[str, Any]:
        return {
            'talent': _document(self.talent),
            'event': _document(self.event),
            'score': self.score,
            'matchScore': self.score,
            'factors': self.factors.to_dict(),
        }


@dataclass
class EventMatch:
    """An event ranked for a talent (talent -> event direction)."""
    event: EventPosting
    match_score: float = 0.0
    match_factors: MatchFactors = field(default_factory=MatchFactors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'event': _document(self.event),
            'matchScore': self.match_score,
            'matchFactors': self.match_factors.to_dict(),
        }
