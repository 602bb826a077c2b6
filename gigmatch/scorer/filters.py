#!/usr/bin/env python3
"""
Result Filters - Post-ranking filters and candidate pre-selection.

filter_by_subscription never re-ranks; it only drops matches.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Union

from gigmatch.schemas import EventPosting, TalentProfile, UserProfile
from gigmatch.scorer.models import TalentMatch

logger = logging.getLogger(__name__)


def _talent_skills(match) -> List[str]:
    talent = match.talent if isinstance(match, TalentMatch) else match.get('talent')
    return TalentProfile.coerce(talent, "talent").skills


def filter_by_subscription(matches: List[TalentMatch], viewing_user) -> List[TalentMatch]:
    """
    Apply the viewing user's subscription filters to ranked matches.

    With skill filtering enabled, keeps matches where one of the viewer's
    skills appears (case-insensitively) inside one of the talent's skills.
    Otherwise returns the same list object unchanged.
    """
    user = UserProfile.coerce(viewing_user, "viewing user")
    subscription = user.subscription

    if subscription is None or not subscription.features.skill_filtering:
        return matches

    user_skills = [s.lower() for s in user.skills]
    filtered = [
        m for m in matches
        if any(
            user_skill in talent_skill.lower()
            for user_skill in user_skills
            for talent_skill in _talent_skills(m)
        )
    ]

    logger.debug(f"Skill filtering kept {len(filtered)}/{len(matches)} matches")
    return filtered


def _skill_terms(skills: Optional[Union[str, Sequence[str]]]) -> List[str]:
    if not skills:
        return []
    if isinstance(skills, str):
        skills = skills.split(',')
    return [s.strip() for s in skills if s and s.strip()]


def select_open_events(
    events: Iterable,
    category: Optional[str] = None,
    skills: Optional[Union[str, Sequence[str]]] = None
) -> List[EventPosting]:
    """
    Pick the events a talent may be matched against.

    Keeps open events, optionally restricted to a musician category and to
    events whose musician types or tags include one of the given skills
    (exact tag match; a comma-separated string is accepted).
    """
    skill_terms = set(_skill_terms(skills))
    selected = []

    for raw in events:
        event = EventPosting.coerce(raw, "event")
        if event.status != 'open':
            continue
        if category and event.musician_category != category:
            continue
        if skill_terms and not (skill_terms & (set(event.musician_types) | set(event.tags))):
            continue
        selected.append(event)

    return selected
