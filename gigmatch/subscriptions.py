#!/usr/bin/env python3
"""
Subscription tiers, lead quotas and upgrade recommendations.

A "lead" is one application to an event. The free tier gets a monthly
quota of leads; every paid tier is unlimited (leads_remaining == -1).

All functions are pure: anything that changes a subscription returns an
updated copy and leaves saving it to the caller.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from gigmatch.config_loader import SubscriptionConfig
from gigmatch.exceptions import LeadLimitReachedError
from gigmatch.schemas import Subscription, SubscriptionFeatures, SubscriptionUsage, UserProfile

logger = logging.getLogger(__name__)

UNLIMITED = -1

TIER_FEATURES: Dict[str, Dict[str, object]] = {
    'free-basic': {
        'leads_per_month': 5,
        'ai_boosted': False,
        'location_filtering': False,
        'skill_filtering': False,
        'portfolio_gallery': False,
        'group_accounts': False,
        'priority_listing': False,
    },
    'pro-tier': {
        'leads_per_month': UNLIMITED,
        'ai_boosted': True,
        'location_filtering': False,
        'skill_filtering': False,
        'portfolio_gallery': False,
        'group_accounts': False,
        'priority_listing': True,
    },
    'location-pro': {
        'leads_per_month': UNLIMITED,
        'ai_boosted': True,
        'location_filtering': True,
        'skill_filtering': False,
        'portfolio_gallery': False,
        'group_accounts': False,
        'priority_listing': True,
    },
    'skill-focused': {
        'leads_per_month': UNLIMITED,
        'ai_boosted': True,
        'location_filtering': True,
        'skill_filtering': True,
        'portfolio_gallery': False,
        'group_accounts': False,
        'priority_listing': True,
    },
    'portfolio-plus': {
        'leads_per_month': UNLIMITED,
        'ai_boosted': True,
        'location_filtering': True,
        'skill_filtering': True,
        'portfolio_gallery': True,
        'group_accounts': False,
        'priority_listing': True,
    },
    'agency-plan': {
        'leads_per_month': UNLIMITED,
        'ai_boosted': True,
        'location_filtering': True,
        'skill_filtering': True,
        'portfolio_gallery': True,
        'group_accounts': True,
        'priority_listing': True,
    },
}


def features_for_tier(tier: str, config: Optional[SubscriptionConfig] = None) -> SubscriptionFeatures:
    """Feature set a tier grants; the free tier's quota comes from config."""
    config = config or SubscriptionConfig()
    if tier not in TIER_FEATURES:
        raise ValueError(f"Unknown subscription tier: {tier!r}")
    features = dict(TIER_FEATURES[tier])
    if tier == config.free_tier:
        features['leads_per_month'] = config.free_leads_per_month
    return SubscriptionFeatures(**features)


def change_tier(subscription, tier: str, config: Optional[SubscriptionConfig] = None) -> Subscription:
    """Copy of the subscription moved to another tier, with that tier's features."""
    subscription = Subscription.coerce(subscription, "subscription")
    return subscription.model_copy(update={'tier': tier, 'features': features_for_tier(tier, config)})


def _is_free(subscription: Subscription, config: Optional[SubscriptionConfig]) -> bool:
    config = config or SubscriptionConfig()
    return subscription.tier == config.free_tier


def leads_remaining(subscription, config: Optional[SubscriptionConfig] = None) -> int:
    subscription = Subscription.coerce(subscription, "subscription")
    if _is_free(subscription, config):
        return max(0, subscription.features.leads_per_month - subscription.usage.leads_used)
    return UNLIMITED


def can_apply_to_event(subscription, config: Optional[SubscriptionConfig] = None) -> bool:
    subscription = Subscription.coerce(subscription, "subscription")
    if _is_free(subscription, config):
        return subscription.usage.leads_used < subscription.features.leads_per_month
    return True


def ensure_can_apply(subscription, config: Optional[SubscriptionConfig] = None) -> None:
    """Raise LeadLimitReachedError when the monthly quota is used up."""
    subscription = Subscription.coerce(subscription, "subscription")
    if not can_apply_to_event(subscription, config):
        logger.info(f"Lead limit reached for tier {subscription.tier} "
                    f"({subscription.usage.leads_used} used)")
        raise LeadLimitReachedError(
            tier=subscription.tier,
            leads_used=subscription.usage.leads_used,
            leads_remaining=leads_remaining(subscription, config),
        )


def record_lead_used(subscription, config: Optional[SubscriptionConfig] = None) -> Subscription:
    """Copy with one more lead used; paid tiers are returned as-is."""
    subscription = Subscription.coerce(subscription, "subscription")
    if not _is_free(subscription, config):
        return subscription
    usage = subscription.usage.model_copy(update={'leads_used': subscription.usage.leads_used + 1})
    return subscription.model_copy(update={'usage': usage})


def _aligned(a: datetime, b: datetime) -> Tuple[datetime, datetime]:
    # Naive datetimes are taken as UTC when compared with aware ones
    if (a.tzinfo is None) != (b.tzinfo is None):
        if a.tzinfo is None:
            a = a.replace(tzinfo=timezone.utc)
        else:
            b = b.replace(tzinfo=timezone.utc)
    return a, b


def is_subscription_active(subscription, now: Optional[datetime] = None) -> bool:
    subscription = Subscription.coerce(subscription, "subscription")
    if subscription.status != 'active':
        return False
    if subscription.end_date is None:
        return True
    end_date, now = _aligned(subscription.end_date, now or datetime.now(timezone.utc))
    return end_date > now


def reset_monthly_usage(subscription, now: Optional[datetime] = None) -> Tuple[Subscription, bool]:
    """
    Zero the lead counter when the calendar month has rolled over.

    Returns:
        (subscription, was_reset) - the original object when nothing changed
    """
    subscription = Subscription.coerce(subscription, "subscription")
    now = now or datetime.now(timezone.utc)
    last_reset = subscription.usage.last_reset_date

    if last_reset is not None:
        last_reset, now = _aligned(last_reset, now)
        if last_reset.year == now.year and last_reset.month == now.month:
            return subscription, False

    usage = SubscriptionUsage(leads_used=0, last_reset_date=now)
    return subscription.model_copy(update={'usage': usage}), True


@dataclass
class UpgradeRecommendation:
    tier: str
    reason: str
    benefits: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {'tier': self.tier, 'reason': self.reason, 'benefits': list(self.benefits)}


def recommend_upgrades(
    user,
    subscription=None,
    total_applications: int = 0,
    config: Optional[SubscriptionConfig] = None
) -> List[UpgradeRecommendation]:
    """
    Suggest plan upgrades from a talent's usage pattern.

    Args:
        user: Talent profile (skills and location are read)
        subscription: The talent's subscription, or None if they never subscribed
        total_applications: Number of applications the talent has made
        config: Subscription settings (free tier name)
    """
    config = config or SubscriptionConfig()
    user = UserProfile.coerce(user, "user")
    if subscription is not None:
        subscription = Subscription.coerce(subscription, "subscription")

    recommendations: List[UpgradeRecommendation] = []

    if subscription is None or subscription.tier == config.free_tier:
        if total_applications >= 3:
            recommendations.append(UpgradeRecommendation(
                tier='pro-tier',
                reason="You're actively applying to events. Upgrade to Pro for unlimited "
                       "applications and AI-boosted matching.",
                benefits=['Unlimited applications', 'AI-boosted matching', 'Priority listing'],
            ))

        if user.coordinates is not None:
            recommendations.append(UpgradeRecommendation(
                tier='location-pro',
                reason='You have location data. Upgrade to Location Pro for smart '
                       'location-based matching.',
                benefits=['Location-based filtering', 'AI-boosted matching', 'Priority listing'],
            ))

    if subscription is not None and subscription.tier in (config.free_tier, 'pro-tier', 'location-pro'):
        if len(user.skills) > 3:
            recommendations.append(UpgradeRecommendation(
                tier='skill-focused',
                reason='You have diverse skills. Upgrade to Skill Focused for targeted job matching.',
                benefits=['Skill-based filtering', 'Location-based filtering', 'AI-boosted matching'],
            ))

    if subscription is not None and subscription.tier not in ('portfolio-plus', 'agency-plan'):
        recommendations.append(UpgradeRecommendation(
            tier='portfolio-plus',
            reason='Showcase your work with Portfolio Plus for better visibility.',
            benefits=['Portfolio gallery', 'Skill-based filtering', 'Location-based filtering'],
        ))

    return recommendations


def acceptance_rate(total_applications: int, accepted_applications: int) -> float:
    """Percentage of applications accepted, one decimal; 0 with no applications."""
    if total_applications <= 0:
        return 0.0
    return round(accepted_applications / total_applications * 100, 1)
