#!/usr/bin/env python3
"""
Unit tests for MatchingService.
"""

import unittest

from gigmatch.config_loader import MatchingConfig, ScoringWeights, SubscriptionConfig
from gigmatch.exceptions import InvalidDocumentError, LeadLimitReachedError
from gigmatch.scorer import MatchingService, find_matches
from gigmatch.scorer.models import EventMatch, TalentMatch
from tests.fixtures.gig_fixtures import (
    FREE_SUBSCRIPTION,
    LOS_ANGELES,
    WEDNESDAY_DATE,
    make_bare_talent,
    make_event,
    make_talent,
)


class TestFindMatches(unittest.TestCase):
    """Event -> talent ranking."""

    def setUp(self):
        self.service = MatchingService()
        self.event = make_event()

    def test_end_to_end_perfect_match_exceeds_one(self):
        matches = self.service.find_matches(self.event, [make_talent()])

        self.assertEqual(len(matches), 1)
        match = matches[0]
        self.assertIsInstance(match, TalentMatch)
        self.assertAlmostEqual(match.factors.skill_match, 1.0)
        self.assertAlmostEqual(match.factors.location_match, 1.0)
        self.assertAlmostEqual(match.factors.availability_match, 1.0)
        self.assertAlmostEqual(match.factors.rating_match, 1.0)
        self.assertAlmostEqual(match.factors.competency_match, 1.0)
        self.assertAlmostEqual(match.factors.ai_boost, 0.15)
        # No clamp on the composite score
        self.assertEqual(match.score, 1.15)
        self.assertEqual(match.match_score, 1.15)

    def test_sorted_descending(self):
        candidates = [
            make_bare_talent(_id="weak"),
            make_talent(_id="strong"),
            make_talent(_id="middle", subscription=None, competencyLevel="intermediate"),
        ]
        matches = self.service.find_matches(self.event, candidates)

        self.assertEqual([m.talent.id for m in matches], ["strong", "middle", "weak"])
        scores = [m.score for m in matches]
        self.assertEqual(scores, sorted(scores, reverse=True))

    def test_ties_keep_candidate_order(self):
        candidates = [make_bare_talent(_id=f"t{i}") for i in range(5)]
        matches = self.service.find_matches(self.event, candidates)
        self.assertEqual([m.talent.id for m in matches], ["t0", "t1", "t2", "t3", "t4"])

    def test_limit_defaults_to_twenty(self):
        candidates = [make_bare_talent(_id=f"t{i}") for i in range(25)]
        self.assertEqual(len(self.service.find_matches(self.event, candidates)), 20)
        self.assertEqual(len(self.service.find_matches(self.event, candidates, limit=3)), 3)

    def test_radius_only_affects_location_factor(self):
        far = make_talent(location={"coordinates": list(LOS_ANGELES)})
        near_radius = self.service.find_matches(self.event, [far], radius=10)[0]
        huge_radius = self.service.find_matches(self.event, [far], radius=10000)[0]

        self.assertEqual(near_radius.factors.location_match, 0.2)
        self.assertEqual(huge_radius.factors.location_match, 1.0)
        self.assertEqual(near_radius.factors.skill_match, huge_radius.factors.skill_match)
        self.assertAlmostEqual(huge_radius.score - near_radius.score, 0.8 * 0.25)

    def test_inactive_talent_skipped_unless_included(self):
        candidates = [make_talent(_id="active"), make_talent(_id="inactive", isActive=False)]

        default = self.service.find_matches(self.event, candidates)
        self.assertEqual([m.talent.id for m in default], ["active"])

        everyone = self.service.find_matches(self.event, candidates, include_inactive=True)
        self.assertEqual(len(everyone), 2)

    def test_missing_event_raises(self):
        with self.assertRaises(InvalidDocumentError):
            self.service.find_matches(None, [make_talent()])

    def test_missing_candidate_raises(self):
        with self.assertRaises(InvalidDocumentError):
            self.service.find_matches(self.event, [None])

    def test_malformed_candidate_fields_do_not_abort_ranking(self):
        candidates = [
            make_talent(_id="good"),
            make_talent(_id="free-text-location", location="NYC"),
            make_talent(_id="odd-reviews", rating={"average": 4, "totalReviews": 2.5}),
            make_talent(_id="null-tier", subscription={"tier": None, "features": "all"}),
        ]
        matches = self.service.find_matches(self.event, candidates)

        self.assertEqual(len(matches), 4)
        self.assertEqual(matches[0].talent.id, "good")
        by_id = {m.talent.id: m for m in matches}
        self.assertEqual(by_id["free-text-location"].factors.location_match, 0.5)
        self.assertEqual(by_id["null-tier"].factors.ai_boost, 0.0)

    def test_empty_pool(self):
        self.assertEqual(self.service.find_matches(self.event, []), [])

    def test_module_level_find_matches(self):
        matches = find_matches(self.event, [make_talent()])
        self.assertEqual(matches[0].score, 1.15)

    def test_custom_weights(self):
        config = MatchingConfig(weights=ScoringWeights(skill=1.0, location=0.0, availability=0.0,
                                                       rating=0.0, competency=0.0))
        service = MatchingService(config)
        talent = make_talent(subscription=None, skills=[], subcategory="drummer")
        match = service.find_matches(self.event, [talent])[0]
        # Only category matched: 0.4 of 1.0
        self.assertEqual(match.score, 0.4)

    def test_to_dict_shape(self):
        payload = self.service.find_matches(self.event, [make_talent()])[0].to_dict()

        self.assertEqual(payload['score'], payload['matchScore'])
        self.assertEqual(set(payload['factors']), {
            'skillMatch', 'locationMatch', 'availabilityMatch',
            'ratingMatch', 'competencyMatch', 'aiBoost',
        })
        self.assertEqual(payload['talent']['_id'], 'tal-1')
        self.assertEqual(payload['talent']['firstName'], 'Sam')
        self.assertEqual(payload['event']['musicianCategory'], 'musician')


class TestFindEventsForTalent(unittest.TestCase):
    """Talent -> event ranking."""

    def setUp(self):
        self.service = MatchingService()
        self.talent = make_talent()

    def test_only_open_events_above_threshold(self):
        events = [
            make_event(_id="good"),
            make_event(_id="closed", status="closed"),
            make_event(_id="cancelled", status="cancelled"),
        ]
        matches = self.service.find_events_for_talent(self.talent, events)

        self.assertEqual([m.event.id for m in matches], ["good"])
        self.assertIsInstance(matches[0], EventMatch)
        # Boost is not part of the reverse score
        self.assertEqual(matches[0].match_score, 1.0)
        self.assertIsNone(matches[0].match_factors.ai_boost)
        self.assertNotIn('aiBoost', matches[0].to_dict()['matchFactors'])

    def test_low_scores_dropped(self):
        weak_talent = make_bare_talent()
        # skill 0, location 0.5, availability 0.5, rating 0, competency 0.5 -> 0.275
        event = make_event(type="Concert")
        self.assertEqual(self.service.find_events_for_talent(weak_talent, [event]), [])

    def test_sorted_descending(self):
        events = [
            make_event(_id="partial", musicianCategory="dj", musicianTypes=["club-dj"], genre="House"),
            make_event(_id="perfect"),
        ]
        matches = self.service.find_events_for_talent(self.talent, events)
        self.assertEqual([m.event.id for m in matches], ["perfect", "partial"])

    def test_category_filter(self):
        events = [make_event(_id="music"), make_event(_id="dj", musicianCategory="dj")]
        matches = self.service.find_events_for_talent(self.talent, events, category="musician")
        self.assertEqual([m.event.id for m in matches], ["music"])

    def test_skills_filter_accepts_comma_string(self):
        events = [
            make_event(_id="guitar"),
            make_event(_id="drums", musicianTypes=["drummer"], tags=[]),
            make_event(_id="tagged", musicianTypes=["drummer"], tags=["guitarist"]),
        ]
        matches = self.service.find_events_for_talent(self.talent, events, skills="guitarist, pianist")
        self.assertEqual({m.event.id for m in matches}, {"guitar", "tagged"})

    def test_limit_applies_before_scoring(self):
        events = [make_event(_id=f"e{i}") for i in range(5)]
        matches = self.service.find_events_for_talent(self.talent, events, limit=2)
        self.assertEqual([m.event.id for m in matches], ["e0", "e1"])

    def test_event_match_score_matches_factors(self):
        event = make_event(date=WEDNESDAY_DATE, type="Corporate Gala")
        talent = make_talent(availability="evenings", competencyLevel="beginner")
        score = self.service.calculate_event_match_score(talent, event)
        # skill 1, location 1, availability 0.8, rating 1, competency 0.21
        self.assertAlmostEqual(score, 0.3 + 0.25 + 0.16 + 0.15 + 0.021)

    def test_lead_quota_enforced_by_default(self):
        exhausted = dict(FREE_SUBSCRIPTION, usage={"leadsUsed": 5})
        talent = make_talent(subscription=exhausted)

        with self.assertRaises(LeadLimitReachedError) as ctx:
            self.service.find_events_for_talent(talent, [make_event()])
        self.assertEqual(ctx.exception.tier, "free-basic")
        self.assertEqual(ctx.exception.leads_remaining, 0)

        unchecked = self.service.find_events_for_talent(talent, [make_event()], enforce_lead_quota=False)
        self.assertEqual(len(unchecked), 1)

    def test_free_talent_with_leads_left(self):
        talent = make_talent(subscription=dict(FREE_SUBSCRIPTION, usage={"leadsUsed": 4}))
        self.assertEqual(len(self.service.find_events_for_talent(talent, [make_event()])), 1)

    def test_malformed_event_fields_do_not_abort(self):
        events = [
            make_event(_id="bad", location="Downtown", date="whenever", budget="TBD"),
            make_event(_id="good"),
        ]
        matches = self.service.find_events_for_talent(self.talent, events)
        self.assertEqual([m.event.id for m in matches], ["good", "bad"])

    def test_custom_reverse_threshold(self):
        service = MatchingService(MatchingConfig(reverse_min_score=0.0), SubscriptionConfig())
        matches = service.find_events_for_talent(make_bare_talent(), [make_event()])
        self.assertEqual(len(matches), 1)
        self.assertAlmostEqual(matches[0].match_score, 0.28)


if __name__ == "__main__":
    unittest.main()
