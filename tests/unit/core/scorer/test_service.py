#!/usr/bin/env python3
"""
Test suite for the scoring engine: score composition, ceilings, explanations.
"""

import unittest
from types import SimpleNamespace

from core.config_loader import ScorerConfig
from core.scorer import ScoringService, compute_match, inputs_fingerprint


def job(**overrides):
    fields = dict(required_skills=["React", "Node"], location=None, work_mode="remote", experience_level=None)
    fields.update(overrides)
    return SimpleNamespace(**fields)


def candidate(**overrides):
    fields = dict(skills=["React", "Node", "SQL"], location=None, preferred_work_mode=None, experience_level=None)
    fields.update(overrides)
    return SimpleNamespace(**fields)


class TestComputeMatch(unittest.TestCase):
    """Score composition and the worked React/Node example."""

    def test_worked_example_react_node(self):
        """Job needs React and Node; C offers React, Node and SQL; D only Java. Nothing else is known."""
        plain_job = SimpleNamespace(required_skills=["React", "Node"])
        c = SimpleNamespace(skills=["React", "Node", "SQL"])
        d = SimpleNamespace(skills=["Java"])

        strong = compute_match(plain_job, c)
        weak = compute_match(plain_job, d)

        self.assertGreaterEqual(strong.score, 80.0)
        self.assertAlmostEqual(strong.score, 95.0, places=2)
        self.assertIn("full overlap", strong.explanation)
        self.assertLessEqual(weak.score, 20.0)
        self.assertIn("no overlap", weak.explanation)
        print(f"✅ Example scenario: C={strong.score}, D={weak.score}")

    def test_full_overlap_remote_job(self):
        """Required skills fully covered, one extra skill, remote role, no levels."""
        result = compute_match(job(), candidate())

        # Experience unknown: skills 0.75 * 0.95 + location 0.25 * 1
        self.assertAlmostEqual(result.score, 96.25, places=2)
        self.assertFalse(result.insufficient_data)
        self.assertEqual(result.matched_skills, ["Node.js", "React"])
        self.assertEqual(result.missing_skills, [])
        self.assertIn("+ Skills: full overlap with required skills (Node.js, React)", result.explanation)
        self.assertIn("+ Location: remote role, location independent", result.explanation)
        self.assertIn("~ Experience: experience level not specified (not scored)", result.explanation)

    def test_no_overlap_is_capped_at_ceiling(self):
        result = compute_match(job(), candidate(skills=["Java"]))

        self.assertLessEqual(result.score, 15.0)
        self.assertAlmostEqual(result.score, 15.0, places=2)
        self.assertIn("- Skills: no overlap with required skills (missing Node.js, React)", result.explanation)
        self.assertIn("- Capped:", result.explanation)

    def test_covering_candidate_ranks_above_non_covering(self):
        covering = compute_match(job(), candidate())
        unrelated = compute_match(job(), candidate(skills=["Java"]))
        self.assertGreater(covering.score, unrelated.score)

    def test_insufficient_data_returns_low_flagged_score(self):
        result = compute_match(job(), candidate(skills=[]))

        self.assertTrue(result.insufficient_data)
        self.assertLessEqual(result.score, 10.0)
        self.assertIn("insufficient data", result.explanation)

    def test_job_without_required_skills_is_insufficient(self):
        result = compute_match(job(required_skills=[]), candidate())
        self.assertTrue(result.insufficient_data)
        self.assertLessEqual(result.score, 10.0)

    def test_partial_overlap_lists_missing_skills(self):
        result = compute_match(job(required_skills=["React", "Node", "Docker", "AWS"]), candidate())

        self.assertEqual(result.matched_skills, ["Node.js", "React"])
        self.assertEqual(result.missing_skills, ["AWS", "Docker"])
        self.assertIn("covers 2 of 4 required skills", result.explanation)
        self.assertGreater(result.score, 15.0)
        self.assertLess(result.score, 96.25)

    def test_aliases_and_case_are_normalized(self):
        result = compute_match(
            job(required_skills=["reactjs", "NODE.JS"]),
            candidate(skills=["React", "node"])
        )
        self.assertEqual(result.matched_skills, ["Node.js", "React"])
        self.assertEqual(result.missing_skills, [])

    def test_score_is_deterministic(self):
        first = compute_match(job(location="Berlin", work_mode="hybrid"), candidate(location="Munich"))
        second = compute_match(job(location="Berlin", work_mode="hybrid"), candidate(location="Munich"))
        self.assertEqual(first.score, second.score)
        self.assertEqual(first.explanation, second.explanation)

    def test_score_within_bounds(self):
        cases = [
            (job(experience_level="senior"), candidate(experience_level="intern")),
            (job(work_mode="onsite", location="Paris"), candidate(location="Tokyo")),
            (job(experience_level="mid"), candidate(experience_level="mid")),
        ]
        for j, c in cases:
            result = compute_match(j, c)
            self.assertGreaterEqual(result.score, 0.0)
            self.assertLessEqual(result.score, 100.0)

    def test_perfect_match_scores_100(self):
        result = compute_match(
            job(experience_level="senior"),
            candidate(skills=["React", "Node"], experience_level="senior")
        )
        self.assertAlmostEqual(result.score, 100.0, places=2)

    def test_underqualification_penalized_more_than_overqualification(self):
        under = compute_match(job(experience_level="mid"), candidate(experience_level="junior"))
        over = compute_match(job(experience_level="mid"), candidate(experience_level="senior"))
        self.assertGreater(over.score, under.score)

    def test_unknown_factors_do_not_drag_score_down(self):
        unknown = compute_match(job(work_mode="onsite"), candidate())
        known_mismatch = compute_match(
            job(work_mode="onsite", location="Paris"), candidate(location="Tokyo")
        )

        self.assertAlmostEqual(unknown.score, 95.0, places=2)
        self.assertLess(known_mismatch.score, unknown.score)
        location = next(f for f in unknown.factors if f.name == 'location')
        self.assertFalse(location.scored)
        self.assertEqual(location.weight, 0.0)
        self.assertAlmostEqual(sum(f.weight for f in unknown.factors), 1.0)

    def test_custom_weights_are_honored(self):
        config = ScorerConfig(weight_skills=1.0, weight_location=0.0, weight_experience=0.0)
        result = compute_match(job(), candidate(), config)
        # Skills only: 0.85 * 1 + 0.15 * 2/3
        self.assertAlmostEqual(result.score, 95.0, places=2)

    def test_factors_dict_is_serializable_breakdown(self):
        result = compute_match(job(), candidate())
        data = result.factors_dict()

        self.assertEqual([f['name'] for f in data['factors']], ['skills', 'location', 'experience'])
        self.assertEqual(data['matched_skills'], ["Node.js", "React"])
        self.assertFalse(data['insufficient_data'])


class TestInputsFingerprint(unittest.TestCase):

    def test_fingerprint_stable_for_equivalent_inputs(self):
        a = inputs_fingerprint(job(required_skills=["React", "Node"]), candidate())
        b = inputs_fingerprint(job(required_skills=["node", "reactjs"]), candidate())
        self.assertEqual(a, b)

    def test_fingerprint_changes_with_scoring_fields(self):
        a = inputs_fingerprint(job(), candidate())
        b = inputs_fingerprint(job(), candidate(experience_level="senior"))
        self.assertNotEqual(a, b)


class TestScoringService(unittest.TestCase):

    def test_service_uses_its_config(self):
        service = ScoringService(ScorerConfig(no_overlap_ceiling=5.0))
        result = service.compute_match(job(), candidate(skills=["Java"]))
        self.assertAlmostEqual(result.score, 5.0, places=2)

    def test_service_fingerprint_matches_function(self):
        service = ScoringService()
        self.assertEqual(service.fingerprint(job(), candidate()), inputs_fingerprint(job(), candidate()))


if __name__ == '__main__':
    unittest.main()
