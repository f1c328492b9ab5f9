#!/usr/bin/env python3
"""
Unit tests for skill coverage scoring.
"""

import unittest

from core.models import JobSkill
from core.scorer.coverage import (
    calculate_skill_match,
    calculate_skill_match_percentage,
    find_missing_must_have,
)
from core.skills import SkillNormalizer


class TestSkillMatch(unittest.TestCase):

    def setUp(self):
        self.normalizer = SkillNormalizer()

    def test_01_required_only_full_match_after_normalization(self):
        """A job requiring React matches a candidate listing react.js."""
        print("\n📊 UNIT Test 1: Required-only Match")

        result = calculate_skill_match(["react.js"], [JobSkill("React", True)], self.normalizer)

        self.assertEqual(result.score, 100)
        self.assertEqual(result.missing_must_have, [])
        print(f"  ✓ Score: {result.score}")

    def test_02_no_required_skill_matched(self):
        result = calculate_skill_match(
            ["Python"],
            [JobSkill("React", True), JobSkill("SQL", True)],
            self.normalizer
        )

        self.assertEqual(result.score, 0)
        self.assertEqual(result.missing_must_have, ["React", "SQL"])

    def test_03_required_and_preferred_split_80_20(self):
        job_skills = [
            JobSkill("Java", True),
            JobSkill("Selenium", True),
            JobSkill("Jenkins", False),
            JobSkill("Docker", False),
        ]

        result = calculate_skill_match(["java", "jenkins"], job_skills, self.normalizer)

        # 1/2 * 80 + 1/2 * 20
        self.assertEqual(result.score, 50)
        self.assertEqual(result.missing_must_have, ["Selenium"])
        self.assertEqual(result.matched_required, 1)
        self.assertEqual(result.total_preferred, 2)

    def test_04_preferred_only_carries_full_weight(self):
        job_skills = [JobSkill("Jenkins", False), JobSkill("Docker", False)]

        result = calculate_skill_match(["Jenkins"], job_skills, self.normalizer)

        self.assertEqual(result.score, 50)
        self.assertEqual(result.missing_must_have, [])

    def test_05_job_without_skills_scores_zero(self):
        result = calculate_skill_match(["Python"], [], self.normalizer)

        self.assertEqual(result.score, 0)
        self.assertEqual(result.missing_must_have, [])

    def test_06_score_is_rounded_half_up(self):
        job_skills = [JobSkill("Java", True), JobSkill("SQL", True), JobSkill("AWS", True)]

        result = calculate_skill_match(["java"], job_skills, self.normalizer)

        # 33.33 -> 33
        self.assertEqual(result.score, 33)

        result = calculate_skill_match(["java", "mysql"], job_skills, self.normalizer)

        # 66.67 -> 67
        self.assertEqual(result.score, 67)

    def test_07_missing_skills_reported_verbatim(self):
        result = calculate_skill_match([], [JobSkill("Node.js", True)], self.normalizer)
        self.assertEqual(result.missing_must_have, ["Node.js"])

    def test_08_synonyms_match_each_other(self):
        result = calculate_skill_match(["quality assurance"], [JobSkill("testing", True)], self.normalizer)
        self.assertEqual(result.score, 100)
        self.assertEqual(result.missing_must_have, [])

        result = calculate_skill_match(["node.js"], [JobSkill("JS", True)], self.normalizer)
        self.assertEqual(result.score, 100)
        self.assertEqual(result.missing_must_have, [])


class TestSkillMatchPercentage(unittest.TestCase):

    def setUp(self):
        self.normalizer = SkillNormalizer()

    def test_01_must_70_nice_30(self):
        pct = calculate_skill_match_percentage(
            ["Java", "Jenkins"], ["Java", "Selenium"], ["Jenkins"], self.normalizer
        )
        # 1/2 * 70 + 1/1 * 30
        self.assertEqual(pct, 65)

    def test_02_no_renormalization_when_must_is_empty(self):
        pct = calculate_skill_match_percentage(["Jenkins"], [], ["Jenkins"], self.normalizer)
        self.assertEqual(pct, 30)

    def test_03_find_missing_must_have(self):
        missing = find_missing_must_have(["js"], ["JavaScript", "SQL"], self.normalizer)
        self.assertEqual(missing, ["SQL"])


if __name__ == '__main__':
    unittest.main()
