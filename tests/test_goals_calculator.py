# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

from ownbite.goals.calculator import (
    bmr_mifflin_st_jeor,
    progress_percent,
    protein_met,
    recommended_goals,
    within_tolerance,
)


class TestRecommendedGoals(unittest.TestCase):
    def test_bmr_by_gender(self) -> None:
        self.assertAlmostEqual(bmr_mifflin_st_jeor(gender="male", weight_kg=70, height_cm=175, age=30), 1648.75)
        self.assertAlmostEqual(bmr_mifflin_st_jeor(gender="female", weight_kg=60, height_cm=165, age=30), 1320.25)

    def test_maintain_moderate(self) -> None:
        goals = recommended_goals(gender="male", weight_kg=70, height_cm=175, age=30)
        self.assertEqual(goals, {"calories_goal": 2556, "protein_goal_g": 192, "carbs_goal_g": 256, "fat_goal_g": 85})

    def test_goal_type_adjusts_calories(self) -> None:
        kwargs = dict(gender="female", weight_kg=60, height_cm=165, age=30, activity_level="sedentary")
        maintain = recommended_goals(goal_type="maintain", **kwargs)["calories_goal"]
        self.assertEqual(recommended_goals(goal_type="lose", **kwargs)["calories_goal"], maintain - 500)
        self.assertEqual(recommended_goals(goal_type="gain", **kwargs)["calories_goal"], maintain + 300)


class TestGoalChecks(unittest.TestCase):
    def test_within_tolerance(self) -> None:
        self.assertTrue(within_tolerance(1800, 2000))
        self.assertTrue(within_tolerance(2200, 2000))
        self.assertFalse(within_tolerance(1799, 2000))
        self.assertFalse(within_tolerance(2201, 2000))
        self.assertFalse(within_tolerance(0, 0))

    def test_protein_has_no_upper_bound(self) -> None:
        self.assertTrue(protein_met(300, 150))
        self.assertTrue(protein_met(136, 150))
        self.assertFalse(protein_met(134, 150))

    def test_progress_percent(self) -> None:
        self.assertEqual(progress_percent(500, 2000), 25.0)
        self.assertEqual(progress_percent(1, 3), 33.3)
        self.assertEqual(progress_percent(2500, 2000), 100.0)
        self.assertEqual(progress_percent(100, 0), 0.0)


if __name__ == "__main__":
    unittest.main()
