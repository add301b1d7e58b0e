# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import unittest
from unittest import mock

from ownbite.llm import AIRequestError, AIUnavailableError
from ownbite.meal_plans import generator
from ownbite.meal_plans.models import MealPreferences


def _ai_plan() -> dict:
    return {
        "title": "Iron Boost Week",
        "description": "Iron-focused meals",
        "target_nutrients": ["Iron"],
        "plan_data": {
            "days": [
                {
                    "day": "Monday",
                    "meals": [
                        {
                            "type": "Breakfast",
                            "name": "Lentil hash",
                            "ingredients": ["lentils", "spinach"],
                            "nutrition": {"calories": 420, "protein": 24, "carbs": 50, "fat": 10},
                            "benefits": ["Iron"],
                        }
                    ],
                    "daily_totals": {"calories": 420, "protein": 24, "carbs": 50, "fat": 10},
                }
            ],
            "shopping_list": ["Lentils"],
            "tips": ["Pair iron with vitamin C"],
        },
    }


class TestMockMealPlan(unittest.TestCase):
    def test_mock_plan_shape(self) -> None:
        plan = generator.mock_meal_plan(["Vitamin D", "Iron"])
        self.assertEqual(plan.title, "Personalized Nutrition Plan for Vitamin D, Iron")
        self.assertEqual([d.day for d in plan.plan_data.days], generator.WEEK_DAYS)
        for day in plan.plan_data.days:
            self.assertEqual([m.type for m in day.meals], ["Breakfast", "Lunch", "Dinner"])
        self.assertEqual(plan.plan_data.tips, generator.MOCK_TIPS)
        self.assertIn("Fatty fish", plan.plan_data.shopping_list)
        self.assertIn("Lentils", plan.plan_data.shopping_list)

    def test_shopping_list_is_capped(self) -> None:
        items = generator.shopping_list_for(["Vitamin D", "Iron", "B12", "Magnesium", "Zinc"])
        self.assertEqual(len(items), generator.MAX_SHOPPING_ITEMS)
        self.assertEqual(items[: len(generator.BASE_SHOPPING_ITEMS)], generator.BASE_SHOPPING_ITEMS)

    def test_unknown_deficiency_adds_nothing(self) -> None:
        self.assertEqual(generator.shopping_list_for(["Unobtainium"]), generator.BASE_SHOPPING_ITEMS)


class TestGenerateMealPlan(unittest.TestCase):
    def test_valid_ai_output_is_used(self) -> None:
        content = "Sure!\n```json\n" + json.dumps(_ai_plan()) + "\n```"
        with mock.patch.object(generator, "generate_text", return_value=content) as gen:
            plan, source = generator.generate_meal_plan(["Iron"], MealPreferences(allergies=["peanuts"]))
        self.assertEqual(source, "ai")
        self.assertEqual(plan.title, "Iron Boost Week")
        self.assertEqual(plan.plan_data.days[0].meals[0].name, "Lentil hash")
        prompt = gen.call_args.args[0]
        self.assertIn("Iron", prompt)
        self.assertIn("peanuts", prompt)
        self.assertEqual(gen.call_args.kwargs["timeout"], generator.settings.meal_plan_timeout)

    def test_bloodwork_summary_goes_into_prompt(self) -> None:
        prompt = generator.build_prompt(["Iron"], MealPreferences(), {"summary_text": "Ferritin is low"})
        self.assertIn("BLOODWORK SUMMARY", prompt)
        self.assertIn("Ferritin is low", prompt)
        self.assertIn("Restrictions: None", prompt)
        self.assertIn("Cuisine Preferences: Varied", prompt)

    def test_unparsable_output_falls_back(self) -> None:
        with mock.patch.object(generator, "generate_text", return_value="I cannot help with that."):
            plan, source = generator.generate_meal_plan(["Iron"])
        self.assertEqual(source, "mock")
        self.assertEqual(len(plan.plan_data.days), 7)

    def test_structurally_invalid_output_falls_back(self) -> None:
        content = json.dumps({"title": "No days", "plan_data": {"days": []}})
        with mock.patch.object(generator, "generate_text", return_value=content):
            _, source = generator.generate_meal_plan(["Iron"])
        self.assertEqual(source, "mock")

    def test_timeout_falls_back(self) -> None:
        with mock.patch.object(generator, "generate_text", side_effect=AIRequestError("AI request timed out")):
            _, source = generator.generate_meal_plan(["Zinc"])
        self.assertEqual(source, "mock")

    def test_missing_key_falls_back(self) -> None:
        with mock.patch.object(generator, "generate_text", side_effect=AIUnavailableError("GEMINI_API_KEY not set")):
            plan, source = generator.generate_meal_plan(["Zinc"])
        self.assertEqual(source, "mock")
        self.assertEqual(plan.target_nutrients, ["Zinc"])

    def test_parse_meal_plan_rejects_missing_title(self) -> None:
        payload = _ai_plan()
        payload["title"] = ""
        with self.assertRaises(ValueError):
            generator.parse_meal_plan(json.dumps(payload))


if __name__ == "__main__":
    unittest.main()
