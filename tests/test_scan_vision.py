# -*- coding: utf-8 -*-

from __future__ import annotations

import base64
import io
import unittest
from unittest import mock

from PIL import Image

from ownbite.llm import AIRequestError, AIUnavailableError
from ownbite.scan import vision


def _photo_data_url() -> str:
    buf = io.BytesIO()
    Image.new("RGB", (32, 32), (90, 160, 60)).save(buf, format="JPEG")
    return "data:image/jpeg;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


class TestAnalyzeFoodImage(unittest.TestCase):
    def test_model_output_is_normalized(self) -> None:
        content = """```json
        {"foodItems": [
            {"name": "Grilled chicken", "calories": "320 kcal", "protein": "35g", "carbs": 0, "fat": "12",
             "healthBenefits": "Lean protein", "healthRisks": []},
            {"food": "Brown rice", "calories": 215, "carbohydrates": 45, "protein": 5, "fat": 1.8}
        ]}
        ```"""
        with mock.patch.object(vision, "describe_image", return_value=content) as describe:
            result, warnings, fallback = vision.analyze_food_image(_photo_data_url())

        describe.assert_called_once()
        sent_url = describe.call_args.args[1]
        self.assertTrue(sent_url.startswith("data:image/jpeg;base64,"))
        self.assertFalse(fallback)
        self.assertEqual(warnings, [])
        names = [item["name"] for item in result["foodItems"]]
        self.assertEqual(names, ["Grilled chicken", "Brown rice"])
        self.assertEqual(result["foodItems"][0]["healthBenefits"], ["Lean protein"])
        self.assertEqual(result["foodItems"][1]["carbs"], 45.0)
        self.assertEqual(result["totalCalories"], 535.0)
        self.assertEqual(result["totalProtein"], 40.0)

    def test_missing_key_returns_mixed_meal(self) -> None:
        with mock.patch.object(vision, "describe_image", side_effect=AIUnavailableError("no key")):
            result, warnings, fallback = vision.analyze_food_image(_photo_data_url())
        self.assertTrue(fallback)
        self.assertIn(vision.FALLBACK_WARNING, warnings)
        self.assertEqual(result["foodItems"][0]["name"], "Mixed meal")
        self.assertEqual(result["totalCalories"], 450.0)

    def test_request_error_returns_mixed_meal(self) -> None:
        with mock.patch.object(vision, "describe_image", side_effect=AIRequestError("timeout")):
            _, _, fallback = vision.analyze_food_image(_photo_data_url())
        self.assertTrue(fallback)

    def test_empty_item_list_returns_mixed_meal(self) -> None:
        with mock.patch.object(vision, "describe_image", return_value='{"foodItems": []}'):
            result, _, fallback = vision.analyze_food_image(_photo_data_url())
        self.assertTrue(fallback)
        self.assertEqual(len(result["foodItems"]), 1)

    def test_undecodable_photo_is_still_analyzed(self) -> None:
        data_url = "data:image/heic;base64," + base64.b64encode(b"not really a heic").decode("ascii")
        with mock.patch.object(vision, "describe_image", return_value='{"foodItems": [{"name": "Soup"}]}') as describe:
            result, warnings, fallback = vision.analyze_food_image(data_url)
        self.assertFalse(fallback)
        self.assertTrue(describe.call_args.args[1].startswith("data:image/heic;base64,"))
        self.assertEqual(result["foodItems"][0]["calories"], 0.0)
        self.assertEqual(len(warnings), 1)

    def test_bad_base64_raises_value_error(self) -> None:
        with self.assertRaises(ValueError):
            vision.analyze_food_image("data:image/png;base64,%%%")


if __name__ == "__main__":
    unittest.main()
