# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import unittest
from unittest import mock

from ownbite.bloodwork import analysis


class TestAnalyzeReport(unittest.TestCase):
    def test_non_string_fields_are_coerced(self) -> None:
        content = json.dumps(
            {
                "biomarkers": [
                    {
                        "name": "Ferritin",
                        "value": "15",
                        "unit": 5,
                        "status": "Low",
                        "normal_range": 20,
                        "recommendation": "",
                    }
                ],
                "summary_text": "Low ferritin.",
            }
        )
        with mock.patch.object(analysis, "generate_text", return_value=content):
            result, source = analysis.analyze_report("Ferritin 15")

        self.assertEqual(source, "ai")
        marker = result["biomarkers"][0]
        self.assertEqual(marker["value"], 15.0)
        self.assertEqual(marker["unit"], "5")
        self.assertEqual(marker["normal_range"], "20")
        self.assertIsNone(marker["recommendation"])
        self.assertEqual(analysis.normalize_status(marker["status"]), "low")

    def test_unusable_output_uses_mock(self) -> None:
        with mock.patch.object(analysis, "generate_text", return_value="no json here"):
            result, source = analysis.analyze_report("text")
        self.assertEqual(source, "mock")
        self.assertEqual(result["key_deficiencies"], ["Vitamin D", "Iron"])


class TestGradeValue(unittest.TestCase):
    def test_bands_around_reference_range(self) -> None:
        # vitamin d reference range is 30-100
        self.assertEqual(analysis.grade_value("Vitamin D", 14.9), "very_low")
        self.assertEqual(analysis.grade_value("Vitamin D", 15), "low")
        self.assertEqual(analysis.grade_value("Vitamin D", 30), "optimal")
        self.assertEqual(analysis.grade_value("Vitamin D", 100), "optimal")
        self.assertEqual(analysis.grade_value("vitamin d ", 150), "high")
        self.assertEqual(analysis.grade_value("Vitamin D", 150.1), "very_high")

    def test_unknown_nutrient_is_optimal(self) -> None:
        self.assertEqual(analysis.grade_value("Unobtainium", 0), "optimal")


if __name__ == "__main__":
    unittest.main()
