# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

from ownbite.llm import as_str_list, coerce_float, parse_json_object


class TestParseJsonObject(unittest.TestCase):
    def test_fenced_json(self) -> None:
        content = '```json\n{"foodItems": [{"name": "Apple", "calories": 95}]}\n```'
        parsed = parse_json_object(content)
        self.assertEqual(parsed["foodItems"][0]["name"], "Apple")

    def test_json_wrapped_in_prose_with_trailing_comma(self) -> None:
        content = 'Here is the plan: {"title": "Plan", "tips": ["a", "b",],} Enjoy!'
        parsed = parse_json_object(content)
        self.assertEqual(parsed["title"], "Plan")
        self.assertEqual(parsed["tips"], ["a", "b"])

    def test_braces_inside_strings_are_ignored(self) -> None:
        parsed = parse_json_object('{"note": "use {curly} braces", "n": 1}')
        self.assertEqual(parsed["note"], "use {curly} braces")

    def test_python_style_literals(self) -> None:
        parsed = parse_json_object("{'ok': True, 'value': None}")
        self.assertEqual(parsed, {"ok": True, "value": None})

    def test_no_object_raises(self) -> None:
        with self.assertRaises(ValueError):
            parse_json_object("I could not analyze this image.")


class TestCoercion(unittest.TestCase):
    def test_coerce_float(self) -> None:
        self.assertEqual(coerce_float("260 kcal"), 260.0)
        self.assertEqual(coerce_float("5.5g"), 5.5)
        self.assertEqual(coerce_float("1,200"), 1200.0)
        self.assertEqual(coerce_float(12), 12.0)
        self.assertIsNone(coerce_float(True))
        self.assertIsNone(coerce_float("n/a"))

    def test_as_str_list(self) -> None:
        self.assertEqual(as_str_list("Fiber"), ["Fiber"])
        self.assertEqual(as_str_list(None), [])
        self.assertEqual(as_str_list(["Iron", "", "Zinc"]), ["Iron", "Zinc"])


if __name__ == "__main__":
    unittest.main()
