# -*- coding: utf-8 -*-

from __future__ import annotations

import base64
import io
import os
import shutil
import sys
import tempfile
import unittest
from itertools import count
from pathlib import Path
from unittest import mock

from fastapi.testclient import TestClient
from PIL import Image

_seq = count(1)


def _jpeg_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (40, 30), (180, 90, 30)).save(buf, format="JPEG")
    return buf.getvalue()


class TestOwnBiteApi(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls._tmp = Path(tempfile.mkdtemp(prefix="ownbite-test-"))
        data_root = cls._tmp / "data"
        os.environ["OWNBITE_DATA_ROOT"] = str(data_root)
        os.environ["OWNBITE_DB_PATH"] = str(data_root / "ownbite.db")
        os.environ["OWNBITE_JWT_SECRET"] = "test-secret"
        # AI and recipe APIs unavailable so every feature takes its fallback path.
        os.environ.pop("GEMINI_API_KEY", None)
        os.environ.pop("SPOONACULAR_API_KEY", None)

        # Ensure settings/app reflect the env vars above.
        for name in list(sys.modules.keys()):
            if name == "ownbite" or name.startswith("ownbite."):
                sys.modules.pop(name, None)

        from ownbite.api import app  # noqa: WPS433 (import inside test for env control)

        cls.app = app

    @classmethod
    def tearDownClass(cls) -> None:
        shutil.rmtree(cls._tmp, ignore_errors=True)

    def _register(self, name: str = "User") -> tuple[TestClient, str]:
        client = TestClient(self.app)
        self.addCleanup(client.close)
        email = f"{name.lower()}{next(_seq)}@example.com"
        resp = client.post(
            "/api/auth/register",
            json={"email": email, "password": "password123", "full_name": name},
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        return client, resp.json()["user"]["id"]

    def _make_admin(self, user_id: str) -> None:
        from ownbite.app_db import db_conn
        from ownbite.config import settings

        with db_conn(settings.app_db_path) as conn:
            conn.execute("UPDATE profiles SET role = 'admin' WHERE user_id = ?", (user_id,))

    # ---------- auth ----------

    def test_auth_required(self) -> None:
        client = TestClient(self.app)
        self.addCleanup(client.close)
        self.assertEqual(client.get("/api/diary/entries?date=2026-01-05").status_code, 401)
        self.assertEqual(client.get("/api/rewards").status_code, 401)
        resp = client.get("/api/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"ok": True})

    def test_register_login_and_profile(self) -> None:
        client = TestClient(self.app)
        self.addCleanup(client.close)
        email = f"login{next(_seq)}@example.com"
        resp = client.post("/api/auth/register", json={"email": email, "password": "password123"})
        self.assertEqual(resp.status_code, 200)
        resp = client.post("/api/auth/register", json={"email": email, "password": "password123"})
        self.assertEqual(resp.status_code, 400)

        resp = client.post("/api/auth/login", json={"email": email, "password": "wrong-password"})
        self.assertEqual(resp.status_code, 401)
        resp = client.post("/api/auth/login", json={"email": email, "password": "password123"})
        self.assertEqual(resp.status_code, 200)
        token = resp.json()["token"]

        bearer = TestClient(self.app)
        self.addCleanup(bearer.close)
        resp = bearer.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["email"], email)
        resp = bearer.get("/api/auth/me", headers={"Authorization": "Bearer not.a.token"})
        self.assertEqual(resp.status_code, 401)

        resp = client.patch("/api/profile", json={"full_name": "Renamed"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["full_name"], "Renamed")
        resp = client.get("/api/profile/premium")
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.json()["has_premium_access"])
        self.assertIn("no-store", resp.headers["cache-control"])

    # ---------- diary + goals ----------

    def test_diary_entries_refresh_goal_log(self) -> None:
        client, _ = self._register("Dana")
        day = "2026-01-05"

        resp = client.get(f"/api/goals/progress?date={day}")
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.json()["goals"])

        resp = client.put(
            "/api/goals",
            json={"calories_goal": 2000, "protein_goal_g": 150, "fat_goal_g": 65, "carbs_goal_g": 200},
        )
        self.assertEqual(resp.status_code, 200, resp.text)

        resp = client.post(
            "/api/diary/entries",
            json={
                "name": "Big bowl",
                "calories": 2000,
                "protein": 150,
                "carbs": 200,
                "fat": 65,
                "timestamp": f"{day}T12:30:00Z",
            },
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        entry_id = resp.json()["id"]

        summary = client.get(f"/api/diary/summary?date={day}").json()
        self.assertEqual(summary["calories"], 2000.0)
        self.assertEqual(summary["entry_count"], 1)

        logs = client.get("/api/goals/logs").json()
        self.assertEqual(logs["count"], 1)
        self.assertTrue(logs["logs"][0]["overall_goal_met"])
        self.assertEqual(client.get("/api/goals/streak").json()["current_streak"], 1)

        progress = client.get(f"/api/goals/progress?date={day}").json()
        self.assertEqual(progress["progress"]["calories"], 100.0)

        resp = client.delete(f"/api/diary/entries/{entry_id}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(client.delete(f"/api/diary/entries/{entry_id}").status_code, 404)
        logs = client.get("/api/goals/logs").json()
        self.assertFalse(logs["logs"][0]["overall_goal_met"])
        self.assertEqual(client.get("/api/goals/streak").json()["current_streak"], 0)

    def test_entries_are_private(self) -> None:
        owner, _ = self._register("Owner")
        other, _ = self._register("Other")
        entry = owner.post(
            "/api/diary/entries",
            json={"name": "Toast", "calories": 120, "timestamp": "2026-02-01T08:00:00Z"},
        ).json()
        self.assertEqual(other.delete(f"/api/diary/entries/{entry['id']}").status_code, 404)
        self.assertEqual(other.get("/api/diary/entries?date=2026-02-01").json()["count"], 0)

    def test_recommended_goals(self) -> None:
        client, _ = self._register("Rec")
        resp = client.post(
            "/api/goals/recommended",
            json={"gender": "male", "weight_kg": 70, "height_cm": 175, "age": 30},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["calories_goal"], 2556)
        resp = client.post("/api/goals/recommended", json={"gender": "male", "weight_kg": -1, "height_cm": 175, "age": 30})
        self.assertEqual(resp.status_code, 422)

    # ---------- scan ----------

    def test_scan_fallback_upload_and_history(self) -> None:
        client, _ = self._register("Scanner")
        data_url = "data:image/jpeg;base64," + base64.b64encode(_jpeg_bytes()).decode("ascii")

        resp = client.post("/api/scan/analyze", json={"imageDataUrl": data_url})
        self.assertEqual(resp.status_code, 200, resp.text)
        body = resp.json()
        self.assertTrue(body["fallback"])
        self.assertEqual(body["foodItems"][0]["name"], "Mixed meal")

        resp = client.post("/api/scan/analyze", json={"imageDataUrl": "data:image/png;base64,%%%%%%%%%%%%"})
        self.assertEqual(resp.status_code, 400)

        resp = client.post("/api/scan/images", files={"file": ("meal.jpg", _jpeg_bytes(), "image/jpeg")})
        self.assertEqual(resp.status_code, 200, resp.text)
        image_url = resp.json()["image_url"]
        resp = client.get(image_url)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.headers["content-type"], "image/jpeg")

        resp = client.post("/api/scan/scans", json={"result": body, "image_url": image_url})
        self.assertEqual(resp.status_code, 200, resp.text)
        scans = client.get("/api/scan/scans").json()
        self.assertEqual(scans["count"], 1)
        self.assertEqual(scans["scans"][0]["total_calories"], 450.0)
        self.assertEqual(scans["scans"][0]["items"][0]["name"], "Mixed meal")

    # ---------- bloodwork + meal plans + coach ----------

    def test_bloodwork_upload_uses_mock_analysis(self) -> None:
        client, _ = self._register("Blood")
        resp = client.post(
            "/api/bloodwork/upload",
            files={"file": ("labs.csv", b"name,value\nVitamin D,25\n", "text/csv")},
            data={"notes": "fasting"},
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        body = resp.json()
        self.assertEqual(body["analysis_source"], "mock")
        self.assertEqual(body["source_type"], "csv")
        self.assertTrue(body["analysis_complete"])

        deficiencies = client.get("/api/bloodwork/deficiencies").json()["deficiencies"]
        self.assertEqual(deficiencies, ["Iron", "Vitamin D"])

        resp = client.post(
            "/api/bloodwork/manual",
            json={"nutrients": [{"name": "Vitamin D", "value": 45, "unit": "ng/mL"}]},
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        statuses = client.get("/api/bloodwork/status").json()["statuses"]
        self.assertEqual([s["status"] for s in statuses], ["optimal"])

        trend = client.get("/api/bloodwork/trends/vitamin d").json()
        self.assertEqual([p["value"] for p in trend["points"]], [25.0, 45.0])

        result_id = body["id"]
        self.assertEqual(client.delete(f"/api/bloodwork/{result_id}").status_code, 200)
        self.assertEqual(client.get(f"/api/bloodwork/{result_id}").status_code, 404)

    def test_bloodwork_analysis_request_failure(self) -> None:
        from ownbite.bloodwork import analysis
        from ownbite.llm import AIRequestError

        client, _ = self._register("Lab")
        with mock.patch.object(analysis, "generate_text", side_effect=AIRequestError("upstream timeout")):
            resp = client.post(
                "/api/bloodwork/upload",
                files={"file": ("labs.txt", b"Vitamin D 25 ng/mL\n", "text/plain")},
            )
            self.assertEqual(resp.status_code, 200, resp.text)
            body = resp.json()
            self.assertFalse(body["analysis_complete"])
            self.assertIsNone(body["analysis_source"])
            self.assertEqual(len(body["warnings"]), 1)
            self.assertIn("upstream timeout", body["warnings"][0])

            resp = client.post(f"/api/bloodwork/{body['id']}/analyze")
            self.assertEqual(resp.status_code, 502)

        self.assertEqual(client.get("/api/bloodwork/deficiencies").json()["deficiencies"], [])
        resp = client.post(f"/api/bloodwork/{body['id']}/analyze")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertTrue(resp.json()["analysis_complete"])
        self.assertEqual(resp.json()["analysis_source"], "mock")

    def test_bloodwork_manual_grading(self) -> None:
        client, _ = self._register("Grader")
        resp = client.post(
            "/api/bloodwork/manual",
            json={
                "nutrients": [
                    {"name": "Vitamin D", "value": 10, "unit": "ng/mL"},
                    {"name": "Iron", "value": 50, "unit": "ug/dL"},
                    {"name": "Zinc", "value": 130, "unit": "ug/dL"},
                    {"name": "Calcium", "value": 20, "unit": "mg/dL"},
                    {"name": "Magnesium", "value": 2.0, "unit": "mg/dL"},
                ]
            },
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["source_type"], "manual")

        statuses = client.get("/api/bloodwork/status").json()["statuses"]
        self.assertEqual(
            {s["nutrient_name"]: s["status"] for s in statuses},
            {
                "Vitamin D": "very_low",
                "Iron": "low",
                "Zinc": "high",
                "Calcium": "very_high",
                "Magnesium": "optimal",
            },
        )
        self.assertEqual(client.get("/api/bloodwork/deficiencies").json()["deficiencies"], ["Iron", "Vitamin D"])

    def test_meal_plan_to_grocery_list(self) -> None:
        client, _ = self._register("Planner")
        resp = client.post("/api/meal-plans/generate", json={"nutrient_deficiencies": ["Iron"]})
        self.assertEqual(resp.status_code, 200, resp.text)
        plan = resp.json()
        self.assertEqual(plan["source"], "mock")
        self.assertEqual(len(plan["plan_data"]["days"]), 7)

        plan.pop("source")
        saved = client.post("/api/meal-plans", json=plan).json()
        second = client.post("/api/meal-plans", json=plan).json()
        active = client.get("/api/meal-plans/active").json()
        self.assertEqual(active["id"], second["id"])
        self.assertEqual(client.get("/api/meal-plans").json()["count"], 2)

        resp = client.post("/api/grocery/lists/from-meal-plan", json={"plan_id": saved["id"]})
        self.assertEqual(resp.status_code, 200, resp.text)
        grocery = resp.json()
        self.assertEqual(grocery["name"], f"{plan['title']} Shopping List")
        self.assertEqual(grocery["item_count"], len(plan["plan_data"]["shopping_list"]))

    def test_coach_advice_without_model(self) -> None:
        client, _ = self._register("Coachee")
        resp = client.post("/api/coach/advice", json={"query": "How much protein?"})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["source"], "mock")
        self.assertTrue(resp.json()["advice"])

    def test_recipe_search_without_key(self) -> None:
        client, _ = self._register("Searcher")
        self.assertEqual(client.get("/api/recipes/search?query=soup").status_code, 500)

    # ---------- community + grocery ----------

    def test_community_follow_like_and_grocery(self) -> None:
        alice, alice_id = self._register("Alice")
        bob, bob_id = self._register("Bob")

        recipe = alice.post(
            "/api/community/recipes",
            json={"title": "Lentil Soup", "ingredients": ["lentils", "carrots", "onion"], "tags": ["vegan"]},
        ).json()
        hidden = alice.post("/api/community/recipes", json={"title": "Secret Stew", "is_public": False}).json()

        self.assertEqual(bob.post(f"/api/community/users/{bob_id}/follow").status_code, 400)
        resp = bob.post(f"/api/community/users/{alice_id}/follow")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["is_following"])

        feed = bob.get("/api/community/feed").json()
        self.assertEqual([r["title"] for r in feed["recipes"]], ["Lentil Soup"])
        self.assertEqual(bob.get(f"/api/community/recipes/{hidden['id']}").status_code, 404)

        liked = bob.post(f"/api/community/recipes/{recipe['id']}/like").json()
        self.assertEqual(liked["like_count"], 1)
        self.assertTrue(liked["is_liked"])
        liked = bob.post(f"/api/community/recipes/{recipe['id']}/like").json()
        self.assertEqual(liked["like_count"], 1)

        comment = bob.post(f"/api/community/recipes/{recipe['id']}/comments", json={"content": "Yum"})
        self.assertEqual(comment.status_code, 200, comment.text)
        self.assertEqual(alice.delete(f"/api/community/comments/{comment.json()['id']}").status_code, 404)

        remix = bob.post(f"/api/community/recipes/{recipe['id']}/remix", json={}).json()
        self.assertEqual(remix["title"], "Lentil Soup (Remix)")
        self.assertEqual(remix["remix_of"], recipe["id"])
        self.assertEqual(bob.patch(f"/api/community/recipes/{recipe['id']}", json={"title": "Mine"}).status_code, 404)

        resp = alice.patch(
            f"/api/community/recipes/{recipe['id']}",
            json={"title": None, "is_public": None, "description": "Hearty"},
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["title"], "Lentil Soup")
        self.assertTrue(resp.json()["is_public"])
        self.assertEqual(resp.json()["description"], "Hearty")

        resp = bob.post("/api/grocery/lists/from-recipe", json={"recipe_id": recipe["id"]})
        self.assertEqual(resp.status_code, 200, resp.text)
        grocery = resp.json()
        self.assertEqual(grocery["name"], "Lentil Soup Ingredients")
        items = bob.get(f"/api/grocery/lists/{grocery['id']}/items").json()["items"]
        self.assertEqual([i["name"] for i in items], ["lentils", "carrots", "onion"])
        self.assertTrue(all(i["category"] == "From Recipe" and not i["is_checked"] for i in items))

        checked = bob.patch(f"/api/grocery/items/{items[0]['id']}", json={"is_checked": True}).json()
        self.assertTrue(checked["is_checked"])
        self.assertEqual(alice.get(f"/api/grocery/lists/{grocery['id']}/items").status_code, 404)
        self.assertEqual(alice.delete(f"/api/grocery/items/{items[0]['id']}").status_code, 404)

    # ---------- reminders ----------

    def test_reminders_filter(self) -> None:
        client, _ = self._register("Remy")
        first = client.post("/api/reminders", json={"title": "Drink water", "priority": "high"}).json()
        client.post("/api/reminders", json={"title": "Lose 2kg", "type": "goal"})
        self.assertEqual(first["type"], "reminder")

        resp = client.patch(f"/api/reminders/{first['id']}", json={"is_completed": True})
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["is_completed"])

        everything = client.get("/api/reminders").json()
        self.assertEqual(everything["count"], 2)
        self.assertEqual(everything["reminders"][0]["title"], "Lose 2kg")
        active = client.get("/api/reminders?filter=active").json()["reminders"]
        self.assertEqual([r["title"] for r in active], ["Lose 2kg"])
        done = client.get("/api/reminders?filter=completed").json()["reminders"]
        self.assertEqual([r["title"] for r in done], ["Drink water"])

        self.assertEqual(client.post("/api/reminders", json={"title": "x", "priority": "urgent"}).status_code, 422)
        self.assertEqual(client.delete(f"/api/reminders/{first['id']}").status_code, 200)
        self.assertEqual(client.delete(f"/api/reminders/{first['id']}").status_code, 404)

    # ---------- affiliates ----------

    def test_affiliate_referral_and_commission(self) -> None:
        affiliate, affiliate_user_id = self._register("Afi")
        referred, _ = self._register("Newbie")
        admin, admin_id = self._register("Admin")
        self._make_admin(admin_id)

        profile = affiliate.put("/api/affiliates/me", json={"full_name": "Afi Partner", "bio": "Chef"}).json()
        code = profile["referral_code"]
        self.assertTrue(code.startswith("afipartn"))
        self.assertEqual(len(code), len("afipartn") + 4)
        self.assertFalse(profile["approved"])
        updated = affiliate.put("/api/affiliates/me", json={"bio": "Home chef"}).json()
        self.assertEqual(updated["referral_code"], code)
        self.assertEqual(updated["bio"], "Home chef")

        self.assertFalse(referred.get(f"/api/affiliates/validate/{code}").json()["valid"])
        self.assertEqual(referred.post("/api/affiliates/referrals", json={"referral_code": code}).status_code, 404)

        self.assertEqual(affiliate.get("/api/affiliates/admin/affiliates").status_code, 403)
        resp = admin.post(f"/api/affiliates/admin/affiliates/{profile['id']}/approve")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["approved"])
        self.assertTrue(referred.get(f"/api/affiliates/validate/{code}").json()["valid"])

        self.assertEqual(affiliate.post("/api/affiliates/referrals", json={"referral_code": code}).status_code, 400)
        resp = referred.post("/api/affiliates/referrals", json={"referral_code": code, "source": "instagram"})
        self.assertEqual(resp.status_code, 200, resp.text)
        referral = resp.json()
        self.assertEqual(referral["hashtag"], "#iamhealthierwithownbite.me")
        self.assertEqual(referred.post("/api/affiliates/referrals", json={"referral_code": code}).status_code, 409)

        self.assertEqual(
            admin.post("/api/affiliates/admin/commissions", json={"referral_id": "missing", "amount": 5}).status_code,
            404,
        )
        first = admin.post("/api/affiliates/admin/commissions", json={"referral_id": referral["id"], "amount": 10}).json()
        admin.post("/api/affiliates/admin/commissions", json={"referral_id": referral["id"], "amount": 2.5})
        self.assertEqual(first["status"], "pending")
        paid = admin.patch(f"/api/affiliates/admin/commissions/{first['id']}", json={"status": "paid"}).json()
        self.assertEqual(paid["status"], "paid")
        self.assertIsNotNone(paid["paid_at"])

        dashboard = affiliate.get("/api/affiliates/dashboard").json()
        self.assertEqual(dashboard["affiliate"]["user_id"], affiliate_user_id)
        self.assertEqual(dashboard["stats"]["total_referrals"], 1)
        self.assertEqual(dashboard["stats"]["total_earnings"], 12.5)
        self.assertEqual(dashboard["stats"]["paid_earnings"], 10.0)
        self.assertEqual(dashboard["stats"]["pending_earnings"], 2.5)
        self.assertEqual(len(dashboard["recent_commissions"]), 2)
        self.assertEqual(referred.get("/api/affiliates/dashboard").status_code, 404)

    # ---------- social + rewards ----------

    def test_social_share_awards_points(self) -> None:
        client, user_id = self._register("Sharer")
        share = {"content_type": "recipe", "content_id": "abc", "provider": "twitter", "share_text": "Try this"}
        self.assertEqual(client.post("/api/social/share", json=share).status_code, 400)

        resp = client.post("/api/social/connect", json={"provider": "myspace", "code": "x", "redirectUri": "https://cb"})
        self.assertEqual(resp.status_code, 400)

        from ownbite.social.storage import upsert_account

        account = upsert_account(
            user_id=user_id,
            provider="twitter",
            account={"provider_user_id": "42", "username": "sharer", "access_token": "tok"},
        )
        accounts = client.get("/api/social/accounts").json()
        self.assertEqual([a["provider"] for a in accounts["accounts"]], ["twitter"])
        self.assertNotIn("access_token", accounts["accounts"][0])

        resp = client.post("/api/social/share", json={**share, "hashtags": ["#vegan"]})
        self.assertEqual(resp.status_code, 200, resp.text)
        body = resp.json()
        self.assertEqual(body["points_awarded"], 15)
        self.assertEqual(body["share"]["share_status"], "success")
        self.assertTrue(body["share"]["share_url"].endswith("/r/abc"))
        self.assertEqual(body["share"]["hashtags"], ["#vegan", "#iamhealthierwithownbite.me"])

        history = client.get("/api/social/shares").json()
        self.assertEqual(history["count"], 1)

        rewards = client.get("/api/rewards").json()
        self.assertEqual(rewards["points"], 15)
        self.assertEqual(rewards["tier"], "Bronze")
        self.assertEqual(rewards["next_tier"], "Silver")
        self.assertEqual(rewards["points_to_next_tier"], 485)
        self.assertEqual(rewards["recent_events"][0]["event_type"], "share_progress")
        self.assertEqual(rewards["recent_events"][0]["context"], {"content_type": "recipe", "provider": "twitter"})

        resp = client.post("/api/rewards/award", json={"event_type": "log_meal", "points": 500})
        self.assertTrue(resp.json()["tier_changed"])
        self.assertEqual(resp.json()["tier"], "Silver")
        board = client.get("/api/rewards/leaderboard?limit=50").json()
        self.assertIn(user_id, [e["user_id"] for e in board["entries"]])

        self.assertEqual(client.delete(f"/api/social/accounts/{account['id']}").status_code, 200)
        self.assertEqual(client.get("/api/social/accounts").json()["count"], 0)
        self.assertEqual(client.post("/api/social/share", json=share).status_code, 400)

    def test_rewards_marketplace(self) -> None:
        client, _ = self._register("Shopper")
        admin, admin_id = self._register("Keeper")
        self._make_admin(admin_id)

        item = {"name": "Spice Kit", "points_cost": 100, "category": "Physical", "is_digital": False, "stock_quantity": 2}
        self.assertEqual(client.post("/api/rewards/admin/items", json=item).status_code, 403)
        resp = admin.post("/api/rewards/admin/items", json=item)
        self.assertEqual(resp.status_code, 200, resp.text)
        kit = resp.json()
        self.assertEqual(kit["required_tier"], "Bronze")

        catalog = client.get("/api/rewards/items").json()
        self.assertEqual(catalog["user_points"], 0)
        self.assertIn(kit["id"], [r["id"] for r in catalog["rewards"]])
        self.assertEqual(client.post("/api/rewards/redeem", json={"reward_item_id": kit["id"]}).status_code, 400)

        client.post("/api/rewards/award", json={"event_type": "log_meal", "points": 150})
        resp = client.post(
            "/api/rewards/redeem",
            json={"reward_item_id": kit["id"], "delivery_details": {"address": "1 Main St"}},
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        redemption = resp.json()
        self.assertEqual(redemption["status"], "pending")
        self.assertEqual(redemption["remaining_points"], 50)

        rewards = client.get("/api/rewards").json()
        self.assertEqual(rewards["points"], 50)
        self.assertEqual(rewards["lifetime_points"], 150)

        history = client.get("/api/rewards/redemptions").json()
        self.assertEqual(history["count"], 1)
        self.assertEqual(history["redemptions"][0]["reward_name"], "Spice Kit")

        path = f"/api/rewards/admin/redemptions/{redemption['id']}"
        self.assertEqual(client.patch(path, json={"status": "fulfilled"}).status_code, 403)
        resp = admin.patch(path, json={"status": "fulfilled"})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["status"], "fulfilled")
        self.assertIsNotNone(resp.json()["fulfilled_at"])
        self.assertEqual(admin.patch(path, json={"status": "cancelled"}).status_code, 409)
        self.assertEqual(admin.patch("/api/rewards/admin/redemptions/missing", json={"status": "fulfilled"}).status_code, 404)

    # ---------- activity ----------

    def test_activity_logs_and_summary(self) -> None:
        client, _ = self._register("Mover")
        resp = client.put(
            "/api/activity/days/2026-03-02/activity",
            json={
                "sitting_hours": 8,
                "driving_hours": 1,
                "screen_time_hours": 5,
                "screen_time_breakdown": {"social_media": 2, "work": 3},
                "sleep_hours": 6,
            },
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["screen_time_breakdown"]["work"], 3)

        resp = client.put("/api/activity/days/2026-03-02/activity", json={"sitting_hours": 6, "sleep_hours": 8})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["sitting_hours"], 6)
        client.put("/api/activity/days/2026-03-03/activity", json={"sitting_hours": 4, "sleep_hours": 7})

        client.put("/api/activity/days/2026-03-02/hydration", json={"hydration_pct": 60})
        client.put("/api/activity/days/2026-03-03/hydration", json={"hydration_pct": 80})
        client.put("/api/activity/days/2026-03-02/fast-food", json={"is_fast_food": True})
        client.put("/api/activity/days/2026-03-02/substances", json={"substance_type": "Alcohol", "amount": 2})
        client.put("/api/activity/days/2026-03-02/substances", json={"substance_type": "alcohol", "amount": 1})
        client.put("/api/activity/days/2026-03-02/spending", json={"category": "groceries", "amount": 40.5})
        client.put("/api/activity/days/2026-03-03/spending", json={"category": "restaurants", "amount": 20})

        day = client.get("/api/activity/days/2026-03-02").json()
        self.assertEqual(day["activity"]["sleep_hours"], 8)
        self.assertTrue(day["fast_food"]["is_fast_food"])
        self.assertEqual([(s["substance_type"], s["amount"]) for s in day["substances"]], [("alcohol", 1.0)])
        empty = client.get("/api/activity/days/2026-03-09").json()
        self.assertIsNone(empty["activity"])
        self.assertEqual(empty["spending"], [])

        summary = client.get("/api/activity/summary?end=2026-03-08").json()
        self.assertEqual(summary["start"], "2026-03-02")
        self.assertEqual(summary["days_logged"], 2)
        self.assertEqual(summary["avg_sitting_hours"], 5.0)
        self.assertEqual(summary["avg_sleep_hours"], 7.5)
        self.assertEqual(summary["avg_hydration_pct"], 70.0)
        self.assertEqual(summary["fast_food_days"], 1)
        self.assertEqual(summary["substance_totals"], {"alcohol": 1.0})
        self.assertEqual(summary["total_spend"], 60.5)
        self.assertEqual(summary["spend_by_category"], {"groceries": 40.5, "restaurants": 20.0})

        self.assertEqual(client.get("/api/activity/summary?end=2026-03-01").json()["days_logged"], 0)
        self.assertEqual(client.get("/api/activity/days/not-a-date").status_code, 400)
        self.assertEqual(client.put("/api/activity/days/2026-03-02/hydration", json={"hydration_pct": 120}).status_code, 422)


if __name__ == "__main__":
    unittest.main()
