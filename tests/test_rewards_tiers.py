# -*- coding: utf-8 -*-

from __future__ import annotations

import shutil
import tempfile
import threading
import unittest
from pathlib import Path
from unittest import mock

from ownbite.app_db import db_conn, init_app_db
from ownbite.rewards import storage
from ownbite.rewards.storage import RedemptionError, next_tier_for, tier_for


class TestRewardTiers(unittest.TestCase):
    def test_tier_boundaries(self) -> None:
        self.assertEqual(tier_for(0), "Bronze")
        self.assertEqual(tier_for(499), "Bronze")
        self.assertEqual(tier_for(500), "Silver")
        self.assertEqual(tier_for(999), "Silver")
        self.assertEqual(tier_for(1000), "Gold")
        self.assertEqual(tier_for(1999), "Gold")
        self.assertEqual(tier_for(2000), "Platinum")
        self.assertEqual(tier_for(50_000), "Platinum")

    def test_next_tier(self) -> None:
        self.assertEqual(next_tier_for(0), ("Silver", 500))
        self.assertEqual(next_tier_for(620), ("Gold", 380))
        self.assertEqual(next_tier_for(1999), ("Platinum", 1))
        self.assertEqual(next_tier_for(2000), (None, 0))


class TestRewardsLedger(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="ownbite-rewards-"))
        self.db_path = self._tmp / "rewards.db"
        init_app_db(self.db_path)
        patcher = mock.patch.object(storage.settings, "app_db_path", self.db_path)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(shutil.rmtree, self._tmp, True)
        with db_conn(self.db_path) as conn:
            conn.execute(
                "INSERT INTO users (id, email, password_hash, created_at) VALUES ('u1', 'u1@x.io', 'x', '2026-01-01')"
            )

    def _events(self) -> list:
        with db_conn(self.db_path) as conn:
            return [dict(r) for r in conn.execute("SELECT * FROM reward_events WHERE user_id = 'u1'")]

    def test_concurrent_awards_are_not_lost(self) -> None:
        errors: list = []

        def worker() -> None:
            try:
                for _ in range(10):
                    storage.award_points(user_id="u1", event_type="log_meal", points=1)
            except Exception as exc:  # surfaced below
                errors.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])
        rewards = storage.get_rewards(user_id="u1")
        self.assertEqual(rewards["points"], 80)
        self.assertEqual(rewards["lifetime_points"], 80)
        self.assertEqual(len(self._events()), 80)

    def test_award_reports_tier_change(self) -> None:
        first = storage.award_points(user_id="u1", event_type="streak", points=450)
        self.assertEqual(first, {"points_awarded": 450, "new_points": 450, "tier": "Bronze", "tier_changed": False})
        second = storage.award_points(user_id="u1", event_type="streak", points=60)
        self.assertEqual(second["new_points"], 510)
        self.assertEqual(second["tier"], "Silver")
        self.assertTrue(second["tier_changed"])

    def test_redeem_debits_points_and_keeps_lifetime(self) -> None:
        storage.award_points(user_id="u1", event_type="streak", points=400)
        redemption = storage.redeem_reward(user_id="u1", reward_item_id="recipe-ebook")
        self.assertEqual(redemption["points_spent"], 250)
        self.assertEqual(redemption["remaining_points"], 150)
        self.assertEqual(redemption["status"], "fulfilled")
        self.assertEqual(len(redemption["redemption_code"]), 8)

        rewards = storage.get_rewards(user_id="u1")
        self.assertEqual(rewards["points"], 150)
        self.assertEqual(rewards["lifetime_points"], 400)
        self.assertEqual(rewards["recent_events"][0]["event_type"], "redeem_reward")
        self.assertEqual(rewards["recent_events"][0]["points_awarded"], -250)

        with self.assertRaises(RedemptionError) as ctx:
            storage.redeem_reward(user_id="u1", reward_item_id="recipe-ebook")
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(storage.get_rewards(user_id="u1")["points"], 150)
        self.assertEqual(len(storage.list_redemptions(user_id="u1")), 1)

    def test_redeem_requires_tier(self) -> None:
        storage.award_points(user_id="u1", event_type="streak", points=900)
        with self.assertRaises(RedemptionError) as ctx:
            storage.redeem_reward(user_id="u1", reward_item_id="water-bottle")
        self.assertEqual(ctx.exception.status_code, 403)
        catalog = storage.list_reward_items(user_id="u1")
        by_id = {r["id"]: r for r in catalog["rewards"]}
        self.assertEqual(catalog["user_tier"], "Silver")
        self.assertTrue(by_id["premium-month"]["can_afford"])
        self.assertFalse(by_id["water-bottle"]["is_unlocked"])
        self.assertFalse(by_id["water-bottle"]["can_afford"])

    def test_out_of_stock_rolls_back(self) -> None:
        storage.award_points(user_id="u1", event_type="streak", points=3000)
        with db_conn(self.db_path) as conn:
            conn.execute("UPDATE reward_items SET stock_quantity = 1 WHERE id = 'water-bottle'")

        first = storage.redeem_reward(user_id="u1", reward_item_id="water-bottle", delivery_details={"city": "Oslo"})
        self.assertEqual(first["status"], "pending")
        self.assertIsNone(first["redemption_code"])
        self.assertEqual(first["delivery_details"], {"city": "Oslo"})

        with self.assertRaises(RedemptionError) as ctx:
            storage.redeem_reward(user_id="u1", reward_item_id="water-bottle")
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(storage.get_rewards(user_id="u1")["points"], 1800)

        cancelled = storage.set_redemption_status(redemption_id=first["id"], status="cancelled")
        self.assertEqual(cancelled["status"], "cancelled")
        rewards = storage.get_rewards(user_id="u1")
        self.assertEqual(rewards["points"], 3000)
        self.assertEqual(rewards["lifetime_points"], 3000)
        with self.assertRaises(RedemptionError):
            storage.set_redemption_status(redemption_id=first["id"], status="fulfilled")

    def test_unknown_reward(self) -> None:
        with self.assertRaises(RedemptionError) as ctx:
            storage.redeem_reward(user_id="u1", reward_item_id="nope")
        self.assertEqual(ctx.exception.status_code, 404)


if __name__ == "__main__":
    unittest.main()
