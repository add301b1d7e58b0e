# -*- coding: utf-8 -*-

from __future__ import annotations

import sqlite3
import unittest
from unittest import mock

from ownbite.affiliates import storage
from ownbite.affiliates.storage import ReferralError, generate_unique_referral_code, referral_code_base


class TestReferralCodeBase(unittest.TestCase):
    def test_lowercase_alphanumerics_truncated(self) -> None:
        self.assertEqual(referral_code_base("Jane Doe-Smith"), "janedoes")

    def test_short_names_use_ref(self) -> None:
        self.assertEqual(referral_code_base("Al"), "ref")
        self.assertEqual(referral_code_base("!!"), "ref")
        self.assertEqual(referral_code_base(""), "ref")

    def test_email_local_part_characters(self) -> None:
        self.assertEqual(referral_code_base("amy@x.io"), "amyxio")


class TestUniqueReferralCode(unittest.TestCase):
    def setUp(self) -> None:
        self.conn = sqlite3.connect(":memory:")
        self.conn.execute("CREATE TABLE affiliates (referral_code TEXT UNIQUE)")
        self.conn.execute("INSERT INTO affiliates (referral_code) VALUES ('jane0001')")

    def tearDown(self) -> None:
        self.conn.close()

    def test_collision_is_rerolled(self) -> None:
        with mock.patch.object(storage, "_random_suffix", side_effect=["0001", "0002"]):
            self.assertEqual(generate_unique_referral_code(self.conn, "Jane"), "jane0002")

    def test_last_attempt_is_checked_too(self) -> None:
        with mock.patch.object(storage, "_random_suffix", return_value="0001"):
            with self.assertRaises(ReferralError) as ctx:
                generate_unique_referral_code(self.conn, "Jane")
        self.assertEqual(ctx.exception.status_code, 409)


if __name__ == "__main__":
    unittest.main()
