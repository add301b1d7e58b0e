# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest
from unittest import mock
from urllib.parse import parse_qs

import httpx

from ownbite.social import providers
from ownbite.social.storage import default_share_url, with_main_hashtag


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestExchangeCode(unittest.TestCase):
    def setUp(self) -> None:
        patcher = mock.patch.dict(
            providers.settings.social_credentials,
            {"twitter": ("client-id", "client-secret"), "pinterest": (None, None)},
        )
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_twitter_code_exchange_and_profile(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                seen["form"] = parse_qs(request.content.decode("utf-8"))
                return httpx.Response(200, json={"access_token": "tok", "refresh_token": "ref", "expires_in": 3600})
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(
                200,
                json={"data": {"id": "42", "username": "eatwell", "profile_image_url": "https://img/x.png"}},
            )

        with _client(handler) as client:
            account = providers.exchange_code("twitter", code="abc", redirect_uri="https://app/cb", client=client)

        self.assertEqual(seen["form"]["grant_type"], ["authorization_code"])
        self.assertEqual(seen["form"]["code"], ["abc"])
        self.assertEqual(seen["form"]["client_id"], ["client-id"])
        self.assertEqual(seen["auth"], "Bearer tok")
        self.assertEqual(account["provider_user_id"], "42")
        self.assertEqual(account["username"], "eatwell")
        self.assertEqual(account["profile_image_url"], "https://img/x.png")
        self.assertEqual(account["refresh_token"], "ref")
        self.assertTrue(account["token_expires_at"].endswith("Z"))

    def test_unsupported_provider(self) -> None:
        with self.assertRaises(providers.UnsupportedProviderError):
            providers.exchange_code("linkedin", code="abc", redirect_uri="https://app/cb")

    def test_missing_credentials(self) -> None:
        with self.assertRaises(providers.ProviderConfigError):
            providers.exchange_code("pinterest", code="abc", redirect_uri="https://app/cb")

    def test_token_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": "invalid_grant"})

        with _client(handler) as client, self.assertRaises(providers.ProviderAuthError):
            providers.exchange_code("twitter", code="bad", redirect_uri="https://app/cb", client=client)

    def test_non_object_token_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=["access_token", "tok"])

        with _client(handler) as client, self.assertRaises(providers.ProviderAuthError):
            providers.exchange_code("twitter", code="abc", redirect_uri="https://app/cb", client=client)

    def test_profile_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                return httpx.Response(200, json={"access_token": "tok"})
            return httpx.Response(401, text="unauthorized")

        with _client(handler) as client, self.assertRaises(providers.ProviderAuthError):
            providers.exchange_code("twitter", code="abc", redirect_uri="https://app/cb", client=client)


class TestProfileExtraction(unittest.TestCase):
    def test_facebook_picture(self) -> None:
        fields = providers.PROVIDERS["facebook"].extract(
            {"id": "1", "name": "Sam", "picture": {"data": {"url": "https://pic"}}}
        )
        self.assertEqual(fields, {"provider_user_id": "1", "username": "Sam", "profile_image_url": "https://pic"})

    def test_tiktok_nested_user(self) -> None:
        fields = providers.PROVIDERS["tiktok"].extract(
            {"data": {"user": {"open_id": "o1", "display_name": "Chef", "avatar_url": "https://a"}}}
        )
        self.assertEqual(fields["provider_user_id"], "o1")
        self.assertEqual(fields["username"], "Chef")


class TestShareHelpers(unittest.TestCase):
    def test_default_share_urls(self) -> None:
        base = providers.settings.share_base_url
        self.assertEqual(default_share_url("recipe", "r1"), f"{base}/r/r1")
        self.assertEqual(default_share_url("food_scan", "s1"), f"{base}/s/s1")
        self.assertEqual(default_share_url("bloodwork", "b1"), f"{base}/b/b1")

    def test_main_hashtag_is_added_once(self) -> None:
        self.assertEqual(with_main_hashtag(["#vegan"]), ["#vegan", "#iamhealthierwithownbite.me"])
        self.assertEqual(with_main_hashtag(["#iamhealthierwithownbite.me"]), ["#iamhealthierwithownbite.me"])


if __name__ == "__main__":
    unittest.main()
