# -*- coding: utf-8 -*-

from __future__ import annotations

import base64
import hashlib
import hmac
import unittest
from urllib.parse import parse_qsl

import httpx

from data_migrators.fatsecret.models import FatSecretKeys, TokenPair
from data_migrators.fatsecret.oauth1 import (
    OAuth1Session,
    OAuth1Signer,
    hmac_sha1_signature,
    make_nonce,
    param_string,
    percent_encode,
    signable_url,
    signature_base_string,
)
from data_migrators.transport import RetryPolicy

KEYS = FatSecretKeys(consumer_key="ckey", consumer_secret="c&secret")


def _signer() -> OAuth1Signer:
    return OAuth1Signer(KEYS, clock=lambda: 1700000000.9, nonce_factory=lambda: "12345678")


class TestPercentEncoding(unittest.TestCase):
    def test_rfc3986_rules(self) -> None:
        self.assertEqual(percent_encode("a b"), "a%20b")
        self.assertEqual(percent_encode("a+b"), "a%2Bb")
        self.assertEqual(percent_encode("~-._"), "~-._")
        self.assertEqual(percent_encode("a/b=c&d"), "a%2Fb%3Dc%26d")
        self.assertEqual(percent_encode("ü"), "%C3%BC")


class TestSignatureBaseString(unittest.TestCase):
    def test_sorted_and_deterministic(self) -> None:
        params = {"b": "2", "a": "1"}
        base = signature_base_string("POST", "https://example.com/x", params)
        self.assertEqual(base, "POST&https%3A%2F%2Fexample.com%2Fx&a%3D1%26b%3D2")
        self.assertEqual(base, signature_base_string("POST", "https://example.com/x", {"a": "1", "b": "2"}))

    def test_query_string_is_not_signed_as_url(self) -> None:
        self.assertEqual(signable_url("https://example.com/x?y=1#frag"), "https://example.com/x")
        self.assertEqual(
            signature_base_string("post", "https://example.com/x?y=1", {}),
            "POST&https%3A%2F%2Fexample.com%2Fx&",
        )

    def test_param_values_are_double_encoded_in_base_string(self) -> None:
        self.assertEqual(param_string({"q": "a b"}), "q=a%20b")
        base = signature_base_string("GET", "https://example.com/", {"q": "a b"})
        self.assertTrue(base.endswith("&q%3Da%2520b"))


class TestSignature(unittest.TestCase):
    def test_hmac_sha1(self) -> None:
        base = "POST&https%3A%2F%2Fexample.com%2Fx&a%3D1"
        expected = base64.b64encode(
            hmac.new(b"c%26secret&tok", base.encode("utf-8"), hashlib.sha1).digest()
        ).decode("ascii")
        self.assertEqual(hmac_sha1_signature(base, "c&secret", "tok"), expected)

    def test_nonce_is_eight_digits(self) -> None:
        for _ in range(20):
            nonce = make_nonce()
            self.assertEqual(len(nonce), 8)
            self.assertTrue(nonce.isdigit())


class TestOAuth1Signer(unittest.TestCase):
    def test_protocol_params(self) -> None:
        signed = _signer().sign("POST", "https://example.com/x", {"b": "2", "a": "1"})
        self.assertEqual(signed["oauth_consumer_key"], "ckey")
        self.assertEqual(signed["oauth_nonce"], "12345678")
        self.assertEqual(signed["oauth_signature_method"], "HMAC-SHA1")
        self.assertEqual(signed["oauth_timestamp"], "1700000000")
        self.assertEqual(signed["oauth_version"], "1.0")
        self.assertNotIn("oauth_token", signed)
        self.assertNotIn("oauth_callback", signed)
        self.assertEqual(signed["a"], "1")

    def test_stable_with_same_nonce_and_timestamp(self) -> None:
        first = _signer().sign("POST", "https://example.com/x", {"b": "2", "a": "1"})
        second = _signer().sign("POST", "https://example.com/x", {"a": "1", "b": "2"})
        self.assertEqual(first, second)

    def test_signature_without_tokens(self) -> None:
        signed = _signer().sign("POST", "https://example.com/x", {"a": "1"})
        unsigned = {k: v for k, v in signed.items() if k != "oauth_signature"}
        base = signature_base_string("POST", "https://example.com/x", unsigned)
        self.assertEqual(signed["oauth_signature"], hmac_sha1_signature(base, "c&secret", ""))

    def test_access_token_is_sent_and_keys_signature(self) -> None:
        signer = _signer()
        signer.request_token = TokenPair(token="rt", token_secret="rts")
        signer.access_token = TokenPair(token="at", token_secret="ats")
        signed = signer.sign("POST", "https://example.com/x", {"a": "1"})
        self.assertEqual(signed["oauth_token"], "at")
        unsigned = {k: v for k, v in signed.items() if k != "oauth_signature"}
        base = signature_base_string("POST", "https://example.com/x", unsigned)
        self.assertEqual(signed["oauth_signature"], hmac_sha1_signature(base, "c&secret", "ats"))

    def test_request_token_secret_used_when_token_matches(self) -> None:
        signer = _signer()
        signer.request_token = TokenPair(token="rt", token_secret="rts")
        self.assertEqual(signer.token_secret_for({"oauth_token": "rt"}), "rts")
        self.assertEqual(signer.token_secret_for({"oauth_token": "other"}), "")
        self.assertEqual(signer.token_secret_for({}), "")

    def test_explicit_oauth_token_wins(self) -> None:
        signer = _signer()
        signer.access_token = TokenPair(token="at", token_secret="ats")
        signed = signer.sign("POST", "https://example.com/x", {"oauth_token": "explicit"})
        self.assertEqual(signed["oauth_token"], "explicit")


class TestOAuth1Session(unittest.TestCase):
    def test_each_attempt_is_signed_afresh(self) -> None:
        bodies = []
        nonces = iter(["11111111", "22222222"])

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(dict(parse_qsl(request.content.decode("ascii"))))
            return httpx.Response(503 if len(bodies) == 1 else 200, text="ok")

        signer = OAuth1Signer(KEYS, clock=lambda: 1700000000, nonce_factory=lambda: next(nonces))
        with httpx.Client(transport=httpx.MockTransport(handler)) as http:
            session = OAuth1Session(signer, http, retry=RetryPolicy(max_retries=3), sleep=lambda _: None)
            resp = session.post("https://example.com/x", {"a": "1"})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual([b["oauth_nonce"] for b in bodies], ["11111111", "22222222"])
        self.assertNotEqual(bodies[0]["oauth_signature"], bodies[1]["oauth_signature"])
        self.assertEqual(bodies[1]["a"], "1")


if __name__ == "__main__":
    unittest.main()
