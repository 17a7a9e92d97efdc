# -*- coding: utf-8 -*-
"""FatSecret: OAuth1 HMAC-SHA1 request signing."""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import random
import time
from typing import Callable, Dict, Mapping, Optional
from urllib.parse import quote_plus, urlsplit

import httpx

from ..transport import RetryPolicy, send_with_retry
from .models import FatSecretKeys, TokenPair

logger = logging.getLogger(__name__)

SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"
_NONCE_DIGITS = 8


def percent_encode(value: str) -> str:
    """Form-encode, then tighten to RFC 3986 (space as %20, literal tilde)."""
    return quote_plus(str(value), safe="").replace("+", "%20").replace("%7E", "~")


def signable_url(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}{parts.path}"


def param_string(params: Mapping[str, str]) -> str:
    pairs = sorted((str(name), str(value)) for name, value in params.items())
    return "&".join(f"{percent_encode(name)}={percent_encode(value)}" for name, value in pairs)


def signature_base_string(method: str, url: str, params: Mapping[str, str]) -> str:
    return "&".join(
        [
            method.upper(),
            percent_encode(signable_url(url)),
            percent_encode(param_string(params)),
        ]
    )


def hmac_sha1_signature(base_string: str, consumer_secret: str, token_secret: str = "") -> str:
    key = f"{percent_encode(consumer_secret)}&{token_secret}"
    digest = hmac.new(key.encode("utf-8"), base_string.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def make_nonce() -> str:
    return "".join(str(random.randrange(10)) for _ in range(_NONCE_DIGITS))


class OAuth1Signer:
    """Adds the OAuth1 protocol parameters and signature to a request.

    ``request_token`` and ``access_token`` are set by the authorization flow;
    once an access token exists it is sent as ``oauth_token`` and its secret
    keys every signature.
    """

    def __init__(
        self,
        keys: FatSecretKeys,
        *,
        clock: Callable[[], float] = time.time,
        nonce_factory: Callable[[], str] = make_nonce,
    ) -> None:
        self.keys = keys
        self.request_token: Optional[TokenPair] = None
        self.access_token: Optional[TokenPair] = None
        self._clock = clock
        self._nonce_factory = nonce_factory

    def token_secret_for(self, params: Mapping[str, str]) -> str:
        if self.access_token is not None:
            return self.access_token.token_secret
        if self.request_token is not None and params.get("oauth_token") == self.request_token.token:
            return self.request_token.token_secret
        return ""

    def oauth_params(self) -> Dict[str, str]:
        params = {
            "oauth_consumer_key": self.keys.consumer_key,
            "oauth_nonce": self._nonce_factory(),
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_timestamp": str(int(self._clock())),
            "oauth_version": OAUTH_VERSION,
        }
        if self.access_token is not None:
            params["oauth_token"] = self.access_token.token
        return params

    def sign(self, method: str, url: str, params: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Return ``params`` merged with the OAuth parameters and ``oauth_signature``.

        Parameters passed by the caller win over the defaults, so the access
        token exchange can send the request token as ``oauth_token``.
        """
        values = self.oauth_params()
        values.update({str(k): str(v) for k, v in (params or {}).items()})
        values.pop("oauth_signature", None)

        base_string = signature_base_string(method, url, values)
        logger.debug("OAuth1 signature base string: %s", base_string)

        values["oauth_signature"] = hmac_sha1_signature(
            base_string,
            self.keys.consumer_secret,
            self.token_secret_for(values),
        )
        return values


class OAuth1Session:
    """Signed form-encoded POSTs over a shared ``httpx.Client`` with retries."""

    def __init__(
        self,
        signer: OAuth1Signer,
        http: httpx.Client,
        *,
        retry: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.signer = signer
        self.http = http
        self.retry = retry or RetryPolicy()
        self._sleep = sleep

    def post(self, url: str, params: Optional[Mapping[str, str]] = None) -> httpx.Response:
        # Sign per attempt so a retried request carries a fresh nonce and timestamp.
        def attempt() -> httpx.Response:
            return self.http.post(url, data=self.signer.sign("POST", url, params))

        return send_with_retry(attempt, self.retry, sleep=self._sleep)
