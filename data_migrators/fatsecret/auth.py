# -*- coding: utf-8 -*-
"""FatSecret: three-legged OAuth1 authorization, resumable through the secret cache."""

from __future__ import annotations

import logging
import re
from typing import Callable, Dict, Optional
from urllib.parse import parse_qs

import httpx

from ..errors import HttpStatusError, OAuthProtocolError
from ..storage import SecretStore
from .models import AuthState, TokenPair
from .oauth1 import OAuth1Session, OAuth1Signer

logger = logging.getLogger(__name__)

REQUEST_TOKEN_URL = "https://www.fatsecret.com/oauth/request_token"
ACCESS_TOKEN_URL = "https://www.fatsecret.com/oauth/access_token"
AUTHORIZE_URL = "https://www.fatsecret.com/oauth/authorize"

REQUEST_TOKEN_CACHE = "request_token"
AUTH_CODE_CACHE = "auth_code"
ACCESS_TOKEN_CACHE = "access_token"

_DIGITS_RE = re.compile(r"^\d+$")

Prompt = Callable[[str], str]


def authorize_url(request_token: str) -> str:
    return f"{AUTHORIZE_URL}?oauth_token={request_token}"


def prompt_for_code(url: str) -> str:
    """Interactive prompt: show the authorize URL and read the verifier from stdin."""
    print("==> Go to the authorize URL and enter code")
    print(f"Authorize URL: {url}")
    return input("Enter code: ")


def _parse_form_response(resp: httpx.Response, what: str) -> Dict[str, str]:
    if resp.status_code > 201:
        raise HttpStatusError(resp.status_code, resp.text, url=str(resp.request.url))
    parsed = parse_qs(resp.text, keep_blank_values=True)
    logger.debug("OAuth %s response keys: %s", what, sorted(parsed))
    return {key: values[0] for key, values in parsed.items() if values}


def _require_token_pair(fields: Dict[str, str], what: str) -> TokenPair:
    token = fields.get("oauth_token") or ""
    secret = fields.get("oauth_token_secret") or ""
    if not token:
        raise OAuthProtocolError(f"OAuth {what} response: there is no oauth_token in response")
    if not secret:
        raise OAuthProtocolError(f"OAuth {what} response: there is no oauth_token_secret in response")
    return TokenPair(token=token, token_secret=secret)


class OAuthFlow:
    """Drives request token -> operator code -> access token.

    Each state transition first looks in the ``SecretStore``; completed steps
    are skipped on later runs, so the operator is prompted only once.
    """

    def __init__(self, session: OAuth1Session, store: SecretStore, prompt: Prompt = prompt_for_code) -> None:
        self.session = session
        self.store = store
        self.prompt = prompt
        self.state = AuthState.init
        self.auth_code: Optional[str] = None
        self._request_token_cached = False

    @property
    def signer(self) -> OAuth1Signer:
        return self.session.signer

    @property
    def authorized(self) -> bool:
        return self.state is AuthState.has_access_token

    def authorize(self) -> TokenPair:
        if self.state is AuthState.init:
            cached = self._cached_pair(ACCESS_TOKEN_CACHE)
            if cached is not None:
                logger.info("Using cached FatSecret access token")
                self.signer.access_token = cached
                self.state = AuthState.has_access_token

        while not self.authorized:
            self.step()

        assert self.signer.access_token is not None
        return self.signer.access_token

    def step(self) -> AuthState:
        transitions = {
            AuthState.init: (self._obtain_request_token, AuthState.has_request_token),
            AuthState.has_request_token: (self._obtain_auth_code, AuthState.has_auth_code),
            AuthState.has_auth_code: (self._obtain_access_token, AuthState.has_access_token),
        }
        if self.state not in transitions:
            return self.state
        handler, next_state = transitions[self.state]
        handler()
        self.state = next_state
        return self.state

    def reset(self) -> None:
        for name in (REQUEST_TOKEN_CACHE, AUTH_CODE_CACHE, ACCESS_TOKEN_CACHE):
            self.store.delete(name)
        self.signer.request_token = None
        self.signer.access_token = None
        self.auth_code = None
        self._request_token_cached = False
        self.state = AuthState.init

    def _cached_pair(self, name: str) -> Optional[TokenPair]:
        cached = self.store.get(name)
        if cached is None or not cached.value or not cached.value2:
            return None
        return TokenPair(token=cached.value, token_secret=cached.value2)

    def _obtain_request_token(self) -> None:
        cached = self._cached_pair(REQUEST_TOKEN_CACHE)
        if cached is not None:
            self.signer.request_token = cached
            self._request_token_cached = True
            return

        resp = self.session.post(REQUEST_TOKEN_URL, {"oauth_callback": "oob"})
        fields = _parse_form_response(resp, "request token")

        confirmed = fields.get("oauth_callback_confirmed", "")
        if confirmed != "true":
            raise OAuthProtocolError(f"OAuth callback not confirmed: {confirmed!r} != 'true'")

        pair = _require_token_pair(fields, "request token")
        self.signer.request_token = pair
        self._request_token_cached = False
        self.store.set(REQUEST_TOKEN_CACHE, pair.token, pair.token_secret)
        logger.info("Obtained FatSecret request token")

    def _obtain_auth_code(self) -> None:
        assert self.signer.request_token is not None
        # A cached code is only valid for the request token it was issued against.
        if self._request_token_cached:
            cached = self.store.get(AUTH_CODE_CACHE)
            if cached is not None and _DIGITS_RE.match(cached.value):
                self.auth_code = cached.value
                return

        code = (self.prompt(authorize_url(self.signer.request_token.token)) or "").strip()
        if not _DIGITS_RE.match(code):
            raise OAuthProtocolError(f"invalid authorization code: {code!r}")
        self.auth_code = code
        self.store.set(AUTH_CODE_CACHE, code, "")

    def _obtain_access_token(self) -> None:
        assert self.signer.request_token is not None and self.auth_code is not None
        cached = self._cached_pair(ACCESS_TOKEN_CACHE)
        if cached is not None:
            self.signer.access_token = cached
            return

        resp = self.session.post(
            ACCESS_TOKEN_URL,
            {
                "oauth_token": self.signer.request_token.token,
                "oauth_verifier": self.auth_code,
            },
        )
        fields = _parse_form_response(resp, "access token")
        pair = _require_token_pair(fields, "access token")
        self.signer.access_token = pair
        self.store.set(ACCESS_TOKEN_CACHE, pair.token, pair.token_secret)
        logger.info("Obtained FatSecret access token")
