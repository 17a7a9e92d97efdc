# -*- coding: utf-8 -*-
"""FatSecret: REST API method calls over the signed session."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional

from ..errors import ApiError, HttpStatusError, ResponseParseError
from ..transport import RetryPolicy
from .oauth1 import OAuth1Session

logger = logging.getLogger(__name__)

API_URL = "https://platform.fatsecret.com/rest/server.api"

RATE_LIMIT_MESSAGE = "User is performing too many actions"

# Separate from the transport retries: the rate limit arrives inside a 200 body.
DEFAULT_RATE_LIMIT_RETRY = RetryPolicy(max_retries=5, initial_backoff=10.0, max_timeout=60.0)

MONTH_METHOD = "food_entries.get_month.v2"
DAY_METHOD = "food_entries.get.v2"
FOOD_METHOD = "food.get.v2"


def _extract_error(body: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    err = body.get("error")
    if not isinstance(err, dict):
        return None
    return {"code": err.get("code"), "message": str(err.get("message") or "")}


class FatSecretClient:
    def __init__(
        self,
        session: OAuth1Session,
        *,
        api_url: str = API_URL,
        rate_limit_retry: RetryPolicy = DEFAULT_RATE_LIMIT_RETRY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.session = session
        self.api_url = api_url
        self.rate_limit_retry = rate_limit_retry
        self._sleep = sleep

    def call(self, method: str, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Invoke an API method and return its decoded JSON object.

        Raises ``HttpStatusError`` for non-2xx statuses, ``ApiError`` for an
        ``error`` object in the body (after the rate-limit retries, if any apply).
        """
        form: Dict[str, str] = {"method": method, "format": "json"}
        for key, value in (params or {}).items():
            form[str(key)] = str(value)

        retry_number = 0
        while True:
            resp = self.session.post(self.api_url, form)
            if resp.status_code > 201:
                raise HttpStatusError(resp.status_code, resp.text, url=self.api_url)

            try:
                body = resp.json()
            except ValueError as exc:
                snippet = (resp.text or "").replace("\n", " ").strip()[:200]
                raise ResponseParseError(f"FatSecret returned non-JSON response: method={method}, {snippet}") from exc
            if not isinstance(body, dict):
                raise ResponseParseError(f"FatSecret returned a non-object response: method={method}")

            err = _extract_error(body)
            if err is None:
                return body

            if RATE_LIMIT_MESSAGE in err["message"] and retry_number < self.rate_limit_retry.max_retries:
                wait = self.rate_limit_retry.backoff(retry_number)
                retry_number += 1
                logger.warning(
                    "FatSecret rate limit hit: method=%s, retry_number=%d, wait=%.1fs",
                    method,
                    retry_number,
                    wait,
                )
                self._sleep(wait)
                continue

            raise ApiError(method, err["code"], err["message"])

    def get_month(self, day_index: int) -> Dict[str, Any]:
        return self.call(MONTH_METHOD, {"date": int(day_index)})

    def get_day_entries(self, day_index: int) -> Dict[str, Any]:
        return self.call(DAY_METHOD, {"date": int(day_index)})

    def get_food(self, food_id: int | str) -> Dict[str, Any]:
        return self.call(FOOD_METHOD, {"food_id": food_id})
