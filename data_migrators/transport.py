# -*- coding: utf-8 -*-
"""HTTP transport with bounded exponential backoff on transient statuses."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

import httpx

from .errors import TransportError

logger = logging.getLogger(__name__)

RETRY_STATUSES = frozenset({429, 500, 501, 502, 503, 504})


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 5
    initial_backoff: float = 0.1
    max_timeout: float = 60.0

    def backoff(self, retry_number: int) -> float:
        return min(self.initial_backoff * (2 ** retry_number), self.max_timeout)


def make_http_client(timeout: float = 30.0) -> httpx.Client:
    return httpx.Client(timeout=timeout, follow_redirects=True)


def send_with_retry(
    attempt: Callable[[], httpx.Response],
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> httpx.Response:
    """Run ``attempt`` until it returns a non-transient status or retries run out.

    The last response is returned as-is; interpreting its status is up to the caller.
    Connection-level failures are not retried.
    """
    retry_number = 0
    while True:
        try:
            resp = attempt()
        except httpx.TransportError as exc:
            raise TransportError(f"HTTP request failed: {exc}") from exc

        if resp.status_code not in RETRY_STATUSES or retry_number >= policy.max_retries:
            return resp

        wait = policy.backoff(retry_number)
        retry_number += 1
        logger.warning(
            "Retry HTTP request because of status %d, retry_number=%d, wait=%.2fs",
            resp.status_code,
            retry_number,
            wait,
        )
        sleep(wait)
