# -*- coding: utf-8 -*-
"""Error taxonomy shared by the storage, transport and provider layers."""

from __future__ import annotations

from typing import Any, Optional


class MigratorError(Exception):
    """Base class for every error raised by the library."""


class StorageError(MigratorError):
    """Credential cache directory or file could not be read or written."""


class KeyFileError(MigratorError):
    """Consumer key file is missing or malformed."""


class TransportError(MigratorError):
    """Connection-level failure (DNS, connect, timeout)."""


class HttpStatusError(MigratorError):
    def __init__(self, status_code: int, body: str, *, url: Optional[str] = None) -> None:
        self.status_code = status_code
        self.body = body
        self.url = url
        where = f" {url}" if url else ""
        super().__init__(f"HTTP {status_code}{where}: {body[:300]}")


class OAuthProtocolError(MigratorError):
    """OAuth flow is broken (missing field, unconfirmed callback, bad code)."""


class ApiError(MigratorError):
    def __init__(self, method: str, code: Any, message: str) -> None:
        self.method = method
        self.code = code
        self.message = message
        super().__init__(f"API error: method={method}, code={code}: {message}")


class ResponseParseError(MigratorError):
    """API payload does not match the expected schema."""


class DiaryProtocolError(MigratorError):
    """Month summary window does not advance past the requested cursor."""
