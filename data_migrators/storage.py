# -*- coding: utf-8 -*-
"""Credential cache: one JSON file per secret name (no locking)."""

from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

from .errors import StorageError

logger = logging.getLogger(__name__)

_FILE_MODE = 0o600


class CachedSecret(BaseModel):
    value: str = ""
    value2: str = ""
    time: int = 0


class SecretStore:
    """Persist small named secrets across runs under ``<base_dir>/<namespace>``."""

    def __init__(self, base_dir: Path | str, namespace: str) -> None:
        self.base_dir = Path(base_dir).expanduser()
        self.namespace = namespace

    @property
    def directory(self) -> Path:
        return self.base_dir / self.namespace

    def path_for(self, name: str) -> Path:
        return self.directory / f"{self.namespace}_{name}.json"

    def _ensure_dir(self) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"error when creating a directory {self.directory}: {exc}") from exc

    def get(self, name: str) -> Optional[CachedSecret]:
        fp = self.path_for(name)
        if not fp.exists():
            return None
        try:
            raw = fp.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"error reading secret file {fp}: {exc}") from exc
        try:
            data = json.loads(raw)
        except ValueError:
            return None
        if not isinstance(data, dict):
            return None
        try:
            return CachedSecret.model_validate(data)
        except ValidationError:
            logger.warning("Ignoring malformed secret file %s", fp)
            return None

    def set(self, name: str, value: str, value2: str = "") -> CachedSecret:
        self._ensure_dir()
        secret = CachedSecret(value=value, value2=value2, time=int(time.time()))
        fp = self.path_for(name)
        try:
            fd = os.open(fp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, _FILE_MODE)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(secret.model_dump_json())
        except OSError as exc:
            raise StorageError(f"error when writing secret data to {fp}: {exc}") from exc
        return secret

    def delete(self, name: str) -> bool:
        fp = self.path_for(name)
        try:
            fp.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageError(f"error when removing secret file {fp}: {exc}") from exc
        return True
