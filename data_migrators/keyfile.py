# -*- coding: utf-8 -*-
"""Consumer key loading from a JSON secrets file."""

from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError

from .errors import KeyFileError
from .fatsecret.models import FatSecretKeys


def read_secret_file(path: Path | str) -> str:
    fp = Path(path).expanduser()
    try:
        return fp.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise KeyFileError(f"input `path` error: {exc}") from exc


def load_keys(path: Path | str) -> FatSecretKeys:
    """Load ``{"consumer_key": ..., "consumer_secret": ...}`` from ``path``."""
    raw = read_secret_file(path)
    try:
        return FatSecretKeys.model_validate_json(raw)
    except ValidationError as exc:
        raise KeyFileError(f"invalid credentials format in {path}: {exc}") from exc
