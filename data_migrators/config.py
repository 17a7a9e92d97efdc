from __future__ import annotations

import os
from pathlib import Path


def _default_base_dir() -> Path:
    xdg_data_home = os.environ.get("XDG_DATA_HOME") or str(Path("~") / ".local" / "share")
    return Path(xdg_data_home) / "data-migrators487"


class Settings:
    """Centralized configuration for the migrator CLI.

    Values are resolved from the environment once, when the object is built.
    Library code never reads the environment; the CLI passes plain values down.
    """

    def __init__(self) -> None:
        self.base_dir: Path = Path(
            os.environ.get("DM_BASE_DIR") or _default_base_dir()
        ).expanduser()
        self.fatsecret_key_file: Path = Path(
            os.environ.get("FATSECRET_KEY_FILE") or "~/.tokens/fatsecret.json"
        ).expanduser()
        self.fatsecret_cache_namespace: str = "fatsecret_oauth"

        self.http_timeout: float = float(os.environ.get("DM_HTTP_TIMEOUT") or "30")
        self.http_retries: int = int(os.environ.get("DM_HTTP_RETRIES") or "5")
        self.http_backoff: float = float(os.environ.get("DM_HTTP_BACKOFF") or "0.1")
        self.http_max_timeout: float = float(os.environ.get("DM_HTTP_MAX_TIMEOUT") or "60")
        # FatSecret enforces a per-user rate limit; keep requests paced.
        self.courtesy_delay: float = float(os.environ.get("DM_COURTESY_DELAY") or "1.0")

        self.log_level: str = (os.environ.get("DM_LOG_LEVEL") or "INFO").upper()
