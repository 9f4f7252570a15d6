"""Runtime configuration, read from ``SHOPLEDGER_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(f"SHOPLEDGER_{name}", default)


@dataclass(frozen=True)
class Settings:

    data_dir: Path = _DEFAULT_DATA_DIR
    low_stock_threshold: int = 10
    store_timeout: float = 5.0
    email_timeout: float = 10.0
    sendgrid_api_key: str | None = None
    from_email: str = "support@zenlocalbrand.shop"
    from_name: str = "ZEN LOCAL BRAND"
    admin_email: str = "admin@zenlocalbrand.shop"
    admin_secret: str | None = None
    admin_session_ttl: float = 8 * 60 * 60
    log_level: str = "INFO"

    @staticmethod
    def from_env() -> Settings:
        defaults = Settings()
        return Settings(
            data_dir=Path(_env("DATA_DIR", str(defaults.data_dir))),
            low_stock_threshold=int(_env("LOW_STOCK_THRESHOLD", str(defaults.low_stock_threshold))),
            store_timeout=float(_env("STORE_TIMEOUT", str(defaults.store_timeout))),
            email_timeout=float(_env("EMAIL_TIMEOUT", str(defaults.email_timeout))),
            sendgrid_api_key=_env("SENDGRID_API_KEY") or os.getenv("SENDGRID_API_KEY"),
            from_email=_env("FROM_EMAIL", defaults.from_email),
            from_name=_env("FROM_NAME", defaults.from_name),
            admin_email=_env("ADMIN_EMAIL", defaults.admin_email),
            admin_secret=_env("ADMIN_SECRET"),
            admin_session_ttl=float(_env("ADMIN_SESSION_TTL", str(defaults.admin_session_ttl))),
            log_level=_env("LOG_LEVEL", defaults.log_level).upper(),
        )
