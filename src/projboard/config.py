# src/projboard/config.py

"""Settings for projboard, read once from the environment (and a local .env file).

Every variable uses the PROJBOARD_ prefix. The remote store also accepts the
usual Supabase names (SUPABASE_URL, SUPABASE_ANON_KEY) so an existing .env from
a Supabase project works as is. Nothing here is required: with no store URL the
app runs on the in-memory store.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "PROJBOARD"

_TRUTHY = {"1", "true", "yes", "y", "on"}

load_dotenv(override=False)


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _lookup(*names: str) -> str | None:
    """First non-blank value among `names`, stripped."""
    for name in names:
        value = os.getenv(name)
        if value is not None and value.strip():
            return value.strip()
    return None


def _as_bool(raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    return raw.lower() in _TRUTHY


def _as_float(raw: str | None, default: float) -> float:
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True, slots=True)
class Settings:
    app_name: str
    log_level: str

    # Remote table store (PostgREST, e.g. Supabase `/rest/v1`)
    store_url: str
    store_api_key: str | None
    request_timeout_seconds: float
    # Projects table has a `custom_sections` JSON column (off: sections are neither read nor written)
    project_sections_column: bool

    # Seed the in-memory store when no store_url is set
    offline_demo: bool

    # Logs and other local files (gitignored)
    data_dir: Path

    @property
    def store_configured(self) -> bool:
        return bool(self.store_url)

    @staticmethod
    def from_env() -> "Settings":
        store_url = _lookup(_k("STORE_URL"), "SUPABASE_URL") or ""
        data_dir = _lookup(_k("DATA_DIR"))

        return Settings(
            app_name=_lookup(_k("APP_NAME")) or "projboard",
            log_level=(_lookup(_k("LOG_LEVEL")) or "INFO").upper(),
            store_url=store_url.rstrip("/"),
            store_api_key=_lookup(_k("STORE_API_KEY"), "SUPABASE_ANON_KEY", "SUPABASE_KEY"),
            request_timeout_seconds=max(
                1.0, _as_float(_lookup(_k("REQUEST_TIMEOUT_SECONDS")), 15.0)
            ),
            project_sections_column=_as_bool(_lookup(_k("PROJECT_SECTIONS_COLUMN")), False),
            offline_demo=_as_bool(_lookup(_k("OFFLINE_DEMO")), True),
            data_dir=Path(data_dir).expanduser() if data_dir else Path(".local/projboard"),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
