from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parent
REPO_ROOT = PACKAGE_DIR.parents[1]


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return max(minimum, parsed)


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = float(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _resolve_path(path_value: str) -> Path:
    path = Path(path_value)
    if path.is_absolute():
        return path
    return REPO_ROOT / path


@dataclass(frozen=True)
class Settings:
    app_name: str
    cors_origins: str
    realms_data_dir: Path
    excluded_realms_path: Path
    discovery_url_mainnet: str
    discovery_url_devnet: str
    discovery_page_size: int
    discovery_timeout_seconds: float


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    data_dir_raw = os.getenv('REALMS_DATA_DIR', '').strip()
    realms_data_dir = _resolve_path(data_dir_raw) if data_dir_raw else PACKAGE_DIR / 'data'

    excluded_raw = os.getenv('EXCLUDED_REALMS_PATH', '').strip()
    excluded_realms_path = (
        _resolve_path(excluded_raw) if excluded_raw else realms_data_dir / 'excluded-realms.json'
    )

    return Settings(
        app_name=os.getenv('APP_NAME', 'realms-registry-api'),
        cors_origins=os.getenv('CORS_ORIGINS', 'http://localhost:3000'),
        realms_data_dir=realms_data_dir,
        excluded_realms_path=excluded_realms_path,
        discovery_url_mainnet=os.getenv('DISCOVERY_URL_MAINNET', 'https://graph.holaplex.com/v1').strip(),
        discovery_url_devnet=os.getenv('DISCOVERY_URL_DEVNET', 'https://graph.devnet.holaplex.tools/v1').strip(),
        discovery_page_size=_env_int('DISCOVERY_PAGE_SIZE', 10000),
        discovery_timeout_seconds=_env_float('DISCOVERY_TIMEOUT_SECONDS', 15.0)
    )
