# snapshop/config.py
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=ROOT_DIR / ".env")


def _get_env(*keys: str, default: Optional[str] = None) -> Optional[str]:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_int(*keys: str, default: int) -> int:
    v = _get_env(*keys)
    return default if v is None else int(v)


def _get_float(*keys: str, default: float) -> float:
    v = _get_env(*keys)
    return default if v is None else float(v)


def _get_bool(*keys: str, default: bool = False) -> bool:
    v = _get_env(*keys)
    if v is None:
        return default
    return v.lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    data_dir: str
    key_prefix: str
    shipping: int
    currency: str
    redirect_delay: float
    toast_seconds: float
    order_toast_seconds: float
    prefers_dark: bool
    log_level: str
    api_url: str

    @property
    def durable_path(self) -> Path:
        return Path(self.data_dir) / "storage.json"


def load_settings() -> Settings:
    return Settings(
        data_dir=_get_env("SNAPSHOP_DATA_DIR", default=str(ROOT_DIR / "data")) or "",
        key_prefix=_get_env("SNAPSHOP_KEY_PREFIX", default="snapshop_") or "",
        shipping=_get_int("SNAPSHOP_SHIPPING", default=50),
        currency=_get_env("SNAPSHOP_CURRENCY", default="₹") or "₹",
        redirect_delay=_get_float("SNAPSHOP_REDIRECT_DELAY", default=1.5),
        toast_seconds=_get_float("SNAPSHOP_TOAST_SECONDS", default=3.0),
        order_toast_seconds=_get_float("SNAPSHOP_ORDER_TOAST_SECONDS", default=5.0),
        prefers_dark=_get_bool("SNAPSHOP_PREFERS_DARK"),
        log_level=_get_env("SNAPSHOP_LOG_LEVEL", default="INFO") or "INFO",
        api_url=_get_env("SNAPSHOP_API_URL", default="http://127.0.0.1:8085") or "",
    )


settings = load_settings()
