# snapshop/theme.py
from typing import Optional

from .config import settings
from .database import KeyValueStore, THEME_KEY

THEMES = ("light", "dark")


def default_theme(prefers_dark: Optional[bool] = None) -> str:
    if prefers_dark is None:
        prefers_dark = settings.prefers_dark
    return "dark" if prefers_dark else "light"


def load_theme(store: KeyValueStore, prefers_dark: Optional[bool] = None) -> str:
    saved = store.get(THEME_KEY)
    if saved in THEMES:
        return saved
    return default_theme(prefers_dark)


def toggle_theme(store: KeyValueStore, current: str) -> str:
    new = "light" if current == "dark" else "dark"
    store.set(THEME_KEY, new)
    return new
