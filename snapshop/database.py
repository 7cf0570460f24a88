# snapshop/database.py
import json
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional, Protocol, Union

# This file holds the key-value stores the storefront persists into.
# Two scopes: a durable one that survives restarts (a JSON file) and an
# ephemeral one that lives as long as the process.

logger = logging.getLogger(__name__)

USERS_KEY = "users"
CART_KEY = "cart"
AUTH_KEY = "auth"
THEME_KEY = "theme"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self, prefix: str = ""):
        self.prefix = prefix
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(self.prefix + key)

    def set(self, key: str, value: str) -> None:
        self._data[self.prefix + key] = value

    def delete(self, key: str) -> None:
        self._data.pop(self.prefix + key, None)

    def clear(self) -> None:
        self._data.clear()


class JsonFileStore:
    """Durable store backed by one JSON object file.

    Every call goes to the file: get() re-reads it, set()/delete() re-read,
    change one key and write back, so last writer wins per key.
    """

    def __init__(self, path: Union[str, Path], prefix: str = ""):
        self.prefix = prefix
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("ignoring unreadable store %s: %s", self.path, e)
            return {}
        if not isinstance(raw, dict):
            return {}
        return {k: v for k, v in raw.items() if isinstance(v, str)}

    def _flush(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._load().get(self.prefix + key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[self.prefix + key] = value
        self._flush(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if data.pop(self.prefix + key, None) is not None:
            self._flush(data)

    def clear(self) -> None:
        # only this store's prefix; other prefixes in the same file stay
        data = {k: v for k, v in self._load().items() if not k.startswith(self.prefix)}
        self._flush(data)


# ---------------------------
# Helpers
# ---------------------------
def read_json(store: KeyValueStore, key: str) -> Any:
    raw = store.get(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("stored value under %r is not valid JSON, ignoring it", key)
        return None


def read_json_list(store: KeyValueStore, key: str) -> List[Any]:
    # a corrupt stored list is treated as an empty one
    value = read_json(store, key)
    return value if isinstance(value, list) else []


def write_json(store: KeyValueStore, key: str, value: Any) -> None:
    store.set(key, json.dumps(value, ensure_ascii=False))
