"""
Persistent client storage

String key/value storage with the semantics of browser local storage: values
are strings, missing keys read as None, writes are immediately durable.
"""

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from luxe_storefront.infrastructure.utilities.exceptions import StorefrontError

logger = logging.getLogger(__name__)


class KeyValueStorage(ABC):
    """Storage interface"""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Get the stored value or None"""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store a value"""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a key; missing keys are ignored"""

    def has_item(self, key: str) -> bool:
        return self.get_item(key) is not None


class InMemoryStorage(KeyValueStorage):
    """Process-local storage, used for tests and ephemeral sessions"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._items)


class JsonFileStorage(KeyValueStorage):
    """Storage persisted as one JSON object on disk"""

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._lock = threading.Lock()
        self._items: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as e:
            raise StorefrontError(
                f"Could not read storage file {self._path}: {e}",
                "Saved data could not be loaded.",
                "STORAGE_ERROR",
            ) from e
        if not isinstance(data, dict):
            logger.warning("⚠️ STORAGE: %s is not a JSON object, starting empty", self._path)
            return {}
        return {str(key): str(value) for key, value in data.items()}

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(self._items, handle, ensure_ascii=False)
            os.replace(tmp_path, self._path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value
            self._flush()

    def remove_item(self, key: str) -> None:
        with self._lock:
            if key in self._items:
                del self._items[key]
                self._flush()
