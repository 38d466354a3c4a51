"""Key-value storage namespaces for persisted blobs."""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class KeyValueStorage(ABC):
    """Abstract string key-value namespace."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, overwriting any previous value."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove key if present."""
        pass


class MemoryStorage(KeyValueStorage):
    """In-memory namespace, lost when the process exits."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class JsonFileStorage(KeyValueStorage):
    """Namespace persisted as one JSON object of key -> string in a file."""

    def __init__(self, path: str):
        """Initialize file storage.

        Args:
            path: JSON file holding the namespace. Created on first write.
        """
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> Dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read storage {self._path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Storage {self._path} is not a JSON object, ignoring")
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: Dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)
        logger.debug(f"Wrote {key} to {self._path}")

    def remove(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)
