"""Persistence ports for client-side session state.

StateStore is the read/write port injected into SessionContext; two
implementations are provided: an in-memory store for tests and short-lived
processes, and a JSON file store holding one document of keys.
"""

import json
from abc import ABC, abstractmethod
from copy import deepcopy
from pathlib import Path
from typing import Any, Optional, Union

from ppz_logalyzer.core import get_logger
from ppz_logalyzer.core.errors import StateStoreError

logger = get_logger(__name__)


class StateStore(ABC):
    """Key-value port for persisted client state."""

    @abstractmethod
    def load(self, key: str) -> Optional[dict[str, Any]]:
        """
        Load the value stored under a key.

        Args:
            key: Storage key.

        Returns:
            The stored value, or None if the key is absent.
        """
        ...

    @abstractmethod
    def save(self, key: str, value: dict[str, Any]) -> None:
        """
        Store a value under a key, replacing any previous value.

        Args:
            key: Storage key.
            value: JSON-serializable mapping.
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Remove a key. Missing keys are ignored.

        Args:
            key: Storage key.
        """
        ...


class InMemoryStateStore(StateStore):
    """State store backed by a dict; lost when the process exits."""

    def __init__(self):
        self._data: dict[str, dict[str, Any]] = {}

    def load(self, key: str) -> Optional[dict[str, Any]]:
        value = self._data.get(key)
        return deepcopy(value) if value is not None else None

    def save(self, key: str, value: dict[str, Any]) -> None:
        self._data[key] = deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStateStore(StateStore):
    """State store persisting all keys to a single JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("state_store_read_failed", path=str(self.path), error=str(e))
            raise StateStoreError(
                f"Failed to read state file: {e}", path=str(self.path)
            ) from e
        if not isinstance(data, dict):
            raise StateStoreError("State file must contain a JSON object", path=str(self.path))
        return data

    def _write(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
        except OSError as e:
            logger.error("state_store_write_failed", path=str(self.path), error=str(e))
            raise StateStoreError(
                f"Failed to write state file: {e}", path=str(self.path)
            ) from e

    def load(self, key: str) -> Optional[dict[str, Any]]:
        return self._read().get(key)

    def save(self, key: str, value: dict[str, Any]) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)
