"""
Favorite cars, kept as a set of favorite keys.

The set is loaded once from a key-value store and written back whole after
every change. It is independent from the loaded catalog: keys whose cars are
gone after a new import stay in the set.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Optional, Protocol

from .models import Car, favorite_key
from .rules import FAVORITES_SLOT

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, slot: str) -> Optional[str]: ...

    def set(self, slot: str, value: str) -> None: ...


class MemoryStore:
    def __init__(self, data: Optional[Dict[str, str]] = None) -> None:
        self.data: Dict[str, str] = dict(data or {})

    def get(self, slot: str) -> Optional[str]:
        return self.data.get(slot)

    def set(self, slot: str, value: str) -> None:
        self.data[slot] = value


class JsonFileStore:
    """One ``<slot>.json`` file per slot inside ``directory``."""

    def __init__(self, directory) -> None:
        self.directory = Path(directory)

    def _path(self, slot: str) -> Path:
        return self.directory / f"{slot}.json"

    def get(self, slot: str) -> Optional[str]:
        path = self._path(slot)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, slot: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(slot).write_text(value, encoding="utf-8")


class Favorites:
    def __init__(self, store: KeyValueStore, slot: str = FAVORITES_SLOT) -> None:
        self.store = store
        self.slot = slot
        self._keys: FrozenSet[str] = self.load()

    @property
    def keys(self) -> FrozenSet[str]:
        return self._keys

    def load(self) -> FrozenSet[str]:
        """Stored keys; unreadable or malformed data counts as no favorites."""
        try:
            raw = self.store.get(self.slot)
            if not raw:
                return frozenset()
            data = json.loads(raw)
        except (OSError, ValueError) as exc:
            logger.warning("ignoring unreadable favorites in %r: %s", self.slot, exc)
            return frozenset()

        if not isinstance(data, list):
            logger.warning("ignoring favorites in %r: expected a list", self.slot)
            return frozenset()
        return frozenset(k for k in data if isinstance(k, str))

    def persist(self, keys: Iterable[str]) -> None:
        try:
            self.store.set(self.slot, json.dumps(sorted(keys)))
        except OSError as exc:
            logger.warning("could not save favorites to %r: %s", self.slot, exc)

    def is_favorite(self, car: Car) -> bool:
        return favorite_key(car) in self._keys

    def toggle(self, car: Car) -> bool:
        """Flip membership of ``car``; returns whether it is a favorite now."""
        key = favorite_key(car)
        if key in self._keys:
            self._keys = self._keys - {key}
        else:
            self._keys = self._keys | {key}
        self.persist(self._keys)
        return key in self._keys
