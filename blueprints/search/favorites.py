# blueprints/search/favorites.py
"""
Клиентские настройки: избранные аудитории и параметры отображения.

Хранилище не авторитетное: если оно потеряно или испорчено, значения
сбрасываются к умолчаниям. Сохраняем при каждом изменении.
"""
from __future__ import annotations
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Protocol

log = logging.getLogger(__name__)

FAVORITES_KEY = "savedClassrooms"
DARK_MODE_KEY = "darkMode"
FONT_SIZE_KEY = "fontSize"
FONT_SIZES = ("small", "medium", "large")


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...
    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    def __init__(self, data: Dict[str, str] | None = None):
        self._data: Dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Ключ-значение в одном JSON-файле (аналог localStorage для CLI/тестов)."""

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as ex:
            log.warning("preferences file unreadable, using defaults: %s", ex)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[str]:
        val = self._read().get(key)
        return val if isinstance(val, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)


def _parse_ids(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    try:
        items = json.loads(raw)
    except ValueError:
        return []
    if not isinstance(items, list):
        return []
    ids: List[str] = []
    for it in items:
        # старый формат хранил целые объекты аудиторий
        if isinstance(it, dict):
            it = it.get("id")
        if isinstance(it, str) and it not in ids:
            ids.append(it)
    return ids


class FavoriteSet:
    def __init__(self, store: KeyValueStore, ids: Iterable[str] = ()):
        self._store = store
        self._ids: List[str] = []
        for i in ids:
            if i not in self._ids:
                self._ids.append(i)

    @classmethod
    def load(cls, store: KeyValueStore) -> "FavoriteSet":
        return cls(store, _parse_ids(store.get(FAVORITES_KEY)))

    @property
    def ids(self) -> List[str]:
        return list(self._ids)

    def __contains__(self, classroom_id: object) -> bool:
        return classroom_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    def add(self, classroom_id: str) -> bool:
        if classroom_id in self._ids:
            return False
        self._ids.append(classroom_id)
        self.save()
        return True

    def remove(self, classroom_id: str) -> bool:
        if classroom_id not in self._ids:
            return False
        self._ids.remove(classroom_id)
        self.save()
        return True

    def save(self) -> None:
        self._store.set(FAVORITES_KEY, json.dumps(self._ids))


@dataclass
class Preferences:
    dark_mode: bool = False
    font_size: str = "medium"

    @classmethod
    def load(cls, store: KeyValueStore) -> "Preferences":
        prefs = cls()
        raw_dark = store.get(DARK_MODE_KEY)
        if raw_dark is not None:
            try:
                val = json.loads(raw_dark)
            except ValueError:
                val = None
            if isinstance(val, bool):
                prefs.dark_mode = val
        size = store.get(FONT_SIZE_KEY)
        if size in FONT_SIZES:
            prefs.font_size = size
        return prefs

    def save(self, store: KeyValueStore) -> None:
        if self.font_size not in FONT_SIZES:
            raise ValueError(f"font_size must be one of {FONT_SIZES}")
        store.set(DARK_MODE_KEY, json.dumps(self.dark_mode))
        store.set(FONT_SIZE_KEY, self.font_size)
