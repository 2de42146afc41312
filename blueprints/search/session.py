# blueprints/search/session.py
# Поиск по справочнику с семантикой «последний запрос побеждает»:
# результат запроса отбрасывается, если после него был выдан более новый.
from __future__ import annotations
import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from errors import InvalidArgument
from .client import DirectoryUnavailable
from .services import favorites_first, match

log = logging.getLogger(__name__)


@dataclass
class SearchOutcome:
    ticket: int
    query: str
    results: List = field(default_factory=list)
    degraded: bool = False


class SearchSession:
    def __init__(self, source, favorites: Iterable[str] = ()):
        self._source = source
        self._favorites = favorites
        self._lock = threading.Lock()
        self._seq = 0
        self._pending: Dict[int, str] = {}
        self._snapshot: List = []

    @property
    def snapshot(self) -> List:
        return list(self._snapshot)

    def refresh(self) -> bool:
        """Перечитывает справочник; при ошибке остаётся последний снимок."""
        try:
            records = self._source.list_all()
        except DirectoryUnavailable as e:
            log.warning("directory list unavailable, keeping last snapshot: %s", e)
            return False
        self._snapshot = list(records)
        return True

    def begin(self, query: str) -> int:
        if query is None:
            raise InvalidArgument("query")
        with self._lock:
            self._seq += 1
            self._pending[self._seq] = query
            # всё, что старше нового билета, уже не нужно
            for stale in [t for t in self._pending if t < self._seq]:
                self._pending.pop(stale)
            return self._seq

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._seq

    def resolve(self, ticket: int) -> Optional[SearchOutcome]:
        with self._lock:
            query = self._pending.get(ticket)
        if query is None or not self.is_current(ticket):
            return None

        favorites = list(self._favorites)
        degraded = False
        if not query.strip():
            # справочник не прочитался: отдаём что есть, но помечаем как degraded
            if not self._snapshot and not self.refresh():
                degraded = True
            results = match(query, self._snapshot, favorites)
        else:
            try:
                remote = self._source.search_remote(query)
                results = favorites_first(remote, favorites)
            except DirectoryUnavailable as e:
                log.warning("remote search failed, matching locally: %s", e)
                if not self._snapshot:
                    self.refresh()
                results = match(query, self._snapshot, favorites)
                degraded = True

        with self._lock:
            self._pending.pop(ticket, None)
            if ticket != self._seq:
                return None
        return SearchOutcome(ticket=ticket, query=query, results=results, degraded=degraded)

    def search(self, query: str) -> Optional[SearchOutcome]:
        return self.resolve(self.begin(query))
