# blueprints/search/client.py
# HTTP-клиент справочника аудиторий (того же REST API, что отдаёт этот сервис).
from __future__ import annotations
import logging
from typing import List, Optional
from urllib.parse import quote

import requests
from sqlalchemy.exc import SQLAlchemyError

from blueprints.directory.services import ClassroomRecord

log = logging.getLogger(__name__)


class DirectoryUnavailable(Exception):
    """Удалённый справочник не ответил или ответил ошибкой."""


class HttpDirectorySource:
    def __init__(self, base_url: str, *, timeout: float = 5.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path: str):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise DirectoryUnavailable(str(e)) from e
        except ValueError as e:
            raise DirectoryUnavailable(f"invalid JSON from {url}") from e
        if not isinstance(data, list):
            raise DirectoryUnavailable(f"unexpected payload from {url}")
        return data

    def _records(self, data) -> List[ClassroomRecord]:
        out = []
        for item in data:
            try:
                out.append(ClassroomRecord.from_dict(item))
            except (KeyError, TypeError, ValueError):
                log.warning("skipping malformed classroom record: %r", item)
        return out

    def list_all(self) -> List[ClassroomRecord]:
        return self._records(self._get("/classrooms"))

    def search_remote(self, query: str) -> List[ClassroomRecord]:
        return self._records(self._get(f"/classrooms/search/{quote(query, safe='')}"))


class StoreDirectorySource:
    """Источник поверх локального хранилища (БД или фолбэк)."""

    def __init__(self, store):
        self.store = store

    def list_all(self) -> List[ClassroomRecord]:
        try:
            return self.store.list_all()
        except SQLAlchemyError as e:
            raise DirectoryUnavailable(str(e)) from e

    def search_remote(self, query: str) -> List[ClassroomRecord]:
        try:
            return self.store.search(query)
        except SQLAlchemyError as e:
            raise DirectoryUnavailable(str(e)) from e
