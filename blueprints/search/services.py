# blueprints/search/services.py
from __future__ import annotations
import re
from typing import Iterable, List, Sequence

from errors import InvalidArgument

_NON_ALNUM = re.compile(r"[^a-z0-9]")

def normalize(value: str | None) -> str:
    """lower-case и только ASCII [a-z0-9]; акценты не сворачиваются."""
    if not value:
        return ""
    return _NON_ALNUM.sub("", value.lower())

def tokenize(query: str) -> List[str]:
    # сначала режем по пробелам исходной строки, потом нормализуем каждый токен
    return [normalize(t) for t in query.split()]

def _token_hit(token: str, fields: Sequence[str]) -> bool:
    if not token:
        return False
    return any(token in f for f in fields)

def record_matches(record, tokens: Sequence[str]) -> bool:
    fields = (normalize(record.id), normalize(getattr(record, "building", None)))
    return all(_token_hit(t, fields) for t in tokens)

def unique_by_id(records: Iterable) -> list:
    seen = set()
    out = []
    for r in records:
        if r.id in seen:
            continue
        seen.add(r.id)
        out.append(r)
    return out

def favorites_first(records: Sequence, favorites: Iterable[str]) -> list:
    """Избранные вперёд; внутри каждой группы порядок входного списка."""
    fav = set(favorites or ())
    head = [r for r in records if r.id in fav]
    tail = [r for r in records if r.id not in fav]
    return head + tail

def match(query: str, directory: Sequence, favorites: Iterable[str] = ()) -> list:
    if query is None:
        raise InvalidArgument("query")
    if directory is None:
        raise InvalidArgument("directory")
    records = unique_by_id(directory)
    tokens = tokenize(query)
    if tokens:
        records = [r for r in records if record_matches(r, tokens)]
    return favorites_first(records, favorites)
