# scripts/find_classroom.py
# Консольный клиент: поиск аудитории (избранные сверху) и маршрут до неё.
# Usage:
#   python scripts/find_classroom.py "khe 1"
#   python scripts/find_classroom.py eng --from 43.6577,-79.3788
#   python scripts/find_classroom.py --save KHE-123
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

import requests

# --- ensure project root on sys.path ---
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from blueprints.search.client import HttpDirectorySource  # noqa: E402
from blueprints.search.favorites import FavoriteSet, JsonFileStore  # noqa: E402
from blueprints.search.session import SearchSession  # noqa: E402

DEFAULT_API = os.getenv("CAMPUS_API_URL", "http://localhost:5000/api/v1")
DEFAULT_PREFS = Path.home() / ".campus_navigator.json"

def _print_route(api: str, start: str, classroom_id: str, timeout: float) -> None:
    try:
        r = requests.get(f"{api}/route", params={"from": start, "classroom": classroom_id}, timeout=timeout)
        r.raise_for_status()
        data = r.json()
    except requests.exceptions.RequestException as e:
        print(f"route request failed: {e}")
        return
    if data.get("approximate"):
        print(f"! {data.get('warning')}")
    else:
        print(f"Total distance: {round(data['distance_m'])} m")
    for i, step in enumerate(data.get("steps", []), start=1):
        print(f"  {i:>2}. {step['instruction']} ({round(step['distance'])} m)")
    if data.get("arrived"):
        print("You have arrived.")

def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("query", nargs="?", default="")
    parser.add_argument("--api", default=DEFAULT_API)
    parser.add_argument("--prefs", type=Path, default=DEFAULT_PREFS)
    parser.add_argument("--save", metavar="ID", help="add classroom to favorites")
    parser.add_argument("--unsave", metavar="ID", help="remove classroom from favorites")
    parser.add_argument("--from", dest="start", metavar="LAT,LON", help="route to the first match")
    parser.add_argument("--timeout", type=float, default=5.0)
    args = parser.parse_args()

    favorites = FavoriteSet.load(JsonFileStore(args.prefs))
    if args.save:
        favorites.add(args.save)
    if args.unsave:
        favorites.remove(args.unsave)

    session = SearchSession(HttpDirectorySource(args.api, timeout=args.timeout), favorites)
    session.refresh()
    outcome = session.search(args.query)
    if outcome is None:
        return
    if outcome.degraded:
        print("! search service unavailable, results from local snapshot")
    if not outcome.results:
        print("No classrooms found. Try a different search.")
        return
    for rec in outcome.results:
        star = "*" if rec.id in favorites else " "
        floor = f" - Floor {rec.floor}" if rec.floor else ""
        print(f"{star} {rec.id:<10} {rec.building or ''}{floor}")

    if args.start:
        _print_route(args.api, args.start, outcome.results[0].id, args.timeout)

if __name__ == "__main__":
    main()
