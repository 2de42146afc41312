# blueprints/navigation/narration.py
# Текст для озвучки маршрута; сам синтез речи делает клиент.
from __future__ import annotations
import math
from typing import Optional

def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{math.floor(meters + 0.5)} meters"
    return f"{meters / 1000:.1f} kilometers"

def narrate(classroom_id: str, route) -> Optional[str]:
    """None, если озвучивать нечего (нет шагов маршрута)."""
    if not route.steps:
        return None
    parts = [f"Directions to {classroom_id}."]
    if route.distance_m:
        parts.append(f"Total distance: {format_distance(route.distance_m)}.")
    for idx, step in enumerate(route.steps, start=1):
        parts.append(f"Step {idx}: {step.instruction}. Distance: {format_distance(step.distance)}.")
    return " ".join(parts)
