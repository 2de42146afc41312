from __future__ import annotations

def ensure_coordinate_range(lat: float, lon: float):
    if not -90.0 <= lat <= 90.0:
        raise ValueError("latitude must be within [-90, 90]")
    if not -180.0 <= lon <= 180.0:
        raise ValueError("longitude must be within [-180, 180]")
