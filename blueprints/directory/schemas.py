from __future__ import annotations
from typing import Optional, Tuple
from pydantic import BaseModel, Field, field_validator

from .validators import ensure_coordinate_range

def _check_coordinates(v):
    if v is None:
        return v
    lat, lon = v
    ensure_coordinate_range(lat, lon)
    return v

# ---------- Classrooms ----------
class ClassroomIn(BaseModel):
    id: str = Field(min_length=1, max_length=50)
    coordinates: Tuple[float, float]
    building: Optional[str] = Field(None, max_length=255)
    floor: Optional[int] = None
    description: Optional[str] = Field(None, max_length=2000)

    @field_validator("id")
    @classmethod
    def _strip_id(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("id_required")
        return v

    @field_validator("coordinates")
    @classmethod
    def _coords(cls, v):
        return _check_coordinates(v)

class ClassroomPatch(BaseModel):
    # частичное обновление: передаются только изменяемые поля
    id: Optional[str] = Field(None, min_length=1, max_length=50)
    coordinates: Optional[Tuple[float, float]] = None
    building: Optional[str] = Field(None, max_length=255)
    floor: Optional[int] = None
    description: Optional[str] = Field(None, max_length=2000)

    @field_validator("id")
    @classmethod
    def _strip_id(cls, v: Optional[str]):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("id_required")
        return v

    @field_validator("coordinates")
    @classmethod
    def _coords(cls, v):
        return _check_coordinates(v)

class ClassroomOut(BaseModel):
    id: str
    coordinates: Tuple[float, float]
    building: Optional[str] = None
    floor: Optional[int] = None
    description: Optional[str] = None
