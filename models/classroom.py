from __future__ import annotations
from typing import Any, Dict

from sqlalchemy import Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from extensions import db


class Classroom(db.Model):
    pk: Mapped[int] = mapped_column("id", primary_key=True)
    # публичный идентификатор аудитории (KHE-123); в JSON отдаём как "id"
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    building: Mapped[str | None] = mapped_column(String(255))
    floor: Mapped[int | None] = mapped_column(Integer)
    description: Mapped[str | None] = mapped_column(Text)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.code,
            "coordinates": [self.latitude, self.longitude],
            "building": self.building,
            "floor": self.floor,
            "description": self.description,
        }

    def __repr__(self):
        return f"<Classroom {self.code}>"
