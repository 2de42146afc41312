from __future__ import annotations

# статусы результатов, которые отдаются вызывающему вместо исключений
STATUS_OK = "ok"
STATUS_APPROXIMATE = "approximate"
STATUS_DEGRADED = "degraded"

class InvalidArgument(ValueError):
    """Обязательный параметр отсутствует или имеет неверную структуру."""

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"{field} is required")
