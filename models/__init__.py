from .classroom import Classroom
from .report import ClassroomReport

__all__ = ["Classroom", "ClassroomReport"]
