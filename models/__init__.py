# models/__init__.py

from .admin import Admin
from .section import Section
from .student import Student
from .attendance import AttendanceSnapshot

__all__ = [
    "Admin",
    "Section",
    "Student",
    "AttendanceSnapshot"
]
