"""Gamification data access layer."""
from .student_repository import StudentRepository

__all__ = ["StudentRepository"]
