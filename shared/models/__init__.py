"""Shared ORM entities."""
from shared.models.entities import Base, Club, Student, SupportSession
