"""Support data access layer."""
from .support_session_repository import SupportSessionRepository

__all__ = ["SupportSessionRepository"]
