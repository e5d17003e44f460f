"""Support session models."""
from support.models.domain import SessionKind, IssuedSession, GrantContext
