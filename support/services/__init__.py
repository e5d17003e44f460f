"""Support services - session state machine and operator login."""
from .support_session_service import SupportSessionService
from .operator_auth_service import OperatorAuthService

__all__ = [
    "SupportSessionService",
    "OperatorAuthService",
]
