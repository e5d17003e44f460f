"""Domain models for super-admin support sessions."""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel


class SessionKind(str, Enum):
    """Both kinds share one lifecycle; they differ in TTL and in who presents the token."""
    IMPERSONATION = "impersonation"
    OPERATOR = "operator"


class IssuedSession(BaseModel):
    """What the caller gets back when a session is minted."""
    token: str
    expires_at: datetime
    session_id: str
    kind: SessionKind


class GrantContext(BaseModel):
    """
    Context returned by a successful verification.

    Carries enough of the target club to render the impersonated view without
    another round trip, including the cached onboarding wizard snapshot.
    """
    session_id: str
    kind: SessionKind
    club_id: Optional[str] = None
    club_name: Optional[str] = None
    owner_email: Optional[str] = None
    owner_name: Optional[str] = None
    target_user_id: Optional[str] = None
    operator_id: Optional[str] = None
    expires_at: datetime
    wizard_data: Optional[Dict[str, Any]] = None
