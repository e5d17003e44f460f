"""Pydantic API request/response schemas for the super-admin endpoints."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    expires_at: datetime
    email: str


class VerifyOperatorResponse(BaseModel):
    valid: bool = True
    email: str


class ImpersonateRequest(BaseModel):
    """Start viewing a club (or one of its users) as if logged in."""
    club_id: Optional[str] = None
    user_id: Optional[str] = None
    reason: Optional[str] = None


class ImpersonateResponse(BaseModel):
    success: bool = True
    token: str
    expires_at: datetime


class EndImpersonationRequest(BaseModel):
    token: str


class SupportSessionSummary(BaseModel):
    """One live grant, as listed on the support dashboard."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    kind: str
    operator_id: Optional[str] = None
    target_club_id: Optional[str] = None
    target_user_id: Optional[str] = None
    reason: Optional[str] = None
    started_at: datetime
    expires_at: datetime
    was_used: bool
