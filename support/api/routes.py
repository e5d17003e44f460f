"""Super-admin API endpoints - operator login and club impersonation."""
from typing import List

from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session as DBSession

from database import get_db
from shared.utils.exceptions import TaekUpException
from support.api.dependencies import get_current_operator, security
from support.models.domain import GrantContext, SessionKind
from support.models.schemas import (
    EndImpersonationRequest,
    ImpersonateRequest,
    ImpersonateResponse,
    LoginRequest,
    LoginResponse,
    SupportSessionSummary,
    VerifyOperatorResponse,
)
from support.services.operator_auth_service import OperatorAuthService
from support.services.support_session_service import SupportSessionService

router = APIRouter(prefix="/super-admin", tags=["super-admin"])


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, request: Request, db: DBSession = Depends(get_db)):
    """Open an operator session for the configured super-admin."""
    try:
        issued = OperatorAuthService(db).login(
            body.email,
            body.password,
            ip=_client_ip(request),
            user_agent=request.headers.get("user-agent", "unknown"),
        )
    except TaekUpException as e:
        raise e.to_http_exception()
    return LoginResponse(token=issued.token, expires_at=issued.expires_at, email=body.email.strip().lower())


@router.post("/logout")
def logout(
    operator_id: str = Depends(get_current_operator),
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: DBSession = Depends(get_db),
):
    OperatorAuthService(db).logout(credentials.credentials)
    return {"success": True}


@router.get("/verify", response_model=VerifyOperatorResponse)
def verify_operator(operator_id: str = Depends(get_current_operator)):
    return VerifyOperatorResponse(email=operator_id)


@router.post("/impersonate", response_model=ImpersonateResponse)
def impersonate(
    body: ImpersonateRequest,
    request: Request,
    operator_id: str = Depends(get_current_operator),
    db: DBSession = Depends(get_db),
):
    """Mint a short-lived impersonation token for a club or user."""
    try:
        issued = SupportSessionService(db).create_session(
            operator_id=operator_id,
            target_club_id=body.club_id,
            target_user_id=body.user_id,
            reason=body.reason,
            kind=SessionKind.IMPERSONATION,
            ip=_client_ip(request),
            user_agent=request.headers.get("user-agent", "unknown"),
        )
    except TaekUpException as e:
        raise e.to_http_exception()
    return ImpersonateResponse(token=issued.token, expires_at=issued.expires_at)


@router.post("/impersonate/end")
def end_impersonation(
    body: EndImpersonationRequest,
    operator_id: str = Depends(get_current_operator),
    db: DBSession = Depends(get_db),
):
    """End an impersonation session. Safe to call more than once."""
    try:
        SupportSessionService(db).end_session(body.token)
    except TaekUpException as e:
        raise e.to_http_exception()
    return {"success": True}


@router.get("/impersonate/verify/{token}", response_model=GrantContext)
def verify_impersonation(token: str, db: DBSession = Depends(get_db)):
    """
    Called by the club app when opened with an impersonation token.
    A 401 tells the client to fall back to its normal login.
    """
    try:
        return SupportSessionService(db).verify_session(token, kind=SessionKind.IMPERSONATION)
    except TaekUpException as e:
        raise e.to_http_exception()


@router.get("/clubs/{club_id}/support-sessions", response_model=List[SupportSessionSummary])
def list_club_sessions(
    club_id: str,
    operator_id: str = Depends(get_current_operator),
    db: DBSession = Depends(get_db),
):
    """Live impersonation grants for one club."""
    return SupportSessionService(db).list_active_sessions(club_id)
