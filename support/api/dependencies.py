"""
Bearer-token dependency for super-admin endpoints.

Usage:
    @router.get("/protected")
    def protected_endpoint(operator_id: str = Depends(get_current_operator)):
        return {"operator": operator_id}
"""

from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session as DBSession

from database import get_db
from shared.utils.exceptions import TaekUpException
from support.services.operator_auth_service import OperatorAuthService

security = HTTPBearer(auto_error=False)


def get_current_operator(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: DBSession = Depends(get_db),
) -> str:
    """
    FastAPI dependency: validate the operator session token, return the operator id.
    Raises 401 if the token is missing, ended or expired.
    """
    if not credentials:
        raise HTTPException(status_code=401, detail="Unauthorized - No token provided")

    try:
        return OperatorAuthService(db).authenticate(credentials.credentials)
    except TaekUpException as e:
        raise e.to_http_exception()
