# backend/stockroom/api/deps_auth.py

import secrets
from typing import Callable, NoReturn, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from stockroom.core.errors import AuthError, AuthResult
from stockroom.core.permissions import is_allowed
from stockroom.schemas.auth import Action, AuthSession, Resource
from stockroom.services.auth_service import SessionManager

# ✅ Swagger "Authorize" posts to the form endpoint; normal clients send Authorization: Bearer <token>
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)

ERROR_STATUS = {
    AuthError.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    AuthError.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    AuthError.USERNAME_TAKEN: status.HTTP_409_CONFLICT,
    AuthError.EMAIL_TAKEN: status.HTTP_409_CONFLICT,
}


def raise_auth_error(result: AuthResult, status_code: Optional[int] = None) -> NoReturn:
    raise HTTPException(
        status_code=status_code or ERROR_STATUS[result.error],
        detail=result.message,
    )


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_current_session(
    token: Optional[str] = Depends(oauth2_scheme),
    manager: SessionManager = Depends(get_session_manager),
) -> AuthSession:
    cred_exc = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise cred_exc

    # expired sessions are not refreshed; the client must log in again
    session = manager.current_session()
    if session is None or not manager.is_valid(session):
        raise cred_exc

    # bytes, so a non-ASCII header is a mismatch rather than a TypeError
    presented = token.encode("utf-8", "surrogateescape")
    if not secrets.compare_digest(session.token.encode("utf-8"), presented):
        raise cred_exc

    return session


def require_permission(resource: Resource, action: Action) -> Callable[..., AuthSession]:
    """
    Dependency factory gating a route on the permission table.

    Usage:
        session: AuthSession = Depends(require_permission(Resource.USERS, Action.DELETE))
    """
    def permission_checker(session: AuthSession = Depends(get_current_session)) -> AuthSession:
        if not is_allowed(session.user.role, resource, action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"You don't have permission to {action.value} {resource.value}",
            )
        return session

    return permission_checker
