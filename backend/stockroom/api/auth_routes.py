# backend/stockroom/api/auth_routes.py

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from stockroom.api.deps_auth import (
    get_current_session,
    get_session_manager,
    raise_auth_error,
)
from stockroom.core.permissions import permissions_for
from stockroom.schemas.auth import (
    AuthSession,
    LoginRequest,
    LoginResponse,
    MeResponse,
)
from stockroom.services.auth_service import SessionManager

router = APIRouter()


def _login(manager: SessionManager, username: str, password: str) -> LoginResponse:
    result = manager.login(username, password)
    if not result.ok:
        # orphaned credentials are reported to the login form too, not as a 404
        raise_auth_error(result, status.HTTP_401_UNAUTHORIZED)

    session = result.value
    return LoginResponse(
        access_token=session.token,
        expires_at=session.expires_at,
        user=session.user,
    )


# JSON login (frontend)
@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, manager: SessionManager = Depends(get_session_manager)):
    return _login(manager, payload.username, payload.password)


# OAuth2 form endpoint (Swagger Authorize uses this)
@router.post("/token", response_model=LoginResponse)
def token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    manager: SessionManager = Depends(get_session_manager),
):
    return _login(manager, form_data.username or "", form_data.password or "")


# only the holder of the active session may end it
@router.post("/logout")
def logout(
    _session: AuthSession = Depends(get_current_session),
    manager: SessionManager = Depends(get_session_manager),
):
    manager.logout()
    return {"ok": True}


@router.get("/me", response_model=MeResponse)
def me(session: AuthSession = Depends(get_current_session)):
    return MeResponse(
        user=session.user,
        expires_at=session.expires_at,
        permissions=permissions_for(session.user.role),
    )
