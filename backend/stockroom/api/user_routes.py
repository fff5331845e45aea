# backend/stockroom/api/user_routes.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from stockroom.api.deps_auth import (
    get_session_manager,
    raise_auth_error,
    require_permission,
)
from stockroom.schemas.auth import (
    Action,
    AuthSession,
    RegisterRequest,
    Resource,
    User,
    UserUpdate,
)
from stockroom.services.auth_service import SessionManager

router = APIRouter()

# ---------- USERS (admin writes, manager reads) ----------


@router.get("/users", response_model=List[User])
def list_users(
    manager: SessionManager = Depends(get_session_manager),
    _session: AuthSession = Depends(require_permission(Resource.USERS, Action.READ)),
):
    return manager.list_users()


@router.post("/users", response_model=User, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: RegisterRequest,
    manager: SessionManager = Depends(get_session_manager),
    _session: AuthSession = Depends(require_permission(Resource.USERS, Action.CREATE)),
):
    result = manager.register(payload.username, payload.email, payload.password, payload.role)
    if not result.ok:
        raise_auth_error(result)
    return result.value


@router.patch("/users/{user_id}", response_model=User)
def update_user(
    user_id: str,
    payload: UserUpdate,
    manager: SessionManager = Depends(get_session_manager),
    _session: AuthSession = Depends(require_permission(Resource.USERS, Action.UPDATE)),
):
    result = manager.update_user(
        user_id,
        email=payload.email,
        role=payload.role,
        password=payload.password,
    )
    if not result.ok:
        raise_auth_error(result)
    return result.value


@router.delete("/users/{user_id}")
def delete_user(
    user_id: str,
    manager: SessionManager = Depends(get_session_manager),
    session: AuthSession = Depends(require_permission(Resource.USERS, Action.DELETE)),
):
    if user_id == session.user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account",
        )

    result = manager.delete_user(user_id)
    if not result.ok:
        raise_auth_error(result)
    return {"ok": True}
