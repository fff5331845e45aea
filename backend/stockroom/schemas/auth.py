"""
Authentication Schemas

Records that live in the key-value store (users, credentials, the active
session) plus the request/response bodies of the auth and user routes.
"""
from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator


class Role(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    VIEWER = "viewer"


class Resource(str, Enum):
    PRODUCTS = "products"
    SUPPLIERS = "suppliers"
    CATEGORIES = "categories"
    TRANSACTIONS = "transactions"
    ANALYTICS = "analytics"
    USERS = "users"


class Action(str, Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


# ---------- STORED RECORDS ----------

class User(BaseModel):
    """User profile record"""
    id: str
    username: str
    email: str
    role: Role
    created_at: datetime


class Credential(BaseModel):
    """Password record, keyed by username in the credentials map"""
    password_hash: str
    user_id: str


class AuthSession(BaseModel):
    """The single active session"""
    user: User
    token: str
    expires_at: datetime


# ---------- REQUESTS / RESPONSES ----------

class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: User


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)
    role: Role = Role.VIEWER

    @field_validator("username", "email")
    @classmethod
    def _strip_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class UserUpdate(BaseModel):
    """Username is immutable; an empty password keeps the current one"""
    email: Optional[str] = None
    role: Optional[Role] = None
    password: Optional[str] = None


class MeResponse(BaseModel):
    user: User
    expires_at: datetime
    permissions: Dict[Resource, Dict[Action, bool]]
