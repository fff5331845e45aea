"""
Authentication Service

The Session Manager: login/logout, registration, session validity, demo
identity bootstrap and the user administration rules that keep users and
credentials in step.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import TypeAdapter, ValidationError

from stockroom.core.config import Settings, get_settings
from stockroom.core.errors import AuthError, AuthResult
from stockroom.core.security import (
    generate_token,
    hash_password,
    session_expiry,
    verify_password,
)
from stockroom.core.storage import SqlKeyValueStore
from stockroom.schemas.auth import AuthSession, Credential, Role, User

logger = logging.getLogger(__name__)

_users_adapter = TypeAdapter(List[User])
_credentials_adapter = TypeAdapter(Dict[str, Credential])

# Change these creds anytime (demo defaults)
DEMO_USERS = [
    {"username": "admin", "email": "admin@inventory.com", "role": Role.ADMIN, "password": "admin123"},
    {"username": "manager", "email": "manager@inventory.com", "role": Role.MANAGER, "password": "manager123"},
    {"username": "viewer", "email": "viewer@inventory.com", "role": Role.VIEWER, "password": "viewer123"},
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_user_id() -> str:
    return uuid.uuid4().hex


class SessionManager:
    """
    Owns the active session and is the only writer of users and credentials.

    Args:
        store: persistence surface (get/set/set_many/remove by key)
        settings: storage keys, session lifetime, token size
        clock: returns the current UTC time; injectable for tests
    """

    def __init__(
        self,
        store: SqlKeyValueStore,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._store = store
        self._settings = settings or get_settings()
        self._clock = clock

    # ---------- STORAGE HELPERS ----------

    def _load_users(self) -> List[User]:
        raw = self._store.get(self._settings.USERS_KEY, [])
        try:
            return _users_adapter.validate_python(raw)
        except ValidationError:
            logger.warning("Stored users collection is malformed; treating as empty")
            return []

    def _load_credentials(self) -> Dict[str, Credential]:
        raw = self._store.get(self._settings.CREDENTIALS_KEY, {})
        try:
            return _credentials_adapter.validate_python(raw)
        except ValidationError:
            logger.warning("Stored credentials map is malformed; treating as empty")
            return {}

    def _save(
        self,
        users: Optional[List[User]] = None,
        credentials: Optional[Dict[str, Credential]] = None,
    ) -> None:
        items: Dict[str, Any] = {}
        if users is not None:
            items[self._settings.USERS_KEY] = _users_adapter.dump_python(users, mode="json")
        if credentials is not None:
            items[self._settings.CREDENTIALS_KEY] = _credentials_adapter.dump_python(credentials, mode="json")
        self._store.set_many(items)

    # ---------- BOOTSTRAP ----------

    def seed_demo_users(self) -> bool:
        """Create the demo identities if no user exists yet. Returns True if it seeded."""
        if self._load_users():
            return False

        users: List[User] = []
        credentials: Dict[str, Credential] = {}
        now = self._clock()

        for s in DEMO_USERS:
            user = User(
                id=_new_user_id(),
                username=s["username"],
                email=s["email"],
                role=s["role"],
                created_at=now,
            )
            users.append(user)
            credentials[user.username] = Credential(
                password_hash=hash_password(s["password"]),
                user_id=user.id,
            )

        self._save(users=users, credentials=credentials)
        logger.info("Seeded demo users: %s", ", ".join(u.username for u in users))
        return True

    # ---------- SESSIONS ----------

    def login(self, username: str, password: str) -> AuthResult[AuthSession]:
        username = (username or "").strip()

        credential = self._load_credentials().get(username)
        if credential is None or not verify_password(password, credential.password_hash):
            logger.warning("Failed login for %r", username)
            return AuthResult.failure(AuthError.INVALID_CREDENTIALS)

        user = next((u for u in self._load_users() if u.id == credential.user_id), None)
        if user is None:
            logger.warning("Credential for %r references missing user %s", username, credential.user_id)
            return AuthResult.failure(AuthError.USER_NOT_FOUND)

        session = AuthSession(
            user=user,
            token=generate_token(self._settings.TOKEN_BYTES),
            expires_at=session_expiry(self._clock(), self._settings.SESSION_TTL_HOURS),
        )
        self._store.set(self._settings.SESSION_KEY, session.model_dump(mode="json"))

        logger.info("User %r logged in (role=%s)", user.username, user.role.value)
        return AuthResult.success(session)

    def logout(self) -> None:
        self._store.remove(self._settings.SESSION_KEY)
        logger.info("Session cleared")

    def current_session(self) -> Optional[AuthSession]:
        """The stored session, expired or not. Never refreshed here."""
        raw = self._store.get(self._settings.SESSION_KEY, None)
        if raw is None:
            return None
        try:
            return AuthSession.model_validate(raw)
        except ValidationError:
            logger.warning("Stored session is malformed; ignoring it")
            return None

    def is_valid(self, session: AuthSession) -> bool:
        return session.expires_at > self._clock()

    def is_authenticated(self) -> bool:
        session = self.current_session()
        return session is not None and self.is_valid(session)

    def current_user(self) -> Optional[User]:
        session = self.current_session()
        if session is None or not self.is_valid(session):
            return None
        return session.user

    # ---------- REGISTRATION ----------

    def register(
        self,
        username: str,
        email: str,
        password: str,
        role: Union[Role, str],
    ) -> AuthResult[User]:
        """
        Create a user and its credential. A blank username or a role outside
        ``Role`` is a caller bug and raises ValueError before anything is read
        or written; request schemas reject both first.
        """
        username = (username or "").strip()
        email = (email or "").strip()
        if not username:
            raise ValueError("username must not be blank")
        role = Role(role)

        users = self._load_users()
        credentials = self._load_credentials()

        if username in credentials:
            return AuthResult.failure(AuthError.USERNAME_TAKEN)

        if any(u.email.lower() == email.lower() for u in users):
            return AuthResult.failure(AuthError.EMAIL_TAKEN)

        user = User(
            id=_new_user_id(),
            username=username,
            email=email,
            role=role,
            created_at=self._clock(),
        )
        users.append(user)
        credentials[username] = Credential(password_hash=hash_password(password), user_id=user.id)
        self._save(users=users, credentials=credentials)

        logger.info("Registered user %r (role=%s)", username, role.value)
        return AuthResult.success(user)

    # ---------- USER ADMINISTRATION ----------

    def list_users(self) -> List[User]:
        return self._load_users()

    def get_user(self, user_id: str) -> Optional[User]:
        return next((u for u in self._load_users() if u.id == user_id), None)

    def update_user(
        self,
        user_id: str,
        email: Optional[str] = None,
        role: Optional[Union[Role, str]] = None,
        password: Optional[str] = None,
    ) -> AuthResult[User]:
        """
        Change email, role and/or password. Id and username never change;
        an empty or missing password leaves the credential untouched.
        A role outside ``Role`` raises ValueError, as in register().
        """
        users = self._load_users()
        idx = next((i for i, u in enumerate(users) if u.id == user_id), None)
        if idx is None:
            return AuthResult.failure(AuthError.USER_NOT_FOUND)

        current = users[idx]
        changes: Dict[str, Any] = {}

        if email is not None:
            email = email.strip()
            if any(u.id != user_id and u.email.lower() == email.lower() for u in users):
                return AuthResult.failure(AuthError.EMAIL_TAKEN)
            changes["email"] = email

        if role is not None:
            changes["role"] = Role(role)

        updated = current.model_copy(update=changes)
        users[idx] = updated

        credentials = None
        if password:
            credentials = self._load_credentials()
            credentials[updated.username] = Credential(
                password_hash=hash_password(password),
                user_id=updated.id,
            )

        self._save(users=users, credentials=credentials)

        logger.info(
            "Updated user %r (%s)",
            updated.username,
            ", ".join(sorted(changes) + (["password"] if password else [])) or "no changes",
        )
        return AuthResult.success(updated)

    def delete_user(self, user_id: str) -> AuthResult[User]:
        """Remove the user and its credential together."""
        users = self._load_users()
        target = next((u for u in users if u.id == user_id), None)
        if target is None:
            return AuthResult.failure(AuthError.USER_NOT_FOUND)

        credentials = self._load_credentials()
        credentials.pop(target.username, None)

        self._save(
            users=[u for u in users if u.id != user_id],
            credentials=credentials,
        )

        logger.info("Deleted user %r", target.username)
        return AuthResult.success(target)
