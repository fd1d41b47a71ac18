"""Users, password checks and client sessions."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from typing import Callable, Optional

import bcrypt

DEFAULT_USER_NAME = "default"
AUTH_CMD = "AUTH"
DEFAULT_COST = 10
_MAX_PASSWORD_BYTES = 72


class AuthError(Exception):
    """Authentication failed or the user is unknown."""


class SessionStatus(IntEnum):
    PENDING = 0
    ACTIVE = 1
    EXPIRED = 2


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class User:
    """A user and the bcrypt hashes of the passwords it accepts."""

    username: str
    passwords: list[str] = field(default_factory=list)
    is_password_enabled: bool = False

    def set_password(self, password: str) -> None:
        """Hash ``password`` and add it to the accepted passwords."""
        raw = password.encode("utf-8")
        if len(raw) > _MAX_PASSWORD_BYTES:
            raise ValueError("bcrypt: password length exceeds 72 bytes")
        hashed = bcrypt.hashpw(raw, bcrypt.gensalt(rounds=DEFAULT_COST))
        self.passwords.append(hashed.decode("ascii"))


class Users:
    """A thread-safe registry of users by name."""

    def __init__(self):
        self._store: dict[str, User] = {}
        self._lock = threading.RLock()

    def get(self, username: str) -> User:
        """Return the user called ``username``."""
        with self._lock:
            try:
                return self._store[username]
            except KeyError:
                raise AuthError("ERR user not found") from None

    def add(self, username: str) -> User:
        """Create a user called ``username``, replacing any existing one."""
        user = User(username)
        with self._lock:
            self._store[username] = user
        return user


USER_STORE = Users()


@dataclass(eq=False)
class Session:
    """A client's authentication state.

    ``auth_password`` is the server's configured password; when it is empty
    every session counts as authenticated.
    """

    users: Users = field(default_factory=lambda: USER_STORE, repr=False)
    auth_password: str = field(default="", repr=False)
    clock: Callable[[], datetime] = field(default=_utcnow, repr=False)
    user: Optional[User] = None
    status: SessionStatus = SessionStatus.PENDING
    id: int = field(init=False)
    created_at: datetime = field(init=False)
    last_accessed_at: datetime = field(init=False)

    def __post_init__(self):
        now = self.clock()
        self.id = int(now.timestamp())
        self.created_at = now
        self.last_accessed_at = now

    def is_active(self) -> bool:
        """Return whether the session is authenticated, noting the access."""
        if not self.auth_password and self.status != SessionStatus.ACTIVE:
            self.activate(self.user)
        active = self.status == SessionStatus.ACTIVE
        if active:
            self.last_accessed_at = self.clock()
        return active

    def activate(self, user: Optional[User]) -> None:
        """Mark the session authenticated as ``user``."""
        now = self.clock()
        self.user = user
        self.status = SessionStatus.ACTIVE
        self.created_at = now
        self.last_accessed_at = now

    def validate(self, username: str, password: str) -> None:
        """Authenticate as ``username``; raise AuthError if that fails."""
        user = self.users.get(username)
        if username == DEFAULT_USER_NAME and not user.passwords:
            self.activate(user)
            return
        raw = password.encode("utf-8")
        for hashed in user.passwords:
            try:
                matched = bcrypt.checkpw(raw, hashed.encode("ascii"))
            except ValueError:
                continue
            if matched:
                self.activate(user)
                return
        raise AuthError("WRONGPASS invalid username-password pair or user is disabled")

    def expire(self) -> None:
        """Mark the session expired."""
        self.status = SessionStatus.EXPIRED