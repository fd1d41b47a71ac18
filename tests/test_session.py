from datetime import datetime, timedelta, timezone

import bcrypt
import pytest

from dicekv.session import (
    DEFAULT_USER_NAME,
    AuthError,
    Session,
    SessionStatus,
    User,
    Users,
)


class _Clock:
    def __init__(self):
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def users():
    return Users()


def test_get_unknown_user(users):
    with pytest.raises(AuthError, match="ERR user not found"):
        users.get("alice")


def test_add_then_get(users):
    user = users.add("alice")
    assert users.get("alice") is user
    assert user.username == "alice"
    assert user.passwords == []


def test_set_password_stores_hash():
    password = "password"
    user = User("alice")
    user.set_password(password)
    assert len(user.passwords) == 1
    assert user.passwords[0] != password
    assert bcrypt.checkpw(password.encode(), user.passwords[0].encode())


def test_set_password_too_long():
    with pytest.raises(ValueError):
        User("alice").set_password("password" * 10)


def test_new_session_is_pending(users):
    session = Session(users=users, clock=_Clock())
    assert session.status == SessionStatus.PENDING
    assert session.user is None
    assert session.id == int(session.created_at.timestamp())


def test_is_active_without_configured_password(users):
    session = Session(users=users, clock=_Clock())
    before = session.last_accessed_at
    assert session.is_active() is True
    assert session.status == SessionStatus.ACTIVE
    assert session.last_accessed_at > before


def test_is_active_with_configured_password(users):
    password = "password"
    session = Session(users=users, auth_password=password, clock=_Clock())
    assert session.is_active() is False
    assert session.status == SessionStatus.PENDING


def test_validate_default_user_without_passwords(users):
    default = users.add(DEFAULT_USER_NAME)
    password = "password"
    session = Session(users=users, auth_password=password, clock=_Clock())
    session.validate(DEFAULT_USER_NAME, "secret")
    assert session.status == SessionStatus.ACTIVE
    assert session.user is default
    assert session.is_active() is True


def test_validate_correct_password(users):
    password = "password"
    user = users.add(DEFAULT_USER_NAME)
    user.set_password(password)
    session = Session(users=users, auth_password=password, clock=_Clock())
    session.validate(DEFAULT_USER_NAME, password)
    assert session.status == SessionStatus.ACTIVE
    assert session.user is user


def test_validate_wrong_password(users):
    password = "password"
    users.add(DEFAULT_USER_NAME).set_password(password)
    session = Session(users=users, auth_password=password, clock=_Clock())
    with pytest.raises(AuthError, match="WRONGPASS"):
        session.validate(DEFAULT_USER_NAME, "secret")
    assert session.status == SessionStatus.PENDING


def test_validate_other_user_without_passwords_fails(users):
    users.add("alice")
    session = Session(users=users, clock=_Clock())
    with pytest.raises(AuthError, match="WRONGPASS"):
        session.validate("alice", "secret")


def test_validate_unknown_user(users):
    session = Session(users=users, clock=_Clock())
    with pytest.raises(AuthError, match="user not found"):
        session.validate("alice", "secret")


def test_expire(users):
    password = "password"
    session = Session(users=users, auth_password=password, clock=_Clock())
    session.activate(users.add("alice"))
    session.expire()
    assert session.status == SessionStatus.EXPIRED
    assert session.is_active() is False