"""
Account registration and credential checks.

Passwords are stored as Django password hashes; the plain text never
reaches the store.
"""
from typing import Optional

from django.contrib.auth.hashers import check_password, make_password

from core.entities import User
from core.exceptions import DuplicateError


def register_user(storage, data: dict, *, verified: Optional[bool] = None) -> User:
    """Create a user after the username/email pre-checks.

    The pre-checks give the friendly messages; the store still enforces
    uniqueness if two registrations race past them.
    """
    if storage.get_user_by_username(data['username']):
        raise DuplicateError('username', 'Username already taken')
    if storage.get_user_by_email(data['email']):
        raise DuplicateError('email', 'Email already registered')
    payload = dict(data)
    payload['password'] = make_password(data['password'])
    # Patients need no document review.
    payload['is_verified'] = verified if verified is not None else payload.get('user_type', 'patient') == 'patient'
    return storage.create_user(payload)


def authenticate(storage, username: str, password: str) -> Optional[User]:
    user = storage.get_user_by_username(username)
    if user is None or not check_password(password, user.password):
        return None
    return user
