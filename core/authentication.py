"""
Session authentication backed by the entity store.

The session only carries ``user_id``; the user itself is resolved
through ``request.storage`` so authentication works the same with the
in-memory and the database backends.  Kept apart from the views so
that DRF can import it while settings are loading.
"""
from __future__ import annotations

from django.middleware.csrf import rotate_token
from rest_framework import authentication

SESSION_KEY = 'user_id'


class StorageSessionAuthentication(authentication.SessionAuthentication):
    """Resolve ``request.session['user_id']`` to a :class:`core.entities.User`.

    Unsafe methods still go through DRF's CSRF check.  A stale id (user
    gone from the store) is treated as anonymous rather than an error.
    """

    def authenticate(self, request):
        raw = request._request
        user_id = raw.session.get(SESSION_KEY)
        if not user_id:
            return None
        storage = getattr(raw, 'storage', None)
        if storage is None:
            return None
        user = storage.get_user(user_id)
        if user is None:
            return None
        self.enforce_csrf(request)
        return (user, None)

    def authenticate_header(self, request):
        # Makes DRF answer 401 (not 403) when credentials are missing.
        return 'Session'


def login(request, user) -> None:
    """Start a session for ``user``; rotates the session key and the CSRF token."""
    session = request.session
    session.cycle_key()
    session[SESSION_KEY] = user.id
    rotate_token(request)


def logout(request) -> None:
    request.session.flush()
