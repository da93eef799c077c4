"""
Session login, registration and logout.

The session cookie carries only the user id; see
:mod:`core.authentication` for how it is resolved on later requests.
Register, login and check also hand out the ``csrftoken`` cookie that
session-authenticated writes must echo back in ``X-CSRFToken``.
"""
from __future__ import annotations

from django.middleware.csrf import get_token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import AuthenticationFailed, NotAuthenticated
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core import authentication
from core.presenters import present
from core.serializers.auth import LoginSerializer, RegisterSerializer
from core.serializers.common import load
from core.services import accounts
from core.services.audit import log_action


@api_view(['POST'])
@permission_classes([AllowAny])
def register_view(request):
    """Create an account and log it in straight away."""
    data = load(RegisterSerializer, request.data, 'Invalid user data')
    user = accounts.register_user(request.storage, data)
    authentication.login(request, user)

    log_action(request.storage, user=user, action='register', object_type='user', object_id=user.id,
               detail={'userType': user.user_type}, ip_address=request.META.get('REMOTE_ADDR'))
    return Response(present(user), status=201)


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """
    Username/password login.  Missing fields are a 400, a wrong
    password or unknown username a 401 with the same message.
    """
    data = load(LoginSerializer, request.data, 'Username and password required')
    username = data['username']
    storage = request.storage
    ip = request.META.get('REMOTE_ADDR')

    user = accounts.authenticate(storage, username, data['password'])
    if user is None:
        log_action(storage, user=None, action='login', object_type='user',
                   detail={'result': 'fail', 'username': username}, ip_address=ip)
        raise AuthenticationFailed('Invalid credentials')

    authentication.login(request, user)
    log_action(storage, user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok'}, ip_address=ip)
    return Response(present(user), status=200)


@api_view(['GET'])
@permission_classes([AllowAny])
def check_view(request):
    """Return the session user, or 401 when there is none."""
    get_token(request)
    if not request.user:
        raise NotAuthenticated('Not authenticated')
    return Response(present(request.user))


@api_view(['POST'])
@permission_classes([AllowAny])
def logout_view(request):
    authentication.logout(request)
    return Response({'message': 'Logged out successfully'})
