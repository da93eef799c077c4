"""
User profiles and directory listings.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotAuthenticated, NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core.entities import UserUpdate
from core.permissions import ensure_self
from core.presenters import present
from core.serializers.common import load, parse_id
from core.serializers.users import UserProfileSerializer


@api_view(['GET', 'PUT'])
@permission_classes([AllowAny])
def user_detail(request, user_id):
    uid = parse_id(user_id, 'user')
    storage = request.storage

    if request.method == 'GET':
        user = storage.get_user(uid)
        if user is None:
            raise NotFound('User not found')
        return Response(present(user))

    if not request.user:
        raise NotAuthenticated('Authentication required')
    ensure_self(request, uid)
    data = load(UserProfileSerializer, request.data, 'Invalid user data', partial=True)
    user = storage.update_user(uid, UserUpdate.from_data(data))
    if user is None:
        raise NotFound('User not found')
    return Response(present(user))


@api_view(['GET'])
@permission_classes([AllowAny])
def list_doctors(request):
    return Response(present(request.storage.list_doctors()))


@api_view(['GET'])
@permission_classes([AllowAny])
def list_second_opinion_doctors(request):
    """Professionals who opted in to second-opinion requests."""
    doctors = [d for d in request.storage.list_doctors() if d.available_for_second_opinion]
    return Response(present(doctors))


@api_view(['GET'])
@permission_classes([AllowAny])
def list_pharmacy_users(request):
    return Response(present(request.storage.list_pharmacy_users()))
