"""
Direct messages between two users.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core.presenters import present
from core.serializers.common import load, parse_id
from core.serializers.messages import (
    ConversationQuerySerializer,
    MessageCreateSerializer,
    MessageListQuerySerializer,
)


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def messages(request):
    """GET: messages received by ``userId``.  POST: send a message."""
    storage = request.storage
    if request.method == 'GET':
        q = load(MessageListQuerySerializer, request.query_params, 'User ID required')
        return Response(present(storage.list_messages(q['user_id'])))

    data = load(MessageCreateSerializer, request.data, 'Invalid message data')
    return Response(present(storage.create_message(data)), status=201)


@api_view(['GET'])
@permission_classes([AllowAny])
def conversation(request):
    q = load(ConversationQuerySerializer, request.query_params, 'Both user IDs required')
    return Response(present(request.storage.get_conversation(q['user1_id'], q['user2_id'])))


@api_view(['PATCH'])
@permission_classes([AllowAny])
def mark_read(request, message_id):
    mid = parse_id(message_id, 'message')
    if request.storage.mark_message_as_read(mid) is None:
        raise NotFound('Message not found')
    return Response({'success': True})
