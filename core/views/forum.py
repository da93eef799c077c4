"""
Forum endpoints: categories, posts and comments.

Reads are public; creating anything needs a session, and the author is
always the session user rather than anything in the body.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core.permissions import IsSessionUser, ReadOnlyOrSessionUser
from core.presenters import present
from core.serializers.common import load, parse_id
from core.serializers.forum import (
    ForumCategoryCreateSerializer,
    ForumCommentCreateSerializer,
    ForumPostCreateSerializer,
    ForumPostListQuerySerializer,
)
from core.services.forum import post_detail


@api_view(['GET', 'POST'])
@permission_classes([ReadOnlyOrSessionUser])
def categories(request):
    storage = request.storage
    if request.method == 'GET':
        return Response(present(storage.list_forum_categories()))

    data = load(ForumCategoryCreateSerializer, request.data, 'Invalid category data')
    category = storage.create_forum_category(data)
    return Response(present(category), status=201)


@api_view(['GET'])
@permission_classes([AllowAny])
def category_by_slug(request, slug):
    category = request.storage.get_forum_category_by_slug(slug)
    if category is None:
        raise NotFound('Category not found')
    return Response(present(category))


@api_view(['GET', 'POST'])
@permission_classes([ReadOnlyOrSessionUser])
def posts(request):
    storage = request.storage
    if request.method == 'GET':
        q = load(ForumPostListQuerySerializer, request.query_params, 'Invalid category ID')
        return Response(present(storage.list_forum_posts(q.get('category_id'))))

    data = load(ForumPostCreateSerializer, request.data, 'Invalid post data')
    post = storage.create_forum_post({**data, 'user_id': request.user.id})
    return Response(present(post), status=201)


@api_view(['GET'])
@permission_classes([AllowAny])
def post_detail_view(request, post_id):
    """Post with author and category name plus its comments; counts a view."""
    pid = parse_id(post_id, 'post')
    detail = post_detail(request.storage, pid)
    if detail is None:
        raise NotFound('Post not found')

    post = present(detail['post'], author=detail['author'], categoryName=detail['category_name'])
    comments = [present(c['comment'], author=c['author']) for c in detail['comments']]
    return Response({'post': post, 'comments': comments})


@api_view(['GET'])
@permission_classes([AllowAny])
def post_comments(request, post_id):
    pid = parse_id(post_id, 'post')
    storage = request.storage
    if storage.get_forum_post(pid) is None:
        raise NotFound('Post not found')
    return Response(present(storage.list_forum_comments(pid)))


@api_view(['POST'])
@permission_classes([IsSessionUser])
def create_comment(request):
    data = load(ForumCommentCreateSerializer, request.data, 'Invalid comment data')
    storage = request.storage
    if storage.get_forum_post(data['post_id']) is None:
        raise NotFound('Post not found')
    comment = storage.create_forum_comment({**data, 'user_id': request.user.id})
    return Response(present(comment), status=201)
