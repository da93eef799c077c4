"""
URL mappings for the Onconet API.

Paths mirror the ones the web client calls.  Trailing slashes are
omitted (``APPEND_SLASH`` is off).  Ids in paths are captured as
strings so that a non-numeric id is answered with a 400, not a 404.
"""
from django.urls import include, path

from .views import (
    auth,
    forum,
    geocode,
    health,
    medical_records,
    messages,
    pharmacies,
    second_opinion,
    sos_contracts,
    users,
)

urlpatterns = [
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),

    path('api/geocode', geocode.geocode, name='geocode'),

    path('api/auth/register', auth.register_view, name='auth-register'),
    path('api/auth/login', auth.login_view, name='auth-login'),
    path('api/auth/check', auth.check_view, name='auth-check'),
    path('api/auth/logout', auth.logout_view, name='auth-logout'),

    path('api/users/<str:user_id>', users.user_detail, name='user-detail'),
    path('api/doctors', users.list_doctors, name='doctors'),
    path('api/doctors/second-opinion', users.list_second_opinion_doctors, name='doctors-second-opinion'),
    path('api/pharmacy-users', users.list_pharmacy_users, name='pharmacy-users'),

    path('api/forum/categories', forum.categories, name='forum-categories'),
    path('api/forum/categories/<str:slug>', forum.category_by_slug, name='forum-category'),
    path('api/forum/posts', forum.posts, name='forum-posts'),
    path('api/forum/posts/<str:post_id>', forum.post_detail_view, name='forum-post'),
    path('api/forum/posts/<str:post_id>/comments', forum.post_comments, name='forum-post-comments'),
    path('api/forum/comments', forum.create_comment, name='forum-comments'),

    path('api/second-opinion/requests', second_opinion.requests_view, name='second-opinion-requests'),
    path('api/second-opinion/requests/<str:request_id>', second_opinion.request_detail,
         name='second-opinion-request'),
    path('api/second-opinion/requests/<str:request_id>/status', second_opinion.request_status,
         name='second-opinion-status'),

    path('api/messages', messages.messages, name='messages'),
    path('api/messages/conversation', messages.conversation, name='messages-conversation'),
    path('api/messages/<str:message_id>/read', messages.mark_read, name='message-read'),

    path('api/pharmacies', pharmacies.list_pharmacies, name='pharmacies'),
    path('api/pharmacies/<str:pharmacy_id>', pharmacies.pharmacy_detail, name='pharmacy-detail'),
    path('api/testimonials', pharmacies.list_testimonials, name='testimonials'),

    path('api/medical-records', medical_records.records, name='medical-records'),
    path('api/medical-records/<str:record_id>', medical_records.record_detail, name='medical-record'),

    path('api/sos-contracts', sos_contracts.contracts, name='sos-contracts'),
    path('api/sos-contracts/<str:contract_id>', sos_contracts.contract_detail, name='sos-contract'),
    path('api/sos-contracts/<str:contract_id>/activate', sos_contracts.activate, name='sos-contract-activate'),
    path('api/sos-contracts/<str:contract_id>/deactivate', sos_contracts.deactivate,
         name='sos-contract-deactivate'),
]
