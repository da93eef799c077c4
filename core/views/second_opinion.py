from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core.presenters import present
from core.serializers.common import load, parse_id
from core.serializers.second_opinion import (
    SecondOpinionCreateSerializer,
    SecondOpinionListQuerySerializer,
    SecondOpinionStatusSerializer,
)
from core.services.second_opinion import change_status


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def requests_view(request):
    storage = request.storage
    if request.method == 'GET':
        q = load(SecondOpinionListQuerySerializer, request.query_params, 'Invalid patient or doctor ID')
        patient_id = q.get('patient_id')
        # patientId wins when both are given
        doctor_id = None if patient_id else q.get('doctor_id')
        return Response(present(storage.list_second_opinion_requests(patient_id=patient_id, doctor_id=doctor_id)))

    data = load(SecondOpinionCreateSerializer, request.data, 'Invalid request data')
    created = storage.create_second_opinion_request(data)
    return Response(present(created), status=201)


@api_view(['GET'])
@permission_classes([AllowAny])
def request_detail(request, request_id):
    """Request with its patient and doctor profiles."""
    rid = parse_id(request_id, 'request')
    storage = request.storage
    item = storage.get_second_opinion_request(rid)
    if item is None:
        raise NotFound('Request not found')
    return Response(present(item, patient=storage.get_user(item.patient_id), doctor=storage.get_user(item.doctor_id)))


@api_view(['PATCH'])
@permission_classes([AllowAny])
def request_status(request, request_id):
    rid = parse_id(request_id, 'request')
    data = load(SecondOpinionStatusSerializer, request.data, 'Invalid request ID or status')
    updated = change_status(request.storage, rid, data['status'])
    return Response(present(updated))
