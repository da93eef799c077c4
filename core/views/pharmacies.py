from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core.presenters import present
from core.serializers.common import load, parse_id
from core.serializers.pharmacies import PharmacyListQuerySerializer


@api_view(['GET'])
@permission_classes([AllowAny])
def list_pharmacies(request):
    """Pharmacy listings, optionally narrowed by region, city or specialization."""
    q = load(PharmacyListQuerySerializer, request.query_params, 'Invalid filters')
    return Response(present(request.storage.list_pharmacies(
        region=q.get('region'), city=q.get('city'), specialization=q.get('specialization'),
    )))


@api_view(['GET'])
@permission_classes([AllowAny])
def pharmacy_detail(request, pharmacy_id):
    pid = parse_id(pharmacy_id, 'pharmacy')
    pharmacy = request.storage.get_pharmacy(pid)
    if pharmacy is None:
        raise NotFound('Pharmacy not found')
    return Response(present(pharmacy))


@api_view(['GET'])
@permission_classes([AllowAny])
def list_testimonials(request):
    return Response(present(request.storage.list_testimonials()))
