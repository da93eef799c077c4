from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core.serializers.common import load
from core.serializers.geocode import GeocodeSerializer
from core.services.geocoding import geocode_address


@api_view(['POST'])
@permission_classes([AllowAny])
def geocode(request):
    """Forward an address to the geocoder; 404 when it has no match."""
    data = load(GeocodeSerializer, request.data, 'Address is required')
    result = geocode_address(data['address'])
    if result is None:
        raise NotFound('Address not found')
    return Response(result.as_dict())
