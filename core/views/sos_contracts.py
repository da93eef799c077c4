"""
SOS (emergency access) contracts.

Contracts are created inactive.  Activation and deactivation are plain
state sets: calling either twice leaves the contract in the same state.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core.presenters import present
from core.serializers.common import load, parse_id
from core.serializers.sos_contracts import SosContractCreateSerializer, SosContractListQuerySerializer
from core.services.audit import log_action
from core.services.sos import create_contract

NOT_FOUND = 'SOS contract not found'


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def contracts(request):
    storage = request.storage
    if request.method == 'GET':
        q = load(SosContractListQuerySerializer, request.query_params, 'Patient ID or Doctor ID required')
        patient_id = q.get('patient_id')
        if patient_id:
            items = storage.list_sos_contracts(patient_id=patient_id)
        else:
            items = storage.list_sos_contracts(doctor_id=q['doctor_id'])
        return Response(present(items))

    data = load(SosContractCreateSerializer, request.data, 'Invalid SOS contract data')
    return Response(present(create_contract(storage, data)), status=201)


@api_view(['GET'])
@permission_classes([AllowAny])
def contract_detail(request, contract_id):
    cid = parse_id(contract_id, 'contract')
    contract = request.storage.get_sos_contract(cid)
    if contract is None:
        raise NotFound(NOT_FOUND)
    return Response(present(contract))


def _set_active(request, contract_id, active: bool):
    cid = parse_id(contract_id, 'contract')
    storage = request.storage
    if active:
        contract = storage.activate_sos_contract(cid)
    else:
        contract = storage.deactivate_sos_contract(cid)
    if contract is None:
        raise NotFound(NOT_FOUND)
    log_action(storage, user=request.user, action='activate' if active else 'deactivate',
               object_type='sos_contract', object_id=cid,
               detail={'patientId': contract.patient_id, 'doctorId': contract.doctor_id},
               ip_address=request.META.get('REMOTE_ADDR'))
    return Response(present(contract))


@api_view(['PATCH'])
@permission_classes([AllowAny])
def activate(request, contract_id):
    return _set_active(request, contract_id, True)


@api_view(['PATCH'])
@permission_classes([AllowAny])
def deactivate(request, contract_id):
    return _set_active(request, contract_id, False)
