"""
Patient medical records.

Every read, update and delete is scoped to ``(id, patientId)``; a record
belonging to someone else is indistinguishable from a missing one.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core.entities import MedicalRecordUpdate
from core.presenters import present
from core.serializers.common import load, parse_id
from core.serializers.medical_records import MedicalRecordSerializer, PatientScopeSerializer
from core.services.audit import log_action

NOT_FOUND = 'Medical record not found'
SCOPE_REQUIRED = 'Invalid record ID or patient ID required'


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def records(request):
    storage = request.storage
    if request.method == 'GET':
        q = load(PatientScopeSerializer, request.query_params, 'Patient ID required')
        return Response(present(storage.list_medical_records(q['patient_id'])))

    data = load(MedicalRecordSerializer, request.data, 'Invalid medical record data')
    return Response(present(storage.create_medical_record(data)), status=201)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([AllowAny])
def record_detail(request, record_id):
    rid = parse_id(record_id, 'record')
    storage = request.storage

    if request.method == 'PUT':
        patient_id = load(PatientScopeSerializer, request.data, SCOPE_REQUIRED)['patient_id']
        data = load(MedicalRecordSerializer, request.data, 'Invalid medical record data', partial=True)
        data.pop('patient_id', None)
        record = storage.update_medical_record(rid, patient_id, MedicalRecordUpdate.from_data(data))
        if record is None:
            raise NotFound(NOT_FOUND)
        return Response(present(record))

    patient_id = load(PatientScopeSerializer, request.query_params, SCOPE_REQUIRED)['patient_id']

    if request.method == 'DELETE':
        if not storage.delete_medical_record(rid, patient_id):
            raise NotFound(NOT_FOUND)
        log_action(storage, user=request.user, action='delete', object_type='medical_record', object_id=rid,
                   detail={'patientId': patient_id}, ip_address=request.META.get('REMOTE_ADDR'))
        return Response({'success': True})

    record = storage.get_medical_record(rid, patient_id)
    if record is None:
        raise NotFound(NOT_FOUND)
    return Response(present(record))
