from rest_framework import serializers

from core.entities import RECORD_TYPES


class MedicalRecordSerializer(serializers.Serializer):
    """Create payload; with ``partial=True`` it validates updates too."""
    patientId = serializers.IntegerField(source='patient_id', min_value=1)
    recordType = serializers.ChoiceField(source='record_type', choices=RECORD_TYPES)
    title = serializers.CharField(max_length=255)
    description = serializers.CharField()
    date = serializers.DateField()
    doctorName = serializers.CharField(source='doctor_name', max_length=255, required=False, allow_null=True, allow_blank=True)
    hospitalName = serializers.CharField(source='hospital_name', max_length=255, required=False, allow_null=True, allow_blank=True)
    medications = serializers.JSONField(required=False, allow_null=True)
    documents = serializers.ListField(child=serializers.CharField(max_length=1024), required=False)
    isPrivate = serializers.BooleanField(source='is_private', required=False)


class PatientScopeSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(source='patient_id', min_value=1)
