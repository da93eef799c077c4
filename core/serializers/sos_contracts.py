from rest_framework import serializers

from core.entities import ACCESS_LEVELS, CONTRACT_TYPES, EMERGENCY_TYPES

from .common import OptionalIdField


class SosContractCreateSerializer(serializers.Serializer):
    # No isActive: contracts start inactive.
    patientId = serializers.IntegerField(source='patient_id', min_value=1)
    doctorId = serializers.IntegerField(source='doctor_id', min_value=1)
    contractType = serializers.ChoiceField(source='contract_type', choices=CONTRACT_TYPES, required=False)
    emergencyType = serializers.ChoiceField(source='emergency_type', choices=EMERGENCY_TYPES)
    accessLevel = serializers.ChoiceField(source='access_level', choices=ACCESS_LEVELS, required=False)
    sharedRecordIds = serializers.ListField(source='shared_record_ids', child=serializers.IntegerField(min_value=1),
                                            required=False)
    expiresAt = serializers.DateTimeField(source='expires_at', required=False, allow_null=True)
    consentGiven = serializers.BooleanField(source='consent_given', required=False)
    emergencyNotes = serializers.CharField(source='emergency_notes', required=False, allow_null=True, allow_blank=True)


class SosContractListQuerySerializer(serializers.Serializer):
    patientId = OptionalIdField(source='patient_id')
    doctorId = OptionalIdField(source='doctor_id')

    def validate(self, attrs):
        if not attrs.get('patient_id') and not attrs.get('doctor_id'):
            raise serializers.ValidationError('Patient ID or Doctor ID required')
        return attrs
