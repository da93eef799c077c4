from rest_framework import serializers

from core.services.second_opinion import STATUSES

from .common import OptionalIdField


class SecondOpinionCreateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(source='patient_id', min_value=1)
    doctorId = serializers.IntegerField(source='doctor_id', min_value=1)
    diagnosis = serializers.CharField()
    description = serializers.CharField()
    documentLinks = serializers.ListField(source='document_links', child=serializers.CharField(max_length=1024),
                                          required=False)


class SecondOpinionStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=STATUSES)


class SecondOpinionListQuerySerializer(serializers.Serializer):
    patientId = OptionalIdField(source='patient_id')
    doctorId = OptionalIdField(source='doctor_id')
