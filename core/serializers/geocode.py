from rest_framework import serializers


class GeocodeSerializer(serializers.Serializer):
    address = serializers.CharField(max_length=512)

    def validate_address(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Address is required')
        return v
