from rest_framework import serializers


class PharmacyListQuerySerializer(serializers.Serializer):
    region = serializers.CharField(max_length=128, required=False)
    city = serializers.CharField(max_length=128, required=False)
    specialization = serializers.CharField(max_length=128, required=False)


class PharmacySerializer(serializers.Serializer):
    """Pharmacy listing payload, used by the demo seeding."""
    name = serializers.CharField(max_length=255)
    address = serializers.CharField(max_length=255)
    city = serializers.CharField(max_length=128)
    region = serializers.CharField(max_length=128)
    phone = serializers.CharField(max_length=32, required=False, allow_null=True)
    specializations = serializers.ListField(child=serializers.CharField(max_length=128), required=False)
    rating = serializers.IntegerField(min_value=0, max_value=5, required=False, allow_null=True)
    imageUrl = serializers.CharField(source='image_url', max_length=512, required=False, allow_null=True)
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False, allow_null=True)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False, allow_null=True)


class TestimonialSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    role = serializers.CharField(max_length=128)
    location = serializers.CharField(max_length=128)
    content = serializers.CharField()
    rating = serializers.IntegerField(min_value=1, max_value=5)
    imageUrl = serializers.CharField(source='image_url', max_length=512, required=False, allow_null=True)
