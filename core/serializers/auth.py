from rest_framework import serializers

from core.entities import USER_TYPES

from .users import UserProfileSerializer


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField()

    def validate_username(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Username is required')
        return v


class RegisterSerializer(UserProfileSerializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(min_length=6, max_length=128, write_only=True)
    email = serializers.EmailField(max_length=254)
    fullName = serializers.CharField(source='full_name', max_length=255)
    userType = serializers.ChoiceField(source='user_type', choices=USER_TYPES, default='patient')

    def validate_username(self, v):
        v = (v or '').strip()
        if len(v) < 3:
            raise serializers.ValidationError('Username must be at least 3 characters')
        return v
