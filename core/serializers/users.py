from rest_framework import serializers


class UserProfileSerializer(serializers.Serializer):
    """Fields a user may set on their own profile.

    Username, password, account type and verification are not here, so
    a profile update can never touch them.
    """
    email = serializers.EmailField(max_length=254, required=False)
    fullName = serializers.CharField(source='full_name', max_length=255, required=False)
    birthDate = serializers.DateField(source='birth_date', required=False, allow_null=True)
    # professional
    specialization = serializers.CharField(max_length=255, required=False, allow_null=True, allow_blank=True)
    hospital = serializers.CharField(max_length=255, required=False, allow_null=True, allow_blank=True)
    licenseNumber = serializers.CharField(source='license_number', max_length=64, required=False, allow_null=True, allow_blank=True)
    studioAddress = serializers.CharField(source='studio_address', max_length=255, required=False, allow_null=True, allow_blank=True)
    bookingCalendar = serializers.JSONField(source='booking_calendar', required=False, allow_null=True)
    contacts = serializers.JSONField(required=False, allow_null=True)
    verificationDocument = serializers.CharField(source='verification_document', max_length=512, required=False, allow_null=True, allow_blank=True)
    availableForSecondOpinion = serializers.BooleanField(source='available_for_second_opinion', required=False)
    calendarSettings = serializers.JSONField(source='calendar_settings', required=False, allow_null=True)
    # pharmacy
    pharmacyName = serializers.CharField(source='pharmacy_name', max_length=255, required=False, allow_null=True, allow_blank=True)
    address = serializers.CharField(max_length=255, required=False, allow_null=True, allow_blank=True)
    pharmacyOffers = serializers.CharField(source='pharmacy_offers', required=False, allow_null=True, allow_blank=True)
    googleMapsLink = serializers.URLField(source='google_maps_link', max_length=512, required=False, allow_null=True, allow_blank=True)
    # common
    city = serializers.CharField(max_length=128, required=False, allow_null=True, allow_blank=True)
    region = serializers.CharField(max_length=128, required=False, allow_null=True, allow_blank=True)
    phone = serializers.CharField(max_length=32, required=False, allow_null=True, allow_blank=True)
    bio = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    profileImage = serializers.CharField(source='profile_image', max_length=512, required=False, allow_null=True, allow_blank=True)
