"""
Database tables for the Onconet backend.

One table per entity in :mod:`core.entities`.  These models are only
touched by :class:`core.storage.database.DatabaseStorage`; handlers see
the entity dataclasses, never these rows.  Array-valued columns are
stored as JSON lists so the same schema works on SQLite and PostgreSQL.
"""
from __future__ import annotations

from django.db import models


class User(models.Model):
    """A platform account: patient, professional or pharmacy.

    Type-specific profile fields coexist on one row and stay null for the
    other account types.  ``password`` holds a Django password hash.
    """
    USER_TYPE_CHOICES = [
        ('patient', 'Patient'),
        ('professional', 'Professional'),
        ('pharmacy', 'Pharmacy'),
    ]
    username = models.CharField(max_length=150, unique=True)
    password = models.CharField(max_length=256)
    email = models.EmailField(max_length=254, unique=True)
    full_name = models.CharField(max_length=255)
    user_type = models.CharField(max_length=16, choices=USER_TYPE_CHOICES, default='patient', db_index=True)

    # Patient fields
    birth_date = models.DateField(null=True, blank=True)

    # Professional fields
    specialization = models.CharField(max_length=255, null=True, blank=True)
    hospital = models.CharField(max_length=255, null=True, blank=True)
    license_number = models.CharField(max_length=64, null=True, blank=True)
    studio_address = models.CharField(max_length=255, null=True, blank=True)
    booking_calendar = models.JSONField(null=True, blank=True)
    contacts = models.JSONField(null=True, blank=True)
    reviews = models.JSONField(default=list, blank=True)
    verification_document = models.CharField(max_length=512, null=True, blank=True)
    available_for_second_opinion = models.BooleanField(default=False)
    calendar_settings = models.JSONField(null=True, blank=True)

    # Pharmacy fields
    pharmacy_name = models.CharField(max_length=255, null=True, blank=True)
    address = models.CharField(max_length=255, null=True, blank=True)
    pharmacy_offers = models.TextField(null=True, blank=True)
    google_maps_link = models.URLField(max_length=512, null=True, blank=True)

    # Common fields
    city = models.CharField(max_length=128, null=True, blank=True)
    region = models.CharField(max_length=128, null=True, blank=True)
    phone = models.CharField(max_length=32, null=True, blank=True)
    bio = models.TextField(null=True, blank=True)
    profile_image = models.CharField(max_length=512, null=True, blank=True)
    is_verified = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'users'
        ordering = ['id']

    def __str__(self) -> str:
        return f"{self.username} ({self.user_type})"


class ForumCategory(models.Model):
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=128, unique=True)
    description = models.TextField(null=True, blank=True)
    # Cached aggregate, bumped when a post is created.
    post_count = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'forum_categories'
        ordering = ['id']

    def __str__(self) -> str:
        return f"{self.name} ({self.slug})"


class ForumPost(models.Model):
    title = models.CharField(max_length=255)
    content = models.TextField()
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='forum_posts')
    category = models.ForeignKey(ForumCategory, on_delete=models.CASCADE, related_name='posts')
    comment_count = models.PositiveIntegerField(default=0)
    view_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'forum_posts'
        ordering = ['id']

    def __str__(self) -> str:
        return f"{self.title} (#{self.id})"


class ForumComment(models.Model):
    content = models.TextField()
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='forum_comments')
    post = models.ForeignKey(ForumPost, on_delete=models.CASCADE, related_name='comments')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'forum_comments'
        ordering = ['id']

    def __str__(self) -> str:
        return f"Comment {self.id} on {self.post_id}"


class SecondOpinionRequest(models.Model):
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('accepted', 'Accepted'),
        ('rejected', 'Rejected'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]
    patient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='second_opinions_requested')
    doctor = models.ForeignKey(User, on_delete=models.CASCADE, related_name='second_opinions_received')
    diagnosis = models.TextField()
    description = models.TextField()
    document_links = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default='pending', db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'second_opinion_requests'
        ordering = ['id']

    def __str__(self) -> str:
        return f"Second opinion {self.id}: {self.patient_id} -> {self.doctor_id} ({self.status})"


class Message(models.Model):
    sender = models.ForeignKey(User, on_delete=models.CASCADE, related_name='sent_messages')
    receiver = models.ForeignKey(User, on_delete=models.CASCADE, related_name='received_messages')
    content = models.TextField()
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'messages'
        ordering = ['id']
        indexes = [
            models.Index(fields=['sender', 'receiver']),
            models.Index(fields=['receiver', 'is_read']),
        ]

    def __str__(self) -> str:
        return f"msg {self.id} {self.sender_id} -> {self.receiver_id}"


class Pharmacy(models.Model):
    name = models.CharField(max_length=255)
    address = models.CharField(max_length=255)
    city = models.CharField(max_length=128, db_index=True)
    region = models.CharField(max_length=128, db_index=True)
    phone = models.CharField(max_length=32, null=True, blank=True)
    specializations = models.JSONField(default=list, blank=True)
    rating = models.PositiveSmallIntegerField(null=True, blank=True)
    review_count = models.PositiveIntegerField(default=0)
    image_url = models.CharField(max_length=512, null=True, blank=True)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)

    class Meta:
        db_table = 'pharmacies'
        ordering = ['id']
        verbose_name_plural = 'pharmacies'

    def __str__(self) -> str:
        return f"{self.name} ({self.city})"


class Testimonial(models.Model):
    name = models.CharField(max_length=255)
    role = models.CharField(max_length=128)
    location = models.CharField(max_length=128)
    content = models.TextField()
    rating = models.PositiveSmallIntegerField()
    image_url = models.CharField(max_length=512, null=True, blank=True)

    class Meta:
        db_table = 'testimonials'
        ordering = ['id']

    def __str__(self) -> str:
        return f"{self.name} ({self.rating}/5)"


class MedicalRecord(models.Model):
    """A patient-owned clinical record; always accessed by (id, patient)."""
    RECORD_TYPE_CHOICES = [
        ('diagnosis', 'Diagnosis'),
        ('treatment', 'Treatment'),
        ('medication', 'Medication'),
        ('test_result', 'Test result'),
        ('visit', 'Visit'),
    ]
    patient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='medical_records')
    record_type = models.CharField(max_length=16, choices=RECORD_TYPE_CHOICES)
    title = models.CharField(max_length=255)
    description = models.TextField()
    date = models.DateField()
    doctor_name = models.CharField(max_length=255, null=True, blank=True)
    hospital_name = models.CharField(max_length=255, null=True, blank=True)
    medications = models.JSONField(null=True, blank=True)
    documents = models.JSONField(default=list, blank=True)
    is_private = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'medical_records'
        ordering = ['id']
        indexes = [models.Index(fields=['patient', 'date'])]

    def __str__(self) -> str:
        return f"{self.title} (patient {self.patient_id})"


class SosContract(models.Model):
    """Emergency-access grant from a patient to a professional."""
    CONTRACT_TYPE_CHOICES = [
        ('sos', 'SOS'),
        ('emergency', 'Emergency'),
        ('consultation', 'Consultation'),
    ]
    EMERGENCY_TYPE_CHOICES = [
        ('oncological', 'Oncological'),
        ('general', 'General'),
        ('urgent', 'Urgent'),
    ]
    ACCESS_LEVEL_CHOICES = [
        ('full', 'Full'),
        ('limited', 'Limited'),
        ('view_only', 'View only'),
    ]
    patient = models.ForeignKey(User, on_delete=models.CASCADE, related_name='sos_contracts_granted')
    doctor = models.ForeignKey(User, on_delete=models.CASCADE, related_name='sos_contracts_received')
    contract_type = models.CharField(max_length=16, choices=CONTRACT_TYPE_CHOICES, default='sos')
    emergency_type = models.CharField(max_length=16, choices=EMERGENCY_TYPE_CHOICES)
    access_level = models.CharField(max_length=16, choices=ACCESS_LEVEL_CHOICES, default='full')
    shared_record_ids = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=False)
    expires_at = models.DateTimeField(null=True, blank=True)
    consent_given = models.BooleanField(default=False)
    consent_date = models.DateTimeField(null=True, blank=True)
    emergency_notes = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'sos_contracts'
        ordering = ['id']

    def __str__(self) -> str:
        state = 'active' if self.is_active else 'inactive'
        return f"SOS {self.id}: {self.patient_id} -> {self.doctor_id} ({state})"


class AuditEvent(models.Model):
    """Who did what to which row; written by ``core.services.audit``."""
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='audit_events')
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_events'
        ordering = ['id']
        indexes = [
            models.Index(fields=['action', 'created_at']),
            models.Index(fields=['object_type', 'object_id', 'created_at']),
        ]

    def __str__(self) -> str:
        return f"{self.action} {self.object_type or '-'}#{self.object_id or '-'} by {self.user_id or '-'}"
