"""
Django admin registrations for the core models.

Lets staff inspect rows written by the database store via ``/admin/``.
Edits made here bypass the storage layer, so counters such as
``post_count`` are not kept in sync.
"""

from django.contrib import admin

from .models import (
    AuditEvent,
    ForumCategory,
    ForumComment,
    ForumPost,
    MedicalRecord,
    Message,
    Pharmacy,
    SecondOpinionRequest,
    SosContract,
    Testimonial,
    User,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('id', 'username', 'email', 'user_type', 'is_verified', 'created_at')
    list_filter = ('user_type', 'is_verified', 'available_for_second_opinion')
    search_fields = ('username', 'email', 'full_name')
    exclude = ('password',)


@admin.register(ForumCategory)
class ForumCategoryAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'slug', 'post_count')
    search_fields = ('name', 'slug')


@admin.register(ForumPost)
class ForumPostAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'user', 'category', 'comment_count', 'view_count', 'created_at')
    list_filter = ('category',)
    search_fields = ('title',)


@admin.register(ForumComment)
class ForumCommentAdmin(admin.ModelAdmin):
    list_display = ('id', 'post', 'user', 'created_at')


@admin.register(SecondOpinionRequest)
class SecondOpinionRequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor', 'status', 'created_at')
    list_filter = ('status',)


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ('id', 'sender', 'receiver', 'is_read', 'created_at')
    list_filter = ('is_read',)


@admin.register(Pharmacy)
class PharmacyAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'city', 'region', 'rating', 'review_count')
    list_filter = ('region',)
    search_fields = ('name', 'city')


@admin.register(Testimonial)
class TestimonialAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'role', 'location', 'rating')


@admin.register(MedicalRecord)
class MedicalRecordAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'record_type', 'title', 'date', 'is_private')
    list_filter = ('record_type', 'is_private')


@admin.register(SosContract)
class SosContractAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor', 'contract_type', 'emergency_type', 'is_active', 'expires_at')
    list_filter = ('is_active', 'contract_type', 'emergency_type')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('id', 'action', 'object_type', 'object_id', 'user', 'ip_address', 'created_at')
    list_filter = ('action', 'object_type')
    readonly_fields = ('user', 'action', 'object_type', 'object_id', 'detail', 'ip_address', 'created_at')
