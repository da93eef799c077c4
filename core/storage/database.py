"""
Django ORM storage.

Rows are read through the models in :mod:`core.models` and handed out
as :mod:`core.entities` dataclasses.  Counters are bumped with ``F()``
expressions so concurrent requests never lose an increment, and unique
constraint violations surface as :class:`DuplicateError`.
"""
from __future__ import annotations

import logging
from dataclasses import fields
from typing import Optional

from django.db import DatabaseError, IntegrityError, connection, transaction
from django.db.models import F, Q
from django.utils import timezone

from core import models as m
from core.entities import (
    AuditEvent,
    ForumCategory,
    ForumComment,
    ForumPost,
    MedicalRecord,
    MedicalRecordUpdate,
    Message,
    Patch,
    Pharmacy,
    PharmacyUpdate,
    SecondOpinionRequest,
    SosContract,
    SosContractUpdate,
    Testimonial,
    User,
    UserUpdate,
)
from core.exceptions import DuplicateError, MissingReference, StorageError

from .base import REFERENCES, Storage, prepare_insert

logger = logging.getLogger(__name__)

MODELS = {
    User: m.User,
    ForumCategory: m.ForumCategory,
    ForumPost: m.ForumPost,
    ForumComment: m.ForumComment,
    SecondOpinionRequest: m.SecondOpinionRequest,
    Message: m.Message,
    Pharmacy: m.Pharmacy,
    Testimonial: m.Testimonial,
    MedicalRecord: m.MedicalRecord,
    SosContract: m.SosContract,
    AuditEvent: m.AuditEvent,
}

# Unique columns per entity, checked in order when an insert collides.
UNIQUE_FIELDS = {
    User: [('username', 'Username already taken'), ('email', 'Email already registered')],
    ForumCategory: [('slug', 'Category slug already exists')],
}


def to_entity(entity_cls, obj):
    if obj is None:
        return None
    # Entity FK fields (user_id, post_id...) match the ORM attnames.
    return entity_cls(**{f.name: getattr(obj, f.name) for f in fields(entity_cls)})


class DatabaseStorage(Storage):
    name = 'database'

    # ------------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------------
    def _one(self, entity_cls, **lookup):
        try:
            obj = MODELS[entity_cls].objects.filter(**lookup).first()
        except DatabaseError as exc:
            raise StorageError(str(exc)) from exc
        return to_entity(entity_cls, obj)

    def _many(self, entity_cls, *args, **lookup) -> list:
        try:
            rows = list(MODELS[entity_cls].objects.filter(*args, **lookup).order_by('id'))
        except DatabaseError as exc:
            raise StorageError(str(exc)) from exc
        return [to_entity(entity_cls, row) for row in rows]

    def _check_references(self, entity_cls, values: dict) -> None:
        for field_name, target in REFERENCES.get(entity_cls, {}).items():
            ref_id = values.get(field_name)
            if ref_id is None or not MODELS[target].objects.filter(pk=ref_id).exists():
                raise MissingReference(field_name, ref_id)

    def _duplicate_from(self, entity_cls, values: dict, exclude_id=None) -> Optional[DuplicateError]:
        model = MODELS[entity_cls]
        for field_name, message in UNIQUE_FIELDS.get(entity_cls, []):
            if field_name not in values:
                continue
            qs = model.objects.filter(**{field_name: values[field_name]})
            if exclude_id is not None:
                qs = qs.exclude(pk=exclude_id)
            if qs.exists():
                return DuplicateError(field_name, message)
        return None

    def _insert(self, entity_cls, data: dict):
        values = prepare_insert(entity_cls, data)
        self._check_references(entity_cls, values)
        try:
            with transaction.atomic():
                obj = MODELS[entity_cls].objects.create(**values)
        except IntegrityError as exc:
            dup = self._duplicate_from(entity_cls, values)
            if dup is not None:
                raise dup from exc
            raise StorageError(str(exc)) from exc
        except DatabaseError as exc:
            raise StorageError(str(exc)) from exc
        return to_entity(entity_cls, obj)

    def _update(self, entity_cls, changes: dict, **lookup):
        model = MODELS[entity_cls]
        if changes:
            if hasattr(model, 'updated_at'):
                changes = {**changes, 'updated_at': timezone.now()}
            try:
                with transaction.atomic():
                    count = model.objects.filter(**lookup).update(**changes)
            except IntegrityError as exc:
                dup = self._duplicate_from(entity_cls, changes, exclude_id=lookup.get('pk'))
                if dup is not None:
                    raise dup from exc
                raise StorageError(str(exc)) from exc
            except DatabaseError as exc:
                raise StorageError(str(exc)) from exc
            if not count:
                return None
        return self._one(entity_cls, **lookup)

    def _patch(self, entity_cls, patch: Patch, **lookup):
        return self._update(entity_cls, patch.changes(), **lookup)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def get_user(self, user_id: int) -> Optional[User]:
        return self._one(User, pk=user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._one(User, username=username)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._one(User, email=email)

    def create_user(self, data: dict) -> User:
        return self._insert(User, data)

    def update_user(self, user_id: int, patch: UserUpdate) -> Optional[User]:
        return self._patch(User, patch, pk=user_id)

    def list_doctors(self) -> list[User]:
        return self._many(User, user_type='professional')

    def list_pharmacy_users(self) -> list[User]:
        return self._many(User, user_type='pharmacy')

    # ------------------------------------------------------------------
    # Forum
    # ------------------------------------------------------------------
    def list_forum_categories(self) -> list[ForumCategory]:
        return self._many(ForumCategory)

    def get_forum_category(self, category_id: int) -> Optional[ForumCategory]:
        return self._one(ForumCategory, pk=category_id)

    def get_forum_category_by_slug(self, slug: str) -> Optional[ForumCategory]:
        return self._one(ForumCategory, slug=slug)

    def create_forum_category(self, data: dict) -> ForumCategory:
        return self._insert(ForumCategory, data)

    def list_forum_posts(self, category_id: Optional[int] = None) -> list[ForumPost]:
        if category_id is None:
            return self._many(ForumPost)
        return self._many(ForumPost, category_id=category_id)

    def get_forum_post(self, post_id: int) -> Optional[ForumPost]:
        return self._one(ForumPost, pk=post_id)

    def create_forum_post(self, data: dict) -> ForumPost:
        with transaction.atomic():
            post = self._insert(ForumPost, data)
            m.ForumCategory.objects.filter(pk=post.category_id).update(post_count=F('post_count') + 1)
        return post

    def increment_post_view_count(self, post_id: int) -> None:
        m.ForumPost.objects.filter(pk=post_id).update(view_count=F('view_count') + 1)

    def list_forum_comments(self, post_id: int) -> list[ForumComment]:
        return self._many(ForumComment, post_id=post_id)

    def create_forum_comment(self, data: dict) -> ForumComment:
        with transaction.atomic():
            comment = self._insert(ForumComment, data)
            m.ForumPost.objects.filter(pk=comment.post_id).update(comment_count=F('comment_count') + 1)
        return comment

    # ------------------------------------------------------------------
    # Second opinions
    # ------------------------------------------------------------------
    def list_second_opinion_requests(self, patient_id: Optional[int] = None,
                                     doctor_id: Optional[int] = None) -> list[SecondOpinionRequest]:
        lookup = {}
        if patient_id is not None:
            lookup['patient_id'] = patient_id
        if doctor_id is not None:
            lookup['doctor_id'] = doctor_id
        return self._many(SecondOpinionRequest, **lookup)

    def get_second_opinion_request(self, request_id: int) -> Optional[SecondOpinionRequest]:
        return self._one(SecondOpinionRequest, pk=request_id)

    def create_second_opinion_request(self, data: dict) -> SecondOpinionRequest:
        return self._insert(SecondOpinionRequest, data)

    def update_second_opinion_request_status(self, request_id: int, status: str) -> Optional[SecondOpinionRequest]:
        return self._update(SecondOpinionRequest, {'status': status}, pk=request_id)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------
    def list_messages(self, user_id: int) -> list[Message]:
        return self._many(Message, receiver_id=user_id)

    def get_conversation(self, user1_id: int, user2_id: int) -> list[Message]:
        return self._many(
            Message,
            Q(sender_id=user1_id, receiver_id=user2_id) | Q(sender_id=user2_id, receiver_id=user1_id),
        )

    def get_message(self, message_id: int) -> Optional[Message]:
        return self._one(Message, pk=message_id)

    def create_message(self, data: dict) -> Message:
        return self._insert(Message, data)

    def mark_message_as_read(self, message_id: int) -> Optional[Message]:
        return self._update(Message, {'is_read': True}, pk=message_id)

    # ------------------------------------------------------------------
    # Pharmacies & testimonials
    # ------------------------------------------------------------------
    def list_pharmacies(self, region: Optional[str] = None, city: Optional[str] = None,
                        specialization: Optional[str] = None) -> list[Pharmacy]:
        lookup = {}
        if region:
            lookup['region__iexact'] = region
        if city:
            lookup['city__iexact'] = city
        rows = self._many(Pharmacy, **lookup)
        # JSON containment is not portable to SQLite; filter in Python.
        if specialization:
            rows = [p for p in rows if specialization in (p.specializations or [])]
        return rows

    def get_pharmacy(self, pharmacy_id: int) -> Optional[Pharmacy]:
        return self._one(Pharmacy, pk=pharmacy_id)

    def create_pharmacy(self, data: dict) -> Pharmacy:
        return self._insert(Pharmacy, data)

    def update_pharmacy(self, pharmacy_id: int, patch: PharmacyUpdate) -> Optional[Pharmacy]:
        return self._patch(Pharmacy, patch, pk=pharmacy_id)

    def list_testimonials(self) -> list[Testimonial]:
        return self._many(Testimonial)

    def create_testimonial(self, data: dict) -> Testimonial:
        return self._insert(Testimonial, data)

    # ------------------------------------------------------------------
    # Medical records
    # ------------------------------------------------------------------
    def list_medical_records(self, patient_id: int) -> list[MedicalRecord]:
        return self._many(MedicalRecord, patient_id=patient_id)

    def get_medical_record(self, record_id: int, patient_id: int) -> Optional[MedicalRecord]:
        return self._one(MedicalRecord, pk=record_id, patient_id=patient_id)

    def create_medical_record(self, data: dict) -> MedicalRecord:
        return self._insert(MedicalRecord, data)

    def update_medical_record(self, record_id: int, patient_id: int,
                              patch: MedicalRecordUpdate) -> Optional[MedicalRecord]:
        return self._patch(MedicalRecord, patch, pk=record_id, patient_id=patient_id)

    def delete_medical_record(self, record_id: int, patient_id: int) -> bool:
        deleted, _ = m.MedicalRecord.objects.filter(pk=record_id, patient_id=patient_id).delete()
        return deleted > 0

    # ------------------------------------------------------------------
    # SOS contracts
    # ------------------------------------------------------------------
    def list_sos_contracts(self, patient_id: Optional[int] = None,
                           doctor_id: Optional[int] = None) -> list[SosContract]:
        lookup = {}
        if patient_id is not None:
            lookup['patient_id'] = patient_id
        if doctor_id is not None:
            lookup['doctor_id'] = doctor_id
        return self._many(SosContract, **lookup)

    def get_sos_contract(self, contract_id: int) -> Optional[SosContract]:
        return self._one(SosContract, pk=contract_id)

    def create_sos_contract(self, data: dict) -> SosContract:
        return self._insert(SosContract, data)

    def update_sos_contract(self, contract_id: int, patch: SosContractUpdate) -> Optional[SosContract]:
        return self._patch(SosContract, patch, pk=contract_id)

    # ------------------------------------------------------------------
    # Audit trail
    # ------------------------------------------------------------------
    def create_audit_event(self, data: dict) -> AuditEvent:
        return self._insert(AuditEvent, data)

    def list_audit_events(self, object_type: Optional[str] = None, object_id: Optional[int] = None,
                          user_id: Optional[int] = None) -> list[AuditEvent]:
        lookup = {}
        if object_type is not None:
            lookup['object_type'] = object_type
        if object_id is not None:
            lookup['object_id'] = object_id
        if user_id is not None:
            lookup['user_id'] = user_id
        return self._many(AuditEvent, **lookup)

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------
    def ping(self) -> bool:
        try:
            with connection.cursor() as cursor:
                cursor.execute('SELECT 1')
                cursor.fetchone()
        except DatabaseError:
            logger.exception('database ping failed')
            return False
        return True
