"""
In-memory storage.

Rows live in per-entity lists for the lifetime of the process.  One
lock serialises every mutation, which is what makes the view-count
increment and the username/email uniqueness check race-free here.
Callers always receive copies, so mutating a returned entity never
changes the stored row.
"""
from __future__ import annotations

import itertools
import threading
from dataclasses import replace
from typing import Callable, Optional, TypeVar

from django.utils import timezone

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
from core.exceptions import DuplicateError, MissingReference

from .base import REFERENCES, Storage, owned_by, prepare_insert

T = TypeVar('T')

_TIMESTAMPED = {
    AuditEvent, User, ForumPost, ForumComment, SecondOpinionRequest, Message, MedicalRecord, SosContract,
}
_UPDATED_AT = {MedicalRecord, SosContract}


class MemStorage(Storage):
    name = 'memory'

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._rows: dict[type, list] = {}
        self._ids: dict[type, itertools.count] = {}

    # ------------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------------
    def _table(self, entity_cls: type) -> list:
        return self._rows.setdefault(entity_cls, [])

    def _find(self, entity_cls: type[T], pred: Callable[[T], bool]) -> Optional[T]:
        for row in self._table(entity_cls):
            if pred(row):
                return row
        return None

    def _get(self, entity_cls: type[T], pred: Callable[[T], bool]) -> Optional[T]:
        with self._lock:
            row = self._find(entity_cls, pred)
            return replace(row) if row is not None else None

    def _filter(self, entity_cls: type[T], pred: Callable[[T], bool] = lambda _: True) -> list[T]:
        with self._lock:
            return [replace(r) for r in self._table(entity_cls) if pred(r)]

    def _check_references(self, entity_cls: type, values: dict) -> None:
        for field_name, target in REFERENCES.get(entity_cls, {}).items():
            ref_id = values.get(field_name)
            if self._find(target, lambda r: r.id == ref_id) is None:
                raise MissingReference(field_name, ref_id)

    def _insert(self, entity_cls: type[T], data: dict) -> T:
        values = prepare_insert(entity_cls, data)
        with self._lock:
            self._check_references(entity_cls, values)
            counter = self._ids.setdefault(entity_cls, itertools.count(1))
            now = timezone.now()
            if entity_cls in _TIMESTAMPED:
                values['created_at'] = now
            if entity_cls in _UPDATED_AT:
                values['updated_at'] = now
            row = entity_cls(id=next(counter), **values)
            self._table(entity_cls).append(row)
            return replace(row)

    def _update(self, entity_cls: type[T], pred: Callable[[T], bool], changes: dict) -> Optional[T]:
        with self._lock:
            row = self._find(entity_cls, pred)
            if row is None:
                return None
            for key, value in changes.items():
                setattr(row, key, value)
            if entity_cls in _UPDATED_AT:
                row.updated_at = timezone.now()
            return replace(row)

    def _patch(self, entity_cls: type[T], pred: Callable[[T], bool], patch: Patch) -> Optional[T]:
        return self._update(entity_cls, pred, patch.changes())

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def get_user(self, user_id: int) -> Optional[User]:
        return self._get(User, lambda u: u.id == user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._get(User, lambda u: u.username == username)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._get(User, lambda u: u.email == email)

    def create_user(self, data: dict) -> User:
        with self._lock:
            if self._find(User, lambda u: u.username == data.get('username')):
                raise DuplicateError('username', 'Username already taken')
            if self._find(User, lambda u: u.email == data.get('email')):
                raise DuplicateError('email', 'Email already registered')
            return self._insert(User, data)

    def update_user(self, user_id: int, patch: UserUpdate) -> Optional[User]:
        with self._lock:
            email = patch.changes().get('email')
            if email and self._find(User, lambda u: u.email == email and u.id != user_id):
                raise DuplicateError('email', 'Email already registered')
            return self._patch(User, lambda u: u.id == user_id, patch)

    def list_doctors(self) -> list[User]:
        return self._filter(User, lambda u: u.user_type == 'professional')

    def list_pharmacy_users(self) -> list[User]:
        return self._filter(User, lambda u: u.user_type == 'pharmacy')

    # ------------------------------------------------------------------
    # Forum
    # ------------------------------------------------------------------
    def list_forum_categories(self) -> list[ForumCategory]:
        return self._filter(ForumCategory)

    def get_forum_category(self, category_id: int) -> Optional[ForumCategory]:
        return self._get(ForumCategory, lambda c: c.id == category_id)

    def get_forum_category_by_slug(self, slug: str) -> Optional[ForumCategory]:
        return self._get(ForumCategory, lambda c: c.slug == slug)

    def create_forum_category(self, data: dict) -> ForumCategory:
        with self._lock:
            if self._find(ForumCategory, lambda c: c.slug == data.get('slug')):
                raise DuplicateError('slug', 'Category slug already exists')
            return self._insert(ForumCategory, data)

    def list_forum_posts(self, category_id: Optional[int] = None) -> list[ForumPost]:
        if category_id is None:
            return self._filter(ForumPost)
        return self._filter(ForumPost, lambda p: p.category_id == category_id)

    def get_forum_post(self, post_id: int) -> Optional[ForumPost]:
        return self._get(ForumPost, lambda p: p.id == post_id)

    def create_forum_post(self, data: dict) -> ForumPost:
        with self._lock:
            post = self._insert(ForumPost, data)
            category = self._find(ForumCategory, lambda c: c.id == post.category_id)
            category.post_count += 1
            return post

    def increment_post_view_count(self, post_id: int) -> None:
        with self._lock:
            post = self._find(ForumPost, lambda p: p.id == post_id)
            if post is not None:
                post.view_count += 1

    def list_forum_comments(self, post_id: int) -> list[ForumComment]:
        return self._filter(ForumComment, lambda c: c.post_id == post_id)

    def create_forum_comment(self, data: dict) -> ForumComment:
        with self._lock:
            comment = self._insert(ForumComment, data)
            post = self._find(ForumPost, lambda p: p.id == comment.post_id)
            post.comment_count += 1
            return comment

    # ------------------------------------------------------------------
    # Second opinions
    # ------------------------------------------------------------------
    def list_second_opinion_requests(self, patient_id: Optional[int] = None,
                                     doctor_id: Optional[int] = None) -> list[SecondOpinionRequest]:
        return self._filter(
            SecondOpinionRequest,
            lambda r: (patient_id is None or r.patient_id == patient_id)
            and (doctor_id is None or r.doctor_id == doctor_id),
        )

    def get_second_opinion_request(self, request_id: int) -> Optional[SecondOpinionRequest]:
        return self._get(SecondOpinionRequest, lambda r: r.id == request_id)

    def create_second_opinion_request(self, data: dict) -> SecondOpinionRequest:
        return self._insert(SecondOpinionRequest, data)

    def update_second_opinion_request_status(self, request_id: int, status: str) -> Optional[SecondOpinionRequest]:
        return self._update(SecondOpinionRequest, lambda r: r.id == request_id, {'status': status})

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------
    def list_messages(self, user_id: int) -> list[Message]:
        return self._filter(Message, lambda m: m.receiver_id == user_id)

    def get_conversation(self, user1_id: int, user2_id: int) -> list[Message]:
        pair = {(user1_id, user2_id), (user2_id, user1_id)}
        return self._filter(Message, lambda m: (m.sender_id, m.receiver_id) in pair)

    def get_message(self, message_id: int) -> Optional[Message]:
        return self._get(Message, lambda m: m.id == message_id)

    def create_message(self, data: dict) -> Message:
        return self._insert(Message, data)

    def mark_message_as_read(self, message_id: int) -> Optional[Message]:
        return self._update(Message, lambda m: m.id == message_id, {'is_read': True})

    # ------------------------------------------------------------------
    # Pharmacies & testimonials
    # ------------------------------------------------------------------
    def list_pharmacies(self, region: Optional[str] = None, city: Optional[str] = None,
                        specialization: Optional[str] = None) -> list[Pharmacy]:
        def match(p: Pharmacy) -> bool:
            if region and (p.region or '').lower() != region.lower():
                return False
            if city and (p.city or '').lower() != city.lower():
                return False
            if specialization and specialization not in (p.specializations or []):
                return False
            return True
        return self._filter(Pharmacy, match)

    def get_pharmacy(self, pharmacy_id: int) -> Optional[Pharmacy]:
        return self._get(Pharmacy, lambda p: p.id == pharmacy_id)

    def create_pharmacy(self, data: dict) -> Pharmacy:
        return self._insert(Pharmacy, data)

    def update_pharmacy(self, pharmacy_id: int, patch: PharmacyUpdate) -> Optional[Pharmacy]:
        return self._patch(Pharmacy, lambda p: p.id == pharmacy_id, patch)

    def list_testimonials(self) -> list[Testimonial]:
        return self._filter(Testimonial)

    def create_testimonial(self, data: dict) -> Testimonial:
        return self._insert(Testimonial, data)

    # ------------------------------------------------------------------
    # Medical records
    # ------------------------------------------------------------------
    def list_medical_records(self, patient_id: int) -> list[MedicalRecord]:
        return self._filter(MedicalRecord, lambda r: owned_by(r, patient_id))

    def get_medical_record(self, record_id: int, patient_id: int) -> Optional[MedicalRecord]:
        return self._get(MedicalRecord, lambda r: r.id == record_id and owned_by(r, patient_id))

    def create_medical_record(self, data: dict) -> MedicalRecord:
        return self._insert(MedicalRecord, data)

    def update_medical_record(self, record_id: int, patient_id: int,
                              patch: MedicalRecordUpdate) -> Optional[MedicalRecord]:
        return self._patch(MedicalRecord, lambda r: r.id == record_id and owned_by(r, patient_id), patch)

    def delete_medical_record(self, record_id: int, patient_id: int) -> bool:
        with self._lock:
            table = self._table(MedicalRecord)
            for idx, row in enumerate(table):
                if row.id == record_id and owned_by(row, patient_id):
                    del table[idx]
                    return True
            return False

    # ------------------------------------------------------------------
    # SOS contracts
    # ------------------------------------------------------------------
    def list_sos_contracts(self, patient_id: Optional[int] = None,
                           doctor_id: Optional[int] = None) -> list[SosContract]:
        return self._filter(
            SosContract,
            lambda c: (patient_id is None or owned_by(c, patient_id))
            and (doctor_id is None or owned_by(c, doctor_id, 'doctor_id')),
        )

    def get_sos_contract(self, contract_id: int) -> Optional[SosContract]:
        return self._get(SosContract, lambda c: c.id == contract_id)

    def create_sos_contract(self, data: dict) -> SosContract:
        return self._insert(SosContract, data)

    def update_sos_contract(self, contract_id: int, patch: SosContractUpdate) -> Optional[SosContract]:
        return self._patch(SosContract, lambda c: c.id == contract_id, patch)

    # ------------------------------------------------------------------
    # Audit trail
    # ------------------------------------------------------------------
    def create_audit_event(self, data: dict) -> AuditEvent:
        return self._insert(AuditEvent, data)

    def list_audit_events(self, object_type: Optional[str] = None, object_id: Optional[int] = None,
                          user_id: Optional[int] = None) -> list[AuditEvent]:
        return self._filter(
            AuditEvent,
            lambda e: (object_type is None or e.object_type == object_type)
            and (object_id is None or e.object_id == object_id)
            and (user_id is None or e.user_id == user_id),
        )
