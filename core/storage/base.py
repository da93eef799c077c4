"""
The storage contract shared by every backend.

Absence is never an exception: lookups return ``None``, listings return
an empty list, updates of a missing (or out-of-scope) id return ``None``
and deletes return ``False``.  Listings come back in insertion order.
Unique-field collisions raise :class:`core.exceptions.DuplicateError`.
"""
from __future__ import annotations

import abc
from typing import Any, Optional

from core.entities import (
    AuditEvent,
    ForumCategory,
    ForumComment,
    ForumPost,
    MedicalRecord,
    MedicalRecordUpdate,
    Message,
    Pharmacy,
    PharmacyUpdate,
    SecondOpinionRequest,
    SosContract,
    SosContractUpdate,
    Testimonial,
    User,
    UserUpdate,
    insertable_fields,
)


# Values every new row starts with, whatever the payload says.
CREATE_DEFAULTS: dict[type, dict[str, Any]] = {
    ForumCategory: {'post_count': 0},
    ForumPost: {'view_count': 0, 'comment_count': 0},
    SecondOpinionRequest: {'status': 'pending'},
    Message: {'is_read': False},
    Pharmacy: {'review_count': 0},
    SosContract: {'is_active': False},
}

# Foreign keys checked before insert: field -> referenced entity.
REFERENCES: dict[type, dict[str, type]] = {
    ForumPost: {'user_id': User, 'category_id': ForumCategory},
    ForumComment: {'user_id': User, 'post_id': ForumPost},
    SecondOpinionRequest: {'patient_id': User, 'doctor_id': User},
    Message: {'sender_id': User, 'receiver_id': User},
    MedicalRecord: {'patient_id': User},
    SosContract: {'patient_id': User, 'doctor_id': User},
}


def prepare_insert(entity_cls: type, data: dict) -> dict:
    """Drop server-assigned and unknown keys, then apply create defaults."""
    allowed = insertable_fields(entity_cls)
    values = {k: v for k, v in data.items() if k in allowed}
    values.update(CREATE_DEFAULTS.get(entity_cls, {}))
    return values


def owned_by(entity: Any, owner_id: Optional[int], owner_field: str = 'patient_id') -> bool:
    """Owner scoping: the entity exists and belongs to ``owner_id``."""
    if entity is None or owner_id is None:
        return False
    return getattr(entity, owner_field, None) == owner_id


class Storage(abc.ABC):
    """Repository over every Onconet entity."""

    name = 'abstract'

    # -- users ------------------------------------------------------------
    @abc.abstractmethod
    def get_user(self, user_id: int) -> Optional[User]: ...

    @abc.abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abc.abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]: ...

    @abc.abstractmethod
    def create_user(self, data: dict) -> User: ...

    @abc.abstractmethod
    def update_user(self, user_id: int, patch: UserUpdate) -> Optional[User]: ...

    @abc.abstractmethod
    def list_doctors(self) -> list[User]: ...

    @abc.abstractmethod
    def list_pharmacy_users(self) -> list[User]: ...

    # -- forum ------------------------------------------------------------
    @abc.abstractmethod
    def list_forum_categories(self) -> list[ForumCategory]: ...

    @abc.abstractmethod
    def get_forum_category(self, category_id: int) -> Optional[ForumCategory]: ...

    @abc.abstractmethod
    def get_forum_category_by_slug(self, slug: str) -> Optional[ForumCategory]: ...

    @abc.abstractmethod
    def create_forum_category(self, data: dict) -> ForumCategory: ...

    @abc.abstractmethod
    def list_forum_posts(self, category_id: Optional[int] = None) -> list[ForumPost]: ...

    @abc.abstractmethod
    def get_forum_post(self, post_id: int) -> Optional[ForumPost]: ...

    @abc.abstractmethod
    def create_forum_post(self, data: dict) -> ForumPost: ...

    @abc.abstractmethod
    def increment_post_view_count(self, post_id: int) -> None:
        """Add one view; must not lose increments under concurrent calls."""

    @abc.abstractmethod
    def list_forum_comments(self, post_id: int) -> list[ForumComment]: ...

    @abc.abstractmethod
    def create_forum_comment(self, data: dict) -> ForumComment: ...

    # -- second opinions --------------------------------------------------
    @abc.abstractmethod
    def list_second_opinion_requests(self, patient_id: Optional[int] = None,
                                     doctor_id: Optional[int] = None) -> list[SecondOpinionRequest]: ...

    @abc.abstractmethod
    def get_second_opinion_request(self, request_id: int) -> Optional[SecondOpinionRequest]: ...

    @abc.abstractmethod
    def create_second_opinion_request(self, data: dict) -> SecondOpinionRequest: ...

    @abc.abstractmethod
    def update_second_opinion_request_status(self, request_id: int, status: str) -> Optional[SecondOpinionRequest]: ...

    # -- messages ---------------------------------------------------------
    @abc.abstractmethod
    def list_messages(self, user_id: int) -> list[Message]:
        """Messages received by ``user_id``."""

    @abc.abstractmethod
    def get_conversation(self, user1_id: int, user2_id: int) -> list[Message]: ...

    @abc.abstractmethod
    def get_message(self, message_id: int) -> Optional[Message]: ...

    @abc.abstractmethod
    def create_message(self, data: dict) -> Message: ...

    @abc.abstractmethod
    def mark_message_as_read(self, message_id: int) -> Optional[Message]: ...

    # -- pharmacies & testimonials ---------------------------------------
    @abc.abstractmethod
    def list_pharmacies(self, region: Optional[str] = None, city: Optional[str] = None,
                        specialization: Optional[str] = None) -> list[Pharmacy]: ...

    @abc.abstractmethod
    def get_pharmacy(self, pharmacy_id: int) -> Optional[Pharmacy]: ...

    @abc.abstractmethod
    def create_pharmacy(self, data: dict) -> Pharmacy: ...

    @abc.abstractmethod
    def update_pharmacy(self, pharmacy_id: int, patch: PharmacyUpdate) -> Optional[Pharmacy]: ...

    @abc.abstractmethod
    def list_testimonials(self) -> list[Testimonial]: ...

    @abc.abstractmethod
    def create_testimonial(self, data: dict) -> Testimonial: ...

    # -- medical records (owner scoped) -----------------------------------
    @abc.abstractmethod
    def list_medical_records(self, patient_id: int) -> list[MedicalRecord]: ...

    @abc.abstractmethod
    def get_medical_record(self, record_id: int, patient_id: int) -> Optional[MedicalRecord]: ...

    @abc.abstractmethod
    def create_medical_record(self, data: dict) -> MedicalRecord: ...

    @abc.abstractmethod
    def update_medical_record(self, record_id: int, patient_id: int,
                              patch: MedicalRecordUpdate) -> Optional[MedicalRecord]: ...

    @abc.abstractmethod
    def delete_medical_record(self, record_id: int, patient_id: int) -> bool: ...

    # -- SOS contracts ----------------------------------------------------
    @abc.abstractmethod
    def list_sos_contracts(self, patient_id: Optional[int] = None,
                           doctor_id: Optional[int] = None) -> list[SosContract]: ...

    @abc.abstractmethod
    def get_sos_contract(self, contract_id: int) -> Optional[SosContract]: ...

    @abc.abstractmethod
    def create_sos_contract(self, data: dict) -> SosContract: ...

    @abc.abstractmethod
    def update_sos_contract(self, contract_id: int, patch: SosContractUpdate) -> Optional[SosContract]: ...

    def activate_sos_contract(self, contract_id: int) -> Optional[SosContract]:
        return self.update_sos_contract(contract_id, SosContractUpdate(is_active=True))

    def deactivate_sos_contract(self, contract_id: int) -> Optional[SosContract]:
        return self.update_sos_contract(contract_id, SosContractUpdate(is_active=False))

    # -- audit trail ------------------------------------------------------
    @abc.abstractmethod
    def create_audit_event(self, data: dict) -> AuditEvent: ...

    @abc.abstractmethod
    def list_audit_events(self, object_type: Optional[str] = None, object_id: Optional[int] = None,
                          user_id: Optional[int] = None) -> list[AuditEvent]:
        """Events oldest first, optionally narrowed to one object or actor."""

    # -- health -----------------------------------------------------------
    def ping(self) -> bool:
        return True
