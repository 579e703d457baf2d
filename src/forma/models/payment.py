"""
Payment model for the Forma client.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from forma.models.parsing import amount_to_json
from forma.models.parsing import format_date
from forma.models.parsing import format_datetime
from forma.models.parsing import parse_amount
from forma.models.parsing import parse_date
from forma.models.parsing import parse_datetime


class PaymentStatus(str, Enum):
    """Lifecycle states of a payment as reported by the backend."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

@dataclass
class MemberProfile:
    """Snapshot of the member a record belongs to."""
    first_name: str
    last_name: str
    email: str
    id: str | None = None
    phone: str | None = None
    date_of_birth: date | None = None
    profile_image_url: str | None = None
    gender: str = "unspecified"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "MemberProfile":
        data = data or {}
        return cls(
            id=data.get('id'),
            first_name=str(data.get('first_name') or ''),
            last_name=str(data.get('last_name') or ''),
            email=str(data.get('email') or ''),
            phone=data.get('phone'),
            date_of_birth=parse_date(data.get('date_of_birth')),
            profile_image_url=data.get('profile_image_url'),
            gender=str(data.get('gender') or 'unspecified'),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            'first_name': self.first_name,
            'last_name': self.last_name,
            'email': self.email,
            'phone': self.phone,
            'date_of_birth': format_date(self.date_of_birth),
            'profile_image_url': self.profile_image_url,
            'gender': self.gender,
        }
        if self.id is not None:
            result['id'] = self.id
        return result

@dataclass
class MembershipSummary:
    """Membership fields embedded in a payment response."""
    id: str
    status: str
    monthly_fee: Decimal
    user_id: str | None = None
    gym_id: str | None = None
    start_date: date | None = None
    end_date: date | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "MembershipSummary | None":
        if not data:
            return None
        return cls(
            id=str(data.get('id', '')),
            status=str(data.get('status', '')),
            monthly_fee=parse_amount(data.get('monthly_fee')),
            user_id=data.get('user_id'),
            gym_id=data.get('gym_id'),
            start_date=parse_date(data.get('start_date')),
            end_date=parse_date(data.get('end_date')),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'user_id': self.user_id,
            'gym_id': self.gym_id,
            'status': self.status,
            'start_date': format_date(self.start_date),
            'end_date': format_date(self.end_date),
            'monthly_fee': amount_to_json(self.monthly_fee),
        }

@dataclass
class PaymentRecord:
    """A SINPE payment submitted against a membership.

    Only ``pending`` payments can be approved or rejected from the client; the
    audit fields stay empty until the backend records a transition.
    """
    id: str
    membership_id: str
    status: PaymentStatus
    amount: Decimal
    payment_method: str = "sinpe"
    sinpe_reference: str | None = None
    sinpe_phone: str | None = None
    payment_proof_url: str | None = None
    payment_date: datetime | None = None
    approved_date: datetime | None = None
    approved_by: str | None = None
    rejection_reason: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    membership: MembershipSummary | None = None
    user: MemberProfile = field(default_factory=lambda: MemberProfile('', '', ''))

    @property
    def can_transition(self) -> bool:
        """Approve/reject actions are only offered for pending payments."""
        return self.status is PaymentStatus.PENDING

    @property
    def has_receipt(self) -> bool:
        return bool(self.payment_proof_url)

    @property
    def searchable_fields(self) -> list[str]:
        fields = [self.user.full_name, self.user.email]
        if self.sinpe_reference:
            fields.append(self.sinpe_reference)
        return fields

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PaymentRecord":
        """Create a PaymentRecord from the ``/api/payments`` JSON shape."""
        return cls(
            id=str(data['id']),
            membership_id=str(data.get('membership_id') or (data.get('membership') or {}).get('id', '')),
            status=PaymentStatus(data.get('status', 'pending')),
            amount=parse_amount(data.get('amount')),
            payment_method=str(data.get('payment_method') or 'sinpe'),
            sinpe_reference=data.get('sinpe_reference'),
            sinpe_phone=data.get('sinpe_phone'),
            payment_proof_url=data.get('payment_proof_url'),
            payment_date=parse_datetime(data.get('payment_date')),
            approved_date=parse_datetime(data.get('approved_date')),
            approved_by=data.get('approved_by'),
            rejection_reason=data.get('rejection_reason'),
            notes=data.get('notes'),
            created_at=parse_datetime(data.get('created_at')),
            updated_at=parse_datetime(data.get('updated_at')),
            membership=MembershipSummary.from_dict(data.get('membership')),
            user=MemberProfile.from_dict(data.get('user')),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'membership_id': self.membership_id,
            'status': self.status.value,
            'amount': amount_to_json(self.amount),
            'payment_method': self.payment_method,
            'sinpe_reference': self.sinpe_reference,
            'sinpe_phone': self.sinpe_phone,
            'payment_proof_url': self.payment_proof_url,
            'payment_date': format_datetime(self.payment_date),
            'approved_date': format_datetime(self.approved_date),
            'approved_by': self.approved_by,
            'rejection_reason': self.rejection_reason,
            'notes': self.notes,
            'created_at': format_datetime(self.created_at),
            'updated_at': format_datetime(self.updated_at),
            'membership': self.membership.to_dict() if self.membership else None,
            'user': self.user.to_dict(),
        }
