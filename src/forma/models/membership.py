"""
Membership model for the Forma client.
"""

from dataclasses import dataclass
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
from forma.models.payment import MemberProfile
from forma.models.payment import PaymentStatus


DEFAULT_MONTHLY_FEE = Decimal('25000')
CURRENCY = 'CRC'

class MembershipStatus(str, Enum):
    """Lifecycle states of a membership as reported by the backend."""
    PENDING_PAYMENT = "pending_payment"
    ACTIVE = "active"
    EXPIRED = "expired"
    INACTIVE = "inactive"
    CANCELLED = "cancelled"

@dataclass
class LatestPayment:
    """Most recent payment embedded in a membership. Backend-determined."""
    id: str
    amount: Decimal
    status: PaymentStatus
    payment_date: datetime | None = None
    sinpe_reference: str | None = None
    sinpe_phone: str | None = None
    payment_proof_url: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "LatestPayment | None":
        if not data:
            return None
        return cls(
            id=str(data['id']),
            amount=parse_amount(data.get('amount')),
            status=PaymentStatus(data.get('status', 'pending')),
            payment_date=parse_datetime(data.get('payment_date')),
            sinpe_reference=data.get('sinpe_reference'),
            sinpe_phone=data.get('sinpe_phone'),
            payment_proof_url=data.get('payment_proof_url'),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'amount': amount_to_json(self.amount),
            'status': self.status.value,
            'payment_date': format_datetime(self.payment_date),
            'sinpe_reference': self.sinpe_reference,
            'sinpe_phone': self.sinpe_phone,
            'payment_proof_url': self.payment_proof_url,
        }

@dataclass
class MembershipRecord:
    """A member's subscription to one gym."""
    id: str
    user_id: str
    gym_id: str
    status: MembershipStatus
    monthly_fee: Decimal
    user: MemberProfile
    start_date: date | None = None
    end_date: date | None = None
    grace_period_end: date | None = None
    created_at: datetime | None = None
    latest_payment: LatestPayment | None = None

    def __post_init__(self) -> None:
        if self.monthly_fee < 0:
            raise ValueError(f"monthly_fee must be non-negative, got {self.monthly_fee}")

    @property
    def searchable_fields(self) -> list[str]:
        return [self.user.full_name, self.user.email]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MembershipRecord":
        """Create a MembershipRecord from the ``/api/memberships`` JSON shape."""
        return cls(
            id=str(data['id']),
            user_id=str(data.get('user_id', '')),
            gym_id=str(data.get('gym_id', '')),
            status=MembershipStatus(data.get('status', 'pending_payment')),
            monthly_fee=parse_amount(data.get('monthly_fee')),
            user=MemberProfile.from_dict(data.get('user')),
            start_date=parse_date(data.get('start_date')),
            end_date=parse_date(data.get('end_date')),
            grace_period_end=parse_date(data.get('grace_period_end')),
            created_at=parse_datetime(data.get('created_at')),
            latest_payment=LatestPayment.from_dict(data.get('latest_payment')),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'user_id': self.user_id,
            'gym_id': self.gym_id,
            'status': self.status.value,
            'start_date': format_date(self.start_date),
            'end_date': format_date(self.end_date),
            'grace_period_end': format_date(self.grace_period_end),
            'monthly_fee': amount_to_json(self.monthly_fee),
            'created_at': format_datetime(self.created_at),
            'user': self.user.to_dict(),
            'latest_payment': self.latest_payment.to_dict() if self.latest_payment else None,
        }
