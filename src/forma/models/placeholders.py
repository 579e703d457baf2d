"""
Placeholder membership records used when ``memberships.fallback_on_error`` is enabled.

Development aid only: the list screen shows these instead of an empty table
when the backend is unreachable.
"""

import unicodedata
from typing import Any

from forma.models.membership import MembershipRecord


def _membership(
    index: int,
    status: str,
    first_name: str,
    last_name: str,
    phone: str | None,
    date_of_birth: str,
    start_date: str | None,
    end_date: str | None,
    payment_status: str,
    payment_date: str,
    reference: str,
    sinpe_phone: str,
) -> dict[str, Any]:
    ascii_name = unicodedata.normalize('NFKD', f"{first_name}.{last_name}").encode('ascii', 'ignore').decode()
    email = f"{ascii_name.lower()}@email.com"
    return {
        'id': str(index),
        'user_id': f'user-{index}',
        'gym_id': 'gym-1',
        'status': status,
        'start_date': start_date,
        'end_date': end_date,
        'grace_period_end': None,
        'monthly_fee': 25000,
        'created_at': payment_date,
        'user': {
            'first_name': first_name,
            'last_name': last_name,
            'email': email,
            'phone': phone,
            'date_of_birth': date_of_birth,
            'profile_image_url': None,
        },
        'latest_payment': {
            'id': f'payment-{index}',
            'amount': 25000,
            'status': payment_status,
            'payment_date': payment_date,
            'sinpe_reference': reference,
            'sinpe_phone': sinpe_phone,
            'payment_proof_url': f'/payment-proof-{index}.jpg',
        },
    }

PLACEHOLDER_MEMBERSHIPS: list[dict[str, Any]] = [
    _membership(1, 'active', 'María', 'González', '+506 8888-8888', '1990-03-15',
                '2024-07-01', '2024-08-01', 'approved', '2024-07-01T09:00:00Z',
                'REF123456', '+506 8888-8888'),
    _membership(2, 'pending_payment', 'Carlos', 'Rodríguez', '+506 7777-7777', '1985-11-22',
                None, None, 'pending', '2024-07-15T14:00:00Z',
                'REF789012', '+506 7777-7777'),
    _membership(3, 'expired', 'Ana', 'Martínez', '+506 6666-6666', '1992-08-07',
                '2024-06-01', '2024-07-10', 'approved', '2024-06-01T07:30:00Z',
                'REF345678', '+506 6666-6666'),
    _membership(4, 'active', 'Luis', 'Vargas', None, '1988-12-03',
                '2024-07-10', '2024-08-10', 'approved', '2024-07-10T15:30:00Z',
                'REF901234', '+506 5555-5555'),
]

def placeholder_memberships() -> list[MembershipRecord]:
    """Fresh placeholder records; callers may mutate the returned list."""
    return [MembershipRecord.from_dict(data) for data in PLACEHOLDER_MEMBERSHIPS]
