"""
Authenticated identity models: the signed-in staff user and their gym (tenant).
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from forma.models.membership import DEFAULT_MONTHLY_FEE
from forma.models.parsing import amount_to_json
from forma.models.parsing import parse_amount


@dataclass
class User:
    """Signed-in staff account."""
    id: str
    email: str
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        return cls(
            id=str(data['id']),
            email=str(data.get('email', '')),
            metadata=dict(data.get('metadata') or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {'id': self.id, 'email': self.email, 'metadata': self.metadata}

@dataclass
class Gym:
    """The tenant every membership, payment and workout is scoped to."""
    id: str
    name: str
    monthly_fee: Decimal = DEFAULT_MONTHLY_FEE
    sinpe_phone: str = ""
    is_active: bool = False
    role: str = ""
    description: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    logo_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Gym":
        return cls(
            id=str(data['id']),
            name=str(data.get('name', '')),
            monthly_fee=parse_amount(data.get('monthly_fee'), default=DEFAULT_MONTHLY_FEE),
            sinpe_phone=str(data.get('sinpe_phone') or ''),
            is_active=bool(data.get('is_active', False)),
            role=str(data.get('role') or ''),
            description=data.get('description'),
            address=data.get('address'),
            phone=data.get('phone'),
            email=data.get('email'),
            logo_url=data.get('logo_url'),
            created_at=data.get('created_at'),
            updated_at=data.get('updated_at'),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'address': self.address,
            'phone': self.phone,
            'email': self.email,
            'logo_url': self.logo_url,
            'monthly_fee': amount_to_json(self.monthly_fee),
            'sinpe_phone': self.sinpe_phone,
            'is_active': self.is_active,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
            'role': self.role,
        }
