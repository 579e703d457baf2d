"""Pytest configuration and shared fixtures."""

from typing import Any
from unittest.mock import Mock

import pytest

from forma.api.forma_api import FormaAPI
from forma.models.auth import Gym
from forma.models.auth import User
from forma.services.auth_service import AuthSession
from forma.services.preferences import LanguagePreference
from forma.services.storage import MemoryStorage


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch, tmp_path):
    """Keep tests away from the real config directory and environment."""
    monkeypatch.setenv("FORMA_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("LANG", "en_US.UTF-8")
    for var in ('FORMA_API_URL', 'FORMA_API_KEY', 'FORMA_API_TIMEOUT', 'FORMA_PAGE_SIZE',
                'FORMA_FALLBACK_ON_ERROR', 'STRIPE_SECRET_KEY', 'FORMA_ACTIVATION_URL',
                'FORMA_ACTIVATION_KEY', 'FORMA_STATE_DIR', 'FORMA_LOG_LEVEL', 'FORMA_LOG_FILE',
                'FORMA_SESSION'):
        monkeypatch.delenv(var, raising=False)
    yield

@pytest.fixture
def language():
    return LanguagePreference.fixed('en')

@pytest.fixture
def gym_data() -> dict[str, Any]:
    return {
        'id': 'gym-1',
        'name': 'Forma Escazú',
        'monthly_fee': 30000,
        'sinpe_phone': '8888-0000',
        'is_active': True,
        'role': 'owner',
    }

@pytest.fixture
def user_data() -> dict[str, Any]:
    return {'id': 'admin-1', 'email': 'admin@formacr.com', 'metadata': {}}

@pytest.fixture
def api():
    """A FormaAPI double; individual tests set return values."""
    mock = Mock(spec=FormaAPI)
    mock.base_url = "https://formacr.com"
    return mock

@pytest.fixture
def auth(api, language, gym_data, user_data):
    """An AuthSession already signed in to ``gym-1``."""
    session = AuthSession(api, MemoryStorage(), MemoryStorage(), language=language)
    session.user = User.from_dict(user_data)
    session.gym = Gym.from_dict(gym_data)
    return session

def make_payment(
    payment_id: str,
    status: str = 'pending',
    first_name: str = 'María',
    last_name: str = 'González',
    **overrides: Any
) -> dict[str, Any]:
    data = {
        'id': payment_id,
        'membership_id': f'membership-{payment_id}',
        'amount': 25000,
        'status': status,
        'payment_method': 'sinpe',
        'sinpe_reference': f'REF-{payment_id}',
        'sinpe_phone': '8888-8888',
        'payment_proof_url': f'/proofs/{payment_id}.jpg',
        'payment_date': '2024-07-01T10:00:00Z',
        'user': {
            'first_name': first_name,
            'last_name': last_name,
            'email': f'{payment_id}@example.com',
        },
    }
    data.update(overrides)
    return data

def make_membership(
    membership_id: str,
    status: str = 'active',
    first_name: str = 'María',
    last_name: str = 'González',
    **overrides: Any
) -> dict[str, Any]:
    data = {
        'id': membership_id,
        'user_id': f'user-{membership_id}',
        'gym_id': 'gym-1',
        'status': status,
        'monthly_fee': 25000,
        'start_date': '2024-01-01',
        'user': {
            'first_name': first_name,
            'last_name': last_name,
            'email': f'{first_name.lower()}@example.com',
        },
        'latest_payment': None,
    }
    data.update(overrides)
    return data

@pytest.fixture
def payment_factory():
    return make_payment

@pytest.fixture
def membership_factory():
    return make_membership
