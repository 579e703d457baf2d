"""Tests for the Forma REST client and the activation client."""

from decimal import Decimal
from unittest.mock import patch

import pytest

from forma.api.activation import ActivationAPI
from forma.api.forma_api import FormaAPI
from forma.config.types import ApiConfig, CheckoutConfig
from forma.exceptions import ApiInvalidResponseError
from forma.models.membership import MembershipStatus
from forma.models.payment import PaymentStatus


@pytest.fixture
def client():
    return FormaAPI("https://formacr.com", api_key="public-key")

def test_from_config_uses_timeouts():
    client = FormaAPI.from_config(ApiConfig(base_url="https://example.test", api_key="k", connect_timeout=3, timeout=9))
    assert client.base_url == "https://example.test"
    assert client.timeout == (3, 9)
    assert client.session.headers["x-api-key"] == "k"

def test_get_memberships(client, membership_factory):
    with patch.object(client, '_make_request', return_value={'memberships': [membership_factory('m1')]}) as request:
        records = client.get_memberships('gym-1', limit=50, status='active')

    request.assert_called_once_with(
        'GET', '/api/memberships',
        params={'gymId': 'gym-1', 'limit': 50, 'offset': 0, 'status': 'active'}
    )
    assert len(records) == 1
    assert records[0].id == 'm1'
    assert records[0].status is MembershipStatus.ACTIVE
    assert records[0].monthly_fee == Decimal('25000')

def test_get_memberships_missing_list_is_empty(client):
    with patch.object(client, '_make_request', return_value={}):
        assert client.get_memberships('gym-1') == []

def test_malformed_record_is_invalid_response(client):
    with patch.object(client, '_make_request', return_value={'payments': [{'status': 'pending'}]}):
        with pytest.raises(ApiInvalidResponseError):
            client.get_payments('gym-1')

def test_unknown_status_is_invalid_response(client, payment_factory):
    with patch.object(client, '_make_request', return_value={'payments': [payment_factory('p1', status='refunded')]}):
        with pytest.raises(ApiInvalidResponseError):
            client.get_payments('gym-1')

def test_update_payment_payload(client, payment_factory):
    approved = payment_factory('p1', status='approved', approved_by='admin-1', approved_date='2024-07-02T09:00:00Z')
    with patch.object(client, '_make_request', return_value={'success': True, 'payment': approved}) as request:
        record = client.update_payment('p1', PaymentStatus.APPROVED, 'admin-1')

    request.assert_called_once_with(
        'PATCH', '/api/payments',
        data={'paymentId': 'p1', 'status': 'approved', 'approvedBy': 'admin-1'}
    )
    assert record.status is PaymentStatus.APPROVED
    assert record.approved_date is not None

def test_update_payment_sends_reason_only_when_given(client):
    with patch.object(client, '_make_request', return_value={'success': True}) as request:
        assert client.update_payment('p1', PaymentStatus.REJECTED, 'admin-1', 'Blurry receipt') is None

    assert request.call_args.kwargs['data']['rejectionReason'] == 'Blurry receipt'

def test_get_workouts_sends_month_as_string(client):
    body = {'workouts': [{'id': 'w1', 'gym_id': 'gym-1', 'workout_date': '2024-07-04', 'workout_text': '# WOD'}]}
    with patch.object(client, '_make_request', return_value=body) as request:
        workouts = client.get_workouts('gym-1', 2024, 7)

    assert request.call_args.kwargs['params'] == {'gymId': 'gym-1', 'year': '2024', 'month': '7'}
    assert workouts[0].workout_date.day == 4

def test_delete_workout(client):
    with patch.object(client, '_make_request', return_value={'success': True}) as request:
        client.delete_workout('w1')
    request.assert_called_once_with('DELETE', '/api/daily-workouts', params={'id': 'w1'})

def test_activation_uses_its_own_key():
    activation = ActivationAPI.from_config(
        CheckoutConfig(activation_url="https://formacr.com/api/gym/activate", activation_key="activation-secret"),
        ApiConfig()
    )
    with patch.object(activation, '_make_request', return_value={'success': True}) as request:
        activation.activate('gym-1')

    request.assert_called_once_with(
        'POST', '',
        data={'gymId': 'gym-1'},
        headers={'X-API-Key': 'activation-secret'},
        url="https://formacr.com/api/gym/activate"
    )

def test_non_finite_fee_is_invalid_response(client, membership_factory):
    with patch.object(client, '_make_request', return_value={'memberships': [membership_factory('m1', monthly_fee='NaN')]}):
        with pytest.raises(ApiInvalidResponseError):
            client.get_memberships('gym-1')
