"""Tests for approving and rejecting payments."""

from unittest.mock import Mock

import pytest

from forma.exceptions import ApiResponseError, TransitionError
from forma.models.payment import PaymentRecord, PaymentStatus
from forma.services.collection_store import CollectionStore
from forma.services.status_transitions import StatusTransitionHandler


@pytest.fixture
def backend(payment_factory):
    """Payment rows as the backend currently holds them."""
    return {
        'p1': payment_factory('p1', 'pending'),
        'p2': payment_factory('p2', 'approved'),
    }

@pytest.fixture
def store(backend):
    def fetch(gym_id, limit, offset, status):
        rows = [row for row in backend.values() if status is None or row['status'] == status]
        return [PaymentRecord.from_dict(row) for row in rows]

    store = CollectionStore(Mock(side_effect=fetch))
    store.reload('gym-1')
    return store

@pytest.fixture
def api(backend):
    api = Mock()

    def update_payment(payment_id, status, approved_by, rejection_reason=None):
        row = backend[payment_id]
        row['status'] = status.value
        row['approved_by'] = approved_by
        row['approved_date'] = '2024-07-02T09:00:00Z'
        if rejection_reason:
            row['rejection_reason'] = rejection_reason
        return PaymentRecord.from_dict(row)

    api.update_payment.side_effect = update_payment
    return api

def test_approve_reloads_collection(api, store, language):
    handler = StatusTransitionHandler(api, store, 'admin-1', language=language)

    assert handler.approve('p1')

    api.update_payment.assert_called_once_with('p1', PaymentStatus.APPROVED, 'admin-1', None)
    assert store._fetch.call_count == 2
    record = store.get('p1')
    assert record.status is PaymentStatus.APPROVED
    assert record.approved_date is not None
    assert record.approved_by == 'admin-1'
    assert not handler.busy

def test_reload_keeps_status_scope(api, store, language):
    store.reload('gym-1', 'pending')
    handler = StatusTransitionHandler(api, store, 'admin-1', language=language)

    handler.approve('p1')

    assert store.get('p1') is None
    assert store.records == []

def test_reject_with_blank_reason_sends_none(api, store, language):
    handler = StatusTransitionHandler(api, store, 'admin-1', language=language)

    assert handler.reject('p1', '   ')

    api.update_payment.assert_called_once_with('p1', PaymentStatus.REJECTED, 'admin-1', None)
    assert store.get('p1').status is PaymentStatus.REJECTED

def test_reject_with_reason(api, store, language):
    handler = StatusTransitionHandler(api, store, 'admin-1', language=language)
    handler.reject('p1', ' Blurry receipt ')
    api.update_payment.assert_called_once_with('p1', PaymentStatus.REJECTED, 'admin-1', 'Blurry receipt')
    assert store.get('p1').rejection_reason == 'Blurry receipt'

def test_patch_mode_replaces_record_without_reload(api, store, language):
    handler = StatusTransitionHandler(api, store, 'admin-1', reconcile='patch', language=language)

    handler.approve('p1')

    assert store._fetch.call_count == 1
    assert store.get('p1').status is PaymentStatus.APPROVED

def test_patch_mode_falls_back_to_reload(api, store, language):
    api.update_payment.side_effect = None
    api.update_payment.return_value = None
    handler = StatusTransitionHandler(api, store, 'admin-1', reconcile='patch', language=language)

    handler.approve('p1')

    assert store._fetch.call_count == 2

def test_non_pending_payment_is_refused(api, store, language):
    handler = StatusTransitionHandler(api, store, 'admin-1', language=language)

    with pytest.raises(TransitionError) as exc_info:
        handler.approve('p2')

    assert exc_info.value.details == {'payment_id': 'p2'}
    api.update_payment.assert_not_called()

def test_unknown_payment_is_refused(api, store, language):
    handler = StatusTransitionHandler(api, store, 'admin-1', language=language)
    with pytest.raises(TransitionError):
        handler.reject('missing')
    api.update_payment.assert_not_called()

def test_transition_refused_while_busy(api, store, language):
    handler = StatusTransitionHandler(api, store, 'admin-1', language=language)
    handler.busy = True
    with pytest.raises(TransitionError, match="in progress"):
        handler.approve('p1')

def test_api_failure_sets_error_and_keeps_records(api, store, language):
    api.update_payment.side_effect = ApiResponseError(409, "Payment already processed")
    handler = StatusTransitionHandler(api, store, 'admin-1', language=language)

    assert not handler.approve('p1')

    assert handler.error_message == "Payment already processed"
    assert store.get('p1').status is PaymentStatus.PENDING
    assert store._fetch.call_count == 1
    assert not handler.busy

def test_unknown_reconcile_mode():
    with pytest.raises(ValueError):
        StatusTransitionHandler(Mock(), Mock(), 'admin-1', reconcile='merge')
