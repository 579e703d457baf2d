"""Tests for status filtering and text search."""

from forma.models.membership import MembershipRecord
from forma.models.payment import PaymentRecord
from forma.services.filters import FilterComposer, matches_search, normalize, status_counts


def test_normalize_strips_accents_and_case():
    assert normalize("González") == "gonzalez"
    assert normalize("MARÍA") == "maria"

def test_search_is_accent_insensitive(membership_factory):
    record = MembershipRecord.from_dict(membership_factory('1', first_name='María', last_name='González'))

    assert matches_search(record, "gonzalez")
    assert matches_search(record, "GONZÁLEZ")
    assert matches_search(record, "maria@")
    assert not matches_search(record, "rodriguez")

def test_empty_query_matches_everything(membership_factory):
    record = MembershipRecord.from_dict(membership_factory('1'))
    assert matches_search(record, "")

def test_whitespace_in_query_is_significant(membership_factory):
    record = MembershipRecord.from_dict(membership_factory('1'))
    assert not matches_search(record, "   ")
    assert matches_search(record, "maría ")
    assert not matches_search(record, "gonzález ")

def test_payment_search_includes_reference(payment_factory):
    record = PaymentRecord.from_dict(payment_factory('p1', sinpe_reference='REF123456'))
    assert matches_search(record, "ref123")

def test_visible_combines_status_and_query_in_order(membership_factory):
    records = [
        MembershipRecord.from_dict(membership_factory('1', 'active', 'María', 'González')),
        MembershipRecord.from_dict(membership_factory('2', 'expired', 'Ana', 'Martínez')),
        MembershipRecord.from_dict(membership_factory('3', 'active', 'Luis', 'Vargas')),
        MembershipRecord.from_dict(membership_factory('4', 'active', 'Mario', 'Solano')),
    ]

    composer = FilterComposer()
    assert [r.id for r in composer.visible(records)] == ['1', '2', '3', '4']

    composer.status_filter = 'active'
    assert [r.id for r in composer.visible(records)] == ['1', '3', '4']

    composer.query = 'mar'
    assert [r.id for r in composer.visible(records)] == ['1', '4']

    composer.status_filter = 'all'
    assert [r.id for r in composer.visible(records)] == ['1', '2', '4']

def test_visible_does_not_modify_records(membership_factory):
    records = [MembershipRecord.from_dict(membership_factory('1'))]
    FilterComposer('expired', 'zzz').visible(records)
    assert len(records) == 1

def test_status_counts(payment_factory):
    records = [
        PaymentRecord.from_dict(payment_factory('1', 'pending')),
        PaymentRecord.from_dict(payment_factory('2', 'approved')),
        PaymentRecord.from_dict(payment_factory('3', 'pending')),
    ]
    counts = status_counts(records, ['pending', 'approved', 'rejected', 'cancelled'])
    assert counts == {'all': 3, 'pending': 2, 'approved': 1, 'rejected': 0, 'cancelled': 0}
