"""
Tests for the raffle inventory counters, against a real SQLite session.
"""

from raffle_service.crud.crud_inventory import inventory
from raffle_service.services.purchase_service import PurchaseService
from raffle_service.services.purchase_state import PurchaseStateMachine
from tests.utils.raffle import create_random_raffle, purchase_request


def test_reserve_issuance_returns_previous_count(db_session):
    raffle = create_random_raffle(db_session)

    assert inventory.reserve_issuance(db_session, raffle.id, 3) == 0
    assert inventory.reserve_issuance(db_session, raffle.id, 2) == 3
    db_session.commit()

    db_session.refresh(raffle)
    assert raffle.issued_tickets == 5


def test_increment_sold_respects_total(db_session):
    raffle = create_random_raffle(db_session, total_tickets=5)

    assert inventory.increment_sold(db_session, raffle.id, 4) == 4
    assert inventory.increment_sold(db_session, raffle.id, 2) is None
    assert inventory.increment_sold(db_session, raffle.id, 1) == 5


def test_decrement_sold_floors_at_zero(db_session):
    raffle = create_random_raffle(db_session, total_tickets=5)
    inventory.increment_sold(db_session, raffle.id, 2)

    assert inventory.decrement_sold(db_session, raffle.id, 1) == 1
    assert inventory.decrement_sold(db_session, raffle.id, 3) == 0


def test_confirmed_and_issued_counts(db_session):
    raffle = create_random_raffle(db_session)
    service = PurchaseService(db_session)
    first = service.create_purchase(
        raffle_id=raffle.id, input_data=purchase_request(operation_number="1", quantity=2)
    )
    service.create_purchase(
        raffle_id=raffle.id, input_data=purchase_request(operation_number="2", quantity=3)
    )
    PurchaseStateMachine(db_session).confirm(first.purchase_id)

    assert inventory.confirmed_count(db_session, raffle.id) == 2
    assert inventory.issued_count(db_session, raffle.id) == 5
    db_session.refresh(raffle)
    assert raffle.issued_tickets == inventory.issued_count(db_session, raffle.id)


def test_lock_raffle_missing(db_session):
    assert inventory.lock_raffle(db_session, "raf_missing") is None
