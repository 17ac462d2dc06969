"""
Tests for the purchase transaction manager.

Verifies that PurchaseService correctly:
- Allocates exactly `quantity` ticket codes per purchase
- Rejects reused operation numbers without touching inventory or codes
- Applies and records valid referral codes, refusing invalid ones
- Refuses purchases beyond the confirmed-ticket availability
- Lists and searches purchases
"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from raffle_service.constants.purchase import PurchaseStatus
from raffle_service.core.errors import (
    DuplicateOperationNumberError,
    InsufficientInventoryError,
    InvalidReferralError,
    PurchaseNotFoundError,
    RaffleNotFoundError,
    ValidationFailedError,
)
from raffle_service.models.purchase import Purchase
from raffle_service.models.raffle_ticket import RaffleTicket
from raffle_service.services.purchase_service import PurchaseService
from raffle_service.services.purchase_state import PurchaseStateMachine
from tests.utils.raffle import create_random_raffle, create_referral, purchase_request


class TestCreatePurchase:

    def test_creates_pending_purchase_with_tickets(self, db_session):
        raffle = create_random_raffle(db_session)
        service = PurchaseService(db_session)

        result = service.create_purchase(
            raffle_id=raffle.id, input_data=purchase_request(quantity=2)
        )

        assert result.tickets == ["471001", "471002"]
        assert result.amount == 50.0
        assert result.referral_code is None

        purchase = db_session.get(Purchase, result.purchase_id)
        assert purchase.status == PurchaseStatus.PENDING
        assert purchase.name == "EDGARD ABANTO RUIZ"
        assert purchase.payment_method == "yape"
        assert purchase.ticket_codes == result.tickets
        assert len(purchase.ticket_codes) == purchase.quantity

        db_session.refresh(raffle)
        assert raffle.sold_tickets == 0
        assert raffle.issued_tickets == 2

    def test_correlative_continues_across_purchases(self, db_session):
        raffle = create_random_raffle(db_session)
        service = PurchaseService(db_session)

        service.create_purchase(
            raffle_id=raffle.id, input_data=purchase_request(operation_number="1001", quantity=3)
        )
        result = service.create_purchase(
            raffle_id=raffle.id, input_data=purchase_request(operation_number="99817", quantity=2)
        )

        assert result.tickets == ["471004", "471005"]

    def test_unknown_raffle(self, db_session):
        service = PurchaseService(db_session)

        with pytest.raises(RaffleNotFoundError):
            service.create_purchase(raffle_id="raf_missing", input_data=purchase_request())

    def test_duplicate_operation_number_has_no_side_effects(self, db_session):
        raffle = create_random_raffle(db_session)
        other = create_random_raffle(db_session)
        service = PurchaseService(db_session)
        service.create_purchase(raffle_id=raffle.id, input_data=purchase_request(quantity=2))

        # Same reference on another raffle is still a duplicate
        with pytest.raises(DuplicateOperationNumberError) as exc_info:
            service.create_purchase(
                raffle_id=other.id,
                input_data=purchase_request(quantity=1, national_id="71234567"),
            )

        assert exc_info.value.field == "operation_number"
        db_session.refresh(other)
        assert other.issued_tickets == 0
        assert other.sold_tickets == 0
        assert db_session.query(Purchase).count() == 1
        assert db_session.query(RaffleTicket).count() == 2

    def test_duplicate_of_rejected_purchase_still_refused(self, db_session):
        raffle = create_random_raffle(db_session)
        service = PurchaseService(db_session)
        first = service.create_purchase(raffle_id=raffle.id, input_data=purchase_request())
        PurchaseStateMachine(db_session).reject(first.purchase_id)

        with pytest.raises(DuplicateOperationNumberError):
            service.create_purchase(raffle_id=raffle.id, input_data=purchase_request())

    def test_referral_discount_applied(self, db_session):
        raffle = create_random_raffle(db_session)
        create_referral(db_session, code="JUAN10")
        service = PurchaseService(db_session)

        result = service.create_purchase(
            raffle_id=raffle.id,
            input_data=purchase_request(quantity=2, referral_code=" JUAN10 "),
        )

        assert result.amount == 44.0
        assert result.referral_code == "JUAN10"
        purchase = db_session.get(Purchase, result.purchase_id)
        assert purchase.amount == Decimal("44.00")
        assert purchase.referral_code == "JUAN10"

    def test_expired_referral_refused(self, db_session):
        raffle = create_random_raffle(db_session)
        now = datetime(2026, 3, 15, tzinfo=timezone.utc)
        create_referral(db_session, code="OLD", active_until=now - timedelta(days=1))
        service = PurchaseService(db_session)

        with pytest.raises(InvalidReferralError) as exc_info:
            service.create_purchase(
                raffle_id=raffle.id,
                input_data=purchase_request(referral_code="OLD"),
                now=now,
            )

        assert exc_info.value.reason == "expired"
        db_session.refresh(raffle)
        assert raffle.issued_tickets == 0
        assert db_session.query(Purchase).count() == 0

    def test_insufficient_inventory(self, db_session):
        raffle = create_random_raffle(db_session, total_tickets=3)
        service = PurchaseService(db_session)

        with pytest.raises(InsufficientInventoryError) as exc_info:
            service.create_purchase(raffle_id=raffle.id, input_data=purchase_request(quantity=4))

        assert exc_info.value.available == 3
        assert exc_info.value.field == "quantity"

    def test_pending_purchases_do_not_reserve_inventory(self, db_session):
        raffle = create_random_raffle(db_session, total_tickets=3)
        service = PurchaseService(db_session)

        service.create_purchase(
            raffle_id=raffle.id, input_data=purchase_request(operation_number="1", quantity=3)
        )
        result = service.create_purchase(
            raffle_id=raffle.id, input_data=purchase_request(operation_number="2", quantity=3)
        )

        # Codes keep counting past the pending ones
        assert result.tickets == ["421004", "421005", "421006"]

    def test_sold_out_after_confirmation(self, db_session):
        raffle = create_random_raffle(db_session, total_tickets=2)
        service = PurchaseService(db_session)
        first = service.create_purchase(
            raffle_id=raffle.id, input_data=purchase_request(operation_number="1", quantity=2)
        )
        PurchaseStateMachine(db_session).confirm(first.purchase_id)

        with pytest.raises(InsufficientInventoryError) as exc_info:
            service.create_purchase(
                raffle_id=raffle.id, input_data=purchase_request(operation_number="2", quantity=1)
            )

        assert exc_info.value.available == 0


class TestListAndSearch:

    def _seed(self, db_session):
        raffle = create_random_raffle(db_session)
        create_referral(db_session, code="JUAN10")
        service = PurchaseService(db_session)
        first = service.create_purchase(
            raffle_id=raffle.id,
            input_data=purchase_request(operation_number="5551", quantity=2, referral_code="JUAN10"),
        )
        second = service.create_purchase(
            raffle_id=raffle.id,
            input_data=purchase_request(operation_number="5552", quantity=1, national_id="71234567"),
        )
        return raffle, service, first, second

    def test_list_purchases_joins_raffle_and_referral(self, db_session):
        raffle, service, first, second = self._seed(db_session)

        rows = service.list_purchases()

        assert {r.id for r in rows} == {first.purchase_id, second.purchase_id}
        by_id = {r.id: r for r in rows}
        assert by_id[first.purchase_id].raffle_title == raffle.title
        assert by_id[first.purchase_id].referral_name == "JUAN PEREZ"
        assert by_id[first.purchase_id].referral_email == "juan.perez@example.com"
        assert by_id[first.purchase_id].tickets == first.tickets
        assert by_id[second.purchase_id].referral_name is None

    def test_search_by_national_id_returns_one_row_per_ticket(self, db_session):
        raffle, service, first, second = self._seed(db_session)

        rows = service.search_purchases(national_id="45678912")

        assert [r.ticket_code for r in rows] == first.tickets
        assert rows[0].full_name == "EDGARD ABANTO"
        assert rows[0].operation_number == "5551"
        assert rows[0].raffle_title == raffle.title
        assert rows[0].status.startswith("PENDIENTE")

    def test_search_by_ticket_code(self, db_session):
        raffle, service, first, second = self._seed(db_session)

        rows = service.search_purchases(ticket_code=second.tickets[0])

        assert len(rows) == 1
        assert rows[0].operation_number == "5552"

    def test_search_reflects_confirmation(self, db_session):
        raffle, service, first, second = self._seed(db_session)
        PurchaseStateMachine(db_session).confirm(second.purchase_id)

        rows = service.search_purchases(operation_number="5552")

        assert rows[0].status.startswith("CONFIRMADO")

    def test_search_requires_a_criterion(self, db_session):
        with pytest.raises(ValidationFailedError):
            PurchaseService(db_session).search_purchases()

    def test_search_rejects_malformed_national_id(self, db_session):
        with pytest.raises(ValidationFailedError) as exc_info:
            PurchaseService(db_session).search_purchases(national_id="12ab")

        assert exc_info.value.field == "national_id"

    def test_search_without_matches(self, db_session):
        self._seed(db_session)

        with pytest.raises(PurchaseNotFoundError):
            PurchaseService(db_session).search_purchases(national_id="10000000")
