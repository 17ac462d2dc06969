"""
Tests for ticket code derivation.
"""

import pytest

from raffle_service.services.ticket_codes import generate_ticket_codes


class TestGenerateTicketCodes:

    def test_example_codes(self):
        """National id 45678912, operation 99817, 3 already issued, 2 bought."""
        assert generate_ticket_codes("45678912", "99817", 3, 2) == ["471004", "471005"]

    def test_first_ticket_of_raffle(self):
        assert generate_ticket_codes("71234567", "A-120", 0, 1) == ["701001"]

    def test_length_matches_quantity_and_suffix_increases(self):
        codes = generate_ticket_codes("45678912", "99817", 10, 5)

        assert len(codes) == 5
        suffixes = [int(c[2:]) for c in codes]
        assert suffixes == list(range(1011, 1016))

    def test_disjoint_issuance_ranges_never_collide(self):
        first = generate_ticket_codes("45678912", "11117", 0, 3)
        second = generate_ticket_codes("49999999", "22227", 3, 3)

        assert not set(first) & set(second)

    @pytest.mark.parametrize(
        "national_id, operation_number",
        [("", "99817"), ("45678912", "")],
    )
    def test_empty_inputs_rejected(self, national_id, operation_number):
        with pytest.raises(ValueError):
            generate_ticket_codes(national_id, operation_number, 0, 1)

    def test_invalid_counts_rejected(self):
        with pytest.raises(ValueError):
            generate_ticket_codes("45678912", "99817", 0, 0)
        with pytest.raises(ValueError):
            generate_ticket_codes("45678912", "99817", -1, 1)
