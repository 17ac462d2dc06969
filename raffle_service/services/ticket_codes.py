# raffle_service/services/ticket_codes.py
from typing import List

# Correlatives start after this offset: the first ticket of a raffle is 1001.
CORRELATIVE_OFFSET = 1000


def generate_ticket_codes(
    national_id: str, operation_number: str, issued_count: int, quantity: int
) -> List[str]:
    """
    Derive the ticket codes for one purchase.

    Each code is the buyer's first national-id character, the last character
    of the operation number, and the correlative `1000 + issued_count + 1 + i`.
    `issued_count` must come from an issuance reservation so that concurrent
    purchases never share a correlative range.

    Example: national id 45678912, operation 99817, issued 3, quantity 2
    gives ["471004", "471005"].
    """
    national_id = str(national_id)
    operation_number = str(operation_number)
    if not national_id or not operation_number:
        raise ValueError("national_id and operation_number must not be empty")
    if quantity < 1:
        raise ValueError("quantity must be at least 1")
    if issued_count < 0:
        raise ValueError("issued_count cannot be negative")

    prefix = f"{national_id[0]}{operation_number[-1]}"
    base = CORRELATIVE_OFFSET + issued_count
    return [f"{prefix}{base + 1 + i}" for i in range(quantity)]
