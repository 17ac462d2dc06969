# raffle_service/crud/crud_raffle.py
from raffle_service.crud.base import CRUDBase
from raffle_service.models.raffle import Raffle
from raffle_service.schemas.raffle import RaffleCreate


class CRUDRaffle(CRUDBase[Raffle, RaffleCreate]):
    """CRUD operations for Raffle model. Counters are owned by crud_inventory."""


raffle = CRUDRaffle(Raffle)
