# raffle_service/models/__init__.py
# Import all models so SQLAlchemy can resolve relationships by name.

from raffle_service.db.base_class import Base
from raffle_service.models.raffle import Raffle
from raffle_service.models.purchase import Purchase
from raffle_service.models.raffle_ticket import RaffleTicket
from raffle_service.models.referral import Referral
