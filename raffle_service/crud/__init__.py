# raffle_service/crud/__init__.py

from .crud_raffle import raffle
from .crud_referral import referral
from .crud_purchase import purchase
from .crud_inventory import inventory
