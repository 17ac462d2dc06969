# raffle_service/api/v1/api.py

from fastapi import APIRouter
from raffle_service.api.v1.endpoints import (
    admin,
    health,
    purchases,
    raffles,
    referrals,
)

# This is the main router for the v1 API.
# It will include all the specific endpoint routers.
api_router = APIRouter()

api_router.include_router(raffles.router)
api_router.include_router(purchases.router)
api_router.include_router(referrals.router)
api_router.include_router(admin.router)
api_router.include_router(health.router)
