# raffle_service/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from raffle_service.api.error_handlers import raffle_error_handler, validation_error_handler
from raffle_service.api.v1.api import api_router
from raffle_service.core.config import settings
from raffle_service.core.email import init_resend
from raffle_service.core.errors import RaffleServiceError
from raffle_service.core.limiter import limiter

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Raffle service starting up (env={settings.ENV})...")
    init_resend()
    yield
    logger.info("Raffle service shutting down...")


app = FastAPI(
    title=f"{settings.BRAND_NAME} Raffle Service",
    version="1.0.0",
    description="""
        **Raffle ticket sales**

        ## Features

        * **Raffles**: Catalogue with live confirmed and available ticket counts
        * **Purchases**: Payment-reference registration with ticket allocation
        * **Referrals**: Time-boxed referral codes with a purchase discount
        * **Admin review**: Confirm or reject payments, with buyer notifications
        * **Lookup**: Public search of tickets by national id, operation number or code

        ## Authentication

        Admin endpoints require the `X-Internal-Api-Key` header.
        """,
    lifespan=lifespan,
)

origins = [
    settings.FRONTEND_URL,
    "https://www.rifasganaya.pe",
    "http://localhost:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,  # Allow specific origins
    allow_credentials=True,  # Allow cookies and authorization headers
    allow_methods=["*"],  # Allow all methods (GET, POST, etc.)
    allow_headers=["*"],  # Allow all headers
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(RaffleServiceError, raffle_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    return {"status": "Raffle Service is running"}
