# raffle_service/core/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Values come from the process environment (Docker Compose / .env loader).
    model_config = SettingsConfigDict(extra="ignore")

    # The environment mode: 'local' or 'prod'
    ENV: str = "local"

    # --- Production URLs (for inside Docker) ---
    DATABASE_URL_PROD: str = "postgresql://raffles:raffles@db:5432/raffles"

    # --- Local Development URLs (for running locally) ---
    DATABASE_URL_LOCAL: str = "sqlite:///./raffles.db"

    # Admin endpoints authenticate with this shared key
    INTERNAL_API_KEY: str = "change-me"

    # Email delivery (Resend)
    RESEND_API_KEY: str = ""
    RESEND_FROM_DOMAIN: str = "rifasganaya.pe"

    # Purchase transaction boundary
    TRANSACTION_MAX_ATTEMPTS: int = 3
    TRANSACTION_TIMEOUT_MS: int = 5000

    # Branding used in notification texts
    BRAND_NAME: str = "Rifas Gana Ya"
    SUPPORT_PHONE: str = "976476422"
    SUPPORT_EMAIL: str = "ventas@rifasganaya.pe"

    FRONTEND_URL: str = "http://localhost:5173"

    # --- Dynamic Properties ---
    @property
    def DATABASE_URL(self) -> str:
        return (
            self.DATABASE_URL_LOCAL if self.ENV == "local" else self.DATABASE_URL_PROD
        )


# Create a single instance of the settings
settings = Settings()
