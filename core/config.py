from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Land Registry API"
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # -------------------------------------------------
    # CORS (mobile + web clients)
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:8081",
        "http://localhost:19006",
    ]

    # -------------------------------------------------
    # Supabase (Primary DB & Auth)
    # URL + anon key are the two values every client needs.
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = Field(None)
    SUPABASE_ANON_KEY: Optional[str] = Field(None)

    # Service role is only used for server-initiated notifications
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(None)

    # -------------------------------------------------
    # Admin review alerts (Discord, Slack, etc.)
    # -------------------------------------------------
    ADMIN_WEBHOOK_URL: Optional[str] = Field(None)

    # -------------------------------------------------
    # Caching / rate limits
    # -------------------------------------------------
    ZONING_CACHE_TTL_SECONDS: int = Field(300, description="TTL for the zoning law list (default: 5 minutes)")
    SIGNUP_RATE_LIMIT: int = Field(5, description="Signups allowed per window per IP/email")
    SIGNUP_RATE_WINDOW_SECONDS: int = Field(900)
    VERIFICATION_REQUEST_LIMIT: int = Field(3, description="Verification requests per window per requester")
    VERIFICATION_REQUEST_WINDOW_SECONDS: int = Field(3600)

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    model_config = SettingsConfigDict(case_sensitive=True)


# Instantiate settings
settings = Settings()
