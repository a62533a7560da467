from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Citizen Complaints API"
    ENV: str = "development"
    LOG_LEVEL: str = Field("INFO", env="LOG_LEVEL")

    # -------------------------------------------------
    # Frontend Domains
    # -------------------------------------------------
    FRONTEND_DOMAIN: Optional[str] = Field(None, env="FRONTEND_DOMAIN")

    FRONTEND_DOMAINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # -------------------------------------------------
    # CORS (auto-built below)
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Primary DB)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = Field(None, env="SUPABASE_URL")
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(None, env="SUPABASE_SERVICE_ROLE_KEY")

    # -------------------------------------------------
    # Token verification
    # -------------------------------------------------
    JWT_SECRET: Optional[str] = Field(None, env="JWT_SECRET")
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: Optional[str] = Field(None, env="JWT_AUDIENCE")

    # -------------------------------------------------
    # SMTP Email Notifications
    # -------------------------------------------------
    SMTP_HOST: Optional[str] = Field(None, env="SMTP_HOST")
    SMTP_PORT: Optional[int] = Field(None, env="SMTP_PORT")
    SMTP_USER: Optional[str] = Field(None, env="SMTP_USER")
    SMTP_PASS: Optional[str] = Field(None, env="SMTP_PASS")

    # New complaint alerts go here
    ADMIN_NOTIFICATION_EMAIL: Optional[str] = Field(None, env="ADMIN_NOTIFICATION_EMAIL")

    # -------------------------------------------------
    # Webhook notifications (Discord, Slack, etc.)
    # -------------------------------------------------
    NOTIFY_WEBHOOK_URL: Optional[str] = Field(None, env="NOTIFY_WEBHOOK_URL")

    # -------------------------------------------------
    # Complaint listing
    # -------------------------------------------------
    DEFAULT_PAGE_SIZE: int = Field(10, description="Page size when the client sends none")
    MAX_PAGE_SIZE: int = Field(100, description="Upper bound for page size")

    # -------------------------------------------------
    # Public submission rate limit (per client IP)
    # -------------------------------------------------
    SUBMIT_RATE_LIMIT: int = 5
    SUBMIT_RATE_WINDOW_SECONDS: int = 3600

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list dynamically after loading settings
# -------------------------------------------------
cors_origins = []

# 1) add deployed frontend domain
if settings.FRONTEND_DOMAIN:
    domain = settings.FRONTEND_DOMAIN
    if not domain.startswith("http"):
        domain = f"https://{domain}"
    cors_origins.append(domain.rstrip("/"))

# 2) add local dev domains
cors_origins.extend([d.rstrip("/") for d in settings.FRONTEND_DOMAINS])

# 3) remove duplicates
settings.BACKEND_CORS_ORIGINS = sorted(list(set(cors_origins)))
