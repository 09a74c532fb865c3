"""Application Settings - Central Configuration"""
from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # MongoDB
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "helpdesk_dev"

    # Access tokens
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expires_days: int = 15

    # Password hashing
    bcrypt_rounds: int = 10

    # SLA
    sla_warning_hours: int = 24

    # Attachments
    uploads_path: str = "./uploads"
    attachments_max_mb: int = 5
    max_attachments_per_ticket: int = 5
    allowed_mime_types: str = "image/jpeg,image/png,image/gif,image/webp"

    # Logging
    logs_path: str = "./logs"
    log_level: str = "INFO"

    # CORS - set to "*" to allow all origins
    cors_origins: str = "http://localhost:5173"

    # Frontend URL (always allowed by CORS)
    frontend_url: str = ""

    # Environment
    environment: str = "development"
    debug: bool = True

    # Seeded admin account (scripts/seed_admin.py)
    # Change these in production!
    admin_email: str = "admin@company.com"
    admin_password: str = "sample123"
    admin_name: str = "System Admin"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string to list, including the frontend URL"""
        origins = [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
        if self.frontend_url and self.frontend_url not in origins:
            origins.append(self.frontend_url)
        return origins

    @property
    def allowed_mime_types_list(self) -> List[str]:
        """Parse allowed mime types string to list"""
        return [mime.strip() for mime in self.allowed_mime_types.split(",")]

    @property
    def attachments_max_bytes(self) -> int:
        """Max attachment size in bytes"""
        return self.attachments_max_mb * 1024 * 1024


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
