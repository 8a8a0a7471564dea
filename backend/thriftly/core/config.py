"""
Centralized application configuration
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings"""

    # API Settings
    API_TITLE: str = "Thriftly API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Sustainable fashion marketplace API"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_DEBUG: bool = True

    # Storage backend: "memory" (tests/demo) or "sql" (persistent)
    STORE_BACKEND: str = "memory"
    DATABASE_URL: str = "sqlite:///./thriftly.db"

    # Auth
    AUTH_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRY_HOURS: int = 24
    PASSWORD_SCHEMES: str = "bcrypt"

    # Blob storage (Supabase Storage)
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    STORAGE_BUCKET: str = "clothing-images"
    MAX_IMAGE_BYTES: int = 5 * 1024 * 1024
    MAX_IMAGES_PER_PRODUCT: int = 5

    # Browsing
    DEFAULT_PAGE_SIZE: int = 12

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        import json
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    def get_password_schemes(self) -> List[str]:
        """Parse PASSWORD_SCHEMES into a passlib scheme list"""
        return [scheme.strip() for scheme in self.PASSWORD_SCHEMES.split(",") if scheme.strip()]

    @property
    def supabase_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_SERVICE_ROLE_KEY)

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
