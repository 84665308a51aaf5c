"""
Configuration management for PocketCloset backend
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


"""Application settings and configuration"""
class Settings:

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR: str = os.getenv("LOG_DIR", "")

    # Database Configuration
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./pocketcloset.db")

    # Comma separated origins allowed in production
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "")

    # Session tokens
    JWT_SECRET: str = os.getenv("JWT_SECRET", "change-me")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "10080"))  # 7 days

    # Brute-force protection and password reset
    REDIS_URL: str = os.getenv("REDIS_URL", "")
    LOGIN_MAX_ATTEMPTS: int = int(os.getenv("LOGIN_MAX_ATTEMPTS", "5"))
    LOGIN_BLOCK_SECONDS: int = int(os.getenv("LOGIN_BLOCK_SECONDS", "900"))
    RESET_TOKEN_TTL_SECONDS: int = int(os.getenv("RESET_TOKEN_TTL_SECONDS", "900"))
    UPLOAD_CLAIM_TTL_SECONDS: int = int(os.getenv("UPLOAD_CLAIM_TTL_SECONDS", "86400"))

    # slowapi limits on auth endpoints
    RATE_LIMIT_ENABLED: bool = _flag("RATE_LIMIT_ENABLED", "true")
    AUTH_RATE_LIMIT: str = os.getenv("AUTH_RATE_LIMIT", "20/minute")

    # Cloudinary Configuration
    CLOUDINARY_CLOUD_NAME: str = os.getenv("CLOUDINARY_CLOUD_NAME", "")
    CLOUDINARY_API_KEY: str = os.getenv("CLOUDINARY_API_KEY", "")
    CLOUDINARY_API_SECRET: str = os.getenv("CLOUDINARY_API_SECRET", "")

    # Image upload settings
    CLOUDINARY_FOLDER: str = os.getenv("CLOUDINARY_FOLDER", "pocketcloset")
    MAX_IMAGE_SIZE: int = int(os.getenv("MAX_IMAGE_SIZE", "10485760"))  # 10MB default

    # Feature flags
    USE_CLOUDINARY: bool = _flag("USE_CLOUDINARY", "true")

    # Google Gemini Configuration
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    GEMINI_VISION_MODEL: str = os.getenv("GEMINI_VISION_MODEL", "gemini-2.0-flash")

    # OAuth audiences, checked only when set
    GOOGLE_CLIENT_ID: str = os.getenv("GOOGLE_CLIENT_ID", "")
    APPLE_CLIENT_ID: str = os.getenv("APPLE_CLIENT_ID", "")

    # Weather fallback location
    DEFAULT_CITY: str = os.getenv("DEFAULT_CITY", "Alicante")
    DEFAULT_LATITUDE: float = float(os.getenv("DEFAULT_LATITUDE", "38.3452"))
    DEFAULT_LONGITUDE: float = float(os.getenv("DEFAULT_LONGITUDE", "-0.4810"))

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def cors_origins(self) -> list:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    """Check if Cloudinary is properly configured"""
    @property
    def cloudinary_configured(self) -> bool:
        return bool(
            self.CLOUDINARY_CLOUD_NAME
            and self.CLOUDINARY_API_KEY
            and self.CLOUDINARY_API_SECRET
        )

settings = Settings()
