from pydantic_settings import BaseSettings
from typing import List, Any
import json
from pathlib import Path


def parse_cors_origins(v: Any) -> List[str]:
    """Parse CORS origins from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        # Try JSON parsing first
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        # Fall back to comma-separated
        return [origin.strip() for origin in v.split(',') if origin.strip()]
    return []


def parse_extensions(v: Any) -> List[str]:
    """Parse allowed extensions from string or list"""
    if isinstance(v, list):
        return [ext.lower().lstrip('.') for ext in v]
    if isinstance(v, str):
        if v.startswith('['):
            try:
                return [ext.lower().lstrip('.') for ext in json.loads(v)]
            except json.JSONDecodeError:
                pass
        return [ext.strip().lower().lstrip('.') for ext in v.split(',') if ext.strip()]
    return []


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "Scholarship Beneficiary Portal"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    API_PREFIX: str = "/api"

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 5000

    # ==========================================
    # Database
    # ==========================================
    DATABASE_URL: str
    DB_ECHO: bool = False

    # ==========================================
    # Authentication
    # ==========================================
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 6000  # 100 hours
    BCRYPT_ROUNDS: int = 10
    AUTH_HEADER_NAME: str = "x-auth-token"

    # Bootstrap admin account (used by create_admin_user.py and on startup if set)
    SEED_ADMIN_USERNAME: str = ""
    SEED_ADMIN_PASSWORD: str = ""

    # ==========================================
    # Storage Configuration
    # ==========================================
    STORAGE_MODE: str = "local"  # "local" or "s3"
    UPLOAD_DIR: str = "uploads"
    PUBLIC_BASE_URL: str = "http://localhost:5000"

    # AWS S3 / MinIO
    USE_MINIO: bool = False
    AWS_ACCESS_KEY_ID: str = ""
    AWS_SECRET_ACCESS_KEY: str = ""
    AWS_REGION: str = "ap-south-1"
    S3_BUCKET_NAME: str = "scholarship-documents"
    MINIO_ENDPOINT: str = "localhost:9000"

    # ==========================================
    # File Upload
    # ==========================================
    MAX_UPLOAD_SIZE: int = 10485760  # 10MB per file
    MAX_REQUEST_SIZE: int = 125829120  # 120MB per request (11 documents)
    ALLOWED_EXTENSIONS_STR: str = "pdf,png,jpg,jpeg,webp"

    @property
    def ALLOWED_EXTENSIONS(self) -> List[str]:
        """Parse allowed extensions from comma-separated string"""
        return parse_extensions(self.ALLOWED_EXTENSIONS_STR)

    # ==========================================
    # CORS (stored as comma-separated string, parsed to list)
    # ==========================================
    CORS_ORIGINS_STR: str = "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return parse_cors_origins(self.CORS_ORIGINS_STR)

    # ==========================================
    # Rate Limiting
    # ==========================================
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    LOGIN_RATE_LIMIT: str = "10/minute"
    REGISTER_RATE_LIMIT: str = "5/minute"

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings

    @property
    def BASE_DIR(self) -> Path:
        return Path(__file__).resolve().parent.parent.parent

    @property
    def upload_path(self) -> Path:
        """Absolute directory for locally stored uploads"""
        path = Path(self.UPLOAD_DIR)
        if not path.is_absolute():
            path = self.BASE_DIR / path
        return path

    def is_dev_mode(self) -> bool:
        """Check if running in development mode"""
        return self.ENVIRONMENT == "development" or self.DEBUG


# Create settings instance
settings = Settings()
