from pydantic_settings import BaseSettings
import os


class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "Open Book Wiki"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"  # development, production
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/openbookwiki.db"
    DATA_DIR: str = "./data"

    # API settings
    API_PREFIX: str = "/api"

    # CORS settings
    BACKEND_CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:5176",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:5176"
    ]

    # Authentication
    JWT_SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    BCRYPT_ROUNDS: int = 12

    # Seed data
    SEED_DEFAULT_DATA: bool = True
    SEED_DEMO_USERS: bool = True
    DEFAULT_ADMIN_PASSWORD: str = "admin123"
    DEFAULT_AVATAR: str = "/avatars/avatar-openbookwiki.svg"

    # Export settings
    PDF_FORMAT: str = "A4"
    PDF_MARGIN: str = "20mm"
    PDF_RENDER_TIMEOUT_MS: int = 30000
    EXPORT_FOOTER: str = "Exported from Open Book Wiki"

    # Slow request threshold for the timing middleware
    SLOW_REQUEST_SECONDS: float = 1.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

    @property
    def database_path(self) -> str:
        return self.DATABASE_URL.replace("sqlite+aiosqlite:///", "")

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"


settings = Settings()

# Create necessary directories
os.makedirs(settings.DATA_DIR, exist_ok=True)
