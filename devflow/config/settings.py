from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """
    Application configuration settings.
    Loads from environment variables or .env file.
    """
    PROJECT_NAME: str = "DevFlow API"
    PROJECT_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    PORT: int = 8000

    DATABASE_URL: str
    DB_POOL_SIZE: int = 20
    # Seconds to wait for a pooled connection before giving up
    DB_POOL_TIMEOUT: int = 2
    DB_POOL_RECYCLE: int = 1800

    SECRET_KEY: str
    REFRESH_SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30

    # Default admin, created on startup when both are set.
    # Using str instead of EmailStr to support .local domains in development
    ADMIN_EMAIL: str = ""
    ADMIN_PASSWORD: str = ""
    ADMIN_NAME: str = "Administrator"

    BCRYPT_ROUNDS: int = 12

    LOG_LEVEL: str = "INFO"

    ALLOWED_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

settings = Settings()
