"""Application settings"""
from pydantic_settings import BaseSettings
from typing import Optional, List


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Helpdesk API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # API
    API_V1_PREFIX: str = "/api/v1"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Database
    DATABASE_URL: Optional[str] = None
    DATABASE_TYPE: str = "postgresql"  # sqlite, postgresql
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "helpdesk"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"

    # Security
    SECRET_KEY: str = "your-secret-key-change-in-production"

    # JWT
    JWT_SECRET_KEY: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_HOURS: int = 24  # Token expiration time in hours

    # Session cookie carrying the JWT
    SESSION_COOKIE_NAME: str = "helpdesk_session"
    SESSION_COOKIE_SECURE: bool = False

    # Default Admin User
    DEFAULT_ADMIN_NAME: str = "Admin"
    DEFAULT_ADMIN_EMAIL: str = "admin@example.com"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"  # Change this in production!

    # Ticket listing
    DEFAULT_PAGE_SIZE: int = 50
    MAX_PAGE_SIZE: int = 500
    PUBLIC_TICKET_READS: bool = False

    # Deleting a ticket also deletes its comments
    CASCADE_DELETE_COMMENTS: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True

    def get_database_url(self) -> str:
        """Get database URL from settings or environment"""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        if self.DATABASE_TYPE == "postgresql":
            return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        elif self.DATABASE_TYPE == "sqlite":
            return "sqlite:///./helpdesk.db"
        else:
            raise ValueError(f"Unsupported database type: {self.DATABASE_TYPE}")

    def get_jwt_secret(self) -> str:
        return self.JWT_SECRET_KEY or self.SECRET_KEY


settings = Settings()
