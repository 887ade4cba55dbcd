"""Application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = "swiftaid"
    debug: bool = False
    database_url: str = "sqlite:///./swiftaid.db"
    # Local development only; deployed databases are migrated with alembic
    create_tables: bool = False

    # JWT
    jwt_secret: str = "change-me-in-production-use-openssl-rand-hex-32"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 12  # one shift

    # Dispatch
    auto_schedule_drivers: bool = True

    # Demo accounts
    seed_demo_accounts: bool = False
    seed_admin_email: str = "admin@swiftaid.com"
    seed_admin_password: str = "admin123"
    seed_driver_password: str = "driver123"


settings = Settings()
