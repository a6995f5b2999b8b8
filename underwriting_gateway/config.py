"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./underwriting.db"
    create_schema_on_startup: bool = True

    # Service
    service_name: str = "underwriting-gateway"
    log_level: str = "INFO"

    # Loans
    loan_number_prefix: str = "QL"
    recent_history_limit: int = 20


settings = Settings()
