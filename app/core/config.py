"""Application configuration."""
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # WhatsApp Cloud API
    whatsapp_verify_token: str
    whatsapp_token: str
    whatsapp_phone_number_id: str
    whatsapp_api_version: str = "v21.0"
    whatsapp_api_base_url: str = "https://graph.facebook.com"
    whatsapp_timeout_seconds: float = 10.0

    # Database
    database_url: str

    # Business
    business_name: str = "Pak Sayur"
    cs_whatsapp_number: str = "6285190653341"
    transfer_instructions: Optional[str] = None

    # Reference data
    catalog_file: Optional[str] = None  # YAML catalog instead of the products table
    seed_file: Optional[str] = None  # YAML seeded into empty tables on startup

    # Conversation
    draft_ttl_minutes: int = 360
    processed_message_ttl_minutes: int = 1440

    # Matching thresholds
    alias_fuzzy_min_length: int = 4
    alias_short_max_length: int = 5
    alias_short_max_distance: int = 1
    alias_long_max_distance: int = 2
    zone_match_threshold: float = 0.7

    # Logging
    log_level: str = "INFO"
    log_sql: bool = False  # echo SQL statements at INFO

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
