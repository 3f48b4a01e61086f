from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    # Core
    app_name: str = "Campaign Manager API"
    environment: str = "development"
    log_level: str = "INFO"
    database_url: str = "sqlite:///./campaigns.db"  # Override in production
    seed_sample_data: bool = True

    # Campaign cache / listing
    campaign_cache_ttl_seconds: float = 60.0
    default_campaign_limit: int = 100
    max_list_limit: int = 1000
    default_leads_limit: int = 50

    # Auth / security
    secret_key: str = "dev-insecure-key"  # set SECRET_KEY in .env for anything but local use
    access_token_exp_minutes: int = 15
    refresh_token_exp_days: int = 14

    # CORS
    cors_allow_origins: str = "http://localhost:8501,http://127.0.0.1:8501"
    cors_allow_methods: List[str] = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    cors_allow_headers: List[str] = ["*"]

    # Rate limiting
    rate_limit_default: str = "200/minute"

    class Config:
        env_file = ".env"
        case_sensitive = False

settings = Settings()
