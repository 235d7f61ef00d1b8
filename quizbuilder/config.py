from pydantic_settings import BaseSettings
from pydantic import SecretStr
from typing import List
import os
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    app_name: str = "Quizbuilder API"
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Store backend: "supabase" (REST) or "sql" (SQLAlchemy URL)
    database_backend: str = os.getenv("DATABASE_BACKEND", "supabase")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./quizbuilder.db")

    # Supabase Configuration
    supabase_url: str = os.getenv("SUPABASE_URL", "")
    supabase_anon_key: SecretStr = os.getenv("SUPABASE_ANON_KEY", "")
    supabase_service_role_key: SecretStr = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")

    # Write retry policy (constraint races)
    max_write_attempts: int = int(os.getenv("MAX_WRITE_ATTEMPTS", 5))
    backoff_base_seconds: float = float(os.getenv("BACKOFF_BASE_SECONDS", 0.1))
    backoff_max_seconds: float = float(os.getenv("BACKOFF_MAX_SECONDS", 1.0))

    # Ordering
    order_sentinel_offset: int = int(os.getenv("ORDER_SENTINEL_OFFSET", 10000))

    # "random" or "lowest_order"
    replacement_policy: str = os.getenv("REPLACEMENT_POLICY", "random")

    timezone: str = os.getenv("TIMEZONE", "UTC")
    admin_emails: List[str] = []

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

settings = Settings()
