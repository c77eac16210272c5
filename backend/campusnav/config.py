"""Application configuration"""
from pydantic_settings import BaseSettings
from functools import lru_cache
import json
from typing import Optional, Union


class Settings(BaseSettings):
    """Application settings from environment variables"""

    # Application
    app_name: str = "Campus Navigation API"
    app_version: str = "0.1.0"
    log_level: str = "INFO"
    campus_name: str = "Central Innovation Campus"

    # Database. Unset means the SQLite file under data/ (see db.py)
    database_url: Optional[str] = None

    # Admin sessions
    session_cookie_name: str = "campusnav_session"
    session_ttl_minutes: int = 12 * 60
    bcrypt_rounds: int = 12

    # Generative-language API used for intent extraction
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash"

    # CORS - JSON string, comma separated string or list
    cors_origins: Union[str, list[str]] = ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from JSON string if needed"""
        if isinstance(self.cors_origins, str):
            try:
                return json.loads(self.cors_origins)
            except ValueError:
                return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
        return self.cors_origins


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
