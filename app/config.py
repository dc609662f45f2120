"""
Configuration management using Pydantic Settings
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    
    # Database
    DATABASE_URL: str = "sqlite:///./eduassess.db"
    
    # Redis (caching is disabled when unset)
    REDIS_URL: Optional[str] = None
    
    # Application
    APP_NAME: str = "EduAssess Quiz Platform"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    
    # Rate Limiting
    RATE_LIMIT_PER_MINUTE: int = 60
    RATE_LIMIT_PER_HOUR: int = 1000
    
    # Quiz Settings
    QUIZ_CACHE_TTL: int = 3600  # 1 hour
    OPTIONS_PER_QUESTION: int = 4
    
    # Notification channel
    NOTIFICATION_DISMISS_SECONDS: float = 10.0
    RECONNECT_DELAY_SECONDS: float = 3.0
    
    # Client
    API_BASE_URL: str = "http://localhost:8000"
    REQUEST_TIMEOUT_SECONDS: float = 10.0
    SUBMIT_MAX_ATTEMPTS: int = 3
    SUBMIT_RETRY_WAIT_SECONDS: float = 1.0
    
    # Logging
    LOG_LEVEL: str = "INFO"
    
    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
