# app/core/config.py
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    SECRET_KEY: str = "your-super-secret-jwt-key-change-in-prod"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080  # 7 days

    DATABASE_URL: str = "sqlite:///./school.db"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    INSTITUTION_NAME: str = "EduPro Institute"
    CORS_ORIGINS: List[str] = [
        "http://localhost",
        "http://127.0.0.1",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # Empty URL means the built-in mock gateway is used
    SMS_API_URL: str = ""
    SMS_API_TOKEN: str = ""
    SMS_SENDER_ID: str = "EDUPRO"
    SMS_TIMEOUT_SECONDS: float = 10.0

    # "sequential" -> 1, 2, 3 for ties; "competition" -> 1, 1, 3
    MERIT_RANKING: str = "sequential"

    LIBRARY_LOAN_DAYS: int = 14
    LIBRARY_FINE_PER_DAY: int = 5

    class Config:
        env_file = ".env"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


settings = Settings()
