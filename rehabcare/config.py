from pydantic_settings import BaseSettings
from typing import List
import os

class Settings(BaseSettings):
    # 데이터베이스 설정 (환경변수에서 읽어오기)
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./rehabcare.db")
    database_echo: bool = os.getenv("DATABASE_ECHO", "False").lower() == "true"

    # JWT 설정 (환경변수에서 읽어오기)
    secret_key: str = os.getenv("SECRET_KEY", "your-secret-key-here-please-change-in-production")
    algorithm: str = os.getenv("ALGORITHM", "HS256")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

    # 환경 설정
    environment: str = os.getenv("ENVIRONMENT", "development")
    debug: bool = os.getenv("DEBUG", "True").lower() == "true"
    app_version: str = os.getenv("APP_VERSION", "1.0.0")

    # CORS 설정
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:8080",
    ]

    # 페이지네이션 설정
    default_page_size: int = 20
    max_page_size: int = 100

    # 로깅 설정
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "app.log")

    # 일정 편성 설정
    scheduler_roles: List[str] = ["MEDICO"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # 추가 필드 무시

settings = Settings()
