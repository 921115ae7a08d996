from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "Teacher Leave Service"

    # "memory": 프로세스 수명 동안만 유지되는 MemStorage
    # "database": DATABASE_URL 기반 SqlStorage
    STORAGE_BACKEND: Literal["memory", "database"] = "memory"
    DATABASE_URL: str = "sqlite+aiosqlite:///./leave_tracker.db"
    SQL_ECHO: bool = False

    SEED_SAMPLE_DATA: bool = True
    LOG_LEVEL: str = "INFO"

    HOST: str = "0.0.0.0"
    PORT: int = 8000

    model_config = SettingsConfigDict(env_file=".env")

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        # logging은 대문자 레벨 이름만 인식 (info -> INFO)
        return v.strip().upper()


settings = Settings()
