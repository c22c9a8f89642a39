"""Configuration management for the PlantLens service."""
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    environment: str = Field("development", alias="PLANTLENS_ENV")
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(5000, alias="PORT")
    cors_origins_raw: str = Field("*", alias="CORS_ORIGINS")

    gemini_api_key: Optional[str] = Field(None, alias="GEMINI_API_KEY")
    gemini_model: str = Field("gemini-1.5-flash", alias="GEMINI_MODEL")
    analysis_timeout: float = Field(60.0, alias="PLANTLENS_ANALYSIS_TIMEOUT", gt=0)

    upload_dir: str = Field("uploads", alias="PLANTLENS_UPLOAD_DIR")
    reports_dir: str = Field("reports", alias="PLANTLENS_REPORTS_DIR")
    static_dir: str = Field("public", alias="PLANTLENS_STATIC_DIR")
    log_dir: str = Field("logs", alias="PLANTLENS_LOG_DIR")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        populate_by_name = True
        extra = "ignore"

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins_raw.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]


settings = get_settings()
