# conselho/config.py
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "conselho-tutelar-secret-key-2024"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Conselho Tutelar API"

    # Armazenamento: um JSON por coleção + pasta de uploads
    DATA_DIR: str = "data"
    UPLOADS_DIR: str = "uploads"
    UPLOADS_URL: str = "/uploads"
    PUBLIC_DIR: str = "public"

    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ALG: str = "HS256"
    TOKEN_EXPIRE_HOURS: int = 24

    # Admin criado no primeiro boot (trocar a senha fora do sistema)
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"

    CORS_ORIGINS: str = "*"

    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    def cors_list(self) -> list[str]:
        return [x.strip() for x in self.CORS_ORIGINS.split(",") if x.strip()]

    @property
    def data_path(self) -> Path:
        return Path(self.DATA_DIR)

    @property
    def uploads_path(self) -> Path:
        return Path(self.UPLOADS_DIR)


@lru_cache
def get_settings() -> Settings:
    return Settings()
