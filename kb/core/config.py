from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    APP_ENV: str = "local"
    APP_NAME: str = "knowledge-base"

    DATABASE_URL: str = "sqlite:///./data/knowledge_base.db"
    DB_AUTO_CREATE: bool = True  # create missing tables on startup; use alembic outside local/dev

    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8081"

    HOST: str = "0.0.0.0"
    PORT: int = 3000

    LOG_LEVEL: str = "INFO"  # DEBUG | INFO | WARNING | ERROR
    LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    DEFAULT_USER_ROLE: str = "Viewer"  # Admin | Editor | Viewer
    UNTITLED_RESOURCE_TITLE: str = "Untitled Resource"

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

settings = Settings()
