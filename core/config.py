from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    # 1️⃣ Runtime
    ENVIRONMENT: str = "development"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # 2️⃣ Database
    DATABASE_URL: str = "sqlite:///./comments.db"
    DB_ECHO: bool = False

    # 3️⃣ HTTP policies
    FRONTEND_ORIGINS: List[str] = ["https://foness.vercel.app"]
    RATE_LIMIT: str = "100/15 minutes"
    COMMENTS_LIMIT: int = 50

    # 4️⃣ Visits
    VISITS_ADMIN_TOKEN: str = ""
    GEOLOCATION_ENABLED: bool = True
    GEOLOCATION_URL: str = "http://ip-api.com/json/{ip}"
    GEOLOCATION_TIMEOUT: float = 5.0

    # 5️⃣ Push channel keepalive (seconds)
    WS_PING_INTERVAL: float = 25.0
    WS_PING_TIMEOUT: float = 60.0

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def cors_origins(self) -> List[str]:
        return self.FRONTEND_ORIGINS if self.is_production else ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

settings = Settings()
