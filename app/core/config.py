from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field

class Settings(BaseSettings):
    PROJECT_NAME: str = "Yatra API"
    ENVIRONMENT: str = "development"
    SITE_URL: str = "http://localhost:3000"

    # Primary store (Neon) serves the app; the secondary store (Supabase) is kept in sync
    PRIMARY_DATABASE_URL: str = Field("sqlite:///./yatra.db", validation_alias="NEON_DATABASE_URL")
    SECONDARY_DATABASE_URL: Optional[str] = Field(None, validation_alias="SUPABASE_DATABASE_URL")

    # Shared secret expected from the scheduler on /api/cron/sync-db
    CRON_SECRET: str = ""

    SECRET_KEY: str = "supersecretkey_change_me_in_production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7 # 1 week
    RESET_TOKEN_EXPIRE_MINUTES: int = 60

    # Mail (mapped from .env)
    MAIL_USERNAME: str = Field("", validation_alias="MAIL_USERNAME")
    MAIL_PASSWORD: str = Field("", validation_alias="APP_PASSWORD")
    MAIL_FROM: str = Field("hello@yatra.example", validation_alias="MAIL_FROM")
    MAIL_PORT: int = Field(465, validation_alias="MAIL_PORT")
    MAIL_SERVER: str = Field("smtp.gmail.com", validation_alias="MAIL_SERVER")
    MAIL_SSL: bool = Field(True, validation_alias="MAIL_SSL")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
