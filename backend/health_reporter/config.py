from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings."""

    # Database
    database_url: str = Field(default="sqlite+aiosqlite:///./health_reporter.db")
    database_echo: bool = Field(default=False)

    # Session credentials
    jwt_secret: str = Field(default="")
    session_cookie_name: str = Field(default="session-token")
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # National registry
    registry_url: str = Field(default="http://localhost:5020")
    registry_timeout_seconds: float = Field(default=10.0, gt=0)

    # Runtime
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # Optional demo account, created at startup when both are set
    demo_user_email: str = Field(default="")
    demo_user_password: str = Field(default="")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
