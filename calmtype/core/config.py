"""Application configuration from environment."""
from pydantic_settings import BaseSettings

DEFAULT_DEV_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "Calm Typing"
    node_env: str = "development"
    port: int = 3000
    log_level: str = "INFO"

    # Database: PostgreSQL in production when DATABASE_URL is set, SQLite otherwise
    database_url: str | None = None
    sqlite_path: str = "./database.sqlite"
    database_ssl: bool = True
    database_echo: bool = False

    # JWT
    jwt_secret: str = "your-jwt-secret"
    jwt_algorithm: str = "HS256"
    access_token_expire_hours: int = 24
    bcrypt_rounds: int = 12

    # Guest sessions never expire unless a TTL is configured
    guest_session_ttl_hours: int | None = None
    guest_session_advertised_ttl: str = "24h"

    # Admin listings are open unless a key is configured
    admin_api_key: str | None = None

    # HTTP
    cors_origins: list[str] = DEFAULT_DEV_ORIGINS
    rate_limit_enabled: bool = True
    rate_limit_max_requests: int = 100
    rate_limit_window_seconds: int = 15 * 60

    # Auto-correction (DeepSeek, OpenAI-compatible chat completions)
    deepseek_api_key: str | None = None
    deepseek_api_url: str = "https://api.deepseek.com/v1/chat/completions"
    deepseek_model: str = "deepseek-chat"
    correction_max_tokens: int = 30
    correction_temperature: float = 0.3
    correction_timeout_seconds: float = 10.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        return self.node_env.lower() == "production"

    @property
    def use_postgres(self) -> bool:
        return self.is_production and bool(self.database_url)

    def async_database_url(self) -> str:
        """SQLAlchemy async URL for the selected backend."""
        if self.use_postgres:
            return to_async_postgres_url(self.database_url)
        return f"sqlite+aiosqlite:///{self.sqlite_path}"


def to_async_postgres_url(url: str) -> str:
    # Hosting providers hand out postgres:// URLs; SQLAlchemy wants a driver name
    for prefix in ("postgres://", "postgresql://", "postgresql+psycopg2://"):
        if url.startswith(prefix):
            return "postgresql+asyncpg://" + url[len(prefix):]
    return url


def get_settings() -> Settings:
    return Settings()

