from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str
    port: int
    debug: bool
    cors_origins: list[str] = []
    # Identifier allocation: retries after the first failed increment, then fallback
    allocation_max_retries: int = 3
    allocation_backoff_seconds: float = 0.05  # Doubles on every retry
    allocation_backoff_max_seconds: float = 1.0  # Hard ceiling for a single backoff sleep
    # Dashboard recent activity
    recent_activity_per_stream: int = 5
    recent_activity_limit: int = 10

    model_config = {
        "env_file": [".env"],
        "env_prefix": "LEDGERDESK_",
        "extra": "ignore",
    }
