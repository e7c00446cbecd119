import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    # No default: a missing DATABASE_URL is reported as a configuration error
    database_url: str | None = os.getenv("DATABASE_URL") or None
    database_echo: bool = os.getenv("DATABASE_ECHO", "False").lower() == "true"

    port: int = int(os.getenv("PORT", "10000"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    cors_origins: list[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # Alert settings
    store_timezone: str = os.getenv("STORE_TIMEZONE", "UTC")
    expiry_window_hours: int = int(os.getenv("EXPIRY_WINDOW_HOURS", "24"))
    low_stock_threshold: int = int(os.getenv("LOW_STOCK_THRESHOLD", "2"))
    log_fetch_limit: int = int(os.getenv("LOG_FETCH_LIMIT", "2000"))


settings = Settings()
