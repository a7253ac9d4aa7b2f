import os
from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application configuration from environment variables"""

    # App
    app_name: str = "Booking Engine"
    debug: bool = os.getenv("DEBUG", "False").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./booking_engine.db")

    # Operating hours fallback when a company has none configured
    default_opening_time: str = os.getenv("DEFAULT_OPENING_TIME", "08:00")
    default_closing_time: str = os.getenv("DEFAULT_CLOSING_TIME", "18:00")
    default_slot_interval_minutes: int = int(os.getenv("DEFAULT_SLOT_INTERVAL_MINUTES", "30"))

    # Bookings
    reject_past_dates: bool = os.getenv("REJECT_PAST_DATES", "True").lower() == "true"
    default_payment_method: str = os.getenv("DEFAULT_PAYMENT_METHOD", "on_site")

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
