import os
from pathlib import Path
from dotenv import load_dotenv

current_file_path = Path(__file__).resolve()
root_dir = current_file_path.parent.parent
env_path = root_dir / ".env"

if env_path.exists():
    load_dotenv(dotenv_path=env_path, override=False)

DEFAULT_CORS_ORIGINS = "https://rsmage.site,https://bot.rsmage.site"


class Settings:
    def __init__(self) -> None:
        self.DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tugasku.db")
        self.CORS_ORIGINS = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",")
            if origin.strip()
        ]
        self.TIMEZONE = os.getenv("TIMEZONE", "Asia/Jakarta")
        self.REMINDER_CHECK_INTERVAL = int(os.getenv("REMINDER_CHECK_INTERVAL", "30"))
        self.OTP_TTL_MINUTES = int(os.getenv("OTP_TTL_MINUTES", "5"))
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        # Off in tests so the app can be imported without touching WhatsApp
        self.START_BACKGROUND = os.getenv("START_BACKGROUND", "true").lower() in ("1", "true", "yes")


config = Settings()
