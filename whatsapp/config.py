import os
import logging
from dotenv import load_dotenv
from typing import Optional
from pathlib import Path

logger = logging.getLogger(__name__)

current_file_path = Path(__file__).resolve()
root_dir = current_file_path.parent.parent
env_path = root_dir / ".env"

if env_path.exists():
    load_dotenv(dotenv_path=env_path, override=False)


class WhatsAppConfig:
    def __init__(
        self,
        access_token: Optional[str] = None,
        version: Optional[str] = None,
        phone_number_id: Optional[str] = None,
        send_timeout: Optional[float] = None,
        probe_interval: Optional[float] = None,
    ) -> None:
        self.ACCESS_TOKEN = access_token or os.getenv("ACCESS_TOKEN")
        self.VERSION = version or os.getenv("VERSION", "v21.0")
        self.PHONE_NUMBER_ID = phone_number_id or os.getenv("PHONE_NUMBER_ID")
        self.SEND_TIMEOUT = send_timeout or float(os.getenv("WHATSAPP_SEND_TIMEOUT", "15"))
        self.PROBE_INTERVAL = probe_interval or float(os.getenv("WHATSAPP_PROBE_INTERVAL", "60"))

        missing = []
        if not self.ACCESS_TOKEN: missing.append("ACCESS_TOKEN")
        if not self.PHONE_NUMBER_ID: missing.append("PHONE_NUMBER_ID")

        if missing:
            logger.warning(f"⚠️ WhatsApp config incomplete, missing: {', '.join(missing)}")

    @property
    def is_complete(self) -> bool:
        return bool(self.ACCESS_TOKEN and self.VERSION and self.PHONE_NUMBER_ID)
