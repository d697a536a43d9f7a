"""
One-time verification codes.

Codes live in an in-memory TTL store owned by the app (lost on restart).
Expired entries are swept lazily on every issue/verify.
"""
import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from reminders.gateway import DeliveryGateway
from reminders.messages import render_otp
from server.enums import VerificationResult
from whatsapp.phone import normalize_phone_number

logger = logging.getLogger(__name__)

OTP_TTL = timedelta(minutes=5)
OTP_LENGTH = 6


class OtpDeliveryError(Exception):
    pass


@dataclass(frozen=True)
class OtpRecord:
    code: str
    expires_at: datetime


class OtpStore:
    def __init__(self) -> None:
        self._records: Dict[str, OtpRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, address: str) -> bool:
        return address in self._records

    def put(self, address: str, record: OtpRecord) -> None:
        with self._lock:
            self._records[address] = record

    def get(self, address: str) -> Optional[OtpRecord]:
        return self._records.get(address)

    def pop(self, address: str) -> Optional[OtpRecord]:
        with self._lock:
            return self._records.pop(address, None)

    def purge_expired(self, now: datetime) -> int:
        with self._lock:
            expired = [a for a, r in self._records.items() if now > r.expires_at]
            for address in expired:
                del self._records[address]
        return len(expired)


def generate_code(length: int = OTP_LENGTH) -> str:
    return "".join(secrets.choice("0123456789") for _ in range(length))


class OtpService:
    def __init__(
        self,
        gateway: DeliveryGateway,
        store: Optional[OtpStore] = None,
        ttl: timedelta = OTP_TTL,
        clock: Callable[[], datetime] = datetime.utcnow,
    ) -> None:
        self._gateway = gateway
        self.store = store if store is not None else OtpStore()
        self._ttl = ttl
        self._clock = clock

    def issue(self, address: str, code: Optional[str] = None) -> str:
        """Send a code over WhatsApp and remember it. The code is only stored once sent."""
        number = normalize_phone_number(address)
        code = code or generate_code()
        now = self._clock()
        self.store.purge_expired(now)

        if not self._gateway.deliver(number, render_otp(code)):
            raise OtpDeliveryError(f"could not deliver OTP to {number}")

        self.store.put(number, OtpRecord(code=code, expires_at=now + self._ttl))
        logger.info(f"🔐 OTP sent to {number}")
        return code

    def verify(self, address: str, code: str) -> VerificationResult:
        number = normalize_phone_number(address)
        now = self._clock()
        # Any attempt consumes the code, right or wrong
        record = self.store.pop(number)

        if record is None:
            return VerificationResult.not_found

        if now > record.expires_at:
            return VerificationResult.expired

        self.store.purge_expired(now)
        if not secrets.compare_digest(record.code.encode(), str(code or "").encode()):
            return VerificationResult.mismatch
        return VerificationResult.valid
