"""
Reminder message templates.

Builds the WhatsApp text for early warnings and tiered reminders. Deadlines
are stored as naive UTC and shown in the configured local timezone with
Indonesian day/month names.
"""
from datetime import datetime
from typing import Optional

import pytz

from .policy import ReminderAction, ReminderDecision, Urgency
from .ports import ReminderCandidate

DEFAULT_TIMEZONE = "Asia/Jakarta"

_DAYS = ("Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu")
_MONTHS = (
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
)

NO_DESCRIPTION = "Tidak ada keterangan tambahan."

EARLY_WARNING_TEXT = "📢 Deadline masih lama, jangan lupa mulai dicicil ya!"

URGENCY_TEXT = {
    Urgency.critical: "🚨 *Segera dikerjakan!*",
    Urgency.approaching: "⏱️ *Waktunya semakin dekat!*",
    Urgency.routine: "📌 Jangan lupa diselesaikan ya.",
}

WATERMARK = (
    "*Developed by Garin & Team*\n"
    "👥 Rio | Rizki | Yasid | Izy\n"
    "\n"
    "    ⚠ *Tugas-Ku Beta Version* ⚠"
)


def format_deadline(deadline: datetime, timezone: str = DEFAULT_TIMEZONE) -> str:
    """e.g. 'Senin, 20 Oktober 2026 pukul 14.30'"""
    if deadline.tzinfo is None:
        deadline = pytz.utc.localize(deadline)
    local = deadline.astimezone(pytz.timezone(timezone))
    return (
        f"{_DAYS[local.weekday()]}, {local.day} {_MONTHS[local.month - 1]} {local.year} "
        f"pukul {local.hour:02d}.{local.minute:02d}"
    )


def _framing(decision: ReminderDecision) -> str:
    if decision.action == ReminderAction.early_warning:
        return EARLY_WARNING_TEXT
    return URGENCY_TEXT[decision.urgency or Urgency.routine]


def render_reminder(
    candidate: ReminderCandidate,
    decision: ReminderDecision,
    timezone: Optional[str] = None,
) -> str:
    description = candidate.description or NO_DESCRIPTION
    deadline_str = format_deadline(candidate.deadline, timezone or DEFAULT_TIMEZONE)

    message = "👋 Haloo! Kami dari *Tugas-Ku* ingin mengingatkan kamu nih...\n\n"
    message += f"✨ *Judul:* {candidate.title}\n\n"
    message += f"📝 *Deskripsi:* {description}\n\n"
    message += f"📅 *Deadline:* {deadline_str}\n\n"
    message += f"{_framing(decision)}\n\n"
    message += WATERMARK
    return message


def render_otp(code: str) -> str:
    return f"Kode verifikasi kamu adalah *{code}*"
