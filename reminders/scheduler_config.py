"""
Scheduler Configuration for Deadline Reminders

Defines reminder tiers, dedup intervals and scheduler settings.
"""
import os

# Early warning fires once while the deadline is further away than this
EARLY_WARNING_THRESHOLD_MIN = 2880  # 48 hours

# Tiered reminder dedup intervals, checked top to bottom.
# (minutes-to-deadline strictly above, minutes required since last send)
REMINDER_INTERVALS = (
    (360, 60),
    (60, 30),
    (10, 10),
    (5, 5),
    (0, 2),
)

# Urgency thresholds in minutes before deadline
URGENCY_CRITICAL_MIN = 5
URGENCY_APPROACHING_MIN = 60

# How often the scheduler checks for tasks (in seconds)
SCHEDULER_CHECK_INTERVAL = int(os.getenv("REMINDER_CHECK_INTERVAL", "30"))
