from prometheus_client import Counter, Histogram

REMINDERS_SENT = Counter(
    "reminders_sent_total",
    "Reminders delivered to users",
    ["tier"]
)

REMINDER_FAILURES = Counter(
    "reminder_failures_total",
    "Reminder delivery or bookkeeping failures",
    ["reason"]
)

TICK_DURATION = Histogram(
    "reminder_tick_duration_seconds",
    "Time spent in one reminder scheduler tick"
)
