"""Quota period arithmetic for the gate."""

import math
from datetime import UTC, datetime

from devblog_api.config.gate import GateSettings, QuotaWindow


def month_start(now: datetime) -> datetime:
    """First instant of `now`'s UTC calendar month."""
    now = now.astimezone(UTC)
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def next_month_start(now: datetime) -> datetime:
    start = month_start(now)
    if start.month == 12:
        return start.replace(year=start.year + 1, month=1)
    return start.replace(month=start.month + 1)


class QuotaPolicy:
    """Maps the configured quota window to period boundaries and retry hints."""

    def __init__(
        self,
        window: QuotaWindow = QuotaWindow.FIXED,
        retry_after_seconds: int = 3600,
    ) -> None:
        self.window = window
        self.retry_after_seconds = retry_after_seconds

    @classmethod
    def from_settings(cls, settings: GateSettings) -> "QuotaPolicy":
        return cls(
            window=settings.quota_window,
            retry_after_seconds=settings.retry_after_seconds,
        )

    def period_start(self, now: datetime | None = None) -> datetime | None:
        """Start of the current quota period, or None if counters never roll over."""
        if self.window == QuotaWindow.CALENDAR_MONTH:
            return month_start(now or datetime.now(UTC))
        return None

    def retry_after(self, now: datetime | None = None) -> int:
        """Seconds a rejected client should wait before retrying."""
        if self.window == QuotaWindow.CALENDAR_MONTH:
            now = now or datetime.now(UTC)
            delta = next_month_start(now) - now.astimezone(UTC)
            return max(1, math.ceil(delta.total_seconds()))
        return self.retry_after_seconds
