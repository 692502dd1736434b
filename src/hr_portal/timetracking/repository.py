from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import TimeEntry


class TimeTrackingRepository(Protocol):
    def find_profile_id_by_email(self, email: str) -> Optional[str]:
        raise NotImplementedError

    def list_entries(self, *, profile_id: str, start: datetime, end: datetime) -> Sequence[TimeEntry]:
        """Entries with ``start <= start_time < end``, ordered by start time."""

        raise NotImplementedError
