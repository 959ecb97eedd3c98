"""
In-memory store for saved tutoring sessions.
"""

import math
import random
import string
import threading
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional

from shared.errors import utc_timestamp
from shared.models import SessionStats, TutoringSession

from .schemas import SessionCreate, SessionFilter

_SORT_ATTRIBUTES = {
    "timestamp": "timestamp",
    "duration": "duration",
    "questionsAsked": "questions_asked",
    "lastUpdated": "last_updated",
}


def new_session_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=6))
    return f"session-{int(time.time() * 1000)}-{suffix}"


def _parse_timestamp(value: str) -> datetime:
    return _as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SessionPage:
    def __init__(self, sessions: List[TutoringSession], total: int, page: int, limit: int):
        self.sessions = sessions
        self.total = total
        self.page = page
        self.limit = limit
        self.total_pages = math.ceil(total / limit)


class SessionStore:

    def __init__(self):
        self._lock = threading.Lock()
        self._sessions: Dict[str, TutoringSession] = {}

    def create(self, data: SessionCreate) -> TutoringSession:
        now = utc_timestamp()
        session = TutoringSession(
            id=new_session_id(),
            timestamp=now,
            last_updated=now,
            **data.model_dump(),
        )
        with self._lock:
            self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> Optional[TutoringSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def all(self) -> List[TutoringSession]:
        with self._lock:
            return list(self._sessions.values())

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def query(self, filter: SessionFilter) -> SessionPage:
        sessions = self.all()

        if filter.start_date:
            start = _as_utc(filter.start_date)
            sessions = [s for s in sessions if _parse_timestamp(s.timestamp) >= start]
        if filter.end_date:
            end = _as_utc(filter.end_date)
            sessions = [s for s in sessions if _parse_timestamp(s.timestamp) <= end]
        if filter.mode:
            sessions = [s for s in sessions if s.mode == filter.mode]
        if filter.completed is not None:
            sessions = [s for s in sessions if s.completed == filter.completed]
        if filter.unit:
            sessions = [s for s in sessions if s.unit == filter.unit]
        if filter.tags:
            wanted = set(filter.tags)
            sessions = [s for s in sessions if wanted.intersection(s.tags)]

        attribute = _SORT_ATTRIBUTES[filter.sort_by]
        sessions.sort(key=lambda s: getattr(s, attribute), reverse=filter.sort_order == "desc")

        start_index = (filter.page - 1) * filter.limit
        return SessionPage(
            sessions=sessions[start_index:start_index + filter.limit],
            total=len(sessions),
            page=filter.page,
            limit=filter.limit,
        )

    def stats(self) -> SessionStats:
        sessions = self.all()
        count = len(sessions)
        total_duration = sum(s.duration for s in sessions)
        total_questions = sum(s.questions_asked for s in sessions)

        mode_breakdown: Dict[str, int] = {}
        unit_breakdown: Dict[str, int] = {}
        for session in sessions:
            mode_breakdown[session.mode] = mode_breakdown.get(session.mode, 0) + 1
            if session.unit:
                unit_breakdown[session.unit] = unit_breakdown.get(session.unit, 0) + 1

        return SessionStats(
            total_sessions=count,
            completed_sessions=sum(1 for s in sessions if s.completed),
            total_duration=total_duration,
            average_duration=total_duration / count if count else 0,
            total_questions_asked=total_questions,
            average_questions_per_session=total_questions / count if count else 0,
            mode_breakdown=mode_breakdown,
            unit_breakdown=unit_breakdown,
        )
