import math
from datetime import datetime, timezone
from typing import Dict, List, Optional

from app.core.logger import logger
from app.schemas.interview import Interview, InterviewSession, InterviewStats, SessionData
from app.schemas.requests import InterviewCreate


def utc_now():
    return datetime.now(timezone.utc)


def _round_half_up(value, digits=1):
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


class MemStorage:
    """In-process store for interviews and their sessions.

    Nothing is persisted; a restart loses every record. Ids are
    auto-incrementing integers starting at 1 for each table.
    """

    def __init__(self):
        self.interviews: Dict[int, Interview] = {}
        self.sessions: Dict[int, InterviewSession] = {}
        self.current_interview_id = 1
        self.current_session_id = 1

    def clear(self):
        self.interviews.clear()
        self.sessions.clear()
        self.current_interview_id = 1
        self.current_session_id = 1

    # --- Interviews ---

    def create_interview(self, data: InterviewCreate) -> Interview:
        interview_id = self.current_interview_id
        self.current_interview_id += 1
        interview = Interview(
            id=interview_id,
            candidate_name=data.candidate_name,
            language=data.language,
            interview_type=data.interview_type,
            experience_level=data.experience_level,
            status=data.status or "pending",
            created_at=utc_now(),
        )
        self.interviews[interview_id] = interview
        logger.info(f"Created interview {interview_id} for {interview.candidate_name} ({interview.language})")
        return interview

    def get_interview(self, interview_id: int) -> Optional[Interview]:
        return self.interviews.get(interview_id)

    def update_interview(self, interview_id: int, **updates) -> Interview:
        interview = self.interviews.get(interview_id)
        if interview is None:
            raise KeyError(f"Interview with id {interview_id} not found")
        updated = interview.model_copy(update=updates)
        self.interviews[interview_id] = updated
        return updated

    def list_interviews(self) -> List[Interview]:
        return sorted(
            self.interviews.values(),
            key=lambda i: (i.created_at, i.id),
            reverse=True,
        )

    def list_interviews_by_status(self, status: str) -> List[Interview]:
        return [i for i in self.list_interviews() if i.status == status]

    # --- Sessions ---

    def create_session(self, interview_id: Optional[int], session_data: Optional[SessionData], is_active=True) -> InterviewSession:
        session_id = self.current_session_id
        self.current_session_id += 1
        session = InterviewSession(
            id=session_id,
            interview_id=interview_id,
            session_data=session_data,
            is_active=is_active,
            created_at=utc_now(),
        )
        self.sessions[session_id] = session
        return session

    def get_session(self, session_id: int) -> Optional[InterviewSession]:
        return self.sessions.get(session_id)

    def get_session_by_interview_id(self, interview_id: int) -> Optional[InterviewSession]:
        """The active session of an interview, if any."""
        for session in self.sessions.values():
            if session.interview_id == interview_id and session.is_active:
                return session
        return None

    def update_session(self, session_id: int, **updates) -> InterviewSession:
        session = self.sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session with id {session_id} not found")
        updated = session.model_copy(update=updates)
        self.sessions[session_id] = updated
        return updated

    # --- Statistics ---

    def get_stats(self) -> InterviewStats:
        all_interviews = list(self.interviews.values())
        active_sessions = sum(1 for s in self.sessions.values() if s.is_active)
        scored = [i.score for i in all_interviews if i.status == "completed" and i.score is not None]
        # Scores are 0-100; the dashboard shows them on a 0-10 scale
        average = sum(scored) / len(scored) / 10 if scored else 0
        return InterviewStats(
            total_interviews=len(all_interviews),
            active_sessions=active_sessions,
            average_score=_round_half_up(average),
            languages_used=len({i.language for i in all_interviews}),
        )


storage = MemStorage()
