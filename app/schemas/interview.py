from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _round_score(value):
    if isinstance(value, float):
        return int(round(value))
    return value


# Models sometimes answer 7.5 where an integer score is expected
Score = Annotated[int, BeforeValidator(_round_score)]


class TranscriptEntry(CamelModel):
    speaker: Literal["ai", "candidate"]
    message: str
    timestamp: int  # epoch ms
    language: Optional[str] = None


class EvaluationCategories(CamelModel):
    communication: Score = 0
    product_knowledge: Score = 0
    sales_technique: Score = 0
    customer_handling: Score = 0
    language_skills: Score = 0


class InterviewEvaluation(CamelModel):
    overall_score: Score = Field(default=0, ge=0, le=100)
    categories: EvaluationCategories = Field(default_factory=EvaluationCategories)
    feedback: str = ""
    recommendations: List[str] = Field(default_factory=list)


class LanguageMetrics(CamelModel):
    accuracy: float = 0
    fluency: float = 0
    vocabulary: float = 0


class SessionResponse(CamelModel):
    question: str
    answer: str
    score: int
    timestamp: int  # epoch ms


class SessionData(CamelModel):
    current_question: str
    question_index: int
    responses: List[SessionResponse] = Field(default_factory=list)
    language_metrics: LanguageMetrics = Field(default_factory=LanguageMetrics)


class Interview(CamelModel):
    id: int
    candidate_name: str
    language: str
    interview_type: str
    experience_level: str
    status: str = "pending"
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: Optional[int] = None  # seconds
    score: Optional[int] = None  # 0-100
    transcript: Optional[List[TranscriptEntry]] = None
    evaluation: Optional[InterviewEvaluation] = None
    vapi_call_id: Optional[str] = None
    created_at: datetime


class InterviewSession(CamelModel):
    id: int
    interview_id: Optional[int] = None
    session_data: Optional[SessionData] = None
    is_active: bool = True
    created_at: datetime


class InterviewStats(CamelModel):
    total_interviews: int
    active_sessions: int
    average_score: float
    languages_used: int


# --- Model-facing payloads ---

class InterviewContext(CamelModel):
    language: str
    interview_type: str
    experience_level: str
    candidate_name: str
    current_question_index: int
    previous_responses: List[SessionResponse] = Field(default_factory=list)


class ScoringCriteria(CamelModel):
    excellent: str = ""
    good: str = ""
    average: str = ""
    poor: str = ""


class GeneratedQuestion(CamelModel):
    question: str
    expected_key_points: List[str] = Field(default_factory=list)
    follow_up_questions: List[str] = Field(default_factory=list)
    scoring_criteria: ScoringCriteria = Field(default_factory=ScoringCriteria)


class ResponseEvaluation(CamelModel):
    score: Score = Field(ge=0, le=10)
    feedback: str = ""
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    follow_up_suggestion: str = ""
    language_metrics: Optional[LanguageMetrics] = None

