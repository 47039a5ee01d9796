from typing import Any, Dict, Literal, Optional

from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.interview_templates import (
    DEFAULT_LANGUAGE,
    EXPERIENCE_LEVELS,
    INTERVIEW_TYPES,
    LANGUAGE_CODES,
)
from app.schemas.interview import CamelModel

# Sarvam also accepts English as a translation source/target
TRANSLATION_CODES = LANGUAGE_CODES + ("en-IN",)


class InterviewCreate(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    candidate_name: str = Field(min_length=1, max_length=200)
    language: str
    interview_type: str
    experience_level: str
    status: Optional[Literal["pending", "active", "completed", "cancelled"]] = "pending"

    @field_validator("language")
    @classmethod
    def check_language(cls, v):
        if v not in LANGUAGE_CODES:
            raise ValueError(f"unsupported language '{v}'")
        return v

    @field_validator("interview_type")
    @classmethod
    def check_interview_type(cls, v):
        if v not in INTERVIEW_TYPES:
            raise ValueError(f"unknown interview type '{v}'")
        return v

    @field_validator("experience_level")
    @classmethod
    def check_experience_level(cls, v):
        if v not in EXPERIENCE_LEVELS:
            raise ValueError(f"experience level must be one of {', '.join(EXPERIENCE_LEVELS)}")
        return v


class RespondRequest(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    answer: str = Field(min_length=1)


class TTSRequest(CamelModel):
    text: str = Field(min_length=1, max_length=1500)
    language: str = DEFAULT_LANGUAGE

    @field_validator("language")
    @classmethod
    def check_language(cls, v):
        if v not in LANGUAGE_CODES:
            raise ValueError(f"unsupported language '{v}'")
        return v


class TranslateRequest(CamelModel):
    text: str = Field(min_length=1, max_length=1000)
    source_language: str
    target_language: str = "en-IN"

    @field_validator("source_language", "target_language")
    @classmethod
    def check_codes(cls, v):
        if v not in TRANSLATION_CODES:
            raise ValueError(f"unsupported language '{v}'")
        return v


class DetectLanguageRequest(CamelModel):
    text: str = Field(min_length=1, max_length=1000)


class VapiWebhookEvent(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    type: str
    message: Optional[Any] = None
    call: Optional[Dict[str, Any]] = None
    status: Optional[str] = None
