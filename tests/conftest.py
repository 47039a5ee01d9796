import os

os.environ.setdefault("LOG_TO_FILE", "0")

import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.errors import VendorError
from app.main import app
from app.schemas.interview import (
    EvaluationCategories,
    GeneratedQuestion,
    InterviewEvaluation,
    ResponseEvaluation,
)
from app.services import llm_service, sarvam_service
from app.services.storage import storage
from app.services.vapi_service import manager


@pytest.fixture(autouse=True)
def clean_state(monkeypatch):
    storage.clear()
    manager.active_connections.clear()
    monkeypatch.setattr(settings, "VAPI_LIVE_CALLS", False)
    monkeypatch.setattr(settings, "MAX_QUESTIONS", 10)
    yield
    storage.clear()
    manager.active_connections.clear()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


class FakeLLM:
    """Stands in for the OpenAI-backed functions of llm_service."""

    def __init__(self):
        self.question_contexts = []
        self.evaluated = []
        self.final_transcripts = []
        self.score = 7
        self.overall_score = 82
        self.language_metrics = None
        self.fail_questions = False
        self.fail_evaluation = False
        self.fail_final = False

    async def generate_interview_question(self, context):
        if self.fail_questions:
            raise VendorError("OpenAI", 503, "unavailable")
        self.question_contexts.append(context)
        return GeneratedQuestion(
            question=f"Question {len(self.question_contexts)}",
            expected_key_points=["rapport", "product fit"],
        )

    async def evaluate_response(self, question, answer, context):
        if self.fail_evaluation:
            raise VendorError("OpenAI", 500, "boom")
        self.evaluated.append((question, answer, context))
        return ResponseEvaluation(
            score=self.score,
            feedback="Clear answer",
            strengths=["confident"],
            improvements=["mention fees"],
            language_metrics=self.language_metrics,
        )

    async def generate_final_evaluation(self, transcript, context):
        if self.fail_final:
            raise VendorError("OpenAI", 502, "Malformed chat completion response")
        self.final_transcripts.append(transcript)
        return InterviewEvaluation(
            overall_score=self.overall_score,
            categories=EvaluationCategories(
                communication=8, product_knowledge=7, sales_technique=8,
                customer_handling=9, language_skills=8,
            ),
            feedback="Solid candidate",
            recommendations=["Practice closing"],
        )


@pytest.fixture
def fake_llm(monkeypatch):
    fake = FakeLLM()
    monkeypatch.setattr(llm_service, "generate_interview_question", fake.generate_interview_question)
    monkeypatch.setattr(llm_service, "evaluate_response", fake.evaluate_response)
    monkeypatch.setattr(llm_service, "generate_final_evaluation", fake.generate_final_evaluation)
    return fake


@pytest.fixture
def fake_stt(monkeypatch):
    calls = []

    async def speech_to_text(audio_bytes, language, filename="audio.wav", content_type="audio/wav"):
        calls.append((audio_bytes, language, filename, content_type))
        return {"transcript": "मैं ग्राहक से पहले उनकी ज़रूरत पूछूंगा", "language_code": language, "confidence": 0.91}

    monkeypatch.setattr(sarvam_service, "speech_to_text", speech_to_text)
    return calls


def new_interview_payload(**overrides):
    payload = {
        "candidateName": "Asha Verma",
        "language": "hi-IN",
        "interviewType": "Door-to-door Sales Assessment",
        "experienceLevel": "fresher",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_interview(client):
    def _make(**overrides):
        resp = client.post("/api/interviews", json=new_interview_payload(**overrides))
        assert resp.status_code == 200, resp.text
        return resp.json()
    return _make

