import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.main import app
from app.services import sarvam_service


def start(client, interview_id):
    resp = client.post(f"/api/interviews/{interview_id}/start")
    assert resp.status_code == 200, resp.text
    return resp.json()


def answer(client, interview_id, text="I would first understand the customer's savings goals"):
    return client.post(f"/api/interviews/{interview_id}/respond", json={"answer": text})


# --- create / read ---

def test_create_interview_returns_pending_record(client):
    resp = client.post("/api/interviews", json={
        "candidateName": "  Asha Verma ",
        "language": "gu-IN",
        "interviewType": "Customer Approach Evaluation",
        "experienceLevel": "experienced",
    })

    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == 1
    assert body["candidateName"] == "Asha Verma"
    assert body["status"] == "pending"
    assert body["startTime"] is None
    assert body["score"] is None
    assert body["createdAt"]


@pytest.mark.parametrize("payload", [
    {"language": "hi-IN", "interviewType": "Product Knowledge Test", "experienceLevel": "fresher"},
    {"candidateName": "   ", "language": "hi-IN", "interviewType": "Product Knowledge Test", "experienceLevel": "fresher"},
    {"candidateName": "Asha", "language": "en-US", "interviewType": "Product Knowledge Test", "experienceLevel": "fresher"},
    {"candidateName": "Asha", "language": "hi-IN", "interviewType": "Coding Round", "experienceLevel": "fresher"},
    {"candidateName": "Asha", "language": "hi-IN", "interviewType": "Product Knowledge Test", "experienceLevel": "senior"},
    {"candidateName": "Asha", "language": "hi-IN", "interviewType": "Product Knowledge Test", "experienceLevel": "fresher", "status": "archived"},
    {"candidateName": 12, "language": "hi-IN", "interviewType": "Product Knowledge Test", "experienceLevel": "fresher"},
])
def test_create_rejects_malformed_bodies(client, payload):
    resp = client.post("/api/interviews", json=payload)

    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request data"
    assert resp.json()["details"]
    assert client.get("/api/interviews").json() == []


def test_create_rejects_invalid_json(client):
    resp = client.post("/api/interviews", content="{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400


def test_get_unknown_interview_is_404(client):
    resp = client.get("/api/interviews/7")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Interview not found"}


def test_non_integer_id_is_rejected(client):
    assert client.get("/api/interviews/abc").status_code == 400


def test_list_interviews_with_status_filter(client, make_interview, fake_llm):
    first = make_interview(candidateName="First")
    make_interview(candidateName="Second")
    start(client, first["id"])

    names = [i["candidateName"] for i in client.get("/api/interviews").json()]
    active = client.get("/api/interviews", params={"status": "active"}).json()

    assert names == ["Second", "First"]
    assert [i["candidateName"] for i in active] == ["First"]
    assert client.get("/api/interviews", params={"status": "bogus"}).status_code == 400


# --- start ---

def test_start_moves_pending_to_active(client, make_interview, fake_llm):
    interview = make_interview()

    body = start(client, interview["id"])

    assert body["interview"]["status"] == "active"
    assert body["interview"]["startTime"]
    assert body["interview"]["vapiCallId"].startswith("simulated_1_")
    session_data = body["session"]["sessionData"]
    assert session_data["currentQuestion"] == "Question 1"
    assert session_data["questionIndex"] == 1
    assert session_data["responses"] == []
    assert session_data["languageMetrics"] == {"accuracy": 0, "fluency": 0, "vocabulary": 0}
    assert body["session"]["isActive"] is True
    assert body["firstQuestion"]["question"] == "Question 1"
    assert body["firstQuestion"]["expectedKeyPoints"] == ["rapport", "product fit"]
    assert body["call"]["status"] == "in-progress"
    assert body["assistant"]["firstMessage"] == "Question 1"

    context = fake_llm.question_contexts[0]
    assert context.current_question_index == 0
    assert context.previous_responses == []
    assert context.language == "hi-IN"

    session = client.get(f"/api/interviews/{interview['id']}/session").json()
    assert session["interviewId"] == interview["id"]


def test_start_twice_is_a_conflict(client, make_interview, fake_llm):
    interview = make_interview()
    start(client, interview["id"])

    resp = client.post(f"/api/interviews/{interview['id']}/start")

    assert resp.status_code == 409
    assert len(fake_llm.question_contexts) == 1


def test_start_unknown_interview_is_404(client, fake_llm):
    assert client.post("/api/interviews/5/start").status_code == 404


def test_start_vendor_failure_is_generic_500_and_keeps_pending(client, make_interview, fake_llm):
    interview = make_interview()
    fake_llm.fail_questions = True

    resp = client.post(f"/api/interviews/{interview['id']}/start")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to start interview"}
    assert client.get(f"/api/interviews/{interview['id']}").json()["status"] == "pending"
    assert client.get(f"/api/interviews/{interview['id']}/session").status_code == 404


# --- respond ---

def test_respond_scores_and_advances(client, make_interview, fake_llm):
    interview = make_interview()
    start(client, interview["id"])

    resp = answer(client, interview["id"], "I would explain the fixed deposit rates")

    assert resp.status_code == 200
    body = resp.json()
    assert body["evaluation"]["score"] == 7
    assert body["evaluation"]["followUpSuggestion"] == ""
    assert body["nextQuestion"] == "Question 2"
    assert body["questionIndex"] == 2
    assert body["isComplete"] is False

    question, given, context = fake_llm.evaluated[0]
    assert question == "Question 1"
    assert given == "I would explain the fixed deposit rates"
    assert context.current_question_index == 1

    data = client.get(f"/api/interviews/{interview['id']}/session").json()["sessionData"]
    assert data["currentQuestion"] == "Question 2"
    assert data["questionIndex"] == 2
    assert len(data["responses"]) == 1
    assert data["responses"][0]["question"] == "Question 1"
    assert data["responses"][0]["score"] == 7
    assert data["responses"][0]["timestamp"] > 0


def test_interview_completes_after_max_questions(client, make_interview, fake_llm):
    interview = make_interview()
    start(client, interview["id"])

    results = [answer(client, interview["id"], f"answer {n}").json() for n in range(1, 11)]

    assert [r["questionIndex"] for r in results] == list(range(2, 12))
    assert [r["isComplete"] for r in results] == [False] * 9 + [True]
    assert results[-1]["nextQuestion"] == ""
    # One opening question plus one after each of the first nine answers
    assert len(fake_llm.question_contexts) == 10

    extra = answer(client, interview["id"], "one more")
    assert extra.status_code == 409
    assert len(fake_llm.evaluated) == 10


def test_max_questions_is_configurable(client, make_interview, fake_llm, monkeypatch):
    monkeypatch.setattr(settings, "MAX_QUESTIONS", 2)
    interview = make_interview()
    start(client, interview["id"])

    assert answer(client, interview["id"]).json()["isComplete"] is False
    assert answer(client, interview["id"]).json()["isComplete"] is True


@pytest.mark.parametrize("payload", [{}, {"answer": ""}, {"answer": "   "}, {"answer": None}])
def test_respond_rejects_empty_answers(client, make_interview, fake_llm, payload):
    interview = make_interview()
    start(client, interview["id"])

    resp = client.post(f"/api/interviews/{interview['id']}/respond", json=payload)

    assert resp.status_code == 400
    assert fake_llm.evaluated == []


def test_respond_before_start_is_404(client, make_interview, fake_llm):
    interview = make_interview()
    resp = answer(client, interview["id"])
    assert resp.status_code == 404
    assert resp.json() == {"error": "Interview or session not found"}


def test_respond_vendor_failure_leaves_session_untouched(client, make_interview, fake_llm):
    interview = make_interview()
    start(client, interview["id"])
    fake_llm.fail_evaluation = True

    resp = answer(client, interview["id"])

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to process response"}
    data = client.get(f"/api/interviews/{interview['id']}/session").json()["sessionData"]
    assert data["questionIndex"] == 1
    assert data["responses"] == []


def test_audio_response_is_transcribed_then_scored(client, make_interview, fake_llm, fake_stt):
    interview = make_interview(language="mr-IN")
    start(client, interview["id"])

    resp = client.post(
        f"/api/interviews/{interview['id']}/respond/audio",
        files={"file": ("answer.webm", b"\x1aE\xdf\xa3fake", "audio/webm")},
    )

    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["transcript"] == "मैं ग्राहक से पहले उनकी ज़रूरत पूछूंगा"
    assert body["questionIndex"] == 2
    audio, language, filename, content_type = fake_stt[0]
    assert language == "mr-IN"
    assert filename == "answer.webm"
    assert content_type == "audio/webm"
    assert fake_llm.evaluated[0][1] == body["transcript"]


def test_audio_response_rejects_empty_upload(client, make_interview, fake_llm, fake_stt):
    interview = make_interview()
    start(client, interview["id"])

    resp = client.post(
        f"/api/interviews/{interview['id']}/respond/audio",
        files={"file": ("answer.wav", b"", "audio/wav")},
    )

    assert resp.status_code == 400
    assert fake_stt == []


# --- end / cancel ---

def test_end_completes_and_evaluates(client, make_interview, fake_llm):
    interview = make_interview(language="ta-IN")
    start(client, interview["id"])
    answer(client, interview["id"], "first answer")
    answer(client, interview["id"], "second answer")

    resp = client.post(f"/api/interviews/{interview['id']}/end")

    assert resp.status_code == 200, resp.text
    body = resp.json()
    done = body["interview"]
    assert done["status"] == "completed"
    assert done["score"] == 82
    assert done["endTime"]
    assert done["duration"] >= 0
    assert body["evaluation"]["overallScore"] == 82
    assert body["evaluation"]["categories"]["customerHandling"] == 9

    transcript = done["transcript"]
    assert [t["speaker"] for t in transcript] == ["ai", "candidate", "ai", "candidate"]
    assert [t["message"] for t in transcript] == ["Question 1", "first answer", "Question 2", "second answer"]
    assert transcript[1]["timestamp"] - transcript[0]["timestamp"] == 30000
    assert {t["language"] for t in transcript} == {"ta-IN"}
    assert len(fake_llm.final_transcripts) == 1

    assert client.get(f"/api/interviews/{interview['id']}/session").status_code == 404
    stats = client.get("/api/stats").json()
    assert stats == {"totalInterviews": 1, "activeSessions": 0, "averageScore": 8.2, "languagesUsed": 1}


def test_end_without_answers_has_empty_transcript(client, make_interview, fake_llm):
    interview = make_interview()
    start(client, interview["id"])

    done = client.post(f"/api/interviews/{interview['id']}/end").json()["interview"]

    assert done["transcript"] == []
    assert done["status"] == "completed"


def test_end_requires_active_interview(client, make_interview, fake_llm):
    interview = make_interview()
    assert client.post(f"/api/interviews/{interview['id']}/end").status_code == 409

    start(client, interview["id"])
    assert client.post(f"/api/interviews/{interview['id']}/end").status_code == 200
    assert client.post(f"/api/interviews/{interview['id']}/end").status_code == 409
    assert client.post("/api/interviews/99/end").status_code == 404


def test_end_vendor_failure_keeps_interview_active(client, make_interview, fake_llm):
    interview = make_interview()
    start(client, interview["id"])
    answer(client, interview["id"], "first answer")
    fake_llm.fail_final = True

    resp = client.post(f"/api/interviews/{interview['id']}/end")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to end interview"}
    stored = client.get(f"/api/interviews/{interview['id']}").json()
    assert stored["status"] == "active"
    assert stored["endTime"] is None
    assert stored["transcript"] is None
    session = client.get(f"/api/interviews/{interview['id']}/session")
    assert session.status_code == 200
    assert len(session.json()["sessionData"]["responses"]) == 1

    fake_llm.fail_final = False
    assert client.post(f"/api/interviews/{interview['id']}/end").json()["interview"]["status"] == "completed"


def test_cancel_deactivates_session(client, make_interview, fake_llm):
    interview = make_interview()
    start(client, interview["id"])

    resp = client.post(f"/api/interviews/{interview['id']}/cancel")

    assert resp.status_code == 200
    assert resp.json()["status"] == "cancelled"
    assert client.get(f"/api/interviews/{interview['id']}/session").status_code == 404
    assert client.post(f"/api/interviews/{interview['id']}/cancel").status_code == 409
    assert client.post(f"/api/interviews/{interview['id']}/start").status_code == 409


# --- system ---

def test_stats_counts_active_sessions_and_languages(client, make_interview, fake_llm):
    a = make_interview(language="hi-IN")
    make_interview(language="kn-IN")
    start(client, a["id"])

    stats = client.get("/api/stats").json()

    assert stats == {"totalInterviews": 2, "activeSessions": 1, "averageScore": 0, "languagesUsed": 2}


def test_catalog_endpoints(client):
    languages = client.get("/api/languages").json()["languages"]
    options = client.get("/api/interview-options").json()

    assert len(languages) == 10
    assert {"code": "or-IN", "name": "Odia", "flag": "🇮🇳"} in languages
    assert "Objection Handling Skills" in options["interviewTypes"]
    assert options["experienceLevels"] == ["fresher", "experienced"]


def test_unexpected_errors_use_the_error_body(monkeypatch):
    async def explode(text):
        raise RuntimeError("detector crashed")

    monkeypatch.setattr(sarvam_service, "detect_language", explode)

    with TestClient(app, raise_server_exceptions=False) as c:
        resp = c.post("/api/speech/detect-language", json={"text": "नमस्ते"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}


def test_health_reports_unconfigured_vendors(client, monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
    monkeypatch.setattr(settings, "SARVAM_API_KEY", None)

    body = client.get("/api/health").json()

    assert body["status"] == "healthy"
    assert body["services"] == {"vapi": True, "sarvam": False, "openai": False}
    assert body["timestamp"]
