"""Interview session workflow.

An interview moves ``pending -> active -> completed`` (or ``cancelled``).
Starting it asks the model for the first question and opens a session;
each answer is scored, appended to the session and followed by the next
question until ``settings.MAX_QUESTIONS`` answers have been collected.
Ending it builds the transcript and asks for the final evaluation.

State is only written after every vendor call of a step has succeeded,
so a failed step leaves the interview and session as they were.
"""
import httpx
from fastapi import HTTPException

from app.core.config import settings
from app.core.errors import VendorError
from app.core.logger import logger
from app.schemas.interview import InterviewContext, LanguageMetrics, SessionData, SessionResponse, TranscriptEntry
from app.services import llm_service, sarvam_service, vapi_service
from app.services.storage import storage, utc_now
from app.services.vapi_service import now_ms


def _require_interview(interview_id):
    interview = storage.get_interview(interview_id)
    if interview is None:
        raise HTTPException(status_code=404, detail="Interview not found")
    return interview


def _require_active_session(interview_id):
    interview = storage.get_interview(interview_id)
    session = storage.get_session_by_interview_id(interview_id)
    if interview is None or session is None or session.session_data is None:
        raise HTTPException(status_code=404, detail="Interview or session not found")
    return interview, session


async def _hang_up(call_id):
    """End a live Vapi call; failures are logged and swallowed."""
    if not settings.VAPI_LIVE_CALLS or vapi_service.is_simulated_call_id(call_id):
        return
    try:
        await vapi_service.end_call(call_id)
    except (VendorError, httpx.HTTPError) as e:
        logger.warning(f"Could not end Vapi call {call_id}: {e}")


def build_context(interview, session_data=None):
    return InterviewContext(
        language=interview.language,
        interview_type=interview.interview_type,
        experience_level=interview.experience_level,
        candidate_name=interview.candidate_name,
        current_question_index=session_data.question_index if session_data else 0,
        previous_responses=list(session_data.responses) if session_data else [],
    )


def build_transcript(session_data, language):
    """Question/answer pairs as a speaker-tagged transcript.

    Questions are stamped QUESTION_LEAD_MS before the answer they received.
    """
    transcript = []
    if session_data is None:
        return transcript
    for response in session_data.responses:
        transcript.append(TranscriptEntry(
            speaker="ai",
            message=response.question,
            timestamp=response.timestamp - settings.QUESTION_LEAD_MS,
            language=language,
        ))
        transcript.append(TranscriptEntry(
            speaker="candidate",
            message=response.answer,
            timestamp=response.timestamp,
            language=language,
        ))
    return transcript


def fold_language_metrics(current: LanguageMetrics, latest: LanguageMetrics, samples: int) -> LanguageMetrics:
    """Running mean of per-answer language metrics over `samples` answers."""
    if samples <= 1:
        return latest.model_copy()

    def step(old, new):
        return round(old + (new - old) / samples, 1)

    return LanguageMetrics(
        accuracy=step(current.accuracy, latest.accuracy),
        fluency=step(current.fluency, latest.fluency),
        vocabulary=step(current.vocabulary, latest.vocabulary),
    )


async def start_interview(interview_id):
    interview = _require_interview(interview_id)
    if interview.status != "pending":
        raise HTTPException(status_code=409, detail=f"Interview is already {interview.status}")

    first_question = await llm_service.generate_interview_question(build_context(interview))

    if settings.VAPI_LIVE_CALLS:
        assistant = await vapi_service.create_assistant(
            interview.language, interview.interview_type, interview.experience_level,
            first_message=first_question.question,
        )
        call = await vapi_service.start_call(assistant["id"], interview.id)
        call_id = call["id"]
    else:
        assistant = vapi_service.simulated_assistant(interview, first_question.question)
        call = vapi_service.simulated_call(interview, assistant["id"])
        call_id = f"simulated_{interview.id}_{now_ms()}"

    # Another request may have started it while we waited on the model
    if storage.get_interview(interview_id).status != "pending":
        await _hang_up(call_id)
        raise HTTPException(status_code=409, detail="Interview was started concurrently")

    updated = storage.update_interview(
        interview_id,
        status="active",
        start_time=utc_now(),
        vapi_call_id=call_id,
    )
    session = storage.create_session(
        interview_id,
        SessionData(current_question=first_question.question, question_index=1),
        is_active=True,
    )
    logger.info(f"▶️ Interview {interview_id} started (session {session.id}, call {call_id})")

    await vapi_service.manager.broadcast({
        "type": "call-status",
        "interviewId": interview_id,
        "callId": call_id,
        "status": call.get("status", "in-progress"),
        "timestamp": now_ms()
    })

    return {
        "interview": updated,
        "session": session,
        "call": call,
        "assistant": assistant,
        "firstQuestion": first_question,
    }


async def submit_response(interview_id, answer):
    interview, session = _require_active_session(interview_id)
    data = session.session_data.model_copy(deep=True)
    if not data.current_question or data.question_index > settings.MAX_QUESTIONS:
        raise HTTPException(status_code=409, detail="All questions have been answered")

    question = data.current_question
    evaluation = await llm_service.evaluate_response(question, answer, build_context(interview, data))

    data.responses.append(SessionResponse(
        question=question,
        answer=answer,
        score=evaluation.score,
        timestamp=now_ms(),
    ))
    data.question_index += 1
    if evaluation.language_metrics is not None:
        data.language_metrics = fold_language_metrics(data.language_metrics, evaluation.language_metrics, len(data.responses))

    next_question = ""
    if data.question_index <= settings.MAX_QUESTIONS:
        generated = await llm_service.generate_interview_question(build_context(interview, data))
        next_question = generated.question
    data.current_question = next_question

    storage.update_session(session.id, session_data=data)
    is_complete = data.question_index > settings.MAX_QUESTIONS
    logger.info(f"Interview {interview_id}: answer {len(data.responses)} scored {evaluation.score}/10{' (complete)' if is_complete else ''}")

    return {
        "evaluation": evaluation,
        "nextQuestion": next_question,
        "questionIndex": data.question_index,
        "isComplete": is_complete,
    }


async def submit_audio_response(interview_id, audio_bytes, filename="audio.wav", content_type="audio/wav"):
    interview, _ = _require_active_session(interview_id)
    if not audio_bytes:
        raise HTTPException(status_code=400, detail="Empty audio upload")

    stt = await sarvam_service.speech_to_text(audio_bytes, interview.language, filename, content_type)
    transcript = stt["transcript"]
    logger.info(f"🎤 Interview {interview_id} answer transcribed ({len(transcript)} chars)")
    if not transcript:
        raise HTTPException(status_code=400, detail="No speech detected in audio")

    result = await submit_response(interview_id, transcript)
    result["transcript"] = transcript
    return result


async def end_interview(interview_id):
    interview = _require_interview(interview_id)
    if interview.status != "active":
        raise HTTPException(status_code=409, detail=f"Interview is {interview.status}, not active")

    session = storage.get_session_by_interview_id(interview_id)
    session_data = session.session_data if session else None
    transcript = build_transcript(session_data, interview.language)

    evaluation = await llm_service.generate_final_evaluation(transcript, build_context(interview, session_data))

    end_time = utc_now()
    if interview.start_time:
        duration = int((end_time - interview.start_time).total_seconds())
    else:
        duration = settings.DEFAULT_INTERVIEW_SECONDS

    updated = storage.update_interview(
        interview_id,
        status="completed",
        end_time=end_time,
        duration=duration,
        score=evaluation.overall_score,
        transcript=transcript,
        evaluation=evaluation,
    )
    if session:
        storage.update_session(session.id, is_active=False)

    await _hang_up(interview.vapi_call_id)

    logger.info(f"🏁 Interview {interview_id} completed: score {evaluation.overall_score}, {duration}s")
    await vapi_service.manager.broadcast({
        "type": "call-status",
        "interviewId": interview_id,
        "callId": interview.vapi_call_id,
        "status": "ended",
        "timestamp": now_ms()
    })

    return {"interview": updated, "evaluation": evaluation}


async def cancel_interview(interview_id):
    interview = _require_interview(interview_id)
    if interview.status in ("completed", "cancelled"):
        raise HTTPException(status_code=409, detail=f"Interview is already {interview.status}")

    session = storage.get_session_by_interview_id(interview_id)
    if session:
        storage.update_session(session.id, is_active=False)
    updated = storage.update_interview(interview_id, status="cancelled", end_time=utc_now())
    logger.info(f"Interview {interview_id} cancelled")

    if interview.vapi_call_id:
        await _hang_up(interview.vapi_call_id)
        await vapi_service.manager.broadcast({
            "type": "call-status",
            "interviewId": interview_id,
            "callId": interview.vapi_call_id,
            "status": "ended",
            "timestamp": now_ms()
        })
    return updated
