import json
import secrets
import time
from typing import Dict

import httpx
from fastapi import WebSocket

from app.core.config import settings
from app.core.errors import VendorError
from app.core.logger import logger
from app.interview_templates import greeting_for, interviewer_prompt, language_name, speaker_for


def now_ms():
    return int(time.time() * 1000)


def _client(timeout=None):
    return httpx.AsyncClient(timeout=timeout or settings.HTTP_TIMEOUT)


def _headers():
    return {
        "Authorization": f"Bearer {settings.VAPI_API_KEY or ''}",
        "Content-Type": "application/json"
    }


def _check(response, what):
    if response.status_code not in (200, 201):
        logger.error(f"Vapi {what} error {response.status_code}: {response.text[:500]}")
        raise VendorError("Vapi", response.status_code, response.text)
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        logger.error(f"Vapi {what} returned non-JSON body: {response.text[:200]}")
        raise VendorError("Vapi", 502, f"{what} response was not JSON")


def build_assistant_config(language, interview_type, experience_level, first_message=None):
    return {
        "name": f"Bank Sales Interview - {language_name(language)}",
        "model": {
            "provider": "openai",
            "model": settings.OPENAI_MODEL,
            "messages": [
                {"role": "system", "content": interviewer_prompt(language, interview_type, experience_level)}
            ],
        },
        "voice": {"provider": "sarvam", "voiceId": speaker_for(language), "language": language},
        "transcriber": {"provider": "sarvam", "language": language},
        "firstMessage": first_message or greeting_for(language, interview_type),
    }


async def create_assistant(language, interview_type, experience_level, first_message=None):
    config = build_assistant_config(language, interview_type, experience_level, first_message)
    async with _client() as client:
        response = await client.post(f"{settings.VAPI_BASE_URL}/assistant", headers=_headers(), json=config)
    assistant = _check(response, "create assistant")
    logger.info(f"Created Vapi assistant {assistant.get('id')}")
    return assistant


async def start_call(assistant_id, interview_id):
    async with _client() as client:
        response = await client.post(
            f"{settings.VAPI_BASE_URL}/call",
            headers=_headers(),
            json={
                "assistantId": assistant_id,
                "type": "webCall",
                "metadata": {"interviewId": interview_id, "timestamp": now_ms()},
            }
        )
    return _check(response, "start call")


async def end_call(call_id):
    async with _client() as client:
        response = await client.delete(f"{settings.VAPI_BASE_URL}/call/{call_id}", headers=_headers())
    _check(response, "end call")


async def get_call(call_id):
    async with _client() as client:
        response = await client.get(f"{settings.VAPI_BASE_URL}/call/{call_id}", headers=_headers())
    return _check(response, "get call")


def simulated_assistant(interview, first_question):
    ts = now_ms()
    return {
        "id": f"assistant_{interview.id}_{ts}",
        "name": f"Bank Sales Interview - {interview.language}",
        "model": {"provider": "openai", "model": settings.OPENAI_MODEL, "messages": []},
        "voice": {"provider": "simulated", "voiceId": "default", "language": interview.language},
        "transcriber": {"provider": "simulated", "language": interview.language},
        "firstMessage": first_question,
    }


def simulated_call(interview, assistant_id):
    return {
        "id": f"call_{interview.id}_{now_ms()}",
        "assistantId": assistant_id,
        "status": "in-progress",
        "type": "webCall",
        "transcript": [],
    }


def is_simulated_call_id(call_id):
    return not call_id or call_id.startswith("simulated_")


class ConnectionManager:
    """Browser WebSocket connections that receive call events."""

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}

    @staticmethod
    def generate_connection_id():
        return f"conn_{now_ms()}_{secrets.token_hex(5)[:9]}"

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        connection_id = self.generate_connection_id()
        self.active_connections[connection_id] = websocket
        await websocket.send_json({
            "type": "connection-established",
            "connectionId": connection_id,
            "timestamp": now_ms()
        })
        logger.info(f"🔌 WebSocket connected: {connection_id} ({len(self.active_connections)} open)")
        return connection_id

    def disconnect(self, connection_id):
        if self.active_connections.pop(connection_id, None) is not None:
            logger.info(f"WebSocket closed: {connection_id}")

    async def broadcast(self, message):
        payload = json.dumps(message, ensure_ascii=False)
        dead_connections = []
        for connection_id, websocket in list(self.active_connections.items()):
            try:
                await websocket.send_text(payload)
            except Exception as e:
                logger.debug(f"Dropping {connection_id}: {e}")
                dead_connections.append(connection_id)
        for connection_id in dead_connections:
            self.active_connections.pop(connection_id, None)
        return len(self.active_connections)

    async def handle_message(self, connection_id, data):
        websocket = self.active_connections.get(connection_id)
        if websocket is None:
            return

        msg_type = data.get("type") if isinstance(data, dict) else None
        if msg_type == "ping":
            await websocket.send_json({"type": "pong", "timestamp": now_ms()})
        elif msg_type in ("start-interview", "end-interview", "voice-input"):
            # Interview state changes go through the HTTP API; acknowledge only
            logger.info(f"{msg_type} received on {connection_id} (interview {data.get('interviewId')})")
            await websocket.send_json({"type": "ack", "for": msg_type, "timestamp": now_ms()})
        else:
            logger.warning(f"Unknown WebSocket message type: {msg_type}")
            await websocket.send_json({
                "type": "error",
                "message": f"Unknown message type: {msg_type}",
                "timestamp": now_ms()
            })


manager = ConnectionManager()
