import json

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect

from app.core.logger import logger
from app.schemas.requests import VapiWebhookEvent
from app.services.vapi_service import manager, now_ms

router = APIRouter(tags=["vapi"])

@router.post("/api/webhook/vapi")
async def vapi_webhook(event: VapiWebhookEvent):
    try:
        if event.type == "transcript":
            await manager.broadcast({
                "type": "transcript-update",
                "message": event.message,
                "timestamp": now_ms()
            })
        elif event.type == "status-update":
            await manager.broadcast({
                "type": "call-status",
                "status": event.status,
                "callId": (event.call or {}).get("id"),
                "timestamp": now_ms()
            })
        elif event.type == "end-of-call-report":
            await manager.broadcast({
                "type": "call-ended",
                "callId": (event.call or {}).get("id"),
                "message": event.message,
                "timestamp": now_ms()
            })
        elif event.type == "function-call":
            logger.info("Vapi function-call received, no functions registered")
        else:
            logger.info(f"Unknown webhook type: {event.type}")
        return {"success": True}
    except Exception as e:
        logger.error(f"Webhook error: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Webhook processing failed")

@router.websocket("/ws/vapi")
async def vapi_socket(websocket: WebSocket):
    connection_id = await manager.connect(websocket)
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                data = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning(f"Bad WebSocket payload on {connection_id}: {raw[:100]}")
                await websocket.send_json({"type": "error", "message": "Invalid JSON", "timestamp": now_ms()})
                continue
            await manager.handle_message(connection_id, data)
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(connection_id)
