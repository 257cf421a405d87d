import json
import logging
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, Query, status
from sqlalchemy.exc import SQLAlchemyError
from roomchat.core.deps_api import user_for_token
from roomchat.db.session import AsyncSessionLocal
from roomchat.services.gateway import GatewayError, SessionGateway, get_gateway

log = logging.getLogger(__name__)

router = APIRouter(prefix="/ws")

def _parse_frame(raw: str | bytes | None) -> tuple[str, object]:
    if raw is None:
        raise GatewayError("Frames must be JSON")
    try:
        # bytes frames are taken as UTF-8 JSON; bad encodings are ValueErrors too
        frame = json.loads(raw)
    except ValueError:
        raise GatewayError("Frames must be JSON")
    if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
        raise GatewayError("Frames must be objects with an event name")
    return frame["event"], frame.get("data")

async def _receive_frame(ws: WebSocket) -> str | bytes | None:
    message = await ws.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE))
    if message.get("text") is not None:
        return message["text"]
    return message.get("bytes")

@router.websocket("")
async def ws_endpoint(ws: WebSocket, token: str = Query(""), gateway: SessionGateway = Depends(get_gateway)):
    try:
        async with AsyncSessionLocal() as db:
            user = await user_for_token(token, db)
    except SQLAlchemyError:
        log.exception("token lookup failed")
        await ws.close(code=status.WS_1011_INTERNAL_ERROR)
        return
    if not user:
        log.warning("rejected chat connection with invalid token")
        await ws.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await ws.accept()
    conn_id = gateway.connect(ws, user.username)
    try:
        while True:
            raw = await _receive_frame(ws)
            try:
                event, data = _parse_frame(raw)
                await gateway.dispatch(conn_id, event, data)
            except GatewayError as e:
                await ws.send_json({"event": "error", "data": {"message": str(e)}})
                continue
            if event == "disconnect":
                await ws.close()
                break
    except WebSocketDisconnect:
        pass
    finally:
        await gateway.disconnect(conn_id)
