from typing import Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Query, status
from starlette.concurrency import run_in_threadpool

from devflow.database.session import SessionLocal
from devflow.auth.dependencies import get_user_from_token
from devflow.utils.notification_hub import notification_hub
from devflow.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Realtime"])

def resolve_user_id(token: str) -> Optional[int]:
    if not token:
        return None
    db = SessionLocal()
    try:
        user = get_user_from_token(db, token)
        return user.id if user else None
    finally:
        db.close()

@router.websocket("/ws/notifications")
async def notifications_socket(websocket: WebSocket, token: str = Query("")):
    """
    Push channel for the user owning the access token.
    Messages are {"event": "notification", "data": {...}}. Anything the
    client sends is ignored; it only keeps the connection open.
    """
    user_id = await run_in_threadpool(resolve_user_id, token)

    if user_id is None:
        logger.info("Rejected websocket connection with invalid token")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await notification_hub.connect(user_id, websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        notification_hub.disconnect(user_id, websocket)
