"""
WebSocket routes for live chat.
"""
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Query, Depends

from bookbot.core.logging import logger
from bookbot.orchestration.order.state import OutboundMessage
from bookbot.api.deps import get_order_bot
from bookbot.services.order_bot import OrderBot

router = APIRouter()


@router.websocket("/chat/{conversation_id}")
async def websocket_chat(
    websocket: WebSocket,
    conversation_id: str,
    sender_id: str = Query(...),
    bot: OrderBot = Depends(get_order_bot),
):
    """
    WebSocket endpoint for a live order conversation.

    Frames received:
    - {"type": "message", "text": "..."}: run one dialog turn
    - {"type": "ping"}: answered with {"type": "pong"}

    Frames sent:
    - {"type": "text", "text": "..."} or {"type": "card", "card": {...}}
      for every outbound message, in order
    - {"type": "turn", "step": "...", "failure": ...} after each turn
    """
    await websocket.accept()
    logger.info(f"WebSocket chat connected: conversation={conversation_id}")

    async def send(message: OutboundMessage) -> None:
        await websocket.send_json(dict(message))

    try:
        await bot.on_connect(sender_id, conversation_id, send)

        while True:
            data = await websocket.receive_json()

            if data.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
            elif data.get("type") == "message":
                outcome = await bot.on_message(
                    sender_id=sender_id,
                    conversation_id=conversation_id,
                    text=str(data.get("text") or ""),
                    send=send,
                )
                await websocket.send_json({
                    "type": "turn",
                    "step": outcome.step_after.value,
                    "failure": outcome.failure.value if outcome.failure else None,
                })
            else:
                await websocket.send_json({"type": "error", "detail": "Unsupported frame type"})

    except WebSocketDisconnect:
        logger.info(f"WebSocket chat disconnected: conversation={conversation_id}")
        await bot.on_dialog(sender_id, conversation_id)
