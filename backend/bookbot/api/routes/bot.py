"""
Bot transport API routes
"""
from typing import List, Optional, Dict, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from bookbot.core import logger
from bookbot.orchestration.order.state import OutboundMessage
from bookbot.api.deps import get_order_bot
from bookbot.services.order_bot import OrderBot

router = APIRouter()


# Request/Response schemas
class InboundMessageRequest(BaseModel):
    sender_id: str = Field(min_length=1)
    conversation_id: str = Field(min_length=1)
    text: str = ""


class CardResponse(BaseModel):
    title: str
    subtitle: str
    image_url: str
    actions: List[str] = []


class OutboundMessageResponse(BaseModel):
    type: str  # "text" or "card"
    text: Optional[str] = None
    card: Optional[CardResponse] = None


class TurnResponse(BaseModel):
    conversation_id: str
    step: str
    messages: List[OutboundMessageResponse]
    failure: Optional[str] = None


class MembersAddedRequest(BaseModel):
    conversation_id: str = Field(min_length=1)
    members_added: List[str] = []
    bot_id: Optional[str] = None


class MembersAddedResponse(BaseModel):
    conversation_id: str
    messages: List[OutboundMessageResponse]


class DialogRequest(BaseModel):
    sender_id: str = Field(min_length=1)
    conversation_id: str = Field(min_length=1)


class MessageCollector:
    """Send sink that keeps outbound messages for the HTTP response."""

    def __init__(self):
        self.messages: List[OutboundMessage] = []

    async def __call__(self, message: OutboundMessage) -> None:
        self.messages.append(message)


def _to_response(message: Dict[str, Any]) -> OutboundMessageResponse:
    return OutboundMessageResponse(
        type=message["type"],
        text=message.get("text"),
        card=CardResponse(**message["card"]) if message.get("card") else None,
    )


@router.post("/messages", response_model=TurnResponse)
async def receive_message(
    request: InboundMessageRequest,
    bot: OrderBot = Depends(get_order_bot),
):
    """Run one dialog turn and return the replies in send order."""
    collector = MessageCollector()
    outcome = await bot.on_message(
        sender_id=request.sender_id,
        conversation_id=request.conversation_id,
        text=request.text,
        send=collector,
    )

    logger.info(f"Turn handled in conversation {request.conversation_id}")

    return TurnResponse(
        conversation_id=outcome.conversation_id,
        step=outcome.step_after.value,
        messages=[_to_response(m) for m in collector.messages],
        failure=outcome.failure.value if outcome.failure else None,
    )


@router.post("/members", response_model=MembersAddedResponse)
async def members_added(
    request: MembersAddedRequest,
    bot: OrderBot = Depends(get_order_bot),
):
    """Welcome newly joined participants."""
    collector = MessageCollector()
    await bot.on_members_added(
        conversation_id=request.conversation_id,
        member_ids=request.members_added,
        send=collector,
        bot_id=request.bot_id,
    )
    return MembersAddedResponse(
        conversation_id=request.conversation_id,
        messages=[_to_response(m) for m in collector.messages],
    )


@router.post("/dialog")
async def dialog_completed(
    request: DialogRequest,
    bot: OrderBot = Depends(get_order_bot),
):
    """Persist state again when the host reports a dialog event."""
    await bot.on_dialog(request.sender_id, request.conversation_id)
    return {"status": "saved"}
