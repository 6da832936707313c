"""
Order Bot Service - runs one dialog turn per inbound message.
"""
import copy
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable, List, Optional

from bookbot.core.config import settings
from bookbot.core.logging import logger, log_audit_event
from bookbot.orchestration.order.machine import OrderStateMachine
from bookbot.orchestration.order.state import (
    OrderConfirmation,
    OutboundMessage,
    StepId,
    TurnFailure,
    create_conversation_data,
    create_user_profile,
    current_step,
    text_message,
)
from bookbot.orchestration.order.steps.base import APOLOGY, STEP_PROMPTS
from bookbot.services.catalog import CatalogClient
from bookbot.services.mailer import MailerClient
from bookbot.services.session_store import (
    ScopedState,
    get_conversation_state,
    get_user_state,
)


USER_PROFILE_PROPERTY = "user_profile"
CONVERSATION_DATA_PROPERTY = "conversation_data"

Send = Callable[[OutboundMessage], Awaitable[None]]


@dataclass
class TurnOutcome:
    """Result of a handled inbound message."""
    conversation_id: str
    step_before: StepId
    step_after: StepId
    messages: List[OutboundMessage] = field(default_factory=list)
    failure: Optional[TurnFailure] = None


class OrderBot:
    """Loads state, runs the order machine, sends replies and saves state."""

    def __init__(
        self,
        user_state: ScopedState,
        conversation_state: ScopedState,
        machine: OrderStateMachine,
        mailer: MailerClient,
        bot_id: Optional[str] = None,
        welcome_message: Optional[str] = None,
    ):
        self.user_state = user_state
        self.conversation_state = conversation_state
        self.machine = machine
        self.mailer = mailer
        self.bot_id = bot_id or settings.BOT_ID
        self.welcome_message = welcome_message or settings.WELCOME_MESSAGE

    async def on_message(
        self,
        sender_id: str,
        conversation_id: str,
        text: str,
        send: Send,
    ) -> TurnOutcome:
        """Handle one inbound message."""
        user_bag = self.user_state.load(sender_id)
        conversation_bag = self.conversation_state.load(conversation_id)

        profile = user_bag.get(USER_PROFILE_PROPERTY, create_user_profile())
        conversation = conversation_bag.get(CONVERSATION_DATA_PROPERTY, create_conversation_data())

        profile_snapshot = copy.deepcopy(profile)
        conversation_snapshot = copy.deepcopy(conversation)
        step_before = current_step(conversation)

        confirmation: Optional[OrderConfirmation] = None
        try:
            result = await self.machine.process_message(profile, conversation, text)
            messages = result.messages
            failure = result.failure
            confirmation = result.confirmation
        except Exception as e:
            logger.error(f"Turn failed for conversation {conversation_id} at {step_before.value}: {e}")
            profile.clear()
            profile.update(profile_snapshot)
            conversation.clear()
            conversation.update(conversation_snapshot)
            messages = [text_message(APOLOGY)]
            prompt = STEP_PROMPTS.get(current_step(conversation))
            if prompt:
                messages.append(text_message(prompt))
            failure = TurnFailure.TRANSPORT

        for message in messages:
            try:
                await send(message)
            except Exception as e:
                logger.error(f"Reply delivery failed for conversation {conversation_id}: {e}")
                failure = TurnFailure.TRANSPORT
                break

        user_bag.save()
        conversation_bag.save()

        if confirmation is not None:
            sent = await self._send_confirmation(confirmation)
            if not sent and failure is None:
                failure = TurnFailure.CONFIRMATION_SEND

        step_after = current_step(conversation)
        log_audit_event(
            "order_turn",
            actor_id=sender_id,
            actor_type="user",
            details={
                "conversation_id": conversation_id,
                "from": step_before.value,
                "to": step_after.value,
                "failure": failure.value if failure else None,
            },
        )

        return TurnOutcome(
            conversation_id=conversation_id,
            step_before=step_before,
            step_after=step_after,
            messages=messages,
            failure=failure,
        )

    async def _send_confirmation(self, confirmation: OrderConfirmation) -> bool:
        """Best-effort confirmation mail; never raises."""
        try:
            result = await self.mailer.send_order_confirmation(
                confirmation["name"],
                confirmation["email"],
                confirmation["content"],
            )
        except Exception as e:
            logger.error(f"Order confirmation raised unexpectedly: {e}")
            return False

        if not result.ok:
            logger.error(f"Order confirmation not delivered: {result.reason}")
        return result.ok

    async def on_members_added(
        self,
        conversation_id: str,
        member_ids: Iterable[str],
        send: Send,
        bot_id: Optional[str] = None,
    ) -> List[OutboundMessage]:
        """Welcome every joined member except the bot itself."""
        bot_id = bot_id or self.bot_id
        sent: List[OutboundMessage] = []
        for member_id in member_ids:
            if member_id == bot_id:
                continue
            message = text_message(self.welcome_message)
            await send(message)
            sent.append(message)

        logger.info(f"Welcomed {len(sent)} member(s) in conversation {conversation_id}")
        return sent

    async def on_connect(self, sender_id: str, conversation_id: str, send: Send) -> List[OutboundMessage]:
        """
        Greet a live client.

        A new conversation gets the welcome; a conversation with stored state
        gets the prompt of the step it is waiting at instead.
        """
        if not self.conversation_state.exists(conversation_id):
            return await self.on_members_added(conversation_id, [sender_id], send)

        conversation = self.conversation_state.load(conversation_id).get(
            CONVERSATION_DATA_PROPERTY, create_conversation_data()
        )
        step = current_step(conversation)
        prompt = STEP_PROMPTS.get(step)
        if not prompt:
            return []

        message = text_message(prompt)
        await send(message)
        logger.info(f"Resumed conversation {conversation_id} at {step.value}")
        return [message]

    async def on_dialog(self, sender_id: str, conversation_id: str) -> None:
        """Save both state scopes again; safe to call any number of times."""
        self.user_state.load(sender_id).save()
        self.conversation_state.load(conversation_id).save()


_order_bot: Optional[OrderBot] = None


def get_order_bot() -> OrderBot:
    """Get or create the order bot singleton."""
    global _order_bot
    if _order_bot is None:
        _order_bot = OrderBot(
            user_state=get_user_state(),
            conversation_state=get_conversation_state(),
            machine=OrderStateMachine(CatalogClient()),
            mailer=MailerClient(),
        )
    return _order_bot
