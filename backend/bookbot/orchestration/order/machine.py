"""
Order State Machine

Implements the deterministic step machine for the book order dialog.
One inbound message runs one step handler; AskBook is the only step that
forwards the same message to the next step within the turn.
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from bookbot.core.logging import logger
from bookbot.orchestration.order.state import (
    ConversationData,
    OrderConfirmation,
    OutboundMessage,
    StepId,
    TurnFailure,
    UserProfile,
    current_step,
    reset_user_profile,
)
from bookbot.orchestration.order.steps import (
    Turn,
    ask_name_step,
    ask_address_step,
    ask_email_step,
    ask_book_step,
    picking_book_step,
    confirm_book_step,
    summary_step,
)
from bookbot.orchestration.order.steps.base import enter_step, say
from bookbot.services.catalog import CatalogClient


CANCEL_WORDS = frozenset({"cancel", "quit"})

StepHandler = Callable[[Turn], Turn]


@dataclass
class TurnResult:
    """What a processed turn produced, in send order."""
    step_before: StepId
    step_after: StepId
    messages: List[OutboundMessage] = field(default_factory=list)
    confirmation: Optional[OrderConfirmation] = None
    failure: Optional[TurnFailure] = None


class OrderStateMachine:
    """
    Order state machine controller.

    Profile and conversation records are mutated in place; the returned
    TurnResult lists the messages to send and the confirmation mail to
    request, if any.
    """

    def __init__(self, catalog: CatalogClient):
        self.catalog = catalog
        self.node_map: Dict[StepId, StepHandler] = {
            StepId.ASK_NAME: ask_name_step,
            StepId.ASK_ADDRESS: ask_address_step,
            StepId.ASK_EMAIL: ask_email_step,
            StepId.ASK_BOOK: ask_book_step,
            StepId.PICKING_BOOK: picking_book_step,
            StepId.CONFIRM_BOOK: confirm_book_step,
            StepId.SUMMARY: summary_step,
        }

        missing = [step.value for step in StepId if step not in self.node_map]
        if missing:
            raise RuntimeError(f"No handler registered for steps: {', '.join(missing)}")

    async def process_message(
        self,
        profile: UserProfile,
        conversation: ConversationData,
        text: str,
    ) -> TurnResult:
        """
        Process a user message through the state machine.

        Runs the current step's handler and keeps going only while a handler
        hands the same input on. The catalog is searched at most once, right
        before the PickingBook handler runs.

        Args:
            profile: User profile, updated in place
            conversation: Conversation data, updated in place
            text: The user's message

        Returns:
            The turn's outbound messages and declared effects
        """
        turn = Turn(profile=profile, conversation=conversation, text=text or "")
        step_before = current_step(conversation)
        conversation["step"] = step_before.value

        if step_before != StepId.ASK_NAME and turn.text.strip().lower() in CANCEL_WORDS:
            self._cancel(turn)
        else:
            # One pass per step; a hand-off can never revisit a step.
            for _ in range(len(self.node_map)):
                step = turn.step
                if step == StepId.PICKING_BOOK and turn.lookup is None:
                    turn.lookup = await self.catalog.search_book(turn.text)

                turn.needs_user_input = True
                turn = self.node_map[step](turn)

                if turn.needs_user_input:
                    break

        step_after = current_step(conversation)
        logger.info(
            f"Order turn {step_before.value} -> {step_after.value}"
            + (f" ({turn.failure.value})" if turn.failure else "")
        )

        return TurnResult(
            step_before=step_before,
            step_after=step_after,
            messages=turn.messages,
            confirmation=turn.confirmation,
            failure=turn.failure,
        )

    def _cancel(self, turn: Turn) -> Turn:
        """Abandon the order in progress and start again from the name."""
        reset_user_profile(turn.profile)
        say(turn, "Your order has been cancelled.")
        return enter_step(turn, StepId.ASK_NAME)
