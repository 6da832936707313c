"""
Base utilities for order step handlers.

Provides common functions for:
- The per-turn record handlers read and write
- Emitting outbound messages
- Moving between steps
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from bookbot.core.logging import logger
from bookbot.orchestration.order.state import (
    ConversationData,
    OrderConfirmation,
    OutboundMessage,
    PENDING_TITLE_STEPS,
    StepId,
    TurnFailure,
    UserProfile,
    current_step,
    text_message,
)
from bookbot.services.catalog import BookSearchResult


NAME_PROMPT = "What is your name?"
ADDRESS_PROMPT = (
    "What is your shipping address? Please include street address, "
    "city, state and zipcode."
)
EMAIL_PROMPT = "Please provide your email."
BOOK_PROMPT = "Please provide your book name."
READY_PROMPT = "Okay, awesome!! Are you ready?"
APOLOGY = "Sorry, something went wrong on our side. Please try again."

# Prompt sent when a step is entered. PickingBook has none and ConfirmBook
# builds its own from the lookup result.
STEP_PROMPTS: Dict[StepId, str] = {
    StepId.ASK_NAME: NAME_PROMPT,
    StepId.ASK_ADDRESS: ADDRESS_PROMPT,
    StepId.ASK_EMAIL: EMAIL_PROMPT,
    StepId.ASK_BOOK: BOOK_PROMPT,
    StepId.SUMMARY: READY_PROMPT,
}


@dataclass
class Turn:
    """Everything a step handler sees and produces for one inbound message."""
    profile: UserProfile
    conversation: ConversationData
    text: str
    lookup: Optional[BookSearchResult] = None
    messages: List[OutboundMessage] = field(default_factory=list)
    confirmation: Optional[OrderConfirmation] = None
    failure: Optional[TurnFailure] = None
    needs_user_input: bool = True

    @property
    def step(self) -> StepId:
        return current_step(self.conversation)


def say(turn: Turn, *texts: str) -> Turn:
    """Queue one text message per argument."""
    for text in texts:
        turn.messages.append(text_message(text))
    return turn


def transition_step(turn: Turn, new_step: StepId) -> Turn:
    """Move the conversation to new_step without prompting."""
    old_step = turn.step
    turn.conversation["step"] = new_step.value
    if new_step not in PENDING_TITLE_STEPS:
        turn.conversation["pending_book_title"] = ""
    logger.debug(f"Order step {old_step.value} -> {new_step.value}")
    return turn


def enter_step(turn: Turn, new_step: StepId) -> Turn:
    """Move to new_step and send its entry prompt, if it has one."""
    transition_step(turn, new_step)
    prompt = STEP_PROMPTS.get(new_step)
    if prompt:
        say(turn, prompt)
    return turn


def hand_off(turn: Turn, new_step: StepId) -> Turn:
    """Move to new_step and let it handle the same input in this turn."""
    transition_step(turn, new_step)
    turn.needs_user_input = False
    return turn


def reject(turn: Turn, failure: TurnFailure, *texts: str) -> Turn:
    """Record a failure and queue the re-prompt; state is left as it was."""
    turn.failure = failure
    return say(turn, *texts)


def capitalize_first(text: str) -> str:
    """Upper-case the first character and leave the rest untouched."""
    return text[:1].upper() + text[1:]
