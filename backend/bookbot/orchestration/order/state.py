"""
Order Flow State Definition

Defines the records the order dialog reads and writes each turn. The user
profile is persisted per user across conversations; the conversation data
is persisted per conversation and only tracks the dialog position.
"""
from typing import TypedDict, List, Optional
from enum import Enum


class StepId(str, Enum):
    """Steps of the order dialog, in flow order."""
    ASK_NAME = "ask_name"
    ASK_ADDRESS = "ask_address"
    ASK_EMAIL = "ask_email"
    ASK_BOOK = "ask_book"
    PICKING_BOOK = "picking_book"
    CONFIRM_BOOK = "confirm_book"
    SUMMARY = "summary"


# pending_book_title is only meaningful while in one of these steps
PENDING_TITLE_STEPS = frozenset({StepId.PICKING_BOOK, StepId.CONFIRM_BOOK})


class TurnFailure(str, Enum):
    """Why a turn did not advance (or, for confirmation_send, what failed after it)."""
    VALIDATION = "validation"
    LOOKUP = "lookup"
    TRANSPORT = "transport"
    CONFIRMATION_SEND = "confirmation_send"


class UserProfile(TypedDict):
    """Order fields collected from the user."""
    name: str
    address: str
    email: str
    book: str


class ConversationData(TypedDict):
    """Dialog position for one conversation."""
    step: str  # StepId value
    pending_book_title: str


class HeroCard(TypedDict):
    title: str
    subtitle: str
    image_url: str
    actions: List[str]


class OutboundMessage(TypedDict, total=False):
    """Message for the transport: type is "text" or "card"."""
    type: str
    text: Optional[str]
    card: Optional[HeroCard]


class OrderConfirmation(TypedDict):
    """Confirmation mail the transport layer should send after the turn."""
    name: str
    email: str
    content: str


PROFILE_FIELDS = ("name", "address", "email", "book")


def create_user_profile() -> UserProfile:
    """Create an empty user profile."""
    return UserProfile(name="", address="", email="", book="")


def create_conversation_data() -> ConversationData:
    """Create conversation data positioned at the first step."""
    return ConversationData(step=StepId.ASK_NAME.value, pending_book_title="")


def reset_user_profile(profile: UserProfile) -> UserProfile:
    """Clear every order field in place."""
    for field in PROFILE_FIELDS:
        profile[field] = ""
    return profile


def current_step(conversation: ConversationData) -> StepId:
    """Read the step, treating a missing or unknown value as the first step."""
    try:
        return StepId(conversation.get("step") or StepId.ASK_NAME.value)
    except ValueError:
        return StepId.ASK_NAME


def text_message(text: str) -> OutboundMessage:
    return OutboundMessage(type="text", text=text)


def card_message(title: str, subtitle: str, image_url: str, actions: List[str]) -> OutboundMessage:
    return OutboundMessage(
        type="card",
        card=HeroCard(title=title, subtitle=subtitle, image_url=image_url, actions=list(actions)),
    )
