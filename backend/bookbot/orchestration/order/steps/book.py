"""
Book selection steps: search, show the first hit, confirm it.
"""
from bookbot.orchestration.order.state import StepId, TurnFailure, card_message
from bookbot.orchestration.order.steps.base import (
    APOLOGY,
    BOOK_PROMPT,
    Turn,
    capitalize_first,
    enter_step,
    hand_off,
    reject,
    say,
    transition_step,
)
from bookbot.services.catalog import LookupStatus


CARD_SUBTITLE = "A beautiful book"
BUY_ACTION = "buy"
CONFIRM_QUESTION = (
    'Is this the book you are looking for? Click Buy if it is correct. '
    'Otherwise type "No".'
)
ASK_TITLE_AGAIN = "Please provide your book name again."


def ask_book_step(turn: Turn) -> Turn:
    """The title asked for on entry is searched right away by PickingBook."""
    return hand_off(turn, StepId.PICKING_BOOK)


def picking_book_step(turn: Turn) -> Turn:
    """
    Present the lookup result for the user's query.

    The machine performs the catalog search before calling this handler and
    stores it on turn.lookup. Any unusable result sends the user back to
    AskBook with nothing committed.
    """
    query = turn.text.strip()
    lookup = turn.lookup

    if lookup is None or lookup.status == LookupStatus.TRANSPORT_ERROR:
        reject(turn, TurnFailure.TRANSPORT, APOLOGY, BOOK_PROMPT)
        return transition_step(turn, StepId.ASK_BOOK)

    if lookup.status == LookupStatus.NOT_FOUND:
        if query:
            reject(turn, TurnFailure.LOOKUP, f'Sorry, I couldn\'t find a book matching "{query}".', ASK_TITLE_AGAIN)
        else:
            reject(turn, TurnFailure.LOOKUP, BOOK_PROMPT)
        return transition_step(turn, StepId.ASK_BOOK)

    if lookup.status == LookupStatus.NO_COVER:
        reject(
            turn,
            TurnFailure.LOOKUP,
            f'Sorry, I couldn\'t load the details for "{lookup.title}".',
            ASK_TITLE_AGAIN,
        )
        return transition_step(turn, StepId.ASK_BOOK)

    turn.messages.append(
        card_message(
            title=lookup.title,
            subtitle=CARD_SUBTITLE,
            image_url=lookup.thumbnail_url,
            actions=[BUY_ACTION],
        )
    )
    say(turn, CONFIRM_QUESTION)

    transition_step(turn, StepId.CONFIRM_BOOK)
    turn.conversation["pending_book_title"] = capitalize_first(query)
    return turn


def confirm_book_step(turn: Turn) -> Turn:
    answer = turn.text.strip().lower()

    if answer == BUY_ACTION:
        turn.profile["book"] = turn.conversation.get("pending_book_title", "")
        return enter_step(turn, StepId.SUMMARY)

    if answer == "no":
        turn.conversation["pending_book_title"] = ""
        say(turn, ASK_TITLE_AGAIN)
        return transition_step(turn, StepId.PICKING_BOOK)

    return reject(
        turn,
        TurnFailure.VALIDATION,
        'Sorry, I didn\'t get that. Please answer "Buy" or "No".',
    )
