"""
Profile collection steps: name, shipping address and e-mail.

Each handler validates the answer to its own question. A failed answer
re-prompts at the same step and leaves every stored field untouched.
"""
from bookbot.orchestration.order.state import StepId, TurnFailure, reset_user_profile
from bookbot.orchestration.order.steps.base import (
    ADDRESS_PROMPT,
    EMAIL_PROMPT,
    Turn,
    enter_step,
    reject,
    say,
)
from bookbot.orchestration.order.validators import (
    is_valid_address,
    is_valid_email,
    is_valid_name,
)


def ask_name_step(turn: Turn) -> Turn:
    if not is_valid_name(turn.text):
        return reject(
            turn,
            TurnFailure.VALIDATION,
            "Your name can not contain numbers or be empty.",
            "Please provide your name again.",
        )

    # A new order starts here, so drop anything left from an abandoned one.
    reset_user_profile(turn.profile)
    turn.profile["name"] = turn.text.strip()

    say(turn, f"Oh, hey {turn.profile['name']}. Nice to see you here!")
    return enter_step(turn, StepId.ASK_ADDRESS)


def ask_address_step(turn: Turn) -> Turn:
    address = turn.text.strip()
    if not is_valid_address(address):
        return reject(
            turn,
            TurnFailure.VALIDATION,
            "Please provide a valid address. It must contain street address, "
            "(apt), city, two letter state and zipcode.",
            ADDRESS_PROMPT,
        )

    turn.profile["address"] = address
    return enter_step(turn, StepId.ASK_EMAIL)


def ask_email_step(turn: Turn) -> Turn:
    email = turn.text.strip()
    if not is_valid_email(email):
        return reject(turn, TurnFailure.VALIDATION, "Please provide a valid email.", EMAIL_PROMPT)

    turn.profile["email"] = email
    return enter_step(turn, StepId.ASK_BOOK)
