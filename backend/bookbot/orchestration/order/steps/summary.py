"""
Summary step: report the order, request the confirmation mail and start over.
"""
from bookbot.orchestration.order.state import OrderConfirmation, StepId, reset_user_profile
from bookbot.orchestration.order.steps.base import Turn, enter_step, say


def format_order_summary(profile) -> str:
    return (
        "Thank you for choosing my service. Summary of your info:\n"
        f"{profile['name']}\n{profile['address']}\n{profile['email']}\n{profile['book']}"
    )


def format_confirmation_content(profile) -> str:
    return f"Your order confirmation:\n{profile['name']}\n{profile['address']}\n{profile['book']}"


def summary_step(turn: Turn) -> Turn:
    profile = turn.profile

    say(
        turn,
        format_order_summary(profile),
        "Thank you for shopping. Confirmation email will be sent to you shortly",
    )

    turn.confirmation = OrderConfirmation(
        name=profile["name"],
        email=profile["email"],
        content=format_confirmation_content(profile),
    )

    reset_user_profile(profile)
    return enter_step(turn, StepId.ASK_NAME)
