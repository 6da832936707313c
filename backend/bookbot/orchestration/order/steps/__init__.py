"""
Order Step Handlers

Each step in the order flow has a handler that:
1. Validates the user's answer
2. Updates the profile and conversation records
3. Queues the next question or a re-prompt
4. Decides the next step

Handlers do no I/O; the machine supplies lookup results and the
orchestrator performs the confirmation send.
"""
from bookbot.orchestration.order.steps.base import Turn
from bookbot.orchestration.order.steps.profile import (
    ask_name_step,
    ask_address_step,
    ask_email_step,
)
from bookbot.orchestration.order.steps.book import (
    ask_book_step,
    picking_book_step,
    confirm_book_step,
)
from bookbot.orchestration.order.steps.summary import summary_step

__all__ = [
    "Turn",
    "ask_name_step",
    "ask_address_step",
    "ask_email_step",
    "ask_book_step",
    "picking_book_step",
    "confirm_book_step",
    "summary_step",
]
