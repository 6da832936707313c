"""
Order Orchestration Module

Deterministic step machine that collects a customer's name, address and
e-mail, finds the requested book and checks the order out.
"""
from bookbot.orchestration.order.state import (
    StepId,
    TurnFailure,
    UserProfile,
    ConversationData,
    create_user_profile,
    create_conversation_data,
)
from bookbot.orchestration.order.machine import OrderStateMachine, TurnResult

__all__ = [
    "StepId",
    "TurnFailure",
    "UserProfile",
    "ConversationData",
    "create_user_profile",
    "create_conversation_data",
    "OrderStateMachine",
    "TurnResult",
]
