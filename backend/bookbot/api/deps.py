"""
API dependencies
"""
from bookbot.services.order_bot import get_order_bot

__all__ = [
    "get_order_bot",
]
