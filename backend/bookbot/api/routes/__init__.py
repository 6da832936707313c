"""
API routes package
"""
from bookbot.api.routes import bot, websocket

__all__ = [
    "bot",
    "websocket",
]
