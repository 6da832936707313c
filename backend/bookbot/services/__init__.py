"""
Services package
"""
from bookbot.services.catalog import CatalogClient, BookSearchResult, LookupStatus
from bookbot.services.mailer import MailerClient, ConfirmationResult
from bookbot.services.session_store import get_session_store, ScopedState, StateBag

__all__ = [
    "CatalogClient",
    "BookSearchResult",
    "LookupStatus",
    "MailerClient",
    "ConfirmationResult",
    "get_session_store",
    "ScopedState",
    "StateBag",
]
