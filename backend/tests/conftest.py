"""
Test configuration and fixtures for BookBot backend tests.
"""

import pytest
from typing import Dict, Generator, List, Optional
from fastapi.testclient import TestClient

from main import app
from bookbot.api.deps import get_order_bot
from bookbot.orchestration.order.machine import OrderStateMachine
from bookbot.services.catalog import BookSearchResult, LookupStatus
from bookbot.services.mailer import ConfirmationResult
from bookbot.services.order_bot import OrderBot
from bookbot.services.session_store import InMemorySessionStore, ScopedState


class FakeCatalog:
    """Catalog double: every query is found unless overridden."""

    def __init__(self):
        self.queries: List[str] = []
        self.results: Dict[str, BookSearchResult] = {}
        self.error: Optional[Exception] = None

    async def search_book(self, query: str) -> BookSearchResult:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        query = query.strip()
        if query in self.results:
            return self.results[query]
        return BookSearchResult(
            status=LookupStatus.FOUND,
            query=query,
            title=query.title(),
            thumbnail_url=f"http://books.example.com/{query.replace(' ', '-')}.jpg",
        )


class FakeMailer:
    """Mail double that records every confirmation."""

    def __init__(self):
        self.sent: List[dict] = []
        self.fail = False

    async def send_order_confirmation(self, name: str, email: str, content: str) -> ConfirmationResult:
        self.sent.append({"name": name, "email": email, "content": content})
        if self.fail:
            return ConfirmationResult(status="transport_error", reason="request_failed")
        return ConfirmationResult(status="sent")


class Outbox:
    """Send sink that keeps every message."""

    def __init__(self):
        self.messages: List[dict] = []

    async def __call__(self, message) -> None:
        self.messages.append(message)

    @property
    def texts(self) -> List[str]:
        return [m["text"] for m in self.messages if m["type"] == "text"]


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def machine(catalog: FakeCatalog) -> OrderStateMachine:
    return OrderStateMachine(catalog)


@pytest.fixture
def bot(store: InMemorySessionStore, machine: OrderStateMachine, mailer: FakeMailer) -> OrderBot:
    return OrderBot(
        user_state=ScopedState(store, "user", ttl_hours=720),
        conversation_state=ScopedState(store, "conversation", ttl_hours=24),
        machine=machine,
        mailer=mailer,
        bot_id="bookbot",
        welcome_message="Hello and welcome! What is your name?",
    )


@pytest.fixture
def outbox() -> Outbox:
    return Outbox()


@pytest.fixture(scope="function")
def client(bot: OrderBot) -> Generator[TestClient, None, None]:
    """Create a test client with the order bot override."""
    app.dependency_overrides[get_order_bot] = lambda: bot
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
