
import sys
import asyncio
from pathlib import Path

# Add backend to path
backend_path = Path(__file__).parent / "backend"
sys.path.append(str(backend_path))

from bookbot.core.config import settings
from bookbot.orchestration.order.machine import OrderStateMachine
from bookbot.services.catalog import CatalogClient
from bookbot.services.mailer import MailerClient
from bookbot.services.order_bot import OrderBot
from bookbot.services.session_store import InMemorySessionStore, ScopedState


async def show(message):
    if message["type"] == "card":
        card = message["card"]
        print(f"BOT [card] {card['title']} - {card['subtitle']} ({card['image_url']}) {card['actions']}")
    else:
        print(f"BOT {message['text']}")


async def main():
    store = InMemorySessionStore()
    bot = OrderBot(
        user_state=ScopedState(store, "user", settings.USER_STATE_TTL_HOURS),
        conversation_state=ScopedState(store, "conversation", settings.CONVERSATION_STATE_TTL_HOURS),
        machine=OrderStateMachine(CatalogClient()),
        mailer=MailerClient(),
    )

    await bot.on_members_added("debug_conversation", ["debug_user"], show)

    while True:
        try:
            text = input("YOU ")
        except EOFError:
            break
        outcome = await bot.on_message("debug_user", "debug_conversation", text, show)
        print(f"    [{outcome.step_before.value} -> {outcome.step_after.value}]"
              + (f" failure={outcome.failure.value}" if outcome.failure else ""))


if __name__ == "__main__":
    asyncio.run(main())
