import sys
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from telegram import Chat, InlineQuery, Message, Update, User

# Ensure the repo root (package) and tests dir (shared fakes) are importable
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))
sys.path.insert(0, str(Path(__file__).resolve().parent))


@pytest.fixture
def user():
    return User(id=123, first_name="Test", is_bot=False)


@pytest.fixture
def chat():
    return Chat(id=456, type="private")


@pytest.fixture
def make_message(user, chat):
    def _make(text: str = "", message_id: int = 1):
        return Message(
            message_id=message_id,
            date=datetime.now(),
            chat=chat,
            from_user=user,
            text=text,
        )

    return _make


@pytest.fixture
def make_inline_update(user):
    def _make(query: str, update_id: int = 1):
        inline_query = InlineQuery(
            id=str(update_id), from_user=user, query=query, offset=""
        )
        return Update(update_id=update_id, inline_query=inline_query)

    return _make


@pytest.fixture
def make_update():
    def _make(message: Message | None = None, update_id: int = 1):
        return Update(update_id=update_id, message=message)

    return _make


@pytest.fixture
def context():
    bot = SimpleNamespace(username="streamfinder_bot", send_message=AsyncMock())
    return SimpleNamespace(bot=bot, user_data={}, chat_data={}, bot_data={}, error=None)
