import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "test-token")
os.environ.setdefault("OPENAI_API_KEY", "test-key")

from unittest.mock import Mock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from prettier_bot import models  # noqa: F401
from prettier_bot.database import Base
from prettier_bot.services.bot_context import BotContext
from prettier_bot.services.llm.base import LLMProvider
from prettier_bot.services.preference_store import PreferenceStore
from prettier_bot.services.result import Result
from prettier_bot.services.session_registry import SessionRegistry
from prettier_bot.services.telegram_service import TelegramService


@pytest.fixture
def db_session():
    """In-memory SQLite session with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def store(db_session):
    return PreferenceStore(db_session)


@pytest.fixture
def sessions():
    return SessionRegistry(history_window=5)


@pytest.fixture
def telegram():
    """Telegram client whose calls all succeed."""
    mock = Mock(spec=TelegramService)
    mock.send_message.return_value = Result.success({"message_id": 500})
    mock.edit_message.return_value = Result.success({"message_id": 500})
    mock.delete_message.return_value = Result.success(True)
    mock.answer_callback_query.return_value = Result.success(True)
    return mock


@pytest.fixture
def llm():
    mock = Mock(spec=LLMProvider)
    mock.complete.return_value = Result.success("Transformed text")
    return mock


@pytest.fixture
def ctx(store, telegram, llm, sessions):
    return BotContext(
        store=store,
        telegram=telegram,
        llm=llm,
        sessions=sessions,
        custom_command_trigger="Create a command",
    )

