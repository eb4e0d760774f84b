import json
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from prettier_bot.config import settings
from prettier_bot.database import get_db
from prettier_bot.dependencies import get_llm, get_sessions, get_telegram
from prettier_bot.logging_config import get_logger
from prettier_bot.schemas.telegram import TelegramCallbackQuery, TelegramMessage, TelegramUpdate
from prettier_bot.services import config_service, intake_service, transform_service
from prettier_bot.services.bot_context import BotContext
from prettier_bot.services.llm import LLMProvider
from prettier_bot.services.preference_store import PreferenceStore
from prettier_bot.services.session_registry import SessionRegistry
from prettier_bot.services.telegram_service import (
    ACTION_ADD_CUSTOM,
    ACTION_DONE,
    ACTION_RUN,
    ACTION_TOGGLE,
    TelegramService,
    parse_callback_data,
)
from prettier_bot.services.user_service import upsert_user_profile

logger = get_logger("telegram_webhook")

router = APIRouter()

MSG_NO_EVENT = "No message or callback query found"
MSG_WELCOME = (
    "👋 Hi! I'm Prettier. Send me any text and pick what to do with it.\n"
    "Use /config to choose which commands appear under your messages."
)
MSG_HELP = (
    "Send me a text and tap a button to transform it.\n\n"
    "/config – choose your commands or add a custom one\n"
    "/cancel – close the configuration"
)


async def parse_telegram_update(request: Request) -> Optional[dict]:
    """
    Parse Telegram update with tolerant decoding to avoid utf-8 crashes.
    Returns dict or None.
    """
    try:
        return await request.json()
    except Exception as e:
        logger.warning(f"Standard request.json() failed: {e}, fallback decoding")

    raw = await request.body()
    try:
        return json.loads(raw.decode("utf-8", errors="replace"))
    except ValueError:
        logger.error("Failed to decode Telegram webhook payload")
        return None


@router.api_route(
    "/webhook",
    methods=["GET", "HEAD", "OPTIONS", "PUT", "PATCH", "DELETE"],
    response_class=PlainTextResponse,
)
async def webhook_placeholder(request: Request):
    logger.info(f"Received {request.method} request")
    return PlainTextResponse("Hello World")


@router.post("/webhook", response_class=PlainTextResponse)
async def handle_telegram_webhook(
    request: Request,
    db: Session = Depends(get_db),
    sessions: SessionRegistry = Depends(get_sessions),
    telegram: TelegramService = Depends(get_telegram),
    llm: LLMProvider = Depends(get_llm),
):
    """
    Handle Telegram webhook updates:
    - Text messages -> bot commands, custom command intake, or transform options
    - Callback queries (button clicks) -> run a command or drive the config view
    - Poll answers -> acknowledged only
    """
    try:
        body = await parse_telegram_update(request)
        if not isinstance(body, dict):
            return PlainTextResponse("Invalid telegram payload", status_code=400)

        logger.debug("Telegram webhook received", extra={"context": {"update": body}})

        try:
            update = TelegramUpdate(**body)
        except ValidationError as e:
            logger.warning(f"Unrecognised update shape: {e.errors()}")
            return PlainTextResponse(MSG_NO_EVENT)

        chat_id = update.chat_id
        if chat_id is None:
            logger.info(MSG_NO_EVENT)
            return PlainTextResponse(MSG_NO_EVENT)

        ctx = BotContext(
            store=PreferenceStore(db),
            telegram=telegram,
            llm=llm,
            sessions=sessions,
            custom_command_trigger=settings.custom_command_trigger,
        )
        await run_in_threadpool(process_update, ctx, db, update, chat_id)
        return PlainTextResponse("OK")

    except Exception as e:
        logger.error(f"Telegram webhook error: {e}", exc_info=True)
        return PlainTextResponse("Internal Server Error", status_code=500)


def process_update(ctx: BotContext, db: Session, update: TelegramUpdate, chat_id: str) -> None:
    """Handle one update. Events of the same conversation never run concurrently."""
    with ctx.sessions.lock_for(chat_id):
        sender = update.sender
        if sender is not None:
            upsert_user_profile(db, chat_id, sender)

        if update.callback_query:
            handle_callback_query(ctx, chat_id, update.callback_query)
        elif update.message:
            handle_message(ctx, chat_id, update.message)
        elif update.poll_answer:
            logger.info(
                "Poll answer received",
                extra={"context": {"chat_id": chat_id, "poll_id": update.poll_answer.poll_id}},
            )


def handle_message(ctx: BotContext, chat_id: str, message: TelegramMessage) -> None:
    if not message.text:
        logger.debug(f"Ignoring non-text message in chat {chat_id}")
        return

    logger.info(f"Message received: chat_id={chat_id}, text={message.text[:50]}")

    if message.is_command:
        handle_bot_command(ctx, chat_id, message.command)
        return

    if ctx.sessions.is_awaiting_custom_input(chat_id):
        intake_service.handle_custom_input(ctx, chat_id, message.text)
        return

    transform_service.present_options(ctx, chat_id, message.text)


def handle_bot_command(ctx: BotContext, chat_id: str, command: str) -> None:
    if command == "/config":
        config_service.show_config(ctx, chat_id)
    elif command == "/cancel":
        config_service.cancel(ctx, chat_id)
    elif command == "/start":
        ctx.telegram.send_message(chat_id, MSG_WELCOME)
    else:
        ctx.telegram.send_message(chat_id, MSG_HELP)


def handle_callback_query(ctx: BotContext, chat_id: str, callback: TelegramCallbackQuery) -> None:
    """Dispatch a button press by its "action:argument" callback data."""
    if not callback.data or callback.message is None:
        ctx.telegram.answer_callback_query(callback.id)
        return

    action, argument = parse_callback_data(callback.data)
    message_id = callback.message.message_id
    logger.info(f"Callback: chat_id={chat_id}, action={action}, argument={argument}")

    if action == ACTION_RUN:
        transform_service.run_command(ctx, chat_id, message_id, callback.message.text, callback.id, argument)
    elif action == ACTION_TOGGLE:
        config_service.handle_toggle(ctx, chat_id, message_id, callback.id, argument)
    elif action == ACTION_ADD_CUSTOM:
        config_service.handle_add_custom(ctx, chat_id, callback.id)
    elif action == ACTION_DONE:
        config_service.handle_done(ctx, chat_id, message_id, callback.id)
    else:
        ctx.telegram.answer_callback_query(callback.id, f"❓ Unknown action: {action}")
