from fastapi import Depends, FastAPI
from sqlalchemy.orm import Session

from prettier_bot.config import settings
from prettier_bot.database import Base, engine, get_db
from prettier_bot.logging_config import get_logger, setup_logging
from prettier_bot.models import UserPreference, UserProfile
from prettier_bot.routers import telegram_webhook
from prettier_bot.services.session_registry import SessionRegistry

setup_logging(settings.log_level)

logger = get_logger("main")

app = FastAPI(
    title="Prettier Bot",
    description="Telegram bot that rewrites text with configurable commands",
    version="0.1.0",
)

# Process-lifetime only; lost on restart.
app.state.sessions = SessionRegistry(history_window=settings.history_window)

app.include_router(telegram_webhook.router)
app.include_router(telegram_webhook.router, prefix="/api")


@app.on_event("startup")
def create_tables() -> None:
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as exc:
        # The webhook still answers; the preference store falls back to defaults.
        logger.error(
            "Database initialisation failed",
            extra={"context": {"error": str(exc)}},
        )


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/db-check")
def db_check(db: Session = Depends(get_db)):
    return {
        "status": "ok",
        "users": db.query(UserProfile).count(),
        "preferences": db.query(UserPreference).count(),
    }
