from datetime import datetime, timezone

from sqlalchemy.orm import Session

from prettier_bot.logging_config import get_logger
from prettier_bot.models import UserProfile
from prettier_bot.schemas.telegram import TelegramUser
from prettier_bot.services.result import DB_ERROR, Result

logger = get_logger("user_service")


def upsert_user_profile(db: Session, chat_id: str, user: TelegramUser) -> Result[UserProfile]:
    """Create or refresh the sender's profile. Called on every contact."""
    try:
        now = datetime.now(timezone.utc)
        profile = db.get(UserProfile, str(chat_id))

        if profile is None:
            profile = UserProfile(chat_id=str(chat_id), first_seen_at=now)
            db.add(profile)

        profile.user_id = user.id
        profile.username = user.username
        profile.first_name = user.first_name
        profile.last_name = user.last_name
        profile.language_code = user.language_code
        profile.last_seen_at = now

        db.commit()
        return Result.success(profile)

    except Exception as e:
        db.rollback()
        logger.error(f"User profile upsert failed: {e}", extra={"context": {"chat_id": str(chat_id)}})
        return Result.failure(str(e), DB_ERROR)
