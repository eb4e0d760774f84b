from prettier_bot.models.user_preference import UserPreference
from prettier_bot.models.user_profile import UserProfile

__all__ = [
    "UserProfile",
    "UserPreference",
]
