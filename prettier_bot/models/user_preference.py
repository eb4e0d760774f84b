from sqlalchemy import TIMESTAMP, Column, Text

from prettier_bot.database import Base


class UserPreference(Base):
    __tablename__ = "user_preferences"

    chat_id = Column(Text, primary_key=True)
    commands = Column(Text, nullable=False)  # JSON list of tagged command objects
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False)
