from sqlalchemy import TIMESTAMP, BigInteger, Column, Text

from prettier_bot.database import Base


class UserProfile(Base):
    __tablename__ = "user_profiles"

    chat_id = Column(Text, primary_key=True)
    user_id = Column(BigInteger)
    username = Column(Text)
    first_name = Column(Text)
    last_name = Column(Text)
    language_code = Column(Text)
    first_seen_at = Column(TIMESTAMP(timezone=True), nullable=False)
    last_seen_at = Column(TIMESTAMP(timezone=True), nullable=False)
