from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from prettier_bot.config import settings


def _connect_args(url: str) -> dict:
    args = {}
    if url.startswith("sqlite"):
        args["check_same_thread"] = False
    if settings.database_auth_token:
        args["auth_token"] = settings.database_auth_token
    return args


engine = create_engine(
    settings.database_url,
    connect_args=_connect_args(settings.database_url),
    pool_pre_ping=True,
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
