from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from friendgraph.core.config import settings

DATABASE_URL = settings.DATABASE_URL
if not DATABASE_URL:
    raise ValueError("DATABASE_URL is not set in the .env file")

engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    echo=settings.DEBUG,
    future=True
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

Base = declarative_base()


def get_db():
    """
    Opens a database session per request.
    The session is closed once the request is done.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
