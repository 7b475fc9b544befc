from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from stretch_tracker.core.config import settings

# SQLite needs cross-thread access because FastAPI runs sync endpoints in a pool.
_connect_args = {"check_same_thread": False} if settings.is_sqlite else {}

engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass
