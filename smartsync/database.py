import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from smartsync.config import DATABASE_URL

logger = logging.getLogger(__name__)

# SQLite connections are shared across the threadpool FastAPI runs sync handlers in
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# One engine per process; disposed by the app lifespan on shutdown
engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db():
    # models must be imported so their tables are registered on Base.metadata
    from smartsync.models import task, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database initialized at %s", engine.url.render_as_string(hide_password=True))


def close_db():
    engine.dispose()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
