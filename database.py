from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from config import settings

MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def is_memory_url(url: str) -> bool:
    return url in MEMORY_URLS


def _unicode_lower(value):
    # SQLite's built-in lower() only folds ASCII
    return value.lower() if isinstance(value, str) else value


def build_engine(url: str):
    """
    SQLite in-memory databases exist per connection, so every session
    has to share the same one.
    """
    if not url.startswith("sqlite"):
        return create_engine(url)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if is_memory_url(url):
        kwargs["poolclass"] = StaticPool
    sqlite_engine = create_engine(url, **kwargs)

    @event.listens_for(sqlite_engine, "connect")
    def register_functions(dbapi_connection, connection_record):
        dbapi_connection.create_function("lower", 1, _unicode_lower)

    return sqlite_engine

engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
