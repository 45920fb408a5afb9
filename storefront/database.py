# storefront/database.py
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import SQLModel, create_engine, Session

from storefront.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Engine
#
# Postgres (production):
#   - sslmode from DB_SSLMODE when the URL does not already carry one
#   - pool_pre_ping=True: validate connections before using them
#
# SQLite (local runs / tests):
#   - check_same_thread=False: the session is used from the worker
#     thread that serves the request, not the one that opened it
#   - timeout=30: writers wait for the database lock instead of failing
# ---------------------------------------------------------

db_url = settings.DATABASE_URL
is_sqlite = db_url.startswith("sqlite")

if not is_sqlite and settings.DB_SSLMODE and "sslmode=" not in db_url:
    separator = "&" if "?" in db_url else "?"
    db_url = f"{db_url}{separator}sslmode={settings.DB_SSLMODE}"

if is_sqlite:
    engine = create_engine(
        db_url,
        echo=False,
        connect_args={"check_same_thread": False, "timeout": 30},
    )
else:
    engine = create_engine(
        db_url,
        echo=False,        # set to True if you want to debug SQL queries
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=5,
    )


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    One session (and one transaction at a time) per request.
    """
    with Session(engine) as session:
        yield session


def dialect_insert(session: Session, model):
    """
    Return an INSERT construct that supports ON CONFLICT for the
    session's backend (Postgres or SQLite).

    Used for atomic insert-if-absent / upsert operations:

        stmt = dialect_insert(session, Cart).values(...)
        stmt = stmt.on_conflict_do_nothing(index_elements=["user_id"])
    """
    name = session.get_bind().dialect.name
    if name == "postgresql":
        return postgresql.insert(model)
    if name == "sqlite":
        return sqlite.insert(model)
    raise RuntimeError(f"Unsupported database dialect: {name}")
