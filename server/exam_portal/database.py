"""
Database engine and session management using SQLAlchemy
"""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

# Base class for models
Base = declarative_base()


def make_engine(database_url: str) -> Engine:
    """Create the engine, relaxing SQLite's thread check for the request thread pool"""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args = {
            "check_same_thread": False,
            "timeout": 30.0,  # wait up to 30 seconds for locks to be released
        }
    engine = create_engine(database_url, connect_args=connect_args, pool_pre_ping=True)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA busy_timeout=30000")
            cursor.close()

    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    """
    Sessions keep loaded attributes after commit so that entities
    can be handed to other threads once the session is closed.
    """
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Initialize database by creating all tables"""
    # Import all models to ensure they're registered
    from exam_portal.models import Exam, Question, Student, StudentScore  # noqa: F401

    Base.metadata.create_all(bind=engine)
