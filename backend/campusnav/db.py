from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from pathlib import Path
import logging

from campusnav.config import get_settings
from campusnav.models.base import Base

logger = logging.getLogger(__name__)

# 1) DATABASE_URL wins when set (e.g. postgresql+psycopg://...)
# 2) otherwise a SQLite file under data/
_database_url_env = get_settings().database_url
if _database_url_env:
    SQLALCHEMY_DATABASE_URL = _database_url_env
    _is_sqlite = SQLALCHEMY_DATABASE_URL.startswith("sqlite")
else:
    _container_data = Path("/app/data")
    if _container_data.exists():
        db_path = _container_data / "campusnav.db"
    else:
        # backend/campusnav/db.py -> ../../.. = <repo root>
        repo_root = Path(__file__).resolve().parents[2]
        db_path = repo_root / "data" / "campusnav.db"
    db_path.parent.mkdir(parents=True, exist_ok=True)
    SQLALCHEMY_DATABASE_URL = f"sqlite:///{db_path}"
    _is_sqlite = True

_connect_args = {"check_same_thread": False} if _is_sqlite else {}


def enable_sqlite_foreign_keys(bind: Engine) -> None:
    # SQLite ignores FOREIGN KEY clauses unless asked per connection
    @event.listens_for(bind, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args=_connect_args,
)
if _is_sqlite:
    enable_sqlite_foreign_keys(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine = engine) -> None:
    # import every model module so the metadata is complete
    import campusnav.models.map  # noqa: F401
    import campusnav.models.location_pin  # noqa: F401
    import campusnav.models.route  # noqa: F401
    import campusnav.models.admin_user  # noqa: F401
    Base.metadata.create_all(bind=bind)
    logger.info("database schema ready (%s)", bind.url.get_backend_name())


def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
