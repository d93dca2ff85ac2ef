from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import create_engine
from sale_engine.core.config import settings


def build_engine(database_url: str, **kwargs) -> Engine:
    """Создать engine; для SQLite включаем внешние ключи (каскадное удаление)"""
    connect_args = kwargs.pop("connect_args", {})
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        connect_args.setdefault("check_same_thread", False)

    new_engine = create_engine(database_url, connect_args=connect_args, **kwargs)

    if is_sqlite:
        @event.listens_for(new_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


engine = build_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)
