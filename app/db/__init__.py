"""Database engine, session factory and transactional helpers."""

from app.db.session import (
    Base,
    SessionLocal,
    check_db_connection,
    engine,
    get_db,
    transaction_scope,
)

__all__ = [
    "Base",
    "SessionLocal",
    "check_db_connection",
    "engine",
    "get_db",
    "transaction_scope",
]
