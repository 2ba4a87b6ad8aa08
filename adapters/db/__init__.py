"""
지갑 DB 어댑터

SQLite 연결, 경로 해석, 스키마 생성.
"""

from adapters.db.sqlite_adapter import (
    SCHEMA_VERSION,
    SQLiteAdapter,
    create_connection,
    init_schema,
    resolve_db_path,
)

__all__ = [
    "SCHEMA_VERSION",
    "SQLiteAdapter",
    "create_connection",
    "init_schema",
    "resolve_db_path",
]
