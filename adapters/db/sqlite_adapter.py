"""
SQLite 어댑터

지갑 데이터(cards, card_events)를 하나의 SQLite 파일에 저장.
연결은 프로세스당 하나이며 WAL 모드로 연다.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from core.constants import PROJECT_ROOT

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"

# PRAGMA user_version 에 기록되는 스키마 버전
SCHEMA_VERSION = 1

DEFAULT_BUSY_TIMEOUT_MS = 5000

# 조회에 쓰이는 인덱스 컬럼 (RecordStore.find_by_index 허용 필드와 동일)
CARD_INDEX_COLUMNS = (
    "store_id",
    "expiration_date",
    "archived_at",
    "last_used_at",
    "nickname",
    "amount_minor",
)
EVENT_INDEX_COLUMNS = ("card_id", "type", "created_at")

_CARDS_DDL = """
    CREATE TABLE IF NOT EXISTS cards (
        id               TEXT PRIMARY KEY,
        store_id         TEXT NOT NULL,
        number           TEXT NOT NULL,
        amount_minor     INTEGER NOT NULL CHECK (amount_minor >= 0),
        currency         TEXT NOT NULL,
        expiration_date  TEXT NOT NULL,
        nickname         TEXT NOT NULL DEFAULT '',
        notes            TEXT,
        created_at       TEXT NOT NULL,
        updated_at       TEXT NOT NULL,
        archived_at      TEXT,
        last_used_at     TEXT,
        is_empty         INTEGER NOT NULL DEFAULT 0
    )
"""

# card_id는 외래 키 아님 (카드 삭제 시 서비스가 직접 함께 삭제)
_CARD_EVENTS_DDL = """
    CREATE TABLE IF NOT EXISTS card_events (
        id                  TEXT PRIMARY KEY,
        card_id             TEXT NOT NULL,
        type                TEXT NOT NULL,
        delta_amount_minor  INTEGER,
        created_at          TEXT NOT NULL
    )
"""


def resolve_db_path(path: Path | str) -> Path | str:
    """설정의 DB 경로를 실제 경로로 변환

    상대 경로는 프로젝트 루트 기준으로 해석. ":memory:"는 그대로 반환.

    Args:
        path: 설정 파일에 적힌 DB 경로

    Returns:
        DB 파일 경로 (Path 타입) 또는 ":memory:"
    """
    if str(path) == MEMORY_DB:
        return MEMORY_DB

    db_path = Path(path)
    if not db_path.is_absolute():
        db_path = PROJECT_ROOT / db_path
    return db_path


async def create_connection(
    db_path: Path | str,
    busy_timeout_ms: int = DEFAULT_BUSY_TIMEOUT_MS,
) -> aiosqlite.Connection:
    """SQLite 연결 생성 (WAL 모드)

    파일 DB는 상위 디렉토리가 없으면 만든다.

    Args:
        db_path: DB 파일 경로 또는 ":memory:"
        busy_timeout_ms: 다른 프로세스가 잠금을 잡고 있을 때 대기 시간

    Returns:
        aiosqlite 연결 객체
    """
    target = str(db_path)
    if target != MEMORY_DB:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(target)
    await conn.execute("PRAGMA journal_mode=WAL")
    await conn.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")

    logger.info("SQLite 연결 생성", extra={"db_path": target})
    return conn


class SQLiteAdapter:
    """지갑 DB 연결

    RecordStore가 유일한 사용자. 트랜잭션 직렬화는 RecordStore가 담당하고,
    이 클래스는 연결 수명과 커밋/롤백만 관리한다.

    Args:
        db_path: DB 파일 경로 (":memory:" 허용)

    사용 예시:
    ```python
    async with SQLiteAdapter(resolve_db_path(settings.db_path)) as db:
        await init_schema(db)
        store = RecordStore(db)
    ```
    """

    def __init__(self, db_path: Path | str):
        self.db_path = db_path if str(db_path) == MEMORY_DB else Path(db_path)
        self._conn: aiosqlite.Connection | None = None

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    def _require_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Not connected to database")
        return self._conn

    async def connect(self) -> None:
        if self._conn is None:
            self._conn = await create_connection(self.db_path)

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.info("SQLite 연결 종료", extra={"db_path": str(self.db_path)})

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        """SQL 실행 (커밋하지 않음)"""
        conn = self._require_conn()
        if parameters:
            return await conn.execute(sql, parameters)
        return await conn.execute(sql)

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[tuple[Any, ...]]:
        cursor = await self.execute(sql, parameters)
        return list(await cursor.fetchall())

    async def commit(self) -> None:
        await self._require_conn().commit()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """트랜잭션 컨텍스트 매니저

        본문이 끝나면 커밋, 예외(취소 포함)가 나면 롤백 후 다시 raise.
        """
        conn = self._require_conn()
        try:
            yield conn
            await conn.commit()
        except BaseException:
            await conn.rollback()
            raise

    # -------------------------------------------------------------------------
    # 스키마 조회
    # -------------------------------------------------------------------------

    async def _sqlite_master_has(self, kind: str, name: str) -> bool:
        rows = await self.fetchall(
            "SELECT name FROM sqlite_master WHERE type = ? AND name = ?",
            (kind, name),
        )
        return bool(rows)

    async def table_exists(self, table_name: str) -> bool:
        return await self._sqlite_master_has("table", table_name)

    async def index_exists(self, index_name: str) -> bool:
        return await self._sqlite_master_has("index", index_name)

    async def column_names(self, table_name: str) -> list[str]:
        """테이블 컬럼 이름 (정의 순서)"""
        rows = await self.fetchall(f"PRAGMA table_info({table_name})")
        return [row[1] for row in rows]

    async def schema_version(self) -> int:
        rows = await self.fetchall("PRAGMA user_version")
        return int(rows[0][0])

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


async def init_schema(adapter: SQLiteAdapter) -> None:
    """지갑 스키마 생성

    여러 번 실행해도 안전 (IF NOT EXISTS). 마지막에 user_version을 기록한다.

    Args:
        adapter: 연결된 SQLiteAdapter
    """
    async with adapter.transaction() as conn:
        await conn.execute(_CARDS_DDL)
        await conn.execute(_CARD_EVENTS_DDL)

        for column in CARD_INDEX_COLUMNS:
            await conn.execute(
                f"CREATE INDEX IF NOT EXISTS ix_cards_{column} ON cards({column})"
            )
        for column in EVENT_INDEX_COLUMNS:
            await conn.execute(
                f"CREATE INDEX IF NOT EXISTS ix_card_events_{column} ON card_events({column})"
            )

        await conn.execute(f"PRAGMA user_version={SCHEMA_VERSION}")

    logger.info("스키마 초기화 완료", extra={"schema_version": SCHEMA_VERSION})
