"""
RecordStore - 카드/이벤트 레코드 저장소

cards, events 두 컬렉션에 대한 키 기반 조회, 전체 스캔, 인덱스 조회,
그리고 두 컬렉션에 걸친 원자적 쓰기 배치를 제공.

동시성 규칙:
- 모든 트랜잭션은 내부 asyncio.Lock으로 직렬화됨
- 트랜잭션 밖의 단건 조회도 같은 Lock을 잡으므로,
  커밋 전의 카드 변경만 보이고 짝이 되는 이벤트는 안 보이는 상태는 관찰되지 않음
- Lock은 재진입 불가. 트랜잭션 안에서는 반드시 StoreTransaction의 메서드를 사용
  (같은 태스크에서 RecordStore 메서드를 부르면 RuntimeError)
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Sequence, Union

import aiosqlite

from adapters.db.sqlite_adapter import (
    CARD_INDEX_COLUMNS,
    EVENT_INDEX_COLUMNS,
    SQLiteAdapter,
)
from core.domain.card import Card
from core.domain.events import CardEvent
from core.errors import StorageFailure
from core.types import Collection

logger = logging.getLogger(__name__)

Entity = Union[Card, CardEvent]


@dataclass(frozen=True)
class CollectionDef:
    """컬렉션 ↔ 테이블 매핑"""

    table: str
    columns: tuple[str, ...]
    indexes: frozenset[str]
    order_by: str
    to_row: Callable[[Any], tuple[Any, ...]]
    from_row: Callable[[tuple[Any, ...]], Any]


CARD_COLUMNS: tuple[str, ...] = (
    "id", "store_id", "number", "amount_minor", "currency",
    "expiration_date", "nickname", "notes", "created_at", "updated_at",
    "archived_at", "last_used_at", "is_empty",
)

EVENT_COLUMNS: tuple[str, ...] = (
    "id", "card_id", "type", "delta_amount_minor", "created_at",
)

COLLECTIONS: dict[Collection, CollectionDef] = {
    Collection.CARDS: CollectionDef(
        table="cards",
        columns=CARD_COLUMNS,
        indexes=frozenset(CARD_INDEX_COLUMNS),
        order_by="rowid ASC",
        to_row=Card.to_row,
        from_row=Card.from_row,
    ),
    Collection.EVENTS: CollectionDef(
        table="card_events",
        columns=EVENT_COLUMNS,
        indexes=frozenset(EVENT_INDEX_COLUMNS),
        order_by="created_at ASC, rowid ASC",
        to_row=CardEvent.to_row,
        from_row=CardEvent.from_row,
    ),
}


# -------------------------------------------------------------------------
# 쓰기 연산 (run_atomic 배치 단위)
# -------------------------------------------------------------------------

@dataclass(frozen=True)
class PutOp:
    """insert 또는 id 기준 덮어쓰기"""

    collection: Collection
    entity: Entity


@dataclass(frozen=True)
class DeleteOp:
    """id 기준 삭제"""

    collection: Collection
    id: str


@dataclass(frozen=True)
class DeleteByIndexOp:
    """인덱스 필드 값 기준 일괄 삭제"""

    collection: Collection
    field: str
    value: Any


WriteOp = Union[PutOp, DeleteOp, DeleteByIndexOp]


def _definition(collection: Collection) -> CollectionDef:
    return COLLECTIONS[Collection(collection)]


def _check_index(definition: CollectionDef, field: str) -> None:
    if field not in definition.indexes:
        raise ValueError(
            f"'{field}'는 {definition.table}의 인덱스 필드가 아닙니다: {sorted(definition.indexes)}"
        )


class StoreTransaction:
    """트랜잭션 범위의 읽기/쓰기 핸들

    RecordStore.transaction() 안에서만 사용. 커밋/롤백은 RecordStore가 담당.

    Args:
        db: SQLiteAdapter 인스턴스
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def _execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        try:
            return await self.db.execute(sql, parameters)
        except aiosqlite.Error as e:
            logger.error("저장소 쿼리 실패", extra={"sql": sql.split()[0], "error": str(e)})
            raise StorageFailure(f"Storage operation failed: {e}") from e

    async def _fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[tuple[Any, ...]]:
        cursor = await self._execute(sql, parameters)
        try:
            return list(await cursor.fetchall())
        except aiosqlite.Error as e:
            raise StorageFailure(f"Storage read failed: {e}") from e

    # ---------------------------------------------------------------------
    # 읽기
    # ---------------------------------------------------------------------

    async def get(self, collection: Collection, entity_id: str) -> Any | None:
        """id로 단건 조회 (없으면 None)"""
        definition = _definition(collection)
        rows = await self._fetchall(
            f"SELECT {', '.join(definition.columns)} FROM {definition.table} WHERE id = ?",
            (entity_id,),
        )
        if not rows:
            return None
        return definition.from_row(rows[0])

    async def scan(self, collection: Collection) -> list[Any]:
        """컬렉션 전체 조회 (페이지네이션 없음)"""
        definition = _definition(collection)
        rows = await self._fetchall(
            f"SELECT {', '.join(definition.columns)} FROM {definition.table} ORDER BY {definition.order_by}"
        )
        return [definition.from_row(row) for row in rows]

    async def find_by_index(
        self,
        collection: Collection,
        field: str,
        value: Any,
    ) -> list[Any]:
        """인덱스 필드 값으로 조회 (value=None이면 IS NULL)"""
        definition = _definition(collection)
        _check_index(definition, field)

        columns = ", ".join(definition.columns)
        if value is None:
            rows = await self._fetchall(
                f"SELECT {columns} FROM {definition.table} WHERE {field} IS NULL "
                f"ORDER BY {definition.order_by}"
            )
        else:
            rows = await self._fetchall(
                f"SELECT {columns} FROM {definition.table} WHERE {field} = ? "
                f"ORDER BY {definition.order_by}",
                (value,),
            )
        return [definition.from_row(row) for row in rows]

    async def count(self, collection: Collection) -> int:
        """컬렉션 레코드 수"""
        definition = _definition(collection)
        rows = await self._fetchall(f"SELECT COUNT(*) AS record_count FROM {definition.table}")
        return rows[0][0] if rows else 0

    # ---------------------------------------------------------------------
    # 쓰기
    # ---------------------------------------------------------------------

    async def put(self, collection: Collection, entity: Entity) -> None:
        """insert 또는 id 기준 덮어쓰기 (upsert)"""
        definition = _definition(collection)
        placeholders = ", ".join("?" for _ in definition.columns)
        updates = ", ".join(f"{c} = excluded.{c}" for c in definition.columns if c != "id")

        await self._execute(
            f"""
            INSERT INTO {definition.table} ({', '.join(definition.columns)})
            VALUES ({placeholders})
            ON CONFLICT(id) DO UPDATE SET {updates}
            """,
            definition.to_row(entity),
        )

    async def insert_if_absent(self, collection: Collection, entity: Entity) -> bool:
        """같은 id가 없을 때만 저장

        Returns:
            True: 신규 저장
            False: 이미 존재하여 무시됨
        """
        definition = _definition(collection)
        placeholders = ", ".join("?" for _ in definition.columns)

        cursor = await self._execute(
            f"INSERT OR IGNORE INTO {definition.table} ({', '.join(definition.columns)}) "
            f"VALUES ({placeholders})",
            definition.to_row(entity),
        )
        return cursor.rowcount == 1

    async def delete(self, collection: Collection, entity_id: str) -> bool:
        """id 기준 삭제 (삭제 여부 반환)"""
        definition = _definition(collection)
        cursor = await self._execute(
            f"DELETE FROM {definition.table} WHERE id = ?",
            (entity_id,),
        )
        return cursor.rowcount > 0

    async def delete_by_index(
        self,
        collection: Collection,
        field: str,
        value: Any,
    ) -> int:
        """인덱스 필드 값 기준 일괄 삭제 (삭제 건수 반환)"""
        definition = _definition(collection)
        _check_index(definition, field)

        cursor = await self._execute(
            f"DELETE FROM {definition.table} WHERE {field} = ?",
            (value,),
        )
        return cursor.rowcount

    async def clear(self, collection: Collection) -> int:
        """컬렉션 전체 삭제 (삭제 건수 반환)"""
        definition = _definition(collection)
        cursor = await self._execute(f"DELETE FROM {definition.table}")
        return cursor.rowcount

    async def apply(self, op: WriteOp) -> None:
        """쓰기 연산 하나 적용"""
        if isinstance(op, PutOp):
            await self.put(op.collection, op.entity)
        elif isinstance(op, DeleteOp):
            await self.delete(op.collection, op.id)
        elif isinstance(op, DeleteByIndexOp):
            await self.delete_by_index(op.collection, op.field, op.value)
        else:
            raise TypeError(f"Unknown write operation: {op!r}")


class RecordStore:
    """카드/이벤트 레코드 저장소

    Ledger Service만 이 저장소에 쓴다.
    프로세스 시작 시 한 번 생성하여 LedgerService에 주입.

    Args:
        db: 연결된 SQLiteAdapter (init_schema 완료 상태)

    사용 예시:
    ```python
    async with SQLiteAdapter(db_path) as db:
        await init_schema(db)
        store = RecordStore(db)

        async with store.transaction() as tx:
            await tx.put(Collection.CARDS, card)
            await tx.put(Collection.EVENTS, event)

        card = await store.get(Collection.CARDS, card.id)
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self._lock = asyncio.Lock()
        self._tx = StoreTransaction(db)
        self._owner: asyncio.Task | None = None

    def _ensure_not_in_transaction(self) -> None:
        if self._owner is not None and self._owner is asyncio.current_task():
            raise RuntimeError(
                "RecordStore called inside its own transaction; use the StoreTransaction"
            )

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[StoreTransaction]:
        """원자적 트랜잭션

        정상 종료 시 커밋, 예외 발생 시 전체 롤백 후 예외 재발생.
        커밋 전까지 다른 조회는 이 트랜잭션의 변경을 볼 수 없음.
        """
        self._ensure_not_in_transaction()
        async with self._lock:
            self._owner = asyncio.current_task()
            try:
                async with self.db.transaction():
                    yield self._tx
            except aiosqlite.Error as e:
                logger.error("트랜잭션 커밋 실패", extra={"error": str(e)})
                raise StorageFailure(f"Transaction failed: {e}") from e
            finally:
                self._owner = None

    async def run_atomic(self, operations: Sequence[WriteOp]) -> None:
        """쓰기 연산 배치를 하나의 트랜잭션으로 실행 (전부 커밋 또는 전부 취소)"""
        async with self.transaction() as tx:
            for op in operations:
                await tx.apply(op)

        logger.debug("원자적 배치 커밋", extra={"op_count": len(operations)})

    # ---------------------------------------------------------------------
    # 단건 조회/쓰기 (각각 독립 트랜잭션)
    # ---------------------------------------------------------------------

    async def get(self, collection: Collection, entity_id: str) -> Any | None:
        """id로 단건 조회 (없으면 None)"""
        self._ensure_not_in_transaction()
        async with self._lock:
            return await self._tx.get(collection, entity_id)

    async def scan(self, collection: Collection) -> list[Any]:
        """컬렉션 전체 조회"""
        self._ensure_not_in_transaction()
        async with self._lock:
            return await self._tx.scan(collection)

    async def find_by_index(
        self,
        collection: Collection,
        field: str,
        value: Any,
    ) -> list[Any]:
        """인덱스 필드 값으로 조회"""
        self._ensure_not_in_transaction()
        async with self._lock:
            return await self._tx.find_by_index(collection, field, value)

    async def count(self, collection: Collection) -> int:
        """컬렉션 레코드 수"""
        self._ensure_not_in_transaction()
        async with self._lock:
            return await self._tx.count(collection)

    async def put(self, collection: Collection, entity: Entity) -> None:
        """insert 또는 id 기준 덮어쓰기"""
        await self.run_atomic([PutOp(collection, entity)])

    async def delete(self, collection: Collection, entity_id: str) -> None:
        """id 기준 삭제"""
        await self.run_atomic([DeleteOp(collection, entity_id)])
