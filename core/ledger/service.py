"""
LedgerService - 카드 원장 서비스

Record Store의 유일한 쓰기 주체.
모든 변경 연산은 카드 쓰기 + 이벤트 1건 추가를 하나의 트랜잭션으로 커밋.
"""

import logging
from datetime import date
from typing import Any, Mapping
from uuid import uuid4

from core.domain.card import Card
from core.domain.events import CardEvent
from core.errors import NotFoundError, ValidationError
from core.ledger.backup import (
    ImportSummary,
    build_export,
    parse_backup,
)
from core.ledger.requests import NewCardRequest
from core.storage.record_store import RecordStore, StoreTransaction
from core.types import CardEventType, Collection
from core.utils.timezone import now_utc

logger = logging.getLogger(__name__)


def _ensure_non_negative(amount_minor: int) -> None:
    """음수 잔액 저장 거부 (코어가 직접 지키는 유일한 입력 검증)"""
    if amount_minor < 0:
        raise ValidationError(f"amount_minor must be >= 0, got {amount_minor}")


def _expiration_sort_key(card: Card) -> date:
    return card.expiration_date


class LedgerService:
    """카드 원장 서비스

    Args:
        store: RecordStore 인스턴스 (프로세스 시작 시 한 번 생성하여 주입)

    사용 예시:
    ```python
    ledger = LedgerService(RecordStore(db))

    card = await ledger.create(NewCardRequest(
        store_id="shufersal",
        number="1234567890",
        amount_minor=5000,
        expiration_date=date(2031, 1, 1),
    ))
    card = await ledger.update_amount(card.id, 0)
    await ledger.archive(card.id)
    ```
    """

    def __init__(self, store: RecordStore):
        self.store = store

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    async def get_by_id(self, card_id: str) -> Card | None:
        """카드 조회 (없으면 None, 오류 아님)"""
        return await self.store.get(Collection.CARDS, card_id)

    async def list_cards(self, include_archived: bool = False) -> list[Card]:
        """카드 목록

        Args:
            include_archived: True면 보관된 카드 포함 전체 (저장 순서),
                False면 활성 카드만 만료일 오름차순

        Returns:
            Card 리스트
        """
        if include_archived:
            return await self.store.scan(Collection.CARDS)
        return await self.get_active_cards()

    async def get_active_cards(self) -> list[Card]:
        """활성 카드 (archived_at 없음), 만료일 오름차순"""
        active = await self.store.find_by_index(Collection.CARDS, "archived_at", None)
        return sorted(active, key=_expiration_sort_key)

    async def get_history(self, card_id: str) -> list[CardEvent]:
        """카드 이벤트 이력 (created_at 오름차순, 카드가 없으면 빈 리스트)"""
        return await self.store.find_by_index(Collection.EVENTS, "card_id", card_id)

    # -------------------------------------------------------------------------
    # 변경
    # -------------------------------------------------------------------------

    async def create(self, request: NewCardRequest) -> Card:
        """카드 생성 + CREATE 이벤트

        입력 검증은 호출자 책임 (NewCardRequest). 음수 잔액만 다시 확인.

        Returns:
            생성된 Card

        Raises:
            ValidationError: amount_minor < 0
        """
        _ensure_non_negative(request.amount_minor)

        now = now_utc()
        card = Card(
            id=str(uuid4()),
            store_id=request.store_id,
            number=request.number,
            amount_minor=request.amount_minor,
            currency=request.currency,
            expiration_date=request.expiration_date,
            created_at=now,
            updated_at=now,
            nickname=request.nickname,
            notes=request.notes,
            archived_at=None,
            last_used_at=None,
            is_empty=request.amount_minor == 0,
        )
        event = CardEvent.create(
            card_id=card.id,
            event_type=CardEventType.CREATE,
            created_at=now,
            delta_amount_minor=card.amount_minor,
        )

        async with self.store.transaction() as tx:
            await tx.put(Collection.CARDS, card)
            await tx.put(Collection.EVENTS, event)

        logger.info(
            "카드 생성",
            extra={"card_id": card.id, "store_id": card.store_id, "amount_minor": card.amount_minor},
        )
        return card

    async def update_amount(self, card_id: str, new_amount_minor: int) -> Card:
        """잔액 변경 + UPDATE_AMOUNT 이벤트

        같은 값으로 호출해도 delta 0 이벤트가 기록됨 (모든 시도를 감사 로그에 남김).

        Raises:
            NotFoundError: 카드 없음
            ValidationError: new_amount_minor < 0
        """
        _ensure_non_negative(new_amount_minor)

        async with self.store.transaction() as tx:
            card = await self._require(tx, card_id)
            delta = new_amount_minor - card.amount_minor
            now = now_utc()

            card.amount_minor = new_amount_minor
            card.is_empty = new_amount_minor == 0
            card.updated_at = now

            await tx.put(Collection.CARDS, card)
            await tx.put(
                Collection.EVENTS,
                CardEvent.create(
                    card_id=card_id,
                    event_type=CardEventType.UPDATE_AMOUNT,
                    created_at=now,
                    delta_amount_minor=delta,
                ),
            )

        logger.info(
            "잔액 변경",
            extra={"card_id": card_id, "amount_minor": new_amount_minor, "delta": delta},
        )
        return card

    async def mark_empty(self, card_id: str) -> Card:
        """잔액 0 처리 (update_amount(card_id, 0)과 동일, UPDATE_AMOUNT로 기록)"""
        return await self.update_amount(card_id, 0)

    async def archive(self, card_id: str) -> Card:
        """보관 처리 + ARCHIVE 이벤트

        이미 보관된 카드도 archived_at이 갱신되고 이벤트가 추가됨.

        Raises:
            NotFoundError: 카드 없음
        """
        card = await self._set_archived(card_id, archived=True)
        logger.info("카드 보관", extra={"card_id": card_id})
        return card

    async def restore(self, card_id: str) -> Card:
        """보관 해제 + RESTORE 이벤트 (이전 상태와 무관)

        Raises:
            NotFoundError: 카드 없음
        """
        card = await self._set_archived(card_id, archived=False)
        logger.info("카드 복원", extra={"card_id": card_id})
        return card

    async def delete(self, card_id: str) -> None:
        """카드와 해당 카드의 모든 이벤트 영구 삭제 (복구 불가)

        Raises:
            NotFoundError: 카드 없음
        """
        async with self.store.transaction() as tx:
            await self._require(tx, card_id)
            await tx.delete(Collection.CARDS, card_id)
            removed = await tx.delete_by_index(Collection.EVENTS, "card_id", card_id)

        logger.info("카드 삭제", extra={"card_id": card_id, "events_removed": removed})

    async def _set_archived(self, card_id: str, archived: bool) -> Card:
        async with self.store.transaction() as tx:
            card = await self._require(tx, card_id)
            now = now_utc()

            card.archived_at = now if archived else None
            card.updated_at = now

            await tx.put(Collection.CARDS, card)
            await tx.put(
                Collection.EVENTS,
                CardEvent.create(
                    card_id=card_id,
                    event_type=CardEventType.ARCHIVE if archived else CardEventType.RESTORE,
                    created_at=now,
                ),
            )
        return card

    @staticmethod
    async def _require(tx: StoreTransaction, card_id: str) -> Card:
        card = await tx.get(Collection.CARDS, card_id)
        if card is None:
            logger.warning("카드 없음", extra={"card_id": card_id})
            raise NotFoundError(card_id)
        return card

    # -------------------------------------------------------------------------
    # 백업
    # -------------------------------------------------------------------------

    async def export_backup(self) -> dict[str, Any]:
        """전체 카드/이벤트 내보내기 payload (한 트랜잭션 안에서 일관된 스냅샷)"""
        async with self.store.transaction() as tx:
            cards = await tx.scan(Collection.CARDS)
            events = await tx.scan(Collection.EVENTS)

        logger.info(
            "백업 내보내기",
            extra={"card_count": len(cards), "event_count": len(events)},
        )
        return build_export(cards, events)

    async def import_backup(self, payload: str | bytes | Mapping[str, Any]) -> ImportSummary:
        """백업 가져오기 (id 기준 합집합, 기존 레코드는 덮어쓰지 않음)

        구조 검증을 먼저 끝내고, 저장은 하나의 트랜잭션으로 실행.
        중간에 저장 실패 시 전체 롤백.

        Raises:
            ImportFormatError: 구조 검증 실패 (저장소 변경 없음)
            StorageFailure: 저장 실패 (저장소 변경 없음)
        """
        contents = parse_backup(payload)

        cards_added = 0
        events_added = 0
        async with self.store.transaction() as tx:
            for card in contents.cards:
                if await tx.insert_if_absent(Collection.CARDS, card):
                    cards_added += 1
            for event in contents.events:
                if await tx.insert_if_absent(Collection.EVENTS, event):
                    events_added += 1

        summary = ImportSummary(
            cards_added=cards_added,
            cards_skipped=len(contents.cards) - cards_added,
            events_added=events_added,
            events_skipped=len(contents.events) - events_added,
        )
        logger.info(
            "백업 가져오기 완료",
            extra={
                "cards_added": summary.cards_added,
                "cards_skipped": summary.cards_skipped,
                "events_added": summary.events_added,
                "events_skipped": summary.events_skipped,
            },
        )
        return summary

    async def clear_all(self) -> None:
        """모든 카드와 이벤트 삭제 (복구 불가, 확인 절차는 호출자 책임)"""
        async with self.store.transaction() as tx:
            cards_removed = await tx.clear(Collection.CARDS)
            events_removed = await tx.clear(Collection.EVENTS)

        logger.warning(
            "전체 데이터 삭제",
            extra={"cards_removed": cards_removed, "events_removed": events_removed},
        )
