"""
CardEvent 도메인 모델

카드의 모든 변경은 CardEvent로 기록됨 (감사 로그, append-only)
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import uuid4

from core.types import CardEventType
from core.utils.timezone import parse_iso, to_iso


@dataclass(frozen=True)
class CardEvent:
    """카드 이벤트

    변경을 기록하는 불변 데이터 구조.
    card_id는 외래 키가 아니며, 카드 삭제 시 함께 삭제됨.
    """

    id: str
    card_id: str
    type: CardEventType
    created_at: datetime
    delta_amount_minor: int | None = None  # CREATE, UPDATE_AMOUNT에만 존재

    @staticmethod
    def create(
        card_id: str,
        event_type: CardEventType,
        created_at: datetime,
        delta_amount_minor: int | None = None,
    ) -> "CardEvent":
        """새 이벤트 생성

        Args:
            card_id: 대상 카드 ID
            event_type: 이벤트 타입
            created_at: 이벤트 시각 (짝을 이루는 카드의 updated_at과 동일)
            delta_amount_minor: 잔액 변화량 (부호 있음)

        Returns:
            새 CardEvent 인스턴스
        """
        return CardEvent(
            id=str(uuid4()),
            card_id=card_id,
            type=event_type,
            created_at=created_at,
            delta_amount_minor=delta_amount_minor,
        )

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리로 변환 (백업 직렬화용, camelCase 키)"""
        data: dict[str, Any] = {
            "id": self.id,
            "cardId": self.card_id,
            "type": self.type.value,
            "createdAt": to_iso(self.created_at),
        }
        if self.delta_amount_minor is not None:
            data["deltaAmountMinor"] = self.delta_amount_minor
        return data

    def to_row(self) -> tuple[Any, ...]:
        """DB 행으로 변환 (record_store.EVENT_COLUMNS 순서)"""
        return (
            self.id,
            self.card_id,
            self.type.value,
            self.delta_amount_minor,
            to_iso(self.created_at),
        )

    @staticmethod
    def from_row(row: tuple[Any, ...]) -> "CardEvent":
        """DB 행을 CardEvent 객체로 변환

        컬럼 순서: 0: id, 1: card_id, 2: type, 3: delta_amount_minor, 4: created_at
        """
        return CardEvent(
            id=row[0],
            card_id=row[1],
            type=CardEventType(row[2]),
            delta_amount_minor=row[3],
            created_at=parse_iso(row[4]),
        )
