"""
Card 도메인 모델

잔액을 보유하는 유일한 가변 엔티티.
amount_minor가 현재 잔액의 유일한 근거이며 이벤트 합산으로 계산하지 않음.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from core.types import CardStatus
from core.utils.timezone import parse_date, parse_iso, to_iso


@dataclass
class Card:
    """기프트 카드

    is_empty는 잔액 기록 시마다 amount_minor == 0 으로 재계산됨.
    """

    id: str
    store_id: str
    number: str
    amount_minor: int
    currency: str
    expiration_date: date
    created_at: datetime
    updated_at: datetime
    nickname: str = ""
    notes: str | None = None
    archived_at: datetime | None = None
    last_used_at: datetime | None = None  # 예약 필드 (현재 어떤 연산도 기록하지 않음)
    is_empty: bool = False

    @property
    def status(self) -> CardStatus:
        """파생 상태 (ACTIVE / ARCHIVED)"""
        if self.archived_at is None:
            return CardStatus.ACTIVE
        return CardStatus.ARCHIVED

    @property
    def is_archived(self) -> bool:
        return self.archived_at is not None

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리로 변환 (백업 직렬화용, camelCase 키)"""
        return {
            "id": self.id,
            "storeId": self.store_id,
            "number": self.number,
            "amountMinor": self.amount_minor,
            "expirationDate": self.expiration_date.isoformat(),
            "nickname": self.nickname,
            "currency": self.currency,
            "createdAt": to_iso(self.created_at),
            "updatedAt": to_iso(self.updated_at),
            "archivedAt": to_iso(self.archived_at) if self.archived_at else None,
            "lastUsedAt": to_iso(self.last_used_at) if self.last_used_at else None,
            "isEmpty": self.is_empty,
            "notes": self.notes,
        }

    def to_row(self) -> tuple[Any, ...]:
        """DB 행으로 변환 (record_store.CARD_COLUMNS 순서)"""
        return (
            self.id,
            self.store_id,
            self.number,
            self.amount_minor,
            self.currency,
            self.expiration_date.isoformat(),
            self.nickname,
            self.notes,
            to_iso(self.created_at),
            to_iso(self.updated_at),
            to_iso(self.archived_at) if self.archived_at else None,
            to_iso(self.last_used_at) if self.last_used_at else None,
            1 if self.is_empty else 0,
        )

    @staticmethod
    def from_row(row: tuple[Any, ...]) -> "Card":
        """DB 행을 Card 객체로 변환

        컬럼 순서:
        0: id, 1: store_id, 2: number, 3: amount_minor, 4: currency,
        5: expiration_date, 6: nickname, 7: notes, 8: created_at, 9: updated_at,
        10: archived_at, 11: last_used_at, 12: is_empty
        """
        return Card(
            id=row[0],
            store_id=row[1],
            number=row[2],
            amount_minor=row[3],
            currency=row[4],
            expiration_date=parse_date(row[5]),
            nickname=row[6] or "",
            notes=row[7],
            created_at=parse_iso(row[8]),
            updated_at=parse_iso(row[9]),
            archived_at=parse_iso(row[10]) if row[10] else None,
            last_used_at=parse_iso(row[11]) if row[11] else None,
            is_empty=bool(row[12]),
        )
