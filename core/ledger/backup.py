"""
백업 내보내기/가져오기 형식

내보내기 형식:
```
{
  "version": 1,
  "exportedAt": <ISO-8601>,
  "cards": [<Card>, ...],
  "events": [<CardEvent>, ...]
}
```

가져오기는 구조 검증을 먼저 모두 끝낸 뒤에만 저장을 시작함.
검증 실패 시 ImportFormatError 하나로 전체 실패 (부분 가져오기 없음).
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

import pydantic
from pydantic import BaseModel, Field

from core.constants import BackupFormat
from core.domain.card import Card
from core.domain.events import CardEvent
from core.errors import ImportFormatError
from core.types import CardEventType
from core.utils.timezone import ensure_utc, now_utc, to_iso

logger = logging.getLogger(__name__)


class CardRecord(BaseModel):
    """백업 파일의 카드 레코드 (camelCase 키)"""

    id: str = Field(..., min_length=1)
    store_id: str = Field(..., alias="storeId")
    number: str
    amount_minor: int = Field(..., ge=0, alias="amountMinor")
    currency: str
    expiration_date: date = Field(..., alias="expirationDate")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")
    nickname: str | None = ""
    notes: str | None = None
    archived_at: datetime | None = Field(default=None, alias="archivedAt")
    last_used_at: datetime | None = Field(default=None, alias="lastUsedAt")
    is_empty: bool | None = Field(default=None, alias="isEmpty")

    model_config = {"populate_by_name": True}

    def to_card(self) -> Card:
        """Card로 변환 (is_empty는 잔액으로 재계산)"""
        return Card(
            id=self.id,
            store_id=self.store_id,
            number=self.number,
            amount_minor=self.amount_minor,
            currency=self.currency,
            expiration_date=self.expiration_date,
            created_at=ensure_utc(self.created_at),
            updated_at=ensure_utc(self.updated_at),
            nickname=self.nickname or "",
            notes=self.notes,
            archived_at=ensure_utc(self.archived_at) if self.archived_at else None,
            last_used_at=ensure_utc(self.last_used_at) if self.last_used_at else None,
            is_empty=self.amount_minor == 0,
        )


class EventRecord(BaseModel):
    """백업 파일의 이벤트 레코드 (camelCase 키)"""

    id: str = Field(..., min_length=1)
    card_id: str = Field(..., alias="cardId")
    type: CardEventType
    created_at: datetime = Field(..., alias="createdAt")
    delta_amount_minor: int | None = Field(default=None, alias="deltaAmountMinor")

    model_config = {"populate_by_name": True}

    def to_event(self) -> CardEvent:
        return CardEvent(
            id=self.id,
            card_id=self.card_id,
            type=self.type,
            created_at=ensure_utc(self.created_at),
            delta_amount_minor=self.delta_amount_minor,
        )


@dataclass(frozen=True)
class BackupContents:
    """검증을 통과한 백업 내용"""

    cards: list[Card]
    events: list[CardEvent]
    version: int | None = None


@dataclass(frozen=True)
class ImportSummary:
    """가져오기 결과 (id 기준 합집합)"""

    cards_added: int
    cards_skipped: int
    events_added: int
    events_skipped: int


def build_export(
    cards: list[Card],
    events: list[CardEvent],
    exported_at: datetime | None = None,
) -> dict[str, Any]:
    """내보내기 payload 생성

    Args:
        cards: 전체 카드
        events: 전체 이벤트
        exported_at: 내보낸 시각 (None이면 현재 UTC)

    Returns:
        JSON 직렬화 가능한 dict
    """
    return {
        "version": BackupFormat.VERSION,
        "exportedAt": to_iso(exported_at or now_utc()),
        "cards": [card.to_dict() for card in cards],
        "events": [event.to_dict() for event in events],
    }


def dump_export(payload: dict[str, Any]) -> str:
    """내보내기 payload를 JSON 문자열로 변환 (들여쓰기 2칸)"""
    return json.dumps(payload, ensure_ascii=False, indent=2)


def backup_file_name(exported_at: datetime | None = None) -> str:
    """기본 백업 파일 이름 (예: gift-cards-backup-2026-02-21.json)"""
    day = (exported_at or now_utc()).date().isoformat()
    return f"{BackupFormat.FILE_PREFIX}-{day}{BackupFormat.FILE_SUFFIX}"


def parse_backup(payload: str | bytes | Mapping[str, Any]) -> BackupContents:
    """백업 payload 구조 검증 및 변환

    - cards 필드가 없거나 리스트가 아니면 실패
    - events 필드가 없거나 리스트가 아니면 이벤트 없음으로 취급
    - 레코드 하나라도 형식이 맞지 않으면 전체 실패

    Args:
        payload: JSON 문자열/바이트 또는 디코딩된 dict

    Returns:
        BackupContents

    Raises:
        ImportFormatError: 구조 검증 실패
    """
    if isinstance(payload, (str, bytes)):
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise ImportFormatError(f"Invalid backup file: not valid JSON ({e.msg})") from e
        except UnicodeDecodeError as e:
            raise ImportFormatError("Invalid backup file: not valid UTF-8") from e
        except RecursionError as e:
            raise ImportFormatError("Invalid backup file: nested too deeply") from e
    else:
        data = payload

    if not isinstance(data, Mapping):
        raise ImportFormatError("Invalid backup file: top-level value must be an object")

    raw_cards = data.get("cards")
    if not isinstance(raw_cards, list):
        raise ImportFormatError("Invalid backup file: 'cards' must be a list")

    raw_events = data.get("events")
    if not isinstance(raw_events, list):
        raw_events = []

    version = data.get("version")
    if version != BackupFormat.VERSION:
        logger.warning("알 수 없는 백업 버전", extra={"version": version})

    try:
        cards = [CardRecord.model_validate(item).to_card() for item in raw_cards]
        events = [EventRecord.model_validate(item).to_event() for item in raw_events]
    except pydantic.ValidationError as e:
        raise ImportFormatError(
            f"Invalid backup file: {e.error_count()} invalid field(s)"
        ) from e

    return BackupContents(
        cards=cards,
        events=events,
        version=version if isinstance(version, int) else None,
    )
