"""
타입 정의 모듈

Enum 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class CardEventType(str, Enum):
    """카드 이벤트 타입

    MARK_EMPTY, DELETE는 스키마에만 정의되어 있고 현재 어떤 연산도 기록하지 않음.
    (잔액 0 처리는 UPDATE_AMOUNT로 기록, 삭제는 이벤트까지 함께 제거)
    """

    CREATE = "CREATE"
    UPDATE_AMOUNT = "UPDATE_AMOUNT"
    ARCHIVE = "ARCHIVE"
    RESTORE = "RESTORE"
    DELETE = "DELETE"
    MARK_EMPTY = "MARK_EMPTY"


class CardStatus(str, Enum):
    """카드 상태 (archived_at에서 파생, 저장되지 않음)"""

    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"


class Collection(str, Enum):
    """Record Store 컬렉션"""

    CARDS = "cards"
    EVENTS = "events"
