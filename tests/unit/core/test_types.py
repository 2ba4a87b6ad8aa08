"""
core/types.py 테스트

모든 Enum이 문자열 직렬화 가능한지 확인
"""

import pytest

from core.types import CardEventType, CardStatus, Collection


class TestCardEventType:
    """CardEventType 테스트"""

    def test_values(self) -> None:
        """값 확인 (백업 파일에 그대로 기록되는 문자열)"""
        assert [t.value for t in CardEventType] == [
            "CREATE",
            "UPDATE_AMOUNT",
            "ARCHIVE",
            "RESTORE",
            "DELETE",
            "MARK_EMPTY",
        ]

    def test_from_string(self) -> None:
        """문자열에서 생성"""
        assert CardEventType("UPDATE_AMOUNT") == CardEventType.UPDATE_AMOUNT

    def test_unknown_value(self) -> None:
        with pytest.raises(ValueError):
            CardEventType("TOP_UP")

    def test_is_str(self) -> None:
        """str 상속 확인"""
        assert isinstance(CardEventType.CREATE, str)
        assert CardEventType.CREATE == "CREATE"


class TestCardStatus:
    """CardStatus 테스트"""

    def test_values(self) -> None:
        assert CardStatus.ACTIVE.value == "ACTIVE"
        assert CardStatus.ARCHIVED.value == "ARCHIVED"


class TestCollection:
    """Collection 테스트"""

    def test_values(self) -> None:
        assert Collection.CARDS.value == "cards"
        assert Collection.EVENTS.value == "events"
