"""
타임존 유틸리티

내부 저장은 UTC ISO 8601 문자열 원칙을 따르기 위한 헬퍼 함수
"""

from datetime import date, datetime, timezone


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)

    datetime.now(timezone.utc)의 축약형.

    Returns:
        현재 UTC 시간 (tzinfo=timezone.utc)
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """naive datetime은 UTC로 간주하여 tzinfo 부여"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso(dt: datetime) -> str:
    """datetime을 UTC ISO 8601 문자열로 변환

    Example:
        >>> to_iso(datetime(2026, 2, 20, 16, 0, 0, tzinfo=timezone.utc))
        '2026-02-20T16:00:00+00:00'
    """
    return ensure_utc(dt).isoformat()


def parse_iso(text: str) -> datetime:
    """ISO 8601 문자열을 UTC datetime으로 변환

    JavaScript의 toISOString() 형식("...Z")도 허용.

    Args:
        text: ISO 8601 문자열

    Returns:
        UTC datetime

    Raises:
        ValueError: 형식이 잘못된 경우
    """
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


def parse_date(text: str) -> date:
    """YYYY-MM-DD 문자열을 date로 변환

    Raises:
        ValueError: 형식이 잘못된 경우
    """
    return date.fromisoformat(text)
