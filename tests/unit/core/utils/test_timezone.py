"""
core/utils/timezone.py 테스트
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from core.utils.timezone import ensure_utc, now_utc, parse_date, parse_iso, to_iso


def test_now_utc_is_aware() -> None:
    assert now_utc().tzinfo == timezone.utc


def test_ensure_utc_naive() -> None:
    """naive는 UTC로 간주"""
    naive = datetime(2026, 2, 20, 12, 0, 0)

    assert ensure_utc(naive) == datetime(2026, 2, 20, 12, 0, 0, tzinfo=timezone.utc)


def test_ensure_utc_converts_offset() -> None:
    """다른 오프셋은 UTC로 변환"""
    jerusalem = datetime(2026, 2, 20, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))

    converted = ensure_utc(jerusalem)

    assert converted.hour == 12
    assert converted.tzinfo == timezone.utc


def test_to_iso() -> None:
    dt = datetime(2026, 2, 20, 16, 0, 0, tzinfo=timezone.utc)

    assert to_iso(dt) == "2026-02-20T16:00:00+00:00"


class TestParseIso:
    """parse_iso() 테스트"""

    def test_javascript_format(self) -> None:
        """toISOString() 형식 ("Z" 접미사, 밀리초)"""
        parsed = parse_iso("2026-02-20T12:00:00.123Z")

        assert parsed == datetime(2026, 2, 20, 12, 0, 0, 123000, tzinfo=timezone.utc)

    def test_roundtrip_with_to_iso(self) -> None:
        dt = datetime(2026, 2, 20, 12, 30, 1, 500, tzinfo=timezone.utc)

        assert parse_iso(to_iso(dt)) == dt

    def test_invalid(self) -> None:
        with pytest.raises(ValueError):
            parse_iso("yesterday")


def test_parse_date() -> None:
    assert parse_date("2031-01-01") == date(2031, 1, 1)

    with pytest.raises(ValueError):
        parse_date("2031-13-01")
