"""
유틸리티 패키지

타임존 처리, 금액 변환 등 공통 유틸리티
"""

from core.utils.money import (
    format_minor,
    from_minor_units,
    to_minor_units,
)
from core.utils.timezone import (
    ensure_utc,
    now_utc,
    parse_date,
    parse_iso,
    to_iso,
)

__all__ = [
    "ensure_utc",
    "now_utc",
    "parse_date",
    "parse_iso",
    "to_iso",
    "format_minor",
    "from_minor_units",
    "to_minor_units",
]
