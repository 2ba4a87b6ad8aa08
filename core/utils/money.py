"""
금액 유틸리티

화면 입력 금액(major unit)과 저장 금액(minor unit, 정수) 사이 변환.
부동소수점 오차를 피하기 위해 Decimal 사용.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from core.constants import Defaults

# 통화 기호 (표시용)
CURRENCY_SYMBOLS: dict[str, str] = {
    "ILS": "₪",
    "USD": "$",
    "EUR": "€",
}

_MINOR_FACTOR = Decimal(10) ** Defaults.MINOR_UNIT_DIGITS


def to_minor_units(amount: Decimal | int | str) -> int:
    """major unit 금액을 minor unit 정수로 변환

    Args:
        amount: 금액 (예: "50.00", Decimal("12.345"))

    Returns:
        minor unit 정수 (예: 5000). 소수 셋째 자리에서 반올림.

    Raises:
        ValueError: 숫자가 아니거나 음수인 경우

    Example:
        >>> to_minor_units("12.345")
        1235
    """
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation as e:
        raise ValueError(f"금액 형식이 잘못되었습니다: {amount!r}") from e

    if not value.is_finite():
        raise ValueError(f"금액 형식이 잘못되었습니다: {amount!r}")
    if value < 0:
        raise ValueError(f"금액은 음수일 수 없습니다: {amount!r}")

    return int((value * _MINOR_FACTOR).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount_minor: int) -> Decimal:
    """minor unit 정수를 major unit Decimal로 변환"""
    return (Decimal(amount_minor) / _MINOR_FACTOR).quantize(
        Decimal(1).scaleb(-Defaults.MINOR_UNIT_DIGITS)
    )


def format_minor(amount_minor: int, currency: str, use_symbol: bool = False) -> str:
    """표시용 금액 문자열

    Example:
        >>> format_minor(5000, "ILS")
        '50.00 ILS'
        >>> format_minor(5000, "ILS", use_symbol=True)
        '50.00 ₪'
    """
    label = CURRENCY_SYMBOLS.get(currency, currency) if use_symbol else currency
    return f"{from_minor_units(amount_minor)} {label}"
