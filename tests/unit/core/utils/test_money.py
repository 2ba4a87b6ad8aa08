"""
core/utils/money.py 테스트
"""

from decimal import Decimal

import pytest

from core.utils.money import format_minor, from_minor_units, to_minor_units


class TestToMinorUnits:
    """to_minor_units() 테스트"""

    @pytest.mark.parametrize(
        "amount, expected",
        [
            ("50", 5000),
            ("50.00", 5000),
            (" 12.5 ", 1250),
            ("12.345", 1235),
            ("0.004", 0),
            (Decimal("0.1"), 10),
            (7, 700),
            ("0", 0),
        ],
    )
    def test_conversion(self, amount: object, expected: int) -> None:
        assert to_minor_units(amount) == expected

    @pytest.mark.parametrize("amount", ["abc", "", "NaN", "Infinity", "1,50"])
    def test_invalid(self, amount: str) -> None:
        """숫자가 아닌 입력"""
        with pytest.raises(ValueError, match="형식"):
            to_minor_units(amount)

    def test_negative(self) -> None:
        """음수 거부"""
        with pytest.raises(ValueError, match="음수"):
            to_minor_units("-0.01")


class TestFormat:
    """from_minor_units() / format_minor() 테스트"""

    def test_from_minor_units(self) -> None:
        assert from_minor_units(5000) == Decimal("50.00")
        assert str(from_minor_units(5)) == "0.05"

    def test_format_code(self) -> None:
        assert format_minor(123456, "ILS") == "1234.56 ILS"

    def test_format_symbol(self) -> None:
        assert format_minor(5000, "ILS", use_symbol=True) == "50.00 ₪"
        assert format_minor(0, "USD", use_symbol=True) == "0.00 $"

    def test_unknown_currency_symbol_falls_back_to_code(self) -> None:
        assert format_minor(100, "GBP", use_symbol=True) == "1.00 GBP"
