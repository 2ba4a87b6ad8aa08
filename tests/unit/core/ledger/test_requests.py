"""
core/ledger/requests.py 테스트

카드 생성/잔액 변경 입력 검증
"""

from datetime import date

import pydantic
import pytest

from core.ledger.requests import AmountUpdateRequest, NewCardRequest


def base_fields(**overrides: object) -> dict[str, object]:
    fields: dict[str, object] = {
        "store_id": "shufersal",
        "number": "1234567890",
        "amount_minor": 5000,
        "expiration_date": date(2031, 1, 1),
    }
    fields.update(overrides)
    return fields


class TestNewCardRequest:
    """NewCardRequest 테스트"""

    def test_defaults(self) -> None:
        request = NewCardRequest(**base_fields())

        assert request.currency == "ILS"
        assert request.nickname == ""
        assert request.notes is None

    def test_expiration_from_string(self) -> None:
        request = NewCardRequest(**base_fields(expiration_date="2030-06-30"))

        assert request.expiration_date == date(2030, 6, 30)

    def test_number_is_stripped(self) -> None:
        request = NewCardRequest(**base_fields(number="  9876 5432  "))

        assert request.number == "9876 5432"

    @pytest.mark.parametrize("number", ["123", "   ", "  12  "])
    def test_short_number_rejected(self, number: str) -> None:
        with pytest.raises(pydantic.ValidationError):
            NewCardRequest(**base_fields(number=number))

    def test_empty_store_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            NewCardRequest(**base_fields(store_id=""))

    def test_negative_amount_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            NewCardRequest(**base_fields(amount_minor=-1))

    def test_blank_notes_become_none(self) -> None:
        request = NewCardRequest(**base_fields(notes="   "))

        assert request.notes is None

    def test_from_major(self) -> None:
        fields = base_fields()
        del fields["amount_minor"]

        request = NewCardRequest.from_major("49.99", **fields)

        assert request.amount_minor == 4999


class TestAmountUpdateRequest:
    """AmountUpdateRequest 테스트"""

    def test_from_major(self) -> None:
        assert AmountUpdateRequest.from_major("0").amount_minor == 0
        assert AmountUpdateRequest.from_major("12.50").amount_minor == 1250

    def test_negative_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            AmountUpdateRequest(amount_minor=-5)

    def test_from_major_invalid(self) -> None:
        with pytest.raises(ValueError):
            AmountUpdateRequest.from_major("abc")
