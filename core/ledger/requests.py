"""
요청 스키마 (Pydantic)

카드 생성/잔액 변경 입력 검증.
입력 검증은 호출자 책임이며, 호출자는 이 모델을 만들어 LedgerService에 전달.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from core.constants import Defaults
from core.utils.money import to_minor_units


class NewCardRequest(BaseModel):
    """카드 생성 요청"""

    store_id: str = Field(..., min_length=1, description="매장 카탈로그 ID")
    number: str = Field(..., description="카드 번호 (임의 문자열)")
    amount_minor: int = Field(..., ge=0, description="초기 잔액 (minor unit)")
    expiration_date: date = Field(..., description="만료일 (정렬/표시용)")
    currency: str = Field(default=Defaults.CURRENCY, min_length=1, description="통화 코드")
    nickname: str = Field(default="", description="별칭")
    notes: str | None = Field(default=None, description="메모")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "store_id": "shufersal",
                    "number": "1234567890",
                    "amount_minor": 5000,
                    "expiration_date": "2031-01-01",
                    "currency": "ILS",
                }
            ]
        }
    }

    @field_validator("number")
    @classmethod
    def _strip_number(cls, value: str) -> str:
        value = value.strip()
        if len(value) < Defaults.MIN_CARD_NUMBER_LENGTH:
            raise ValueError(
                f"Card number must be at least {Defaults.MIN_CARD_NUMBER_LENGTH} characters"
            )
        return value

    @field_validator("notes")
    @classmethod
    def _blank_notes_to_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @classmethod
    def from_major(
        cls,
        amount: Decimal | int | str,
        **fields: object,
    ) -> "NewCardRequest":
        """major unit 금액(예: "50.00")으로 생성"""
        return cls(amount_minor=to_minor_units(amount), **fields)


class AmountUpdateRequest(BaseModel):
    """잔액 변경 요청"""

    amount_minor: int = Field(..., ge=0, description="새 잔액 (minor unit)")

    @classmethod
    def from_major(cls, amount: Decimal | int | str) -> "AmountUpdateRequest":
        """major unit 금액으로 생성

        Raises:
            ValueError: 숫자가 아니거나 음수인 경우
        """
        return cls(amount_minor=to_minor_units(amount))
