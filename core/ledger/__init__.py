"""
카드 원장 (Card Ledger)

카드 상태(잔액, 보관 여부)와 append-only 이벤트 로그를 함께 관리.
모든 변경은 카드 쓰기 + 이벤트 1건이 하나의 트랜잭션으로 커밋됨.

사용 예시:
```python
from core.ledger import LedgerService, NewCardRequest

ledger = LedgerService(store)

card = await ledger.create(NewCardRequest.from_major(
    "50.00",
    store_id="shufersal",
    number="1234567890",
    expiration_date=date(2031, 1, 1),
))
await ledger.mark_empty(card.id)

payload = await ledger.export_backup()
summary = await other_ledger.import_backup(payload)
```
"""

from core.ledger.backup import (
    BackupContents,
    ImportSummary,
    backup_file_name,
    build_export,
    dump_export,
    parse_backup,
)
from core.ledger.requests import AmountUpdateRequest, NewCardRequest
from core.ledger.service import LedgerService

__all__ = [
    # 핵심 클래스
    "LedgerService",
    # 요청 모델
    "NewCardRequest",
    "AmountUpdateRequest",
    # 백업
    "BackupContents",
    "ImportSummary",
    "backup_file_name",
    "build_export",
    "dump_export",
    "parse_backup",
]
