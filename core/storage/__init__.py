"""
스토리지 모듈

카드/이벤트 Record Store 인터페이스 제공
"""

from core.storage.record_store import (
    COLLECTIONS,
    DeleteByIndexOp,
    DeleteOp,
    PutOp,
    RecordStore,
    StoreTransaction,
    WriteOp,
)

__all__ = [
    "COLLECTIONS",
    "RecordStore",
    "StoreTransaction",
    "PutOp",
    "DeleteOp",
    "DeleteByIndexOp",
    "WriteOp",
]
