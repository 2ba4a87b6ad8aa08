"""
pytest 공통 fixture 정의

임시 디렉토리, 설정 파일, 임시 DB 기반 RecordStore/LedgerService fixture
"""

import tempfile
from datetime import date
from pathlib import Path
from typing import AsyncIterator, Callable

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.config.loader import Settings
from core.ledger.requests import NewCardRequest
from core.ledger.service import LedgerService
from core.storage.record_store import RecordStore


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성"""
    settings_content = f"""# 테스트용 settings.yaml
database:
  path: {(temp_dir / "wallet_test.db").as_posix()}

logging:
  level: debug

defaults:
  currency: USD
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture(autouse=True)
def reset_settings() -> None:
    """Settings 싱글턴 초기화 (테스트 간 격리)"""
    Settings.reset()
    yield
    Settings.reset()


@pytest_asyncio.fixture
async def db(tmp_path: Path) -> AsyncIterator[SQLiteAdapter]:
    """스키마가 초기화된 임시 DB"""
    adapter = SQLiteAdapter(tmp_path / "ledger_test.db")
    await adapter.connect()
    await init_schema(adapter)
    yield adapter
    await adapter.close()


@pytest.fixture
def store(db: SQLiteAdapter) -> RecordStore:
    """RecordStore 인스턴스"""
    return RecordStore(db)


@pytest.fixture
def ledger(store: RecordStore) -> LedgerService:
    """LedgerService 인스턴스"""
    return LedgerService(store)


@pytest.fixture
def make_request() -> Callable[..., NewCardRequest]:
    """카드 생성 요청 팩토리 (기본값: shufersal, 50.00 ILS)"""

    def _make(**overrides: object) -> NewCardRequest:
        fields: dict[str, object] = {
            "store_id": "shufersal",
            "number": "1234567890",
            "amount_minor": 5000,
            "expiration_date": date(2031, 1, 1),
            "currency": "ILS",
        }
        fields.update(overrides)
        return NewCardRequest(**fields)

    return _make
