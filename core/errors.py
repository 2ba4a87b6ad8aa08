"""
Ledger 예외 정의

호출자는 LedgerError 하나로 모든 코어 실패를 잡을 수 있음.
"""


class LedgerError(Exception):
    """Ledger 코어 예외 기본 클래스"""
    pass


class NotFoundError(LedgerError):
    """존재하지 않는 카드 ID를 대상으로 한 연산"""

    def __init__(self, card_id: str):
        super().__init__(f"Card not found: {card_id}")
        self.card_id = card_id


class ValidationError(LedgerError):
    """코어가 저장을 거부하는 불가능한 상태 (예: 음수 잔액)"""
    pass


class StorageFailure(LedgerError):
    """저장소 읽기/쓰기 실패 (원인 예외는 __cause__로 연결)"""
    pass


class ImportFormatError(LedgerError):
    """백업 파일 구조 검증 실패 (부분 가져오기 없음)"""
    pass
