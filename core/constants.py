"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → giftwallet/)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수"""

    CURRENCY: str = "ILS"
    LOG_LEVEL: str = "INFO"

    # 카드 번호 최소 길이 (입력 단계 검증)
    MIN_CARD_NUMBER_LENGTH: int = 4

    # 금액 소수 자릿수 (minor unit = 1/100)
    MINOR_UNIT_DIGITS: int = 2


class BackupFormat:
    """백업 파일 형식 상수"""

    VERSION: int = 1
    FILE_PREFIX: str = "gift-cards-backup"
    FILE_SUFFIX: str = ".json"


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    DB_FILE: Path = DATA_DIR / "giftwallet.db"
