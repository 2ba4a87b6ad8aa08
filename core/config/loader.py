"""
설정 로더

settings.yaml 로드 및 지갑 설정 생성.
파일이 없으면 기본값을 사용.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from core.constants import Defaults, Paths

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class WalletConfig:
    """지갑 설정 (settings.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    db_path: str
    log_level: str
    default_currency: str


class SettingsLoadError(Exception):
    """settings.yaml 로드 실패 예외"""

    pass


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """최상위 섹션 조회 (없으면 빈 dict)"""
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise SettingsLoadError(f"settings.yaml의 '{name}' 섹션은 매핑이어야 합니다")
    return section


def _string(section: dict[str, Any], key: str, default: str, where: str) -> str:
    value = section.get(key, default)
    if not isinstance(value, str) or not value:
        raise SettingsLoadError(f"settings.yaml의 {where}.{key}는 비어 있지 않은 문자열이어야 합니다")
    return value


def load_settings(path: Path | None = None) -> WalletConfig:
    """settings.yaml 파일 로드

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        WalletConfig 인스턴스 (파일이 없으면 기본값)

    Raises:
        SettingsLoadError: 형식이 잘못된 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        return WalletConfig(
            db_path=str(Paths.DB_FILE),
            log_level=Defaults.LOG_LEVEL,
            default_currency=Defaults.CURRENCY,
        )

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    database = _section(data, "database")
    logging_section = _section(data, "logging")
    defaults = _section(data, "defaults")

    log_level = _string(logging_section, "level", Defaults.LOG_LEVEL, "logging").upper()
    if log_level not in VALID_LOG_LEVELS:
        raise SettingsLoadError(
            f"유효하지 않은 로그 레벨입니다: '{log_level}'. "
            f"유효한 값: {list(VALID_LOG_LEVELS)}"
        )

    return WalletConfig(
        db_path=_string(database, "path", str(Paths.DB_FILE), "database"),
        log_level=log_level,
        default_currency=_string(defaults, "currency", Defaults.CURRENCY, "defaults"),
    )


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: WalletConfig | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._config is None:
            self._config = load_settings(settings_path)

    @property
    def db_path(self) -> str:
        """DB 경로 (상대 경로는 프로젝트 루트 기준)"""
        assert self._config is not None
        return self._config.db_path

    @property
    def log_level(self) -> str:
        """로그 레벨 이름"""
        assert self._config is not None
        return self._config.log_level

    @property
    def default_currency(self) -> str:
        """카드 생성 시 기본 통화"""
        assert self._config is not None
        return self._config.default_currency

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)
