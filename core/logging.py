"""
로깅 설정 유틸리티

wallet CLI 진입점에서 한 번 호출.
- 콘솔(stderr): WARNING 이상만 (stdout은 명령 결과 출력용)
- 파일: settings.yaml의 logging.level (TimedRotatingFileHandler, 매일 자정 롤링)

사용법:
    from core.logging import setup_logging
    setup_logging("wallet", file_level=settings.log_level)
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.constants import Paths

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 7  # 7일치 보관

# 쿼리마다 로그를 남기는 라이브러리 로거
NOISY_LOGGERS = [
    "aiosqlite",
    "asyncio",
]


def _to_level(level: int | str) -> int:
    """로그 레벨 이름("debug", "INFO" 등) 또는 숫자를 숫자 레벨로 변환"""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def _file_handler(log_file: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        interval=1,
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.suffix = "%Y-%m-%d"  # wallet.log.2026-02-21
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    process_name: str,
    console_level: int | str = logging.WARNING,
    file_level: int | str = logging.INFO,
    log_dir: Path | None = None,
) -> logging.Logger:
    """루트 로거 초기화

    다시 호출하면 기존 핸들러를 닫고 교체한다 (핸들러 중복 없음).

    Args:
        process_name: 로그 파일 이름 ({process_name}.log)
        console_level: 콘솔 레벨 (기본 WARNING)
        file_level: 파일 레벨 (기본 INFO, settings.yaml의 이름 문자열도 허용)
        log_dir: 로그 디렉토리 (None이면 호출 시점의 Paths.LOGS_DIR)

    Returns:
        설정된 루트 Logger

    Raises:
        ValueError: 알 수 없는 레벨 이름
    """
    console_level = _to_level(console_level)
    file_level = _to_level(file_level)

    log_dir = log_dir or Paths.LOGS_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = get_log_file_path(process_name, log_dir)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # 필터링은 핸들러에서

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    root_logger.addHandler(_file_handler(log_file, file_level, formatter))

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger.info(
        "로깅 초기화 완료",
        extra={"process_name": process_name, "log_file": str(log_file)},
    )
    return root_logger


def get_log_file_path(process_name: str, log_dir: Path | None = None) -> Path:
    """로그 파일 경로 반환"""
    return (log_dir or Paths.LOGS_DIR) / f"{process_name}.log"
