"""
core/constants.py 테스트

모든 경로가 pathlib.Path 타입이고, 상수가 정상적으로 접근 가능한지 확인
"""

from pathlib import Path

from core.constants import (
    PROJECT_ROOT,
    BackupFormat,
    Defaults,
    Paths,
)


class TestProjectRoot:
    """PROJECT_ROOT 테스트"""

    def test_project_root_is_absolute(self) -> None:
        """PROJECT_ROOT가 절대 경로인지 확인"""
        assert isinstance(PROJECT_ROOT, Path)
        assert PROJECT_ROOT.is_absolute()

    def test_project_root_contains_core_directory(self) -> None:
        """PROJECT_ROOT에 core 디렉토리가 있는지 확인"""
        assert (PROJECT_ROOT / "core").exists()


class TestDefaults:
    """Defaults 테스트"""

    def test_values(self) -> None:
        assert Defaults.CURRENCY == "ILS"
        assert Defaults.LOG_LEVEL == "INFO"
        assert Defaults.MINOR_UNIT_DIGITS == 2


class TestBackupFormat:
    """BackupFormat 테스트"""

    def test_values(self) -> None:
        assert BackupFormat.VERSION == 1
        assert BackupFormat.FILE_PREFIX == "gift-cards-backup"
        assert BackupFormat.FILE_SUFFIX == ".json"


class TestPaths:
    """Paths 테스트"""

    def test_all_paths_are_path_objects(self) -> None:
        """모든 경로가 Path 타입인지 확인"""
        for path in (
            Paths.CONFIG_DIR,
            Paths.DATA_DIR,
            Paths.LOGS_DIR,
            Paths.SETTINGS_FILE,
            Paths.DB_FILE,
        ):
            assert isinstance(path, Path)
            assert path.is_absolute()

    def test_files_live_under_directories(self) -> None:
        assert Paths.SETTINGS_FILE.parent == Paths.CONFIG_DIR
        assert Paths.DB_FILE.parent == Paths.DATA_DIR
        assert Paths.DB_FILE.suffix == ".db"
