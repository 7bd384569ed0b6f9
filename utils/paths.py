"""
사용자 데이터 경로

설정 파일과 로그 파일 위치를 결정합니다.
KOPIS_DATA_DIR 환경변수가 있으면 OS별 기본 위치 대신 사용합니다.
"""

from pathlib import Path
import sys
import os

APP_DIR_NAME = "KopisSmartSearch"
DATA_DIR_ENV = "KOPIS_DATA_DIR"


def _platform_base() -> Path:
    if sys.platform == "win32":
        return Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg_data = os.environ.get("XDG_DATA_HOME")
    return Path(xdg_data) if xdg_data else Path.home() / ".local" / "share"


def _ensure(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """
    사용자 데이터 디렉토리

    Returns:
        $KOPIS_DATA_DIR, 없으면 OS별 표준 위치 아래 KopisSmartSearch
        (Windows %APPDATA%, macOS ~/Library/Application Support, Linux ~/.local/share)
    """
    override = os.environ.get(DATA_DIR_ENV, "").strip()
    if override:
        return _ensure(Path(override).expanduser())
    return _ensure(_platform_base() / APP_DIR_NAME)


def get_config_dir() -> Path:
    return _ensure(get_data_dir() / "config")


def get_log_dir() -> Path:
    return _ensure(get_data_dir() / "logs")


def get_settings_path() -> Path:
    """기본 설정 파일 경로 ({data_dir}/config/settings.json)"""
    return get_config_dir() / "settings.json"


def get_log_file_path() -> Path:
    """기본 로그 파일 경로 ({data_dir}/logs/app.log)"""
    return get_log_dir() / "app.log"
