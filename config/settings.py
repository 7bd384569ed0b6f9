"""
애플리케이션 설정 관리

dataclass 기반 설정 시스템
- JSON 파일 저장/로드
- 환경변수 오버라이드 (KOPIS_ 접두사)
- 기본값 제공
"""

from dataclasses import dataclass, field, asdict
from typing import Optional
from pathlib import Path
import json
import os

from utils.logging import get_logger
from .constants import (
    KOPIS_BASE_URL,
    DEFAULT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_REQUESTS_PER_MINUTE,
    DEFAULT_BURST_LIMIT,
    DEFAULT_FANOUT_WORKERS,
    DEFAULT_RESULT_CAP,
    DEFAULT_LEVEL3_RESULT_CAP,
    DEFAULT_LEVEL4_GENRE_CAP,
    MAX_ROWS_PER_REQUEST,
    FREE_EVENT_WINDOW_DAYS,
    TRENDING_WINDOW_DAYS,
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOG_FILE_SIZE_MB,
    DEFAULT_LOG_BACKUP_COUNT,
)

logger = get_logger(__name__)


@dataclass
class ApiSettings:
    """KOPIS API 관련 설정"""

    api_key: str = ""
    base_url: str = KOPIS_BASE_URL
    timeout: int = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
    requests_per_minute: int = DEFAULT_REQUESTS_PER_MINUTE
    burst_limit: int = DEFAULT_BURST_LIMIT

    def __post_init__(self):
        """유효성 검사 및 값 보정"""
        self.api_key = (self.api_key or "").strip()
        self.base_url = (self.base_url or KOPIS_BASE_URL).rstrip("/")

        # timeout: 최소 1초, 최대 120초
        if self.timeout < 1:
            self.timeout = DEFAULT_TIMEOUT
        elif self.timeout > 120:
            self.timeout = 120

        # max_retries: 최소 0, 최대 10
        if self.max_retries < 0:
            self.max_retries = 0
        elif self.max_retries > 10:
            self.max_retries = 10

        # backoff_factor: 최소 0.1, 최대 10.0
        if self.backoff_factor < 0.1:
            self.backoff_factor = DEFAULT_BACKOFF_FACTOR
        elif self.backoff_factor > 10.0:
            self.backoff_factor = 10.0

        # requests_per_minute: 최소 1, 최대 600
        if self.requests_per_minute < 1:
            self.requests_per_minute = DEFAULT_REQUESTS_PER_MINUTE
        elif self.requests_per_minute > 600:
            self.requests_per_minute = 600

        # burst_limit: 최소 1, 최대 requests_per_minute
        if self.burst_limit < 1:
            self.burst_limit = 1
        elif self.burst_limit > self.requests_per_minute:
            self.burst_limit = self.requests_per_minute

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_dict(cls, data: dict) -> "ApiSettings":
        return cls(
            api_key=data.get("api_key", ""),
            base_url=data.get("base_url", KOPIS_BASE_URL),
            timeout=data.get("timeout", DEFAULT_TIMEOUT),
            max_retries=data.get("max_retries", DEFAULT_MAX_RETRIES),
            backoff_factor=data.get("backoff_factor", DEFAULT_BACKOFF_FACTOR),
            requests_per_minute=data.get("requests_per_minute", DEFAULT_REQUESTS_PER_MINUTE),
            burst_limit=data.get("burst_limit", DEFAULT_BURST_LIMIT),
        )

    def __repr__(self) -> str:
        key_state = "set" if self.api_key else "missing"
        return (
            f"ApiSettings(api_key=<{key_state}>, base_url={self.base_url!r}, "
            f"timeout={self.timeout}, max_retries={self.max_retries})"
        )


@dataclass
class SearchSettings:
    """스마트 검색 관련 설정"""

    fanout_workers: int = DEFAULT_FANOUT_WORKERS
    result_cap: int = DEFAULT_RESULT_CAP
    level3_result_cap: int = DEFAULT_LEVEL3_RESULT_CAP
    level4_genre_cap: int = DEFAULT_LEVEL4_GENRE_CAP
    free_window_days: int = FREE_EVENT_WINDOW_DAYS
    trending_window_days: int = TRENDING_WINDOW_DAYS

    def __post_init__(self):
        """유효성 검사 및 값 보정"""
        # fanout_workers: 최소 1 (순차), 최대 16
        if self.fanout_workers < 1:
            self.fanout_workers = 1
        elif self.fanout_workers > 16:
            self.fanout_workers = 16

        # 요청 행 수: 1 ~ MAX_ROWS_PER_REQUEST
        for name in ("result_cap", "level3_result_cap", "level4_genre_cap"):
            value = getattr(self, name)
            if value < 1:
                setattr(self, name, 1)
            elif value > MAX_ROWS_PER_REQUEST:
                setattr(self, name, MAX_ROWS_PER_REQUEST)

        # 조회 기간: 1 ~ 365일
        for name in ("free_window_days", "trending_window_days"):
            value = getattr(self, name)
            if value < 1:
                setattr(self, name, 1)
            elif value > 365:
                setattr(self, name, 365)

    @classmethod
    def from_dict(cls, data: dict) -> "SearchSettings":
        return cls(
            fanout_workers=data.get("fanout_workers", DEFAULT_FANOUT_WORKERS),
            result_cap=data.get("result_cap", DEFAULT_RESULT_CAP),
            level3_result_cap=data.get("level3_result_cap", DEFAULT_LEVEL3_RESULT_CAP),
            level4_genre_cap=data.get("level4_genre_cap", DEFAULT_LEVEL4_GENRE_CAP),
            free_window_days=data.get("free_window_days", FREE_EVENT_WINDOW_DAYS),
            trending_window_days=data.get("trending_window_days", TRENDING_WINDOW_DAYS),
        )


@dataclass
class LoggingSettings:
    """로깅 관련 설정"""

    level: str = DEFAULT_LOG_LEVEL
    file_enabled: bool = True
    max_file_size_mb: int = DEFAULT_LOG_FILE_SIZE_MB
    backup_count: int = DEFAULT_LOG_BACKUP_COUNT

    @classmethod
    def from_dict(cls, data: dict) -> "LoggingSettings":
        return cls(
            level=data.get("level", DEFAULT_LOG_LEVEL),
            file_enabled=data.get("file_enabled", True),
            max_file_size_mb=data.get("max_file_size_mb", DEFAULT_LOG_FILE_SIZE_MB),
            backup_count=data.get("backup_count", DEFAULT_LOG_BACKUP_COUNT),
        )


@dataclass
class Settings:
    """
    애플리케이션 전체 설정

    사용법:
        # 설정 파일 + 환경변수에서 로드
        settings = Settings.load()

        # 설정 접근
        timeout = settings.api.timeout

        # 설정 저장 (API 키는 저장하지 않음)
        settings.save()
    """

    api: ApiSettings = field(default_factory=ApiSettings)
    search: SearchSettings = field(default_factory=SearchSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    def to_dict(self) -> dict:
        """설정을 딕셔너리로 변환 (API 키 제외)"""
        api = asdict(self.api)
        api.pop("api_key", None)
        return {
            "api": api,
            "search": asdict(self.search),
            "logging": asdict(self.logging),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """딕셔너리에서 설정 생성"""
        return cls(
            api=ApiSettings.from_dict(data.get("api", {})),
            search=SearchSettings.from_dict(data.get("search", {})),
            logging=LoggingSettings.from_dict(data.get("logging", {})),
        )

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """
        설정 파일에서 로드

        Args:
            config_path: 설정 파일 경로 (None이면 기본 경로 사용)

        Returns:
            Settings 인스턴스
        """
        # 지연 import로 순환 참조 방지
        from utils.paths import get_settings_path

        if config_path is None:
            config_path = get_settings_path()

        settings = cls()

        if config_path.exists():
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                    settings = cls.from_dict(data)
            except (json.JSONDecodeError, IOError) as e:
                # 로드 실패 시 기본 설정 사용
                logger.warning(f"설정 파일 로드 실패, 기본 설정 사용: {e}")

        settings = cls._apply_env_overrides(settings)

        return settings

    @classmethod
    def _apply_env_overrides(cls, settings: "Settings") -> "Settings":
        """환경변수로 설정 오버라이드"""
        env_mappings = {
            "KOPIS_API_KEY": ("api", "api_key", str),
            "KOPIS_BASE_URL": ("api", "base_url", str),
            "KOPIS_TIMEOUT": ("api", "timeout", int),
            "KOPIS_MAX_RETRIES": ("api", "max_retries", int),
            "KOPIS_REQUESTS_PER_MINUTE": ("api", "requests_per_minute", int),
            "KOPIS_FANOUT_WORKERS": ("search", "fanout_workers", int),
            "KOPIS_LOG_LEVEL": ("logging", "level", str),
        }

        for env_var, (section, key, type_fn) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                try:
                    section_obj = getattr(settings, section)
                    setattr(section_obj, key, type_fn(value))
                except (ValueError, AttributeError):
                    logger.warning(f"환경변수 무시: {env_var}={value!r}")

        # 보정 로직 재적용
        settings.api.__post_init__()
        settings.search.__post_init__()

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """
        설정을 파일에 저장

        Args:
            config_path: 저장할 경로 (None이면 기본 경로 사용)
        """
        from utils.paths import get_settings_path

        if config_path is None:
            config_path = get_settings_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    def __repr__(self) -> str:
        return f"Settings(api={self.api!r}, search={self.search}, logging={self.logging})"
