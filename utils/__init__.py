"""유틸리티 모듈"""
from .paths import get_data_dir, get_config_dir, get_log_dir
from .exceptions import (
    KopisSearchError,
    KopisClientError,
    RateLimitError,
    ParsingError,
    EventNotFoundError,
    ConfigError,
    InvalidParamsError,
)
from .logging import setup_logging, get_logger

__all__ = [
    "get_data_dir",
    "get_config_dir",
    "get_log_dir",
    "KopisSearchError",
    "KopisClientError",
    "RateLimitError",
    "ParsingError",
    "EventNotFoundError",
    "ConfigError",
    "InvalidParamsError",
    "setup_logging",
    "get_logger",
]
