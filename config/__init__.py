"""설정 모듈"""
from .settings import Settings, ApiSettings, SearchSettings, LoggingSettings
from .constants import *

__all__ = ["Settings", "ApiSettings", "SearchSettings", "LoggingSettings"]
