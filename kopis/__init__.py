"""KOPIS Open API 클라이언트 모듈"""
from .kopis_client import KopisClient
from .rate_limiter import RateLimiter, NoOpRateLimiter

__all__ = ["KopisClient", "RateLimiter", "NoOpRateLimiter"]
