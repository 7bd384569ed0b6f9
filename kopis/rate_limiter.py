"""
Rate Limiter - 요청 제한기

KOPIS Open API 호출 속도 제어 (버스트 + 분당 슬라이딩 윈도우)
장르별 병렬 조회 시 여러 스레드가 하나의 제한기를 공유합니다.
"""

import time
import threading
from collections import deque
from typing import Optional

from utils.logging import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    스레드 안전 Rate Limiter

    사용법:
        limiter = RateLimiter(requests_per_minute=120, burst_limit=10)

        if limiter.acquire(timeout=30):
            response = session.get(url)

    Args:
        requests_per_minute: 분당 최대 요청 수
        burst_limit: 최소 간격 없이 연속 허용되는 요청 수
    """

    def __init__(
        self,
        requests_per_minute: int = 120,
        burst_limit: int = 10,
    ):
        self.requests_per_minute = max(1, requests_per_minute)
        self.burst_limit = max(1, min(burst_limit, self.requests_per_minute))

        # 요청 간 평균 간격 (초)
        self.min_interval = 60.0 / self.requests_per_minute

        # 최근 요청 시각 (슬라이딩 윈도우)
        self.timestamps: deque = deque(maxlen=self.requests_per_minute)

        self._lock = threading.Lock()

        self._total_requests = 0
        self._total_wait_time = 0.0

        logger.debug(
            f"RateLimiter 초기화: {self.requests_per_minute} req/min, burst={self.burst_limit}"
        )

    def acquire(self, timeout: Optional[float] = None) -> bool:
        """
        요청 슬롯 획득

        필요하면 대기합니다. 필요한 대기 시간이 timeout보다 길면
        대기하지 않고 False를 반환합니다.

        Args:
            timeout: 최대 대기 시간 (초), None이면 무한 대기

        Returns:
            슬롯 획득 성공 여부
        """
        with self._lock:
            now = time.monotonic()
            wait_time = self._calculate_wait_time(now)

            if timeout is not None and wait_time > timeout:
                logger.warning(
                    f"Rate limit timeout: 필요 대기시간 {wait_time:.2f}s > timeout {timeout}s"
                )
                return False

            if wait_time > 0:
                logger.debug(f"Rate limiting: {wait_time:.2f}초 대기")
                self._total_wait_time += wait_time

                # 대기 중에는 락 해제
                self._lock.release()
                try:
                    time.sleep(wait_time)
                finally:
                    self._lock.acquire()

                now = time.monotonic()

            self.timestamps.append(now)
            self._total_requests += 1

            return True

    def _calculate_wait_time(self, now: float) -> float:
        """
        필요한 대기 시간 계산

        버스트 구간 안에서는 바로 통과하고, 버스트를 넘기면
        burst_limit 요청이 평균 간격 이상으로 퍼지도록 대기합니다.
        """
        if not self.timestamps:
            return 0.0

        wait_time = 0.0

        # 버스트 제한
        if len(self.timestamps) >= self.burst_limit:
            burst_window_start = self.timestamps[-self.burst_limit]
            burst_window_elapsed = now - burst_window_start
            burst_window_duration = self.min_interval * self.burst_limit

            if burst_window_elapsed < burst_window_duration:
                wait_time = max(wait_time, burst_window_duration - burst_window_elapsed)

        # 분당 제한
        if len(self.timestamps) >= self.requests_per_minute:
            window_elapsed = now - self.timestamps[0]
            if window_elapsed < 60.0:
                wait_time = max(wait_time, 60.0 - window_elapsed)

        return wait_time

    def get_stats(self) -> dict:
        """Rate Limiter 통계"""
        with self._lock:
            return {
                "total_requests": self._total_requests,
                "total_wait_time": round(self._total_wait_time, 2),
                "requests_per_minute": self.requests_per_minute,
                "burst_limit": self.burst_limit,
                "current_window_size": len(self.timestamps),
            }

    def reset(self) -> None:
        """상태 초기화"""
        with self._lock:
            self.timestamps.clear()
            self._total_requests = 0
            self._total_wait_time = 0.0
            logger.debug("RateLimiter 리셋")

    def __repr__(self) -> str:
        return (
            f"RateLimiter(rpm={self.requests_per_minute}, "
            f"burst={self.burst_limit}, "
            f"requests={self._total_requests})"
        )


class NoOpRateLimiter(RateLimiter):
    """
    테스트용 No-op Rate Limiter

    실제 제한 없이 즉시 통과
    """

    def __init__(self):
        super().__init__(requests_per_minute=600, burst_limit=600)

    def acquire(self, timeout: Optional[float] = None) -> bool:
        self._total_requests += 1
        return True
