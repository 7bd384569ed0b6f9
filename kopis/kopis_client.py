"""
KOPIS Open API HTTP 클라이언트

특징:
- 자동 재시도 (지수 백오프, 5xx)
- Rate Limiting (스레드 안전)
- 타임아웃 관리
- 에러 메시지와 로그에서 API 키 마스킹
"""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from datetime import date
from typing import Optional, Dict, Any, List
import time

from __version__ import get_user_agent
from config.settings import Settings
from config.constants import (
    KOPIS_EVENTS_PATH,
    KOPIS_BOXOFFICE_PATH,
    MAX_ROWS_PER_REQUEST,
    DEFAULT_HEADERS,
)
from models.performance import PerformanceItem, PerformanceDetail, BoxOfficeEntry
from utils.dates import format_date_key
from utils.logging import get_logger, log_timing
from utils.exceptions import (
    KopisClientError,
    RateLimitError,
    EventNotFoundError,
    ConfigError,
    InvalidParamsError,
    mask_secrets,
)
from .rate_limiter import RateLimiter
from .parsers import PerformanceListParser, PerformanceDetailParser, BoxOfficeParser

logger = get_logger(__name__)


class KopisClient:
    """
    KOPIS Open API 클라이언트

    공연 목록, 공연 상세, 예매 순위 세 가지 조회를 제공합니다.
    API 키는 생성 시 주입되며 인스턴스마다 독립적입니다.

    사용법:
        settings = Settings.load()
        with KopisClient(settings) as client:
            events = client.list_events("GGGA", "20250101", "20250131", region_code="11")

    Args:
        settings: 애플리케이션 설정
        api_key: KOPIS 서비스 키 (None이면 settings.api.api_key)
        rate_limiter: 커스텀 Rate Limiter (None이면 자동 생성)

    Raises:
        ConfigError: API 키 없음
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        api_key: Optional[str] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        if settings is None:
            settings = Settings()

        self.settings = settings
        self.api = settings.api

        self._api_key = (api_key or self.api.api_key or "").strip()
        if not self._api_key:
            raise ConfigError(
                "KOPIS API 키가 설정되지 않았습니다 (환경변수 KOPIS_API_KEY)",
                config_key="api.api_key",
            )

        if rate_limiter is None:
            self.rate_limiter = RateLimiter(
                requests_per_minute=self.api.requests_per_minute,
                burst_limit=self.api.burst_limit,
            )
        else:
            self.rate_limiter = rate_limiter

        self.session = self._create_session()

        self._list_parser = PerformanceListParser()
        self._detail_parser = PerformanceDetailParser()
        self._boxoffice_parser = BoxOfficeParser()

        logger.info(
            f"KopisClient 초기화: timeout={self.api.timeout}s, "
            f"retries={self.api.max_retries}, "
            f"rate_limit={self.api.requests_per_minute}/min"
        )

    def _create_session(self) -> requests.Session:
        """
        재시도 로직이 포함된 세션 생성
        """
        session = requests.Session()

        retry_strategy = Retry(
            total=self.api.max_retries,
            backoff_factor=self.api.backoff_factor,
            status_forcelist=[500, 502, 503, 504],  # 429는 별도 처리
            allowed_methods=["GET", "HEAD"],
            raise_on_status=False,
        )

        adapter = HTTPAdapter(
            max_retries=retry_strategy,
            pool_connections=10,
            pool_maxsize=10,
        )

        session.mount("https://", adapter)
        session.mount("http://", adapter)

        session.headers.update(DEFAULT_HEADERS)
        session.headers["User-Agent"] = get_user_agent()

        return session

    def get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """
        GET 요청 수행

        서비스 키가 자동으로 추가되고 Rate Limiting과 재시도가 적용됩니다.

        Args:
            path: API 경로 (예: "/pblprfr")
            params: 쿼리 파라미터 (서비스 키 제외)
            timeout: 요청 타임아웃 (None이면 설정값 사용)

        Returns:
            Response 객체

        Raises:
            RateLimitError: 요청 제한 초과 (429 또는 로컬 대기 시간 초과)
            KopisClientError: 요청 실패
        """
        if not self.rate_limiter.acquire(timeout=30):
            raise RateLimitError(retry_after=30, message="Rate limit 대기 시간 초과")

        url = f"{self.api.base_url}{path}"
        query = {"service": self._api_key}
        if params:
            query.update(params)

        if timeout is None:
            timeout = self.api.timeout

        try:
            logger.debug(f"GET {url} params={self._mask_params(params)}")

            response = self.session.get(url, params=query, timeout=timeout)

            if response.status_code == 429:
                retry_after = self._parse_retry_after(response)
                logger.warning(f"Rate limited by KOPIS, retry after {retry_after}s")
                raise RateLimitError(retry_after=retry_after)

            if response.status_code >= 400:
                logger.error(f"HTTP error: {response.status_code} for {url}")
                raise KopisClientError(
                    message="HTTP 요청 실패",
                    status_code=response.status_code,
                    url=url,
                )

            logger.debug(
                f"Response: {response.status_code}, size={len(response.content)} bytes"
            )

            return response

        except requests.exceptions.Timeout as e:
            logger.error(f"Request timeout: {url}")
            raise KopisClientError(
                message=f"요청 타임아웃 ({timeout}초)",
                url=url,
            ) from e

        except requests.exceptions.ConnectionError as e:
            logger.error(f"Connection error: {url}")
            raise KopisClientError(
                message="연결 실패 (네트워크 상태를 확인하세요)",
                url=url,
            ) from e

        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed: {url}: {mask_secrets(str(e))}")
            raise KopisClientError(
                message=f"요청 실패: {e}",
                url=url,
            ) from e

    def list_events(
        self,
        genre_code: Optional[str],
        start_date: str,
        end_date: str,
        region_code: Optional[str] = None,
        result_cap: int = 50,
    ) -> List[PerformanceItem]:
        """
        공연 목록 조회 (/pblprfr)

        Args:
            genre_code: 장르 코드 (None이면 전체 장르)
            start_date: 시작일 (YYYYMMDD)
            end_date: 종료일 (YYYYMMDD)
            region_code: 2자리 시/도 또는 4자리 구/군 코드 (None이면 전국)
            result_cap: 최대 행 수 (1~100)

        Returns:
            공연 목록 (결과 없으면 빈 리스트)

        Raises:
            KopisClientError: 전송 실패
            ParsingError: 응답 형식 오류
        """
        rows = min(max(int(result_cap), 1), MAX_ROWS_PER_REQUEST)
        params: Dict[str, Any] = {
            "stdate": start_date,
            "eddate": end_date,
            "cpage": 1,
            "rows": rows,
        }
        if genre_code:
            params["shcate"] = genre_code
        params.update(self._region_params(region_code))

        started = time.perf_counter()
        response = self.get(KOPIS_EVENTS_PATH, params=params)
        items = self._list_parser.parse(self._decode(response))
        log_timing(logger, f"list_events genre={genre_code} region={region_code}", started)

        logger.debug(f"list_events: {len(items)}건 (genre={genre_code}, rows={rows})")
        return items

    def get_event_detail(self, event_id: str) -> PerformanceDetail:
        """
        공연 상세 조회 (/pblprfr/{id})

        Raises:
            InvalidParamsError: 빈 공연 ID
            EventNotFoundError: 상세 정보 없음
            KopisClientError: 전송 실패
        """
        event_id = (event_id or "").strip()
        if not event_id:
            raise InvalidParamsError("공연 ID가 필요합니다", field="event_id")

        started = time.perf_counter()
        response = self.get(f"{KOPIS_EVENTS_PATH}/{event_id}")
        detail = self._detail_parser.parse(self._decode(response))
        log_timing(logger, f"get_event_detail {event_id}", started)

        if detail is None:
            raise EventNotFoundError(event_id)
        return detail

    def get_box_office_ranking(
        self,
        genre_code: Optional[str] = None,
        base_date: Optional[date] = None,
    ) -> List[BoxOfficeEntry]:
        """
        주간 예매 순위 조회 (/boxoffice)

        Args:
            genre_code: 장르 코드 (None이면 전체)
            base_date: 기준일 (None이면 오늘)

        Returns:
            순위 오름차순 목록 (없으면 빈 리스트)
        """
        if base_date is None:
            base_date = date.today()

        params: Dict[str, Any] = {
            "ststype": "week",
            "date": format_date_key(base_date),
        }
        if genre_code:
            params["catecode"] = genre_code

        started = time.perf_counter()
        response = self.get(KOPIS_BOXOFFICE_PATH, params=params)
        entries = self._boxoffice_parser.parse(self._decode(response))
        log_timing(logger, f"get_box_office_ranking genre={genre_code}", started)

        return entries

    @staticmethod
    def _region_params(region_code: Optional[str]) -> Dict[str, str]:
        """지역 코드 -> signgucode / signgucodesub"""
        if not region_code:
            return {}
        if len(region_code) == 4:
            return {"signgucode": region_code[:2], "signgucodesub": region_code}
        return {"signgucode": region_code}

    @staticmethod
    def _decode(response: requests.Response) -> str:
        """charset 헤더가 없으면 requests가 ISO-8859-1로 추측하므로 UTF-8로 고정"""
        if not response.encoding or response.encoding.lower() == "iso-8859-1":
            response.encoding = "utf-8"
        return response.text

    @staticmethod
    def _parse_retry_after(response: requests.Response) -> int:
        try:
            return int(response.headers.get("Retry-After", 60))
        except ValueError:
            return 60

    @staticmethod
    def _mask_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        return {key: mask_secrets(str(value)) for key, value in (params or {}).items()}

    def get_stats(self) -> Dict[str, Any]:
        """
        클라이언트 통계 반환
        """
        return {
            "rate_limiter": self.rate_limiter.get_stats(),
            "settings": {
                "timeout": self.api.timeout,
                "max_retries": self.api.max_retries,
                "requests_per_minute": self.api.requests_per_minute,
            },
        }

    def close(self) -> None:
        """
        클라이언트 리소스 정리
        """
        self.session.close()
        logger.debug("KopisClient 종료")

    def __enter__(self) -> "KopisClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"KopisClient(base_url={self.api.base_url!r}, timeout={self.api.timeout}, "
            f"retries={self.api.max_retries})"
        )
