"""
검색 모드별 공연 조회

지역 검색, 무료 공연 검색, 인기 공연 검색이 KOPIS 클라이언트를 어떻게 호출하는지 정의합니다.
완화 엔진은 단계마다 이 클래스를 통해 업스트림을 조회합니다.
"""

from datetime import date
from typing import Dict, List, Optional

from config.settings import Settings
from config.constants import (
    MAX_ROWS_PER_REQUEST,
    STATE_RUNNING,
    ACTIVE_STATES,
)
from models.performance import PerformanceItem
from models.search_params import SearchMode
from utils.dates import add_days, format_date_key, parse_date_key
from utils.logging import get_logger
from utils.exceptions import KopisSearchError

logger = get_logger(__name__)

# 예매 순위 1위 100점, 순위마다 2점 감소
BOX_OFFICE_TOP_SCORE = 100.0
BOX_OFFICE_RANK_STEP = 2.0

# 상태 기반 인기도 가산점
BASE_POPULARITY = 50.0
OPEN_RUN_BONUS = 30.0
RUNNING_BONUS = 10.0
CLOSING_SOON_DAYS = 14
CLOSING_SOON_BONUS = 20.0
LAST_WEEK_DAYS = 7
LAST_WEEK_BONUS = 10.0


def box_office_score(rank: int) -> float:
    """예매 순위 -> 인기도 (0 미만은 0)"""
    return max(0.0, BOX_OFFICE_TOP_SCORE - BOX_OFFICE_RANK_STEP * (rank - 1))


def status_popularity(event: PerformanceItem, today: date) -> float:
    """
    상태 기반 인기도

    기본 50, 오픈런 +30, 공연중 +10, 14일 내 종료 +20, 7일 내 종료 +10 (최대 100)
    """
    score = BASE_POPULARITY

    if event.open_run:
        score += OPEN_RUN_BONUS
    if event.state == STATE_RUNNING:
        score += RUNNING_BONUS

    end = parse_date_key(event.end_key)
    if end is not None:
        days_until_end = (end - today).days
        if 0 < days_until_end <= CLOSING_SOON_DAYS:
            score += CLOSING_SOON_BONUS
        if 0 < days_until_end <= LAST_WEEK_DAYS:
            score += LAST_WEEK_BONUS

    return min(100.0, score)


def _price_sort_key(event: PerformanceItem) -> float:
    min_price = event.min_price
    return float("inf") if min_price is None else float(min_price)


class EventSource:
    """
    검색 모드별 조회

    Args:
        client: KopisClient 또는 같은 세 메서드를 가진 객체
        settings: 애플리케이션 설정
        today: 기준일 (검색 1회 동안 고정)
    """

    def __init__(self, client, settings: Optional[Settings] = None, today: Optional[date] = None):
        self.client = client
        self.settings = settings or Settings()
        self.today = today or date.today()

    def fetch(
        self,
        mode: SearchMode,
        genre_code: Optional[str],
        start_date: Optional[str],
        end_date: Optional[str],
        region_code: Optional[str],
        cap: int,
    ) -> List[PerformanceItem]:
        """
        모드에 맞는 조회 실행

        무료/인기 검색은 자체 고정 기간을 쓰므로 start_date/end_date를 무시합니다.
        인기 검색은 지역 필터를 쓰지 않습니다.
        """
        if mode is SearchMode.FREE_EVENTS:
            return self.fetch_free(genre_code, region_code, cap)
        if mode is SearchMode.TRENDING:
            return self.fetch_trending(genre_code, cap)
        return self.fetch_by_location(genre_code, start_date, end_date, region_code, cap)

    def fetch_by_location(
        self,
        genre_code: Optional[str],
        start_date: str,
        end_date: str,
        region_code: Optional[str],
        cap: int,
    ) -> List[PerformanceItem]:
        """지역/기간 조건 그대로 목록 조회"""
        return self.client.list_events(
            genre_code,
            start_date,
            end_date,
            region_code=region_code,
            result_cap=cap,
        )

    def fetch_free(
        self,
        genre_code: Optional[str],
        region_code: Optional[str],
        cap: int,
    ) -> List[PerformanceItem]:
        """
        무료/저렴한 공연 조회

        오늘부터 free_window_days 동안의 공연을 조회하고,
        관람료 정보가 없으면 상세 조회로 채운 뒤
        무료 공연을 먼저, 유료 공연은 최저가 오름차순으로 정렬합니다.
        """
        start = format_date_key(self.today)
        end = format_date_key(add_days(self.today, self.settings.search.free_window_days))

        events = self.client.list_events(
            genre_code,
            start,
            end,
            region_code=region_code,
            result_cap=cap,
        )
        events = [self._with_price(event) for event in events]

        free_events = [event for event in events if event.is_free]
        paid_events = sorted(
            (event for event in events if not event.is_free),
            key=_price_sort_key,
        )

        logger.debug(
            f"fetch_free genre={genre_code} region={region_code}: "
            f"무료 {len(free_events)}건, 유료 {len(paid_events)}건"
        )
        return (free_events + paid_events)[:cap]

    def _with_price(self, event: PerformanceItem) -> PerformanceItem:
        """목록에 관람료가 없으면 상세 조회로 보충 (실패 시 그대로)"""
        if event.price_guidance:
            return event
        try:
            detail = self.client.get_event_detail(event.id)
        except KopisSearchError as e:
            logger.debug(f"관람료 보충 실패 ({event.id}): {e}")
            return event
        return event.with_price(detail.price_guidance)

    def fetch_trending(self, genre_code: Optional[str], cap: int) -> List[PerformanceItem]:
        """
        인기 공연 조회

        최근 trending_window_days 동안의 공연 중 공연중/공연예정만 남기고
        예매 순위(없으면 상태 기반 점수)로 인기도를 매겨 내림차순 정렬합니다.
        """
        ranks = self._box_office_ranks(genre_code)

        start = format_date_key(add_days(self.today, -self.settings.search.trending_window_days))
        end = format_date_key(self.today)

        events = self.client.list_events(
            genre_code,
            start,
            end,
            region_code=None,
            result_cap=MAX_ROWS_PER_REQUEST,
        )

        ranked: List[PerformanceItem] = []
        for event in events:
            if event.state not in ACTIVE_STATES:
                continue
            rank = ranks.get(event.id)
            popularity = status_popularity(event, self.today)
            if rank is not None:
                popularity = max(popularity, box_office_score(rank))
            ranked.append(event.with_popularity(popularity, rank))

        ranked.sort(key=lambda event: event.popularity, reverse=True)

        logger.debug(
            f"fetch_trending genre={genre_code}: 활성 {len(ranked)}건 / 전체 {len(events)}건"
        )
        return ranked[:cap]

    def _box_office_ranks(self, genre_code: Optional[str]) -> Dict[str, int]:
        """예매 순위 맵 (조회 실패 시 빈 맵)"""
        try:
            entries = self.client.get_box_office_ranking(genre_code)
        except KopisSearchError as e:
            logger.warning(f"예매 순위 조회 실패, 상태 기반 인기도 사용: {e}")
            return {}

        ranks: Dict[str, int] = {}
        for entry in entries:
            ranks.setdefault(entry.event_id, entry.rank)
        return ranks
