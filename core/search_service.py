"""
스마트 검색 서비스

쿼리 분석, 단계별 조건 완화, 점수 계산을 통합하는 고수준 검색 서비스
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple

from config.settings import Settings
from config.constants import MAX_ROWS_PER_REQUEST
from core.event_source import EventSource
from core.query_analyzer import analyze
from core.score_calculator import ScoreCalculator
from data.kopis_codes import (
    extract_sido_code,
    get_genre_list,
    get_genre_name,
    get_related_genres,
    get_sido_name_full,
    is_known_genre,
    GENRE_CODES,
)
from models.analysis import QueryAnalysis
from models.performance import PerformanceItem, PerformanceDetail
from models.relaxation import (
    MAX_LEVEL,
    DateExpansion,
    GenreExpansion,
    LocationExpansion,
    RelaxationStrategy,
    get_strategy,
)
from models.search_params import SearchMode, SearchRequest
from models.search_result import LEVEL_FAILED, ScoreCriteria, SmartSearchResult
from utils.dates import add_months, format_date_key, parse_date_key
from utils.logging import get_logger, LogContext
from utils.exceptions import KopisSearchError

logger = get_logger(__name__)

LEVEL_MESSAGES = {
    2: "🔍 조건을 일부 완화하여 {count}개의 공연을 찾았습니다.",
    3: "🔎 더 많은 선택지를 위해 조건을 확장했습니다. {count}개의 공연을 찾았습니다.",
    4: "🌐 최대 범위로 검색하여 {count}개의 공연을 찾았습니다.",
}

FAILURE_SUGGESTIONS = (
    "기간을 더 길게 설정 (예: 다음달까지)",
    "최소 개수를 줄여서 검색 (1~2개)",
    "지역 제한 없이 전국 검색",
)


@dataclass
class LevelOutcome:
    """한 완화 단계의 조회 결과"""

    level: int
    events: List[PerformanceItem] = field(default_factory=list)
    relaxed: List[str] = field(default_factory=list)


def deduplicate_events(batches: Iterable[Iterable[PerformanceItem]]) -> List[PerformanceItem]:
    """공연 ID 기준 중복 제거 (먼저 나온 항목 유지)"""
    seen = set()
    unique: List[PerformanceItem] = []
    for batch in batches:
        for event in batch:
            if event.id in seen:
                continue
            seen.add(event.id)
            unique.append(event)
    return unique


def build_message(level: int, relaxed: List[str], count: int) -> str:
    """단계별 안내 문구"""
    if level == 1:
        return f"✅ 요청 조건에 완벽히 맞는 공연 {count}개를 찾았습니다!"

    message = LEVEL_MESSAGES[level].format(count=count)
    if not relaxed:
        return message
    conditions = "\n".join(f"  • {condition}" for condition in relaxed)
    return f"{message}\n\n완화된 조건:\n{conditions}"


def build_failure_message(min_count: int, found_count: int) -> str:
    """최대 완화 후에도 최소 개수에 못 미칠 때의 안내 문구"""
    suggestions = "\n".join(f"  • {suggestion}" for suggestion in FAILURE_SUGGESTIONS)
    return (
        f"❌ 죄송합니다. 조건에 맞는 공연을 {min_count}개 이상 찾지 못했습니다. "
        f"({found_count}개 발견)\n\n"
        f"다음과 같이 시도해보세요:\n{suggestions}"
    )


class SmartSearchService:
    """
    스마트 검색 서비스

    요청 그대로(1단계)부터 최대 완화(4단계)까지 순서대로 조회하고,
    최소 개수를 처음 만족한 단계의 공연을 점수순으로 반환합니다.

    사용법:
        with KopisClient(settings) as client:
            service = SmartSearchService(client, settings)
            result = service.search("by-location", {
                "genreCode": "GGGA",
                "startDate": "20250101",
                "endDate": "20250107",
                "sidoCode": "11",
                "limit": 5,
            })

    Args:
        client: KopisClient (또는 list_events/get_event_detail/get_box_office_ranking을 가진 객체)
        settings: 애플리케이션 설정
        clock: 오늘 날짜 제공 함수 (테스트에서 고정)
    """

    def __init__(
        self,
        client,
        settings: Optional[Settings] = None,
        clock: Callable[[], date] = date.today,
    ):
        if settings is None:
            settings = Settings()

        self.client = client
        self.settings = settings
        self.scorer = ScoreCalculator()
        self._clock = clock

        logger.info(f"SmartSearchService 초기화 (fanout_workers={settings.search.fanout_workers})")

    def search(self, search_mode: Any, params: Optional[Mapping[str, Any]]) -> SmartSearchResult:
        """
        스마트 검색 실행

        Args:
            search_mode: "by-location", "free-events", "trending" (또는 도구 이름)
            params: genreCode, startDate, endDate, sidoCode, gugunCode, limit

        Returns:
            SmartSearchResult (모든 단계 실패 시 level=0)

        Raises:
            InvalidParamsError: 파라미터 검증 실패 (업스트림 호출 전)
        """
        request = SearchRequest.from_params(search_mode, params)
        analysis = analyze(request.mode, request.to_params())
        min_count = analysis.min_count

        today = self._clock()
        source = EventSource(self.client, self.settings, today)

        with LogContext(
            "스마트 검색",
            logger,
            mode=request.mode.value,
            genre=request.genre_code,
            region=request.region_code,
            min_count=min_count,
        ):
            outcome = LevelOutcome(level=LEVEL_FAILED)
            for level in range(1, MAX_LEVEL + 1):
                strategy = get_strategy(request.mode, level)
                outcome = self._run_level(source, request, strategy, level, today, min_count)

                logger.info(f"Level {level}: {len(outcome.events)}건 (필요 {min_count}건)")
                if len(outcome.events) >= min_count:
                    return self._build_result(outcome, analysis, request.mode)

            logger.info(f"모든 완화 단계 실패: {len(outcome.events)}건 < {min_count}건")
            return SmartSearchResult(
                events=tuple(outcome.events),
                level=LEVEL_FAILED,
                relaxed_conditions=tuple(outcome.relaxed),
                message=build_failure_message(min_count, len(outcome.events)),
                mode=request.mode,
                min_count=min_count,
            )

    def _run_level(
        self,
        source: EventSource,
        request: SearchRequest,
        strategy: RelaxationStrategy,
        level: int,
        today: date,
        min_count: int,
    ) -> LevelOutcome:
        """
        완화 정책 하나를 적용해 조회

        로그 순서는 위치, 장르, 날짜입니다.
        """
        relaxed: List[str] = []
        region = self._relax_location(request, strategy.location, relaxed)
        genres = self._relax_genre(request.genre_code, strategy.genre, relaxed)
        start_date, end_date = self._relax_dates(request, strategy, today, relaxed)

        cap = getattr(self.settings.search, strategy.result_cap.value)
        cap = min(max(cap, min_count), MAX_ROWS_PER_REQUEST)

        try:
            batches = self._fan_out(
                source,
                request.mode,
                genres,
                start_date,
                end_date,
                region,
                cap,
                skip_failures=strategy.skip_failed_genres,
            )
        except KopisSearchError as e:
            logger.warning(f"Level {level} 조회 실패, 0건으로 처리: {e}")
            batches = []

        return LevelOutcome(level=level, events=deduplicate_events(batches), relaxed=relaxed)

    @staticmethod
    def _relax_location(
        request: SearchRequest,
        expansion: LocationExpansion,
        relaxed: List[str],
    ) -> Optional[str]:
        if expansion is LocationExpansion.NONE:
            return request.region_code

        sido_code = extract_sido_code(request.region_code)
        if expansion is LocationExpansion.NATIONWIDE:
            relaxed.append(f"위치: {get_sido_name_full(sido_code)} 전체")
        else:
            relaxed.append("위치: 구/군 → 시/도 전체")
        return sido_code

    @staticmethod
    def _relax_genre(
        genre_code: Optional[str],
        expansion: GenreExpansion,
        relaxed: List[str],
    ) -> List[Optional[str]]:
        if expansion is GenreExpansion.ALL:
            relaxed.append("장르: 모든 장르")
            return list(GENRE_CODES)

        if expansion is GenreExpansion.NONE or not genre_code:
            return [genre_code]

        # 표에 없는 장르는 유사 장르가 없으므로 장르 조건 자체를 해제
        if not is_known_genre(genre_code):
            relaxed.append(f"장르: 전체 장르 (알 수 없는 장르 코드 {genre_code} 제외)")
            return [None]

        related = list(get_related_genres(genre_code))
        name = get_genre_name(genre_code)
        if expansion is GenreExpansion.SIMILAR_ONE:
            relaxed.append(f"장르: {name} + 유사 장르 1개")
            return related[:2]

        relaxed.append(f"장르: {name} + 유사 장르")
        return related

    def _relax_dates(
        self,
        request: SearchRequest,
        strategy: RelaxationStrategy,
        today: date,
        relaxed: List[str],
    ) -> Tuple[Optional[str], Optional[str]]:
        if strategy.date is DateExpansion.NONE:
            return request.start_date, request.end_date

        if strategy.date_note_only:
            relaxed.append(
                f"날짜: 최근 {self.settings.search.trending_window_days}일 범위로 확장"
            )
            return request.start_date, request.end_date

        # 오늘 ~ 한달 후 (요청 종료일이 더 늦으면 요청 종료일)
        window_end = add_months(today, 1)
        requested_end = parse_date_key(request.end_date)
        if requested_end is not None and requested_end > window_end:
            window_end = requested_end

        start_date = format_date_key(today)
        end_date = format_date_key(window_end)
        relaxed.append(f"날짜: 한달 이내 ({start_date} ~ {end_date})")
        return start_date, end_date

    def _fan_out(
        self,
        source: EventSource,
        mode: SearchMode,
        genres: List[Optional[str]],
        start_date: Optional[str],
        end_date: Optional[str],
        region: Optional[str],
        cap: int,
        skip_failures: bool,
    ) -> List[List[PerformanceItem]]:
        """
        장르별 조회

        결과는 장르 순서대로 반환되므로 완료 순서와 무관하게 중복 제거 결과가 같습니다.
        """

        def fetch(genre: Optional[str]) -> List[PerformanceItem]:
            return source.fetch(mode, genre, start_date, end_date, region, cap)

        def fetch_or_skip(genre: Optional[str]) -> List[PerformanceItem]:
            try:
                return fetch(genre)
            except KopisSearchError as e:
                logger.warning(f"장르 {genre} 조회 실패, 건너뜀: {e}")
                return []

        worker = fetch_or_skip if skip_failures else fetch
        workers = min(self.settings.search.fanout_workers, len(genres))

        if workers <= 1:
            return [worker(genre) for genre in genres]

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="KopisFanout") as executor:
            return list(executor.map(worker, genres))

    def _build_result(
        self,
        outcome: LevelOutcome,
        analysis: QueryAnalysis,
        mode: SearchMode,
    ) -> SmartSearchResult:
        """점수 계산 후 상위 min_count개 선택"""
        parsed = analysis.parsed_params
        criteria = ScoreCriteria(
            target_date=parsed.target_date,
            target_location=parsed.target_location,
            target_genre=parsed.genre_code,
            is_free=analysis.keywords.is_free,
        )

        scored = self.scorer.score_and_sort(outcome.events, analysis.priorities, criteria)
        top = scored[: analysis.min_count]
        events = tuple(score.event for score in top)

        return SmartSearchResult(
            events=events,
            level=outcome.level,
            relaxed_conditions=tuple(outcome.relaxed),
            message=build_message(outcome.level, outcome.relaxed, len(events)),
            scores=tuple(top),
            mode=mode,
            min_count=analysis.min_count,
        )

    def get_event_detail(self, event_id: str) -> PerformanceDetail:
        """
        공연 상세 조회

        Raises:
            EventNotFoundError: 상세 정보 없음
        """
        with LogContext("공연 상세 조회", logger, event_id=event_id):
            return self.client.get_event_detail(event_id)

    @staticmethod
    def genre_list() -> List[Tuple[str, str]]:
        """(장르 코드, 장르명) 목록"""
        return get_genre_list()

    def __repr__(self) -> str:
        return f"SmartSearchService({self.client!r})"
