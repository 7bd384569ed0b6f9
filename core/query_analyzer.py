"""
쿼리 분석기

검색 모드와 원시 파라미터로 우선순위 가중치와 정규화된 파라미터를 결정합니다.
I/O가 없는 순수 함수이며 어떤 입력에도 예외를 던지지 않습니다.
"""

from typing import Any, Mapping, Optional

from models.analysis import (
    DEFAULT_MIN_COUNT,
    FREE_EVENT_PRIORITIES,
    TRENDING_PRIORITIES,
    NARROW_DATE_PRIORITIES,
    DEFAULT_PRIORITIES,
    PriorityWeights,
    QueryKeywords,
    ParsedParams,
    QueryAnalysis,
)
from models.search_params import SearchMode, get_param
from utils.dates import days_between

# 이 일수 이하의 기간은 "다음주" 같은 특정 기간으로 봅니다
NARROW_DATE_SPAN_DAYS = 7


def analyze(search_mode: Any, raw_params: Optional[Mapping[str, Any]]) -> QueryAnalysis:
    """
    검색 전략 분석

    Args:
        search_mode: SearchMode 또는 모드 문자열/도구 이름
        raw_params: 원시 파라미터 (camelCase/snake_case, None 허용)

    Returns:
        QueryAnalysis
    """
    if not isinstance(raw_params, Mapping):
        raw_params = {}

    mode = SearchMode.resolve(search_mode)
    keywords = extract_keywords(mode, raw_params)

    return QueryAnalysis(
        priorities=determine_priorities(keywords),
        keywords=keywords,
        parsed_params=parse_parameters(raw_params),
    )


def extract_keywords(mode: Optional[SearchMode], raw_params: Mapping[str, Any]) -> QueryKeywords:
    return QueryKeywords(
        is_free=mode is SearchMode.FREE_EVENTS,
        is_trending=mode is SearchMode.TRENDING,
        has_date_keyword=has_narrow_date_range(raw_params),
        has_count_keyword=get_param(raw_params, "limit") is not None,
    )


def has_narrow_date_range(raw_params: Mapping[str, Any]) -> bool:
    """시작일과 종료일이 모두 있고 기간이 7일 이하인지 (파싱 실패 시 False)"""
    start = get_param(raw_params, "start_date")
    end = get_param(raw_params, "end_date")
    if not start or not end:
        return False

    span = days_between(str(start), str(end))
    if span is None:
        return False
    return span <= NARROW_DATE_SPAN_DAYS


def determine_priorities(keywords: QueryKeywords) -> PriorityWeights:
    """
    우선순위 결정 (먼저 맞는 규칙 적용)

    1. 무료 검색: 가격 > 날짜 > 장르 > 위치
    2. 인기 검색: 인기도 > 개수 > 장르 > 날짜
    3. 7일 이하 기간: 날짜 > 개수 > 장르 > 위치
    4. 기본: 날짜 > 위치 > 장르 > 개수
    """
    if keywords.is_free:
        return FREE_EVENT_PRIORITIES
    if keywords.is_trending:
        return TRENDING_PRIORITIES
    if keywords.has_date_keyword:
        return NARROW_DATE_PRIORITIES
    return DEFAULT_PRIORITIES


def parse_parameters(raw_params: Mapping[str, Any]) -> ParsedParams:
    return ParsedParams(
        genre_code=_as_text(get_param(raw_params, "genre_code")),
        start_date=_as_text(get_param(raw_params, "start_date")),
        end_date=_as_text(get_param(raw_params, "end_date")),
        sido_code=_as_text(get_param(raw_params, "sido_code")),
        gugun_code=_as_text(get_param(raw_params, "gugun_code")),
        min_count=resolve_min_count(get_param(raw_params, "limit")),
    )


def resolve_min_count(limit: Any) -> int:
    """limit가 양의 정수면 그 값, 아니면 3"""
    if isinstance(limit, bool):
        return DEFAULT_MIN_COUNT
    try:
        value = int(limit)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_MIN_COUNT
    return value if value > 0 else DEFAULT_MIN_COUNT


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)

