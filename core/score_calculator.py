"""
우선순위 기반 공연 점수 계산기

공연마다 5개 차원(가격, 날짜, 장르, 위치, 인기도) 점수를 0~100으로 계산하고
우선순위 가중치로 합산해 내림차순 정렬합니다.
"""

from typing import List, Optional, Sequence, Tuple

from data.kopis_codes import (
    SIMILAR_GENRE_PAIRS,
    get_genre_name,
    get_area_name,
    get_sido_names,
)
from models.analysis import SearchPriority, PriorityWeights
from models.performance import PerformanceItem, is_free_price, extract_min_price
from models.search_result import ScoreCriteria, ScoreBreakdown, EventScore
from utils.dates import parse_date_key

NEUTRAL_SCORE = 50.0
MAX_SCORE = 100.0
MIN_SCORE = 0.0

# (최저가 상한, 점수)
PRICE_BANDS: Tuple[Tuple[int, float], ...] = (
    (5_000, 80.0),
    (10_000, 60.0),
    (20_000, 40.0),
    (50_000, 20.0),
)
PRICE_FLOOR_SCORE = 10.0

# (시작일 차이 상한, 점수)
DATE_DISTANCE_BANDS: Tuple[Tuple[int, float], ...] = (
    (7, 50.0),
    (14, 30.0),
    (30, 10.0),
)


def price_score(event: PerformanceItem) -> float:
    """가격 점수: 무료 100, 최저가가 낮을수록 높음, 가격 정보 없으면 0"""
    if is_free_price(event.price_guidance):
        return MAX_SCORE

    min_price = extract_min_price(event.price_guidance)
    if min_price is None:
        return MIN_SCORE
    if min_price == 0:
        return MAX_SCORE

    for upper, score in PRICE_BANDS:
        if min_price <= upper:
            return score
    return PRICE_FLOOR_SCORE


def date_score(event: PerformanceItem, target_date: Optional[Tuple[str, str]]) -> float:
    """
    날짜 점수

    요청 기간에 완전히 포함 100, 겹침 70,
    그 외에는 시작일 차이 7일 이내 50, 14일 30, 30일 10, 그 이상 0
    """
    if not target_date:
        return NEUTRAL_SCORE

    target_start = parse_date_key(target_date[0])
    target_end = parse_date_key(target_date[1]) or target_start
    if target_start is None:
        return NEUTRAL_SCORE

    event_start = parse_date_key(event.start_key)
    event_end = parse_date_key(event.end_key)
    if event_start is None or event_end is None:
        return MIN_SCORE

    if event_start >= target_start and event_end <= target_end:
        return MAX_SCORE

    if event_start <= target_end and event_end >= target_start:
        return 70.0

    distance = abs((event_start - target_start).days)
    for upper, score in DATE_DISTANCE_BANDS:
        if distance <= upper:
            return score
    return MIN_SCORE


def genre_score(event: PerformanceItem, target_genre: Optional[str]) -> float:
    """
    장르 점수

    공연의 genre_name은 장르 "이름", target_genre는 장르 "코드"입니다.
    """
    if not target_genre:
        return NEUTRAL_SCORE

    event_genre = event.genre_name
    if not event_genre:
        return MIN_SCORE

    target_name = get_genre_name(target_genre)

    if event_genre == target_name:
        return MAX_SCORE

    # "무용(서양/한국무용)"과 "무용" 같은 부분 일치
    if target_name in event_genre or event_genre in target_name:
        return 90.0

    for pair in SIMILAR_GENRE_PAIRS:
        if event_genre in pair and target_name in pair:
            return 60.0

    return MIN_SCORE


def location_score(event: PerformanceItem, target_location: Optional[str]) -> float:
    """
    위치 점수

    4자리 구/군 이름이 지역에 포함 100, 시/도 이름(정식 또는 약칭) 포함 60
    """
    if not target_location:
        return NEUTRAL_SCORE

    area = event.area or ""

    if len(target_location) == 4:
        gugun_name = get_area_name(target_location, short=True)
        if gugun_name and gugun_name in area:
            return MAX_SCORE

    if len(target_location) >= 2:
        for sido_name in get_sido_names(target_location[:2]):
            if sido_name and sido_name in area:
                return 60.0

    return MIN_SCORE


def popularity_score(event: PerformanceItem) -> float:
    """외부 인기도 (0~100으로 보정), 없으면 50"""
    if event.popularity is None:
        return NEUTRAL_SCORE
    return min(MAX_SCORE, max(MIN_SCORE, float(event.popularity)))


def dimension_score(breakdown: ScoreBreakdown, dimension: SearchPriority) -> float:
    """슬롯이 가리키는 차원의 점수"""
    if dimension is SearchPriority.PRICE:
        return breakdown.price
    if dimension is SearchPriority.DATE:
        return breakdown.date
    if dimension is SearchPriority.GENRE:
        return breakdown.genre
    if dimension is SearchPriority.LOCATION:
        return breakdown.location
    if dimension is SearchPriority.POPULARITY:
        return breakdown.popularity
    # COUNT는 점수가 아니라 완화 종료 조건
    return 0.0


def weighted_total(breakdown: ScoreBreakdown, priorities: PriorityWeights) -> float:
    """4개 슬롯의 가중합 (어느 슬롯에도 없는 차원은 0)"""
    total = 0.0
    for dimension, weight in priorities.slots():
        total += weight * dimension_score(breakdown, dimension)
    return total


class ScoreCalculator:
    """
    공연 점수 계산기

    사용법:
        calculator = ScoreCalculator()
        scored = calculator.score_and_sort(events, analysis.priorities, criteria)
        top = [s.event for s in scored[:3]]
    """

    def calculate_breakdown(
        self,
        event: PerformanceItem,
        criteria: ScoreCriteria,
    ) -> ScoreBreakdown:
        return ScoreBreakdown(
            price=price_score(event),
            date=date_score(event, criteria.target_date),
            genre=genre_score(event, criteria.target_genre),
            location=location_score(event, criteria.target_location),
            popularity=popularity_score(event),
        )

    def calculate_score(
        self,
        event: PerformanceItem,
        priorities: PriorityWeights,
        criteria: ScoreCriteria,
    ) -> EventScore:
        breakdown = self.calculate_breakdown(event, criteria)
        return EventScore(
            event=event,
            total=weighted_total(breakdown, priorities),
            breakdown=breakdown,
        )

    def score_and_sort(
        self,
        events: Sequence[PerformanceItem],
        priorities: PriorityWeights,
        criteria: ScoreCriteria,
    ) -> List[EventScore]:
        """
        점수 계산 후 종합 점수 내림차순 정렬

        동점이면 입력 순서를 유지합니다 (안정 정렬).
        """
        scored = [self.calculate_score(event, priorities, criteria) for event in events]
        return sorted(scored, key=lambda score: score.total, reverse=True)
