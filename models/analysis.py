"""
쿼리 분석 데이터 모델

검색 모드별 우선순위 가중치와 정규화된 검색 파라미터
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Dict, Any
from enum import Enum

from config.constants import DEFAULT_MIN_COUNT

# 1~4순위 가중치 (40% / 30% / 20% / 10%)
SLOT_WEIGHTS: Tuple[float, float, float, float] = (0.4, 0.3, 0.2, 0.1)


class SearchPriority(Enum):
    """검색 우선순위 차원"""

    PRICE = "price"
    DATE = "date"
    GENRE = "genre"
    LOCATION = "location"
    COUNT = "count"  # 점수가 아니라 완화 종료 조건으로 반영
    POPULARITY = "popularity"

    @property
    def display_name(self) -> str:
        """표시용 이름"""
        names = {
            SearchPriority.PRICE: "가격",
            SearchPriority.DATE: "날짜",
            SearchPriority.GENRE: "장르",
            SearchPriority.LOCATION: "위치",
            SearchPriority.COUNT: "개수",
            SearchPriority.POPULARITY: "인기도",
        }
        return names[self]


@dataclass(frozen=True)
class PriorityWeights:
    """
    우선순위 가중치 (불변)

    first 40%, second 30%, third 20%, fourth 10%.
    fourth가 없으면 10%는 COUNT 몫이 됩니다.
    """

    first: SearchPriority
    second: SearchPriority
    third: SearchPriority
    fourth: Optional[SearchPriority] = None

    def __post_init__(self):
        ranked = [p for p in (self.first, self.second, self.third, self.fourth) if p is not None]
        if len(set(ranked)) != len(ranked):
            raise ValueError(f"우선순위가 중복되었습니다: {[p.value for p in ranked]}")

    def slots(self) -> Tuple[Tuple[SearchPriority, float], ...]:
        """(차원, 가중치) 4개 슬롯"""
        return (
            (self.first, SLOT_WEIGHTS[0]),
            (self.second, SLOT_WEIGHTS[1]),
            (self.third, SLOT_WEIGHTS[2]),
            (self.fourth or SearchPriority.COUNT, SLOT_WEIGHTS[3]),
        )

    def weight_of(self, dimension: SearchPriority) -> float:
        """차원에 배정된 가중치 (배정되지 않았으면 0)"""
        return sum(weight for slot, weight in self.slots() if slot is dimension)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "first": self.first.value,
            "second": self.second.value,
            "third": self.third.value,
            "fourth": self.fourth.value if self.fourth else None,
        }

    def __str__(self) -> str:
        return " > ".join(
            f"{slot.display_name}({int(weight * 100)}%)" for slot, weight in self.slots()
        )


# 검색 모드별 고정 가중치
FREE_EVENT_PRIORITIES = PriorityWeights(
    first=SearchPriority.PRICE,
    second=SearchPriority.DATE,
    third=SearchPriority.GENRE,
    fourth=SearchPriority.LOCATION,
)

TRENDING_PRIORITIES = PriorityWeights(
    first=SearchPriority.POPULARITY,
    second=SearchPriority.COUNT,
    third=SearchPriority.GENRE,
    fourth=SearchPriority.DATE,
)

NARROW_DATE_PRIORITIES = PriorityWeights(
    first=SearchPriority.DATE,
    second=SearchPriority.COUNT,
    third=SearchPriority.GENRE,
    fourth=SearchPriority.LOCATION,
)

DEFAULT_PRIORITIES = PriorityWeights(
    first=SearchPriority.DATE,
    second=SearchPriority.LOCATION,
    third=SearchPriority.GENRE,
    fourth=SearchPriority.COUNT,
)


@dataclass(frozen=True)
class QueryKeywords:
    """검색 의도 플래그"""

    is_free: bool = False
    is_trending: bool = False
    has_date_keyword: bool = False  # 7일 이하의 특정 기간
    has_count_keyword: bool = False  # limit 지정 여부

    def to_dict(self) -> Dict[str, bool]:
        return {
            "is_free": self.is_free,
            "is_trending": self.is_trending,
            "has_date_keyword": self.has_date_keyword,
            "has_count_keyword": self.has_count_keyword,
        }


@dataclass(frozen=True)
class ParsedParams:
    """
    정규화된 검색 파라미터

    Attributes:
        genre_code: 장르 코드 (예: "GGGA")
        start_date: 시작일 (YYYYMMDD)
        end_date: 종료일 (YYYYMMDD)
        sido_code: 시/도 코드 (2자리)
        gugun_code: 구/군 코드 (4자리)
        min_count: 최소 결과 개수
    """

    genre_code: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    sido_code: Optional[str] = None
    gugun_code: Optional[str] = None
    min_count: int = DEFAULT_MIN_COUNT

    @property
    def target_location(self) -> Optional[str]:
        """점수 계산용 위치 (구/군 우선)"""
        return self.gugun_code or self.sido_code

    @property
    def target_date(self) -> Optional[Tuple[str, str]]:
        """점수 계산용 기간 (종료일이 없으면 시작일 하루)"""
        if not self.start_date:
            return None
        return (self.start_date, self.end_date or self.start_date)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "genre_code": self.genre_code,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "sido_code": self.sido_code,
            "gugun_code": self.gugun_code,
            "min_count": self.min_count,
        }


@dataclass(frozen=True)
class QueryAnalysis:
    """쿼리 분석 결과 (요청당 1회 생성, 읽기 전용)"""

    priorities: PriorityWeights
    keywords: QueryKeywords
    parsed_params: ParsedParams

    @property
    def min_count(self) -> int:
        return self.parsed_params.min_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "priorities": self.priorities.to_dict(),
            "keywords": self.keywords.to_dict(),
            "parsed_params": self.parsed_params.to_dict(),
        }
