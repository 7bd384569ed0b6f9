"""
검색 조건 완화 정책

검색 모드와 완화 단계(1~4)별로 어떤 축을 얼마나 넓힐지 정의하는 정적 테이블
"""

from dataclasses import dataclass
from typing import Dict, Tuple
from enum import Enum

from .search_params import SearchMode

MAX_LEVEL = 4


class LocationExpansion(Enum):
    """위치 완화"""

    NONE = "none"  # 요청 지역 그대로
    NEARBY = "nearby"  # 인접 구/군 (예약)
    CITY = "city"  # 구/군 -> 시/도 전체
    NATIONWIDE = "nationwide"  # 시/도 전체, 지역 없으면 전국


class GenreExpansion(Enum):
    """장르 완화"""

    NONE = "none"
    SIMILAR_ONE = "similar_one"  # 요청 장르 + 유사 장르 1개
    SIMILAR = "similar"  # 요청 장르 + 모든 유사 장르
    ALL = "all"  # 전체 장르


class DateExpansion(Enum):
    """날짜 완화"""

    NONE = "none"
    WEEK = "week"
    MONTH = "month"


class ResultCap(Enum):
    """단계별 요청 행 수 (SearchSettings 필드명)"""

    DEFAULT = "result_cap"
    NARROW = "level3_result_cap"
    PER_GENRE = "level4_genre_cap"


@dataclass(frozen=True)
class RelaxationStrategy:
    """
    단계별 완화 정책 (불변)

    Attributes:
        location: 위치 완화 방식
        genre: 장르 완화 방식
        date: 날짜 완화 방식
        date_note_only: True면 날짜 완화를 안내 문구로만 기록 (쿼리 변경 없음)
        skip_failed_genres: True면 장르별 호출 실패를 건너뜀 (False면 단계 전체가 0건)
        result_cap: 요청 행 수 설정
    """

    location: LocationExpansion = LocationExpansion.NONE
    genre: GenreExpansion = GenreExpansion.NONE
    date: DateExpansion = DateExpansion.NONE
    date_note_only: bool = False
    skip_failed_genres: bool = False
    result_cap: ResultCap = ResultCap.DEFAULT


_EXACT = RelaxationStrategy()

_MAXIMUM = RelaxationStrategy(
    location=LocationExpansion.NATIONWIDE,
    genre=GenreExpansion.ALL,
    date=DateExpansion.MONTH,
    skip_failed_genres=True,
    result_cap=ResultCap.PER_GENRE,
)

RELAXATION_TABLE: Dict[Tuple[SearchMode, int], RelaxationStrategy] = {
    # 무료 검색: 가격 > 날짜 > 장르 > 위치
    (SearchMode.FREE_EVENTS, 1): _EXACT,
    (SearchMode.FREE_EVENTS, 2): RelaxationStrategy(location=LocationExpansion.CITY),
    (SearchMode.FREE_EVENTS, 3): RelaxationStrategy(
        location=LocationExpansion.CITY,
        genre=GenreExpansion.SIMILAR,
        result_cap=ResultCap.NARROW,
    ),
    (SearchMode.FREE_EVENTS, 4): _MAXIMUM,
    # 인기 검색: 인기도 > 개수 > 장르 > 날짜
    (SearchMode.TRENDING, 1): _EXACT,
    (SearchMode.TRENDING, 2): RelaxationStrategy(genre=GenreExpansion.SIMILAR_ONE),
    (SearchMode.TRENDING, 3): RelaxationStrategy(
        genre=GenreExpansion.SIMILAR,
        date=DateExpansion.MONTH,
        date_note_only=True,
        result_cap=ResultCap.NARROW,
    ),
    (SearchMode.TRENDING, 4): _MAXIMUM,
    # 지역 검색: 날짜 > 위치 > 장르 > 개수
    (SearchMode.BY_LOCATION, 1): _EXACT,
    (SearchMode.BY_LOCATION, 2): RelaxationStrategy(genre=GenreExpansion.SIMILAR_ONE),
    (SearchMode.BY_LOCATION, 3): RelaxationStrategy(
        location=LocationExpansion.CITY,
        genre=GenreExpansion.SIMILAR,
    ),
    (SearchMode.BY_LOCATION, 4): _MAXIMUM,
}


def get_strategy(mode: SearchMode, level: int) -> RelaxationStrategy:
    """
    완화 정책 조회

    Raises:
        KeyError: 정의되지 않은 (모드, 단계)
    """
    return RELAXATION_TABLE[(mode, level)]
