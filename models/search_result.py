"""
스마트 검색 결과 데이터 모델
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Any, Iterator

from .performance import PerformanceItem
from .search_params import SearchMode

# 완화 실패 (어느 단계에서도 최소 개수 미달)
LEVEL_FAILED = 0


@dataclass(frozen=True)
class ScoreCriteria:
    """
    점수 계산 기준

    Attributes:
        target_date: (시작일, 종료일) YYYYMMDD
        target_location: 4자리 구/군 또는 2자리 시/도 코드
        target_genre: 장르 코드
        is_free: 무료 공연 검색 여부
    """

    target_date: Optional[Tuple[str, str]] = None
    target_location: Optional[str] = None
    target_genre: Optional[str] = None
    is_free: bool = False


@dataclass(frozen=True)
class ScoreBreakdown:
    """차원별 점수 (각 0~100)"""

    price: float
    date: float
    genre: float
    location: float
    popularity: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "price": self.price,
            "date": self.date,
            "genre": self.genre,
            "location": self.location,
            "popularity": self.popularity,
        }


@dataclass(frozen=True)
class EventScore:
    """공연별 종합 점수"""

    event: PerformanceItem
    total: float
    breakdown: ScoreBreakdown

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event.id,
            "total": round(self.total, 2),
            "breakdown": self.breakdown.to_dict(),
        }


@dataclass(frozen=True)
class SmartSearchResult:
    """
    스마트 검색 결과 (불변)

    Attributes:
        events: 상위 N개 공연 (실패 시 최대 완화 단계의 전체 공연)
        level: 최소 개수를 만족한 완화 단계 (1~4, 실패 시 0)
        relaxed_conditions: 적용된 완화 조건 설명
        message: 사용자용 안내 문구
        scores: 반환된 공연의 점수 상세
        mode: 검색 모드
        min_count: 요청된 최소 개수
    """

    events: Tuple[PerformanceItem, ...]
    level: int
    relaxed_conditions: Tuple[str, ...] = field(default_factory=tuple)
    message: str = ""
    scores: Tuple[EventScore, ...] = field(default_factory=tuple)
    mode: Optional[SearchMode] = None
    min_count: int = 0

    @property
    def is_success(self) -> bool:
        return self.level != LEVEL_FAILED

    @property
    def is_relaxed(self) -> bool:
        return self.level > 1 or self.level == LEVEL_FAILED

    @property
    def count(self) -> int:
        return len(self.events)

    @property
    def is_empty(self) -> bool:
        return len(self.events) == 0

    def score_of(self, event_id: str) -> Optional[EventScore]:
        """공연 ID로 점수 조회"""
        for score in self.scores:
            if score.event.id == event_id:
                return score
        return None

    def __iter__(self) -> Iterator[PerformanceItem]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)

    def __getitem__(self, index: int) -> PerformanceItem:
        return self.events[index]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "events": [event.to_dict() for event in self.events],
            "level": self.level,
            "relaxed_conditions": list(self.relaxed_conditions),
            "message": self.message,
            "scores": [score.to_dict() for score in self.scores],
            "mode": self.mode.value if self.mode else None,
            "min_count": self.min_count,
        }

    def __str__(self) -> str:
        return f"SmartSearchResult(level={self.level}, count={self.count})"
