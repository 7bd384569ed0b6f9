"""데이터 모델 모듈"""
from .analysis import (
    SearchPriority,
    PriorityWeights,
    QueryKeywords,
    ParsedParams,
    QueryAnalysis,
)
from .performance import PerformanceItem, PerformanceDetail, BoxOfficeEntry, BookingLink
from .search_params import SearchMode, SearchRequest
from .search_result import ScoreCriteria, ScoreBreakdown, EventScore, SmartSearchResult
from .relaxation import RelaxationStrategy, get_strategy

__all__ = [
    "SearchPriority",
    "PriorityWeights",
    "QueryKeywords",
    "ParsedParams",
    "QueryAnalysis",
    "PerformanceItem",
    "PerformanceDetail",
    "BoxOfficeEntry",
    "BookingLink",
    "SearchMode",
    "SearchRequest",
    "ScoreCriteria",
    "ScoreBreakdown",
    "EventScore",
    "SmartSearchResult",
    "RelaxationStrategy",
    "get_strategy",
]
