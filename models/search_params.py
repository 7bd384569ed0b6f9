"""
검색 파라미터 데이터 모델
"""

from dataclasses import dataclass
from typing import Optional, Mapping, Any, Dict
from enum import Enum

from utils.dates import to_date_key, parse_date_key
from utils.exceptions import InvalidParamsError

# snake_case 필드 -> camelCase 별칭
_CAMEL_KEYS = {
    "genre_code": "genreCode",
    "start_date": "startDate",
    "end_date": "endDate",
    "sido_code": "sidoCode",
    "gugun_code": "gugunCode",
    "limit": "limit",
}


def get_param(params: Optional[Mapping[str, Any]], name: str) -> Any:
    """
    snake_case / camelCase 어느 쪽 키로 들어와도 값 조회

    빈 문자열은 값이 없는 것으로 취급합니다.
    """
    if not params:
        return None
    value = params.get(name)
    if value is None:
        camel = _CAMEL_KEYS.get(name)
        if camel:
            value = params.get(camel)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    return value


class SearchMode(Enum):
    """검색 모드"""

    BY_LOCATION = "by-location"
    FREE_EVENTS = "free-events"
    TRENDING = "trending"

    @property
    def display_name(self) -> str:
        names = {
            SearchMode.BY_LOCATION: "지역별 공연 검색",
            SearchMode.FREE_EVENTS: "무료/저렴한 공연 검색",
            SearchMode.TRENDING: "인기 공연 검색",
        }
        return names[self]

    @property
    def requires_genre(self) -> bool:
        return self is not SearchMode.TRENDING

    @classmethod
    def resolve(cls, value: Any) -> Optional["SearchMode"]:
        """
        모드 값 또는 별칭(도구 이름)을 SearchMode로 변환

        Returns:
            SearchMode 또는 None (알 수 없는 값)
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        for mode in cls:
            if key == mode.value:
                return mode
        return _MODE_ALIASES.get(key)

    @classmethod
    def parse(cls, value: Any) -> "SearchMode":
        """resolve()와 같지만 알 수 없는 값이면 InvalidParamsError"""
        mode = cls.resolve(value)
        if mode is None:
            raise InvalidParamsError(
                "지원하지 않는 검색 모드입니다 (by-location, free-events, trending)",
                field="mode",
                value=str(value),
            )
        return mode


_MODE_ALIASES = {
    "search_events_by_location": SearchMode.BY_LOCATION,
    "by_location": SearchMode.BY_LOCATION,
    "location": SearchMode.BY_LOCATION,
    "filter_free_events": SearchMode.FREE_EVENTS,
    "free_events": SearchMode.FREE_EVENTS,
    "free": SearchMode.FREE_EVENTS,
    "get_trending_performances": SearchMode.TRENDING,
    "popular": SearchMode.TRENDING,
}


@dataclass(frozen=True)
class SearchRequest:
    """
    검증된 스마트 검색 요청

    from_params()로 생성하면 업스트림 호출 전에 모든 필드가 검증됩니다.
    날짜는 YYYYMMDD로 정규화됩니다.
    """

    mode: SearchMode
    genre_code: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    sido_code: Optional[str] = None
    gugun_code: Optional[str] = None
    limit: Optional[int] = None

    @classmethod
    def from_params(
        cls,
        mode: Any,
        params: Optional[Mapping[str, Any]],
    ) -> "SearchRequest":
        """
        원시 파라미터 검증 후 요청 생성

        Args:
            mode: 검색 모드 (값 또는 별칭)
            params: 원시 파라미터 (camelCase/snake_case)

        Raises:
            InvalidParamsError: 필수 필드 누락, 형식 오류
        """
        search_mode = SearchMode.parse(mode)
        if params is not None and not isinstance(params, Mapping):
            raise InvalidParamsError("검색 파라미터는 키-값 형태여야 합니다", field="params")

        genre_code = get_param(params, "genre_code")
        if genre_code is not None:
            genre_code = str(genre_code).upper()
        if search_mode.requires_genre and not genre_code:
            raise InvalidParamsError("장르 코드가 필요합니다", field="genreCode")

        start_date = cls._validate_date(get_param(params, "start_date"), "startDate")
        end_date = cls._validate_date(get_param(params, "end_date"), "endDate")
        if search_mode is SearchMode.BY_LOCATION:
            if not start_date:
                raise InvalidParamsError("시작일이 필요합니다 (YYYYMMDD)", field="startDate")
            if not end_date:
                raise InvalidParamsError("종료일이 필요합니다 (YYYYMMDD)", field="endDate")
        if start_date and end_date and start_date > end_date:
            raise InvalidParamsError(
                "시작일이 종료일보다 늦습니다",
                field="startDate",
                value=f"{start_date} > {end_date}",
            )

        sido_code = cls._validate_region(get_param(params, "sido_code"), "sidoCode", 2)
        gugun_code = cls._validate_region(get_param(params, "gugun_code"), "gugunCode", 4)

        limit = cls._validate_limit(get_param(params, "limit"))

        return cls(
            mode=search_mode,
            genre_code=genre_code,
            start_date=start_date,
            end_date=end_date,
            sido_code=sido_code,
            gugun_code=gugun_code,
            limit=limit,
        )

    @staticmethod
    def _validate_date(value: Any, field_name: str) -> Optional[str]:
        if value is None:
            return None
        key = to_date_key(str(value))
        if parse_date_key(key) is None:
            raise InvalidParamsError(
                "날짜 형식이 올바르지 않습니다 (YYYYMMDD)",
                field=field_name,
                value=str(value),
            )
        return key

    @staticmethod
    def _validate_region(value: Any, field_name: str, length: int) -> Optional[str]:
        if value is None:
            return None
        code = str(value)
        if not code.isdigit() or len(code) != length:
            raise InvalidParamsError(
                f"지역 코드는 {length}자리 숫자여야 합니다",
                field=field_name,
                value=code,
            )
        return code

    @staticmethod
    def _validate_limit(value: Any) -> Optional[int]:
        """양의 정수만 유지하고 나머지는 기본 개수(None)로 처리"""
        if value is None or isinstance(value, bool):
            return None
        try:
            limit = int(value)
        except (TypeError, ValueError, OverflowError):
            return None
        if isinstance(value, float) and value != limit:
            return None
        return limit if limit > 0 else None

    @property
    def region_code(self) -> Optional[str]:
        """요청 지역 (구/군 우선)"""
        return self.gugun_code or self.sido_code

    def to_params(self) -> Dict[str, Any]:
        """분석기 입력용 파라미터 (값이 있는 항목만)"""
        params = {
            "genre_code": self.genre_code,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "sido_code": self.sido_code,
            "gugun_code": self.gugun_code,
            "limit": self.limit,
        }
        return {key: value for key, value in params.items() if value is not None}

    def __str__(self) -> str:
        return (
            f"SearchRequest(mode={self.mode.value}, genre={self.genre_code}, "
            f"dates={self.start_date}~{self.end_date}, region={self.region_code}, "
            f"limit={self.limit})"
        )
