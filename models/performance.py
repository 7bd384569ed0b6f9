"""
KOPIS 공연 데이터 모델
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, Dict, Any
import re

from utils.dates import to_date_key

_PRICE_TOKEN_RE = re.compile(r"\d[\d,]*")
# 천 단위 구분자가 아닌 쉼표
_PRICE_SEPARATOR_RE = re.compile(r"\s*,(?!\d{3})\s*")
_FREE_MARKERS = ("무료", "free")


def is_free_price(price_text: Optional[str]) -> bool:
    """
    무료 공연 여부

    "무료"/"free" 표기가 있거나 "0", "0원"이면 무료로 봅니다.
    """
    if not price_text:
        return False
    text = price_text.strip().lower()
    if any(marker in text for marker in _FREE_MARKERS):
        return True
    return text in ("0", "0원")


def extract_min_price(price_text: Optional[str]) -> Optional[int]:
    """
    가격 안내 문구에서 최저가 추출

    천 단위 구분자는 숫자의 일부로 취급합니다 ("전석 50,000원" -> 50000).

    Returns:
        최저가 또는 None (숫자 없음)
    """
    if not price_text:
        return None
    values = []
    for token in _PRICE_TOKEN_RE.findall(price_text):
        digits = token.replace(",", "")
        if digits:
            values.append(int(digits))
    return min(values) if values else None


@dataclass(frozen=True)
class PerformanceItem:
    """
    공연 목록 레코드 (불변)

    Attributes:
        id: 공연 ID (mt20id)
        name: 공연명 (prfnm)
        start_date: 공연 시작일 (prfpdfrom, "YYYY.MM.DD" 또는 "YYYYMMDD")
        end_date: 공연 종료일 (prfpdto)
        facility: 공연장명 (fcltynm)
        poster: 포스터 URL
        area: 지역 표시명 (예: "서울특별시")
        genre_name: 장르명 (genrenm)
        open_run: 오픈런 여부
        state: 공연 상태 (공연중/공연예정/공연완료)
        price_guidance: 관람료 안내 문구 (pcseguidance)
        popularity: 외부에서 주어진 인기도 (0~100)
        box_office_rank: 예매 순위
        extra: 그 밖의 원본 필드
    """

    id: str
    name: str
    start_date: str = ""
    end_date: str = ""
    facility: str = ""
    poster: str = ""
    area: str = ""
    genre_name: str = ""
    open_run: bool = False
    state: str = ""
    price_guidance: str = ""
    popularity: Optional[float] = None
    box_office_rank: Optional[int] = None
    extra: Dict[str, str] = field(default_factory=dict, compare=False, hash=False)

    @property
    def start_key(self) -> str:
        """시작일 YYYYMMDD"""
        return to_date_key(self.start_date)

    @property
    def end_key(self) -> str:
        """종료일 YYYYMMDD"""
        return to_date_key(self.end_date)

    @property
    def is_free(self) -> bool:
        return is_free_price(self.price_guidance)

    @property
    def min_price(self) -> Optional[int]:
        return extract_min_price(self.price_guidance)

    def with_price(self, price_guidance: str) -> "PerformanceItem":
        """관람료 안내를 채운 복사본"""
        return replace(self, price_guidance=price_guidance or "")

    def with_popularity(
        self, popularity: float, box_office_rank: Optional[int] = None
    ) -> "PerformanceItem":
        """인기도를 채운 복사본"""
        return replace(self, popularity=popularity, box_office_rank=box_office_rank)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "facility": self.facility,
            "poster": self.poster,
            "area": self.area,
            "genre_name": self.genre_name,
            "open_run": self.open_run,
            "state": self.state,
            "price_guidance": self.price_guidance,
            "popularity": self.popularity,
            "box_office_rank": self.box_office_rank,
            "extra": dict(self.extra),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PerformanceItem":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            start_date=data.get("start_date", ""),
            end_date=data.get("end_date", ""),
            facility=data.get("facility", ""),
            poster=data.get("poster", ""),
            area=data.get("area", ""),
            genre_name=data.get("genre_name", ""),
            open_run=bool(data.get("open_run", False)),
            state=data.get("state", ""),
            price_guidance=data.get("price_guidance", ""),
            popularity=data.get("popularity"),
            box_office_rank=data.get("box_office_rank"),
            extra=dict(data.get("extra") or {}),
        )

    def __str__(self) -> str:
        return f"PerformanceItem(id={self.id!r}, name={self.name!r}, area={self.area!r})"


@dataclass(frozen=True)
class BookingLink:
    """예매처 링크"""

    name: str
    url: str


@dataclass(frozen=True)
class PerformanceDetail:
    """
    공연 상세 레코드 (/pblprfr/{id})

    목록 필드에 출연진, 런타임, 관람 연령, 시놉시스, 예매처 등이 추가됩니다.
    """

    id: str
    name: str
    start_date: str = ""
    end_date: str = ""
    facility: str = ""
    poster: str = ""
    area: str = ""
    genre_name: str = ""
    open_run: bool = False
    state: str = ""
    price_guidance: str = ""
    cast: str = ""
    crew: str = ""
    runtime: str = ""
    age: str = ""
    producer: str = ""
    synopsis: str = ""
    schedule_guidance: str = ""
    images: Tuple[str, ...] = field(default_factory=tuple)
    booking_links: Tuple[BookingLink, ...] = field(default_factory=tuple)

    @property
    def prices(self) -> Tuple[str, ...]:
        """관람료 안내를 좌석별로 분리"""
        if not self.price_guidance:
            return ()
        return tuple(p.strip() for p in _PRICE_SEPARATOR_RE.split(self.price_guidance) if p.strip())

    def to_item(self) -> PerformanceItem:
        """목록 레코드로 변환"""
        return PerformanceItem(
            id=self.id,
            name=self.name,
            start_date=self.start_date,
            end_date=self.end_date,
            facility=self.facility,
            poster=self.poster,
            area=self.area,
            genre_name=self.genre_name,
            open_run=self.open_run,
            state=self.state,
            price_guidance=self.price_guidance,
        )


@dataclass(frozen=True)
class BoxOfficeEntry:
    """예매 순위 항목 (/boxoffice)"""

    event_id: str
    rank: int
    name: str = ""
    genre_name: str = ""
    area: str = ""
    period: str = ""
    facility: str = ""
