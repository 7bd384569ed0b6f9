"""
검색 결과 마크다운 변환

검색 결과, 무료 공연, 인기 공연, 공연 상세, 장르 목록을 마크다운으로 출력합니다.
"""

from datetime import date
from typing import Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup

from config.constants import MAX_RESPONSE_SIZE, STATE_RUNNING, STATE_UPCOMING
from models.performance import PerformanceItem, PerformanceDetail
from models.search_params import SearchMode
from models.search_result import SmartSearchResult
from utils.dates import parse_date_key

NO_INFO = "정보 없음"
NO_TITLE = "제목 없음"

# 항목 단위로 끊는 기준 (전체 한도의 80%)
ITEM_CUTOFF_RATIO = 0.8
SYNOPSIS_MIN_LENGTH = 100
SYNOPSIS_MAX_LENGTH = 1000

HOT_POPULARITY = 80
URGENT_DAYS = 7
CLOSING_NOTICE_DAYS = 14

TRUNCATION_NOTICE = (
    "\n\n---\n\n> ⚠️ **응답이 너무 길어 일부가 생략되었습니다.**\n"
    "> 더 자세한 정보는 개별 공연 ID로 상세 조회를 이용해주세요.\n"
)


def state_emoji(state: str) -> str:
    if state == STATE_RUNNING:
        return "🟢"
    if state == STATE_UPCOMING:
        return "🔵"
    return "⚫"


def clean_html(html: str) -> str:
    """시놉시스의 HTML 태그와 엔티티 제거"""
    if not html:
        return ""
    text = BeautifulSoup(html, "html.parser").get_text()
    return text.replace("\xa0", " ").strip()


def truncate_if_needed(text: str, max_size: int = MAX_RESPONSE_SIZE) -> str:
    """최대 길이를 넘으면 잘라내고 안내 문구 추가"""
    if len(text) <= max_size:
        return text
    return text[: max_size - 100] + TRUNCATION_NOTICE


def days_until_end(event: PerformanceItem, today: date) -> Optional[int]:
    end = parse_date_key(event.end_key)
    if end is None:
        return None
    return (end - today).days


class ResultFormatter:
    """
    마크다운 변환기

    사용법:
        formatter = ResultFormatter()
        print(formatter.format_result(result))
    """

    def __init__(self, max_size: int = MAX_RESPONSE_SIZE, today: Optional[date] = None):
        self.max_size = max_size
        self.today = today or date.today()

    def format_result(self, result: SmartSearchResult) -> str:
        """검색 모드에 맞는 형식으로 변환"""
        if result.mode is SearchMode.FREE_EVENTS:
            return self.format_free_events(result)
        if result.mode is SearchMode.TRENDING:
            return self.format_trending(result)
        return self.format_events(result)

    def format_events(self, result: SmartSearchResult) -> str:
        header = f"# 🎪 공연 검색 결과\n\n> {result.message}\n\n"
        if result.is_empty:
            return header + "검색 결과가 없습니다.\n"

        header += f"**총 {result.count}개의 공연**\n\n---\n\n"
        return self._render_items(header, result.events, self._event_block)

    def format_free_events(self, result: SmartSearchResult, date_range: str = "오늘 ~ 30일 후") -> str:
        header = f"# 🎁 무료/저렴한 공연 추천\n\n> {result.message}\n> 📅 검색 기간: {date_range}\n\n"
        if result.is_empty:
            return header + "검색 결과가 없습니다.\n"

        free_count = sum(1 for event in result.events if event.is_free)
        paid_count = result.count - free_count
        header += f"**무료 공연 {free_count}개 | 유료 공연 {paid_count}개**\n\n---\n\n"
        return self._render_items(header, result.events, self._free_event_block)

    def format_trending(self, result: SmartSearchResult) -> str:
        header = (
            f"# 🔥 인기 공연 추천\n\n> {result.message}\n"
            f"> 스마트 검색으로 최적화된 결과입니다.\n\n"
        )
        if result.is_empty:
            return header + "추천할 공연이 없습니다.\n"

        header += f"**총 {result.count}개의 인기 공연**\n\n---\n\n"
        return self._render_items(header, result.events, self._trending_block)

    def _render_items(self, header: str, events: Iterable[PerformanceItem], block) -> str:
        parts: List[str] = [header]
        length = len(header)
        cutoff = self.max_size * ITEM_CUTOFF_RATIO

        for index, event in enumerate(events, 1):
            text = block(index, event)
            parts.append(text)
            length += len(text)
            if length > cutoff:
                parts.append(f"\n> ⚠️ 결과가 너무 많아 {index}개까지만 표시합니다.\n")
                break

        return truncate_if_needed("".join(parts), self.max_size)

    @staticmethod
    def _poster(event: PerformanceItem) -> str:
        return f"![포스터]({event.poster})\n\n" if event.poster else ""

    def _event_block(self, index: int, event: PerformanceItem) -> str:
        lines = [
            f"## {index}. {event.name or NO_TITLE}\n\n",
            self._poster(event),
            f"- 📅 **공연기간**: {event.start_date} ~ {event.end_date}\n",
            f"- 🏛️ **공연장**: {event.facility or NO_INFO}\n",
            f"- 🎭 **장르**: {event.genre_name or NO_INFO}\n",
            f"- 📍 **지역**: {event.area or NO_INFO}\n",
        ]
        if event.state:
            lines.append(f"- {state_emoji(event.state)} **상태**: {event.state}\n")
        lines.append(f"- 🔗 **공연ID**: `{event.id}` (상세정보 조회 시 사용)\n")
        lines.append("\n---\n\n")
        return "".join(lines)

    def _free_event_block(self, index: int, event: PerformanceItem) -> str:
        badge = "🎁 [무료]" if event.is_free else "💰"
        lines = [
            f"## {index}. {badge} {event.name or NO_TITLE}\n\n",
            self._poster(event),
            f"- 📅 **공연기간**: {event.start_date} ~ {event.end_date}\n",
            f"- 🏛️ **공연장**: {event.facility or NO_INFO}\n",
            f"- 💵 **관람료**: {event.price_guidance or NO_INFO}\n",
            f"- 🎭 **장르**: {event.genre_name or NO_INFO}\n",
            f"- 🔗 **공연ID**: `{event.id}`\n",
            "\n---\n\n",
        ]
        return "".join(lines)

    def _trending_block(self, index: int, event: PerformanceItem) -> str:
        days_left = days_until_end(event, self.today)
        popularity = event.popularity if event.popularity is not None else 50
        indicators = ""
        if popularity >= HOT_POPULARITY:
            indicators += "⭐"
        if days_left is not None and days_left <= URGENT_DAYS:
            indicators += "🔥"

        lines = [
            f"## {index}위. {indicators or '-'} {event.name or NO_TITLE}\n\n",
            self._poster(event),
            f"- 🏆 **인기도**: {popularity:g}점\n",
        ]
        if event.box_office_rank is not None:
            lines.append(f"- 🎟️ **예매순위**: {event.box_office_rank}위\n")
        lines.append(f"- 📅 **공연기간**: {event.start_date} ~ {event.end_date}\n")
        if days_left is not None and 0 < days_left <= CLOSING_NOTICE_DAYS:
            lines.append(f"- ⏰ **마감까지**: {days_left}일 남음\n")
        lines.extend([
            f"- 🏛️ **공연장**: {event.facility or NO_INFO}\n",
            f"- 🎭 **장르**: {event.genre_name or NO_INFO}\n",
            f"- 📍 **지역**: {event.area or NO_INFO}\n",
            f"- 🔗 **공연ID**: `{event.id}`\n",
            "\n---\n\n",
        ])
        return "".join(lines)

    def format_detail(self, detail: Optional[PerformanceDetail]) -> str:
        """공연 상세 정보"""
        if detail is None:
            return "# ❌ 공연 정보를 찾을 수 없습니다.\n"

        lines = [f"# 🎭 {detail.name or '공연 상세정보'}\n\n"]
        if detail.poster:
            lines.append(f"![공연 포스터]({detail.poster})\n\n")

        lines.extend([
            "## 📋 기본 정보\n\n",
            f"- 🎭 **장르**: {detail.genre_name or NO_INFO}\n",
            f"- 📅 **공연기간**: {detail.start_date} ~ {detail.end_date}\n",
            f"- 🏛️ **공연장**: {detail.facility or NO_INFO}\n",
            f"- ⏱️ **공연시간**: {detail.runtime or NO_INFO}\n",
            f"- 🔞 **관람연령**: {detail.age or NO_INFO}\n",
        ])
        if detail.state:
            lines.append(f"- {state_emoji(detail.state)} **공연상태**: {detail.state}\n")

        lines.append("\n## 💰 관람료\n\n")
        if detail.prices:
            lines.extend(f"- {price}\n" for price in detail.prices)
        else:
            lines.append(f"{NO_INFO}\n")

        if detail.cast:
            lines.append(f"\n## 🎬 출연진\n\n{detail.cast}\n")

        if len(detail.synopsis) > SYNOPSIS_MIN_LENGTH:
            synopsis = clean_html(detail.synopsis)
            suffix = "..." if len(synopsis) > SYNOPSIS_MAX_LENGTH else ""
            lines.append(f"\n## 📖 시놉시스\n\n{synopsis[:SYNOPSIS_MAX_LENGTH]}{suffix}\n")

        if detail.schedule_guidance:
            lines.append(f"\n## 📅 공연 시간 안내\n\n{detail.schedule_guidance}\n")

        lines.append("\n## 🔗 예매 정보\n\n")
        links = [link for link in detail.booking_links if link.name and link.url]
        if links:
            lines.extend(f"- [{link.name}]({link.url})\n" for link in links)
        else:
            lines.append("예매 링크 정보가 없습니다.\n")

        lines.append(f"\n---\n\n> 공연 ID: `{detail.id}`\n")
        return truncate_if_needed("".join(lines), self.max_size)

    def format_genre_list(self, genres: Iterable[Tuple[str, str]]) -> str:
        lines = ["# 🎭 공연 장르 목록\n\n"]
        lines.extend(f"- **{code}**: {name}\n" for code, name in genres)
        lines.append("\n> 장르 코드를 사용하여 원하는 공연을 검색할 수 있습니다.\n")
        return truncate_if_needed("".join(lines), self.max_size)
