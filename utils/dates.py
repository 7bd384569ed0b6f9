"""
날짜 유틸리티

KOPIS 날짜 문자열(YYYYMMDD, YYYY.MM.DD) 파싱 및 계산
"""

from __future__ import annotations

import calendar
import re
from datetime import date, timedelta
from typing import Optional

_DATE_KEY_RE = re.compile(r"^\d{8}$")


def to_date_key(text: Optional[str]) -> str:
    """
    날짜 문자열을 YYYYMMDD 키로 변환

    "2025.01.05" -> "20250105", 빈 값은 빈 문자열
    """
    if not text:
        return ""
    return re.sub(r"[.\-/\s]", "", str(text))


def is_date_key(text: Optional[str]) -> bool:
    """YYYYMMDD 형식이고 실제 존재하는 날짜인지 확인"""
    return parse_date_key(text) is not None


def parse_date_key(text: Optional[str]) -> Optional[date]:
    """
    YYYYMMDD (또는 YYYY.MM.DD) 문자열 파싱

    Returns:
        date 또는 None (형식 오류)
    """
    key = to_date_key(text)
    if not _DATE_KEY_RE.match(key):
        return None
    try:
        return date(int(key[0:4]), int(key[4:6]), int(key[6:8]))
    except ValueError:
        return None


def format_date_key(value: date) -> str:
    """date -> YYYYMMDD"""
    return value.strftime("%Y%m%d")


def days_between(start: Optional[str], end: Optional[str]) -> Optional[int]:
    """
    두 날짜 사이의 일수 (end - start)

    Returns:
        일수 또는 None (파싱 실패)
    """
    start_date = parse_date_key(start)
    end_date = parse_date_key(end)
    if start_date is None or end_date is None:
        return None
    return (end_date - start_date).days


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)


def add_months(value: date, months: int) -> date:
    """
    개월 수 더하기

    대상 월에 같은 일자가 없으면 그 달의 마지막 날로 맞춥니다 (1/31 + 1개월 -> 2/28).
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(value.day, last_day))
