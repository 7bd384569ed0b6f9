"""
KOPIS 코드 테이블

장르 코드, 시/도 코드, 구/군 코드와 장르 유사도 맵 (읽기 전용 상수)
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

# 장르 코드 -> 장르명 (KOPIS shcate)
GENRE_CODES: Dict[str, str] = {
    "AAAA": "연극",
    "BBBC": "무용(서양/한국무용)",
    "BBBE": "대중무용",
    "CCCA": "서양음악(클래식)",
    "CCCC": "한국음악(국악)",
    "CCCD": "대중음악",
    "EEEA": "복합",
    "EEEB": "서커스/마술",
    "GGGA": "뮤지컬",
}

# 유사 장르 (원래 장르 포함, 앞쪽일수록 가까움)
RELATED_GENRES: Dict[str, Tuple[str, ...]] = {
    "AAAA": ("AAAA", "GGGA"),  # 연극 + 뮤지컬
    "GGGA": ("GGGA", "AAAA"),  # 뮤지컬 + 연극
    "CCCA": ("CCCA", "CCCC"),  # 클래식 + 국악
    "CCCC": ("CCCC", "CCCA"),  # 국악 + 클래식
    "BBBC": ("BBBC", "BBBE"),  # 무용 + 대중무용
    "BBBE": ("BBBE", "BBBC"),  # 대중무용 + 무용
    "CCCD": ("CCCD",),  # 대중음악 (단독)
    "EEEA": ("EEEA", "EEEB"),  # 복합 + 서커스
    "EEEB": ("EEEB", "EEEA"),  # 서커스 + 복합
}

# 점수 계산용 유사 장르 쌍 (장르명 기준)
SIMILAR_GENRE_PAIRS: Tuple[Tuple[str, str], ...] = (
    ("연극", "뮤지컬"),
    ("서양음악(클래식)", "한국음악(국악)"),
    ("무용(서양/한국무용)", "대중무용"),
    ("복합", "서커스/마술"),
)

# 시/도 코드 -> (정식 명칭, 약칭)
SIDO_CODES: Dict[str, Tuple[str, str]] = {
    "11": ("서울특별시", "서울"),
    "26": ("부산광역시", "부산"),
    "27": ("대구광역시", "대구"),
    "28": ("인천광역시", "인천"),
    "29": ("광주광역시", "광주"),
    "30": ("대전광역시", "대전"),
    "31": ("울산광역시", "울산"),
    "36": ("세종특별자치시", "세종"),
    "41": ("경기도", "경기"),
    "42": ("강원도", "강원"),
    "43": ("충청북도", "충북"),
    "44": ("충청남도", "충남"),
    "45": ("전라북도", "전북"),
    "46": ("전라남도", "전남"),
    "47": ("경상북도", "경북"),
    "48": ("경상남도", "경남"),
    "50": ("제주특별자치도", "제주"),
    "51": ("강원특별자치도", "강원"),
    "52": ("전북특별자치도", "전북"),
}

# 구/군 코드 -> 구/군 명칭
GUGUN_CODES: Dict[str, str] = {
    # 서울
    "1111": "종로구",
    "1114": "중구",
    "1117": "용산구",
    "1120": "성동구",
    "1121": "광진구",
    "1123": "동대문구",
    "1126": "중랑구",
    "1129": "성북구",
    "1130": "강북구",
    "1132": "도봉구",
    "1135": "노원구",
    "1138": "은평구",
    "1141": "서대문구",
    "1144": "마포구",
    "1147": "양천구",
    "1150": "강서구",
    "1153": "구로구",
    "1154": "금천구",
    "1156": "영등포구",
    "1159": "동작구",
    "1162": "관악구",
    "1165": "서초구",
    "1168": "강남구",
    "1171": "송파구",
    "1174": "강동구",
    # 부산
    "2611": "중구",
    "2614": "서구",
    "2617": "동구",
    "2620": "영도구",
    "2623": "부산진구",
    "2626": "동래구",
    "2629": "남구",
    "2632": "북구",
    "2635": "해운대구",
    "2638": "사하구",
    "2641": "금정구",
    "2644": "강서구",
    "2647": "연제구",
    "2650": "수영구",
    "2653": "사상구",
    "2671": "기장군",
    # 경기
    "4111": "수원시",
    "4113": "성남시",
    "4115": "의정부시",
    "4117": "안양시",
    "4119": "부천시",
    "4121": "광명시",
    "4122": "평택시",
    "4127": "안산시",
    "4128": "고양시",
    "4131": "구리시",
    "4136": "남양주시",
    "4146": "용인시",
    "4148": "파주시",
    "4159": "화성시",
}

NATIONWIDE_NAME = "전국"


def get_genre_name(code: Optional[str]) -> str:
    """장르 코드 -> 장르명 (모르는 코드는 그대로 반환)"""
    if not code:
        return ""
    return GENRE_CODES.get(code, code)


def is_known_genre(code: Optional[str]) -> bool:
    return bool(code) and code in GENRE_CODES


def get_genre_list() -> List[Tuple[str, str]]:
    """(코드, 이름) 목록"""
    return list(GENRE_CODES.items())


def get_related_genres(code: str) -> Tuple[str, ...]:
    """
    유사 장르 목록 (원래 장르 포함)

    테이블에 없는 코드는 자기 자신만 반환합니다.
    """
    return RELATED_GENRES.get(code, (code,))


def extract_sido_code(region_code: Optional[str]) -> Optional[str]:
    """시/도 또는 구/군 코드에서 시/도 코드(앞 2자리) 추출"""
    if not region_code:
        return None
    region_code = region_code.strip()
    if len(region_code) < 2:
        return None
    return region_code[:2]


def get_sido_name_full(sido_code: Optional[str]) -> str:
    """시/도 정식 명칭 (코드 없으면 '전국')"""
    if not sido_code:
        return NATIONWIDE_NAME
    names = SIDO_CODES.get(sido_code)
    return names[0] if names else sido_code


def get_sido_name_short(sido_code: Optional[str]) -> str:
    """시/도 약칭 (모르는 코드는 빈 문자열)"""
    if not sido_code:
        return ""
    names = SIDO_CODES.get(sido_code)
    return names[1] if names else ""


def get_sido_names(sido_code: Optional[str]) -> Tuple[str, ...]:
    """지역 텍스트 매칭용 시/도 명칭 (정식, 약칭)"""
    if not sido_code:
        return ()
    return SIDO_CODES.get(sido_code, ())


def get_area_name(code: Optional[str], short: bool = False) -> str:
    """
    지역 코드 -> 표시용 이름

    Args:
        code: 2자리 시/도 또는 4자리 구/군 코드
        short: True면 구/군 이름만 반환 (예: "강남구")

    Returns:
        표시용 이름, 모르는 코드는 빈 문자열 (short) 또는 코드 자체
    """
    if not code:
        return NATIONWIDE_NAME

    if len(code) == 4:
        gugun = GUGUN_CODES.get(code)
        if gugun is None:
            return "" if short else code
        if short:
            return gugun
        return f"{get_sido_name_full(code[:2])} {gugun}"

    if short:
        return get_sido_name_short(code)
    return get_sido_name_full(code)


GENRE_EXAMPLES = ", ".join(f"{code}({name})" for code, name in GENRE_CODES.items())
SIDO_EXAMPLES = ", ".join(f"{code}({names[1]})" for code, names in list(SIDO_CODES.items())[:6])
