"""
KOPIS 스마트 공연 검색기 버전 정보
"""

__version__ = "2.0.0"
__app_name__ = "KOPIS 스마트 공연 검색기"
__app_name_en__ = "KOPIS Smart Search"
__description__ = "공연예술통합전산망(KOPIS) 공연 목록을 단계별 조건 완화와 우선순위 점수로 검색하는 도구"
__license__ = "MIT"


def get_version() -> str:
    """버전 문자열 반환"""
    return __version__


def get_full_name() -> str:
    """앱 이름 + 버전 반환"""
    return f"{__app_name__} v{__version__}"


def get_user_agent() -> str:
    """HTTP User-Agent 문자열"""
    return f"{__app_name_en__.replace(' ', '')}/{__version__}"
