"""
애플리케이션 예외 계층 정의

예외 계층 구조:
    KopisSearchError (기본 예외)
    ├── KopisClientError (HTTP 클라이언트, 업스트림 장애)
    │   └── RateLimitError (요청 제한)
    ├── ParsingError (XML 파싱)
    ├── EventNotFoundError (공연 상세 없음)
    ├── ConfigError (설정 관련)
    └── InvalidParamsError (검색 파라미터 오류)
"""

import re
from typing import Optional

# API 키처럼 보이는 긴 16진수 문자열
_SECRET_RE = re.compile(r"[a-f0-9]{32,}", re.IGNORECASE)


def mask_secrets(text: str) -> str:
    """
    메시지 안의 API 키 마스킹

    Example:
        >>> mask_secrets("service=0123456789abcdef0123456789abcdef")
        'service=0123****cdef'
    """
    if not text:
        return text
    return _SECRET_RE.sub(lambda m: f"{m.group(0)[:4]}****{m.group(0)[-4:]}", text)


class KopisSearchError(Exception):
    """
    애플리케이션 기본 예외

    모든 커스텀 예외의 부모 클래스
    """

    def __init__(self, message: str = "알 수 없는 오류가 발생했습니다"):
        self.message = mask_secrets(message)
        super().__init__(self.message)


class KopisClientError(KopisSearchError):
    """
    HTTP 클라이언트 에러

    네트워크 요청 실패, 타임아웃, 서버 오류 등 (업스트림 사용 불가)
    """

    def __init__(
        self,
        message: str = "KOPIS API 요청 중 오류가 발생했습니다",
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        self.status_code = status_code
        self.url = mask_secrets(url) if url else url
        if status_code:
            message = f"{message} (상태 코드: {status_code})"
        if self.url:
            message = f"{message} - URL: {self.url}"
        super().__init__(message)


class RateLimitError(KopisClientError):
    """
    Rate Limit 초과 에러

    KOPIS 요청 제한에 도달했을 때 발생
    """

    def __init__(
        self,
        retry_after: int = 60,
        message: str = "요청 제한에 도달했습니다",
    ):
        self.retry_after = retry_after
        message = f"{message}. {retry_after}초 후에 다시 시도하세요."
        super().__init__(message, status_code=429)


class ParsingError(KopisSearchError):
    """
    XML 파싱 에러

    응답 구조 변경, 예상치 못한 응답 형식 등
    """

    def __init__(
        self,
        message: str = "XML 파싱 중 오류가 발생했습니다",
        tag: Optional[str] = None,
    ):
        self.tag = tag
        if tag:
            message = f"{message} (태그: {tag})"
        super().__init__(message)


class EventNotFoundError(KopisSearchError):
    """공연 상세 정보를 찾을 수 없음"""

    def __init__(self, event_id: str, message: str = "공연 상세 정보를 찾을 수 없습니다"):
        self.event_id = event_id
        super().__init__(f"{message} (공연 ID: {event_id})")


class ConfigError(KopisSearchError):
    """
    설정 관련 에러

    설정 파일 로드 실패, API 키 누락, 잘못된 설정 값 등
    """

    def __init__(
        self,
        message: str = "설정 오류가 발생했습니다",
        config_key: Optional[str] = None,
        config_value: Optional[str] = None,
    ):
        self.config_key = config_key
        self.config_value = config_value
        if config_key:
            message = f"{message} (설정 키: {config_key})"
        if config_value:
            message = f"{message} (값: {config_value})"
        super().__init__(message)


class InvalidParamsError(KopisSearchError):
    """
    검색 파라미터 검증 에러

    필수 필드 누락, 잘못된 날짜 형식 등. 업스트림 호출 전에 발생하며
    '결과 없음'과 구분됩니다.
    """

    def __init__(
        self,
        message: str = "검색 파라미터 검증에 실패했습니다",
        field: Optional[str] = None,
        value: Optional[str] = None,
    ):
        self.field = field
        self.value = value
        if field:
            message = f"{message} (필드: {field})"
        if value:
            message = f"{message} (값: {value})"
        super().__init__(message)
