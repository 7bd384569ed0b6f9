"""
애플리케이션 상수 정의
"""

# KOPIS Open API
KOPIS_BASE_URL = "http://www.kopis.or.kr/openApi/restful"
KOPIS_EVENTS_PATH = "/pblprfr"
KOPIS_BOXOFFICE_PATH = "/boxoffice"

# 기본 타임아웃 및 재시도
DEFAULT_TIMEOUT = 15  # 초
DEFAULT_MAX_RETRIES = 3
DEFAULT_BACKOFF_FACTOR = 1.0

# Rate Limiting
DEFAULT_REQUESTS_PER_MINUTE = 120
DEFAULT_BURST_LIMIT = 10

# 스마트 검색
DEFAULT_MIN_COUNT = 3
DEFAULT_FANOUT_WORKERS = 4
DEFAULT_RESULT_CAP = 50  # Level 1~2 요청 행 수
DEFAULT_LEVEL3_RESULT_CAP = 20
DEFAULT_LEVEL4_GENRE_CAP = 10  # Level 4 장르별 요청 행 수
MAX_ROWS_PER_REQUEST = 100
FREE_EVENT_WINDOW_DAYS = 30
TRENDING_WINDOW_DAYS = 30

# 공연 상태
STATE_RUNNING = "공연중"
STATE_UPCOMING = "공연예정"
STATE_FINISHED = "공연완료"
ACTIVE_STATES = (STATE_RUNNING, STATE_UPCOMING)

# 응답 최대 길이 (마크다운)
MAX_RESPONSE_SIZE = 24000

# 로깅 설정
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FILE_SIZE_MB = 10
DEFAULT_LOG_BACKUP_COUNT = 3

# HTTP 헤더
DEFAULT_HEADERS = {
    "Accept": "application/xml,text/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "ko-KR,ko;q=0.9,en;q=0.7",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
}
