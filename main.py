#!/usr/bin/env python3
"""
KOPIS 스마트 공연 검색기
메인 실행 파일

사용법:
    python main.py genres
    python main.py detail PF123456
    python main.py search by-location --genre GGGA --start 20250101 --end 20250107 --sido 11
    python main.py search free-events --genre AAAA --limit 5
    python main.py search trending --limit 10
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from __version__ import get_full_name
from config.settings import Settings
from core.formatter import ResultFormatter
from core.search_service import SmartSearchService
from kopis.kopis_client import KopisClient
from data.kopis_codes import GENRE_EXAMPLES, SIDO_EXAMPLES
from models.search_params import SearchMode
from utils.exceptions import KopisSearchError, InvalidParamsError
from utils.logging import setup_logging, get_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kopis-search", description=get_full_name())
    parser.add_argument("--config", type=Path, default=None, help="설정 파일 경로 (JSON)")
    parser.add_argument("--log-level", default=None, help="로그 레벨 (DEBUG, INFO, ...)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("genres", help="공연 장르 코드 목록")

    detail = subparsers.add_parser("detail", help="공연 상세 조회")
    detail.add_argument("event_id", help="공연 ID (예: PF123456)")

    search = subparsers.add_parser("search", help="스마트 공연 검색")
    search.add_argument("mode", choices=[mode.value for mode in SearchMode])
    search.add_argument("--genre", dest="genreCode", help=f"장르 코드: {GENRE_EXAMPLES}")
    search.add_argument("--start", dest="startDate", help="시작일 YYYYMMDD")
    search.add_argument("--end", dest="endDate", help="종료일 YYYYMMDD")
    search.add_argument("--sido", dest="sidoCode", help=f"시/도 코드 (2자리): {SIDO_EXAMPLES} ...")
    search.add_argument("--gugun", dest="gugunCode", help="구/군 코드 (4자리)")
    search.add_argument("--limit", type=int, help="최소 결과 개수 (기본 3)")

    return parser


def run(args: argparse.Namespace, settings: Settings) -> str:
    """명령 실행 후 출력할 마크다운 반환"""
    formatter = ResultFormatter()

    if args.command == "genres":
        return formatter.format_genre_list(SmartSearchService.genre_list())

    with KopisClient(settings) as client:
        service = SmartSearchService(client, settings)

        if args.command == "detail":
            return formatter.format_detail(service.get_event_detail(args.event_id))

        params = {
            key: getattr(args, key)
            for key in ("genreCode", "startDate", "endDate", "sidoCode", "gugunCode", "limit")
            if getattr(args, key) is not None
        }
        result = service.search(args.mode, params)
        return formatter.format_result(result)


def main(argv: Optional[List[str]] = None) -> int:
    """메인 함수"""
    args = build_parser().parse_args(argv)

    settings = Settings.load(args.config)
    if args.log_level:
        settings.logging.level = args.log_level

    setup_logging(
        level=settings.logging.level,
        file_enabled=settings.logging.file_enabled,
        max_file_size_mb=settings.logging.max_file_size_mb,
        backup_count=settings.logging.backup_count,
    )
    logger = get_logger("main")

    try:
        output = run(args, settings)
    except InvalidParamsError as e:
        print(f"❌ 잘못된 요청: {e.message}", file=sys.stderr)
        return 2
    except KopisSearchError as e:
        logger.error(f"명령 실패: {e.message}")
        print(f"❌ {e.message}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
