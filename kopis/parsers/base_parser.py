"""
파서 베이스 클래스

KOPIS XML 응답 파싱을 위한 공통 인터페이스 및 유틸리티
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Any
from bs4 import BeautifulSoup, Tag

from utils.logging import get_logger
from utils.exceptions import ParsingError

logger = get_logger(__name__)


class BaseParser(ABC):
    """
    XML 파서 베이스 클래스

    루트/레코드 태그 탐색과 안전한 텍스트 추출을 제공합니다.
    """

    # 응답 루트 태그 (하위 클래스에서 지정)
    ROOT_TAG = "dbs"

    def make_soup(self, xml: str) -> BeautifulSoup:
        """
        XML 문자열을 BeautifulSoup 객체로 변환

        Raises:
            ParsingError: 빈 응답 또는 루트 태그 없음
        """
        if not xml or not xml.strip():
            raise ParsingError("빈 응답을 받았습니다")

        # html.parser는 <area>를 빈 요소로 취급하므로 XML 파서 사용
        soup = BeautifulSoup(xml, "xml")
        if soup.find(self.ROOT_TAG) is None:
            error = self.get_text_safe(soup.find("errmsg"))
            if error:
                raise ParsingError(f"KOPIS 오류 응답: {error}", tag=self.ROOT_TAG)
            raise ParsingError("응답 루트 태그를 찾을 수 없습니다", tag=self.ROOT_TAG)

        return soup

    def find_records(self, soup: BeautifulSoup, record_tag: str) -> List[Tag]:
        """
        루트 바로 아래의 레코드 요소 목록

        Args:
            soup: BeautifulSoup 객체
            record_tag: 레코드 태그 이름 (예: "db")

        Returns:
            레코드 요소 목록 (없으면 빈 리스트)
        """
        root = soup.find(self.ROOT_TAG)
        if root is None:
            return []
        records = root.find_all(record_tag, recursive=False)
        logger.debug(f"Found {len(records)} <{record_tag}> records")
        return records

    def get_text_safe(
        self,
        element: Optional[Tag],
        default: str = "",
        strip: bool = True,
    ) -> str:
        """
        안전하게 텍스트 추출

        Args:
            element: 요소 (None 가능)
            default: 기본값
            strip: 공백 제거 여부

        Returns:
            추출된 텍스트
        """
        if element is None:
            return default

        text = element.get_text(strip=strip)
        return text if text else default

    def child_text(self, element: Tag, tag_name: str, default: str = "") -> str:
        """직계 자식 태그의 텍스트"""
        return self.get_text_safe(element.find(tag_name, recursive=False), default=default)

    def child_texts(self, element: Tag, container: str, tag_name: str) -> List[str]:
        """
        컨테이너 아래 반복 태그의 텍스트 목록

        예: <styurls><styurl>a</styurl><styurl>b</styurl></styurls>
        """
        parent = element.find(container, recursive=False)
        if parent is None:
            return []
        texts = []
        for child in parent.find_all(tag_name, recursive=False):
            text = self.get_text_safe(child)
            if text:
                texts.append(text)
        return texts

    @abstractmethod
    def parse(self, xml: str) -> Any:
        """
        XML 파싱 (하위 클래스에서 구현)

        Args:
            xml: XML 문자열

        Returns:
            파싱 결과
        """
        pass
