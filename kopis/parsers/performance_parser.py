"""
KOPIS 공연 응답 파서

/pblprfr 목록, /pblprfr/{id} 상세, /boxoffice 예매 순위 XML을 모델로 변환
"""

from typing import List, Dict
from bs4 import Tag

from models.performance import PerformanceItem, PerformanceDetail, BoxOfficeEntry, BookingLink
from utils.logging import get_logger
from .base_parser import BaseParser

logger = get_logger(__name__)

# 목록 레코드에서 모델 필드로 옮기는 태그
_ITEM_FIELDS: Dict[str, str] = {
    "mt20id": "id",
    "prfnm": "name",
    "prfpdfrom": "start_date",
    "prfpdto": "end_date",
    "fcltynm": "facility",
    "poster": "poster",
    "area": "area",
    "genrenm": "genre_name",
    "prfstate": "state",
    "pcseguidance": "price_guidance",
}


class PerformanceListParser(BaseParser):
    """
    공연 목록 파서 (/pblprfr)

    <dbs><db>...</db></dbs> 구조. 결과가 없으면 빈 <dbs/>가 옵니다.
    """

    ROOT_TAG = "dbs"

    def parse(self, xml: str) -> List[PerformanceItem]:
        soup = self.make_soup(xml)
        items: List[PerformanceItem] = []

        for i, record in enumerate(self.find_records(soup, "db")):
            item = self._parse_record(record)
            if item is None:
                logger.debug(f"Record {i} has no mt20id, skipping")
                continue
            items.append(item)

        logger.debug(f"Parsed {len(items)} performances")
        return items

    def _parse_record(self, record: Tag):
        values = {}
        extra = {}
        for child in record.find_all(recursive=False):
            text = self.get_text_safe(child)
            target = _ITEM_FIELDS.get(child.name)
            if target:
                values[target] = text
            elif child.name != "openrun" and text:
                extra[child.name] = text

        if not values.get("id"):
            return None
        values.setdefault("name", "")

        return PerformanceItem(
            open_run=self.child_text(record, "openrun").upper() == "Y",
            extra=extra,
            **values,
        )


class PerformanceDetailParser(BaseParser):
    """
    공연 상세 파서 (/pblprfr/{id})

    상세가 없으면 빈 <dbs/>가 오므로 parse()는 None을 반환합니다.
    """

    ROOT_TAG = "dbs"

    def parse(self, xml: str):
        soup = self.make_soup(xml)
        records = self.find_records(soup, "db")
        if not records:
            return None

        db = records[0]
        event_id = self.child_text(db, "mt20id")
        if not event_id:
            return None

        return PerformanceDetail(
            id=event_id,
            name=self.child_text(db, "prfnm"),
            start_date=self.child_text(db, "prfpdfrom"),
            end_date=self.child_text(db, "prfpdto"),
            facility=self.child_text(db, "fcltynm"),
            poster=self.child_text(db, "poster"),
            area=self.child_text(db, "area"),
            genre_name=self.child_text(db, "genrenm"),
            open_run=self.child_text(db, "openrun").upper() == "Y",
            state=self.child_text(db, "prfstate"),
            price_guidance=self.child_text(db, "pcseguidance"),
            cast=self.child_text(db, "prfcast"),
            crew=self.child_text(db, "prfcrew"),
            runtime=self.child_text(db, "prfruntime"),
            age=self.child_text(db, "prfage"),
            producer=self.child_text(db, "entrpsnm"),
            synopsis=self.child_text(db, "sty"),
            schedule_guidance=self.child_text(db, "dtguidance"),
            images=tuple(self.child_texts(db, "styurls", "styurl")),
            booking_links=tuple(self._parse_relates(db)),
        )

    def _parse_relates(self, db: Tag) -> List[BookingLink]:
        relates = db.find("relates", recursive=False)
        if relates is None:
            return []

        links = []
        for relate in relates.find_all("relate", recursive=False):
            name = self.child_text(relate, "relatenm")
            url = self.child_text(relate, "relateurl")
            if name and url:
                links.append(BookingLink(name=name, url=url))
        return links


class BoxOfficeParser(BaseParser):
    """
    예매 순위 파서 (/boxoffice)

    <boxofs><boxof>...</boxof></boxofs> 구조
    """

    ROOT_TAG = "boxofs"

    def parse(self, xml: str) -> List[BoxOfficeEntry]:
        soup = self.make_soup(xml)
        entries: List[BoxOfficeEntry] = []

        for record in self.find_records(soup, "boxof"):
            event_id = self.child_text(record, "mt20id")
            rank_text = self.child_text(record, "rnum")
            if not event_id or not rank_text.isdigit():
                logger.debug(f"Invalid box office record skipped: id={event_id!r}, rank={rank_text!r}")
                continue

            entries.append(
                BoxOfficeEntry(
                    event_id=event_id,
                    rank=int(rank_text),
                    name=self.child_text(record, "prfnm"),
                    genre_name=self.child_text(record, "cate"),
                    area=self.child_text(record, "area"),
                    period=self.child_text(record, "prfpd"),
                    facility=self.child_text(record, "prfplcnm"),
                )
            )

        entries.sort(key=lambda entry: entry.rank)
        return entries
