import unittest
from datetime import date

from config.settings import Settings
from core.event_source import EventSource, box_office_score, status_popularity
from models.performance import BoxOfficeEntry, PerformanceDetail, PerformanceItem
from models.search_params import SearchMode
from utils.exceptions import EventNotFoundError, KopisClientError

TODAY = date(2025, 1, 1)


class RecordingClient:
    def __init__(self, events=(), details=None, ranking=(), ranking_error=None):
        self.events = list(events)
        self.details = details or {}
        self.ranking = list(ranking)
        self.ranking_error = ranking_error
        self.list_calls = []
        self.detail_calls = []

    def list_events(self, genre_code, start_date, end_date, region_code=None, result_cap=50):
        self.list_calls.append(
            {
                "genre": genre_code,
                "start": start_date,
                "end": end_date,
                "region": region_code,
                "cap": result_cap,
            }
        )
        return list(self.events)

    def get_event_detail(self, event_id):
        self.detail_calls.append(event_id)
        if event_id not in self.details:
            raise EventNotFoundError(event_id)
        return self.details[event_id]

    def get_box_office_ranking(self, genre_code=None):
        if self.ranking_error:
            raise self.ranking_error
        return list(self.ranking)


class TestFetchByLocation(unittest.TestCase):
    def test_passes_filters_through(self):
        client = RecordingClient(events=[PerformanceItem(id="PF1", name="a")])
        source = EventSource(client, Settings(), TODAY)

        events = source.fetch(SearchMode.BY_LOCATION, "GGGA", "20250105", "20250110", "1168", 20)

        self.assertEqual([e.id for e in events], ["PF1"])
        self.assertEqual(
            client.list_calls,
            [{"genre": "GGGA", "start": "20250105", "end": "20250110", "region": "1168", "cap": 20}],
        )


class TestFetchFree(unittest.TestCase):
    def test_uses_fixed_window_and_ignores_dates(self):
        client = RecordingClient()
        source = EventSource(client, Settings(), TODAY)

        source.fetch(SearchMode.FREE_EVENTS, "AAAA", "20250301", "20250331", "11", 15)

        call = client.list_calls[0]
        self.assertEqual((call["start"], call["end"]), ("20250101", "20250131"))
        self.assertEqual(call["region"], "11")
        self.assertEqual(call["cap"], 15)

    def test_free_first_then_cheapest(self):
        events = [
            PerformanceItem(id="P30", name="a", price_guidance="전석 30,000원"),
            PerformanceItem(id="FREE", name="b", price_guidance="무료"),
            PerformanceItem(id="P5", name="c", price_guidance="전석 5,000원"),
            PerformanceItem(id="UNKNOWN", name="d", price_guidance="현장 문의"),
        ]
        source = EventSource(RecordingClient(events=events), Settings(), TODAY)

        result = source.fetch_free("AAAA", None, 10)

        self.assertEqual([e.id for e in result], ["FREE", "P5", "P30", "UNKNOWN"])

    def test_missing_price_filled_from_detail(self):
        events = [
            PerformanceItem(id="PF1", name="a"),
            PerformanceItem(id="PF2", name="b"),
        ]
        details = {"PF1": PerformanceDetail(id="PF1", name="a", price_guidance="무료")}
        client = RecordingClient(events=events, details=details)
        source = EventSource(client, Settings(), TODAY)

        result = source.fetch_free(None, None, 10)

        self.assertEqual(client.detail_calls, ["PF1", "PF2"])
        self.assertEqual(result[0].id, "PF1")
        self.assertTrue(result[0].is_free)
        # 상세 조회 실패 시 관람료 없이 유지
        self.assertEqual(result[1].price_guidance, "")

    def test_truncated_to_cap(self):
        events = [PerformanceItem(id=f"PF{i}", name="x", price_guidance="무료") for i in range(5)]
        source = EventSource(RecordingClient(events=events), Settings(), TODAY)

        self.assertEqual(len(source.fetch_free(None, None, 2)), 2)


class TestFetchTrending(unittest.TestCase):
    def test_window_and_active_filter(self):
        events = [
            PerformanceItem(id="RUN", name="a", state="공연중", end_date="2025.12.31"),
            PerformanceItem(id="SOON", name="b", state="공연예정", end_date="2025.12.31"),
            PerformanceItem(id="DONE", name="c", state="공연완료", end_date="2024.12.31"),
        ]
        client = RecordingClient(events=events)
        source = EventSource(client, Settings(), TODAY)

        result = source.fetch(SearchMode.TRENDING, "GGGA", "20250301", "20250331", "11", 10)

        call = client.list_calls[0]
        self.assertEqual((call["start"], call["end"]), ("20241202", "20250101"))
        self.assertIsNone(call["region"])
        self.assertEqual(call["cap"], 100)
        self.assertEqual([e.id for e in result], ["RUN", "SOON"])

    def test_box_office_rank_raises_popularity(self):
        events = [
            PerformanceItem(id="PLAIN", name="a", state="공연중", end_date="2025.12.31"),
            PerformanceItem(id="RANKED", name="b", state="공연예정", end_date="2025.12.31"),
        ]
        ranking = [BoxOfficeEntry(event_id="RANKED", rank=3)]
        source = EventSource(RecordingClient(events=events, ranking=ranking), Settings(), TODAY)

        result = source.fetch_trending(None, 10)

        self.assertEqual([e.id for e in result], ["RANKED", "PLAIN"])
        self.assertEqual(result[0].popularity, 96)
        self.assertEqual(result[0].box_office_rank, 3)
        self.assertEqual(result[1].popularity, 60)
        self.assertIsNone(result[1].box_office_rank)

    def test_ranking_failure_falls_back_to_status(self):
        events = [PerformanceItem(id="PF1", name="a", state="공연중", open_run=True)]
        client = RecordingClient(events=events, ranking_error=KopisClientError("down"))
        source = EventSource(client, Settings(), TODAY)

        result = source.fetch_trending(None, 10)

        self.assertEqual(result[0].popularity, 90)


class TestPopularityHelpers(unittest.TestCase):
    def test_box_office_score(self):
        self.assertEqual(box_office_score(1), 100)
        self.assertEqual(box_office_score(10), 82)
        self.assertEqual(box_office_score(51), 0)
        self.assertEqual(box_office_score(80), 0)

    def test_status_popularity(self):
        closing = PerformanceItem(id="a", name="a", state="공연중", end_date="2025.01.05")
        self.assertEqual(status_popularity(closing, TODAY), 90)

        two_weeks = PerformanceItem(id="b", name="b", state="공연예정", end_date="2025.01.10")
        self.assertEqual(status_popularity(two_weeks, TODAY), 70)

        capped = PerformanceItem(
            id="c", name="c", state="공연중", open_run=True, end_date="2025.01.03"
        )
        self.assertEqual(status_popularity(capped, TODAY), 100)

        ended_today = PerformanceItem(id="d", name="d", state="공연중", end_date="2025.01.01")
        self.assertEqual(status_popularity(ended_today, TODAY), 60)


if __name__ == "__main__":
    unittest.main()
