import unittest

from core.score_calculator import (
    ScoreCalculator,
    date_score,
    dimension_score,
    genre_score,
    location_score,
    popularity_score,
    price_score,
    weighted_total,
)
from models.analysis import (
    DEFAULT_PRIORITIES,
    FREE_EVENT_PRIORITIES,
    TRENDING_PRIORITIES,
    SearchPriority,
)
from models.performance import PerformanceItem
from models.search_result import ScoreBreakdown, ScoreCriteria


def make_event(event_id="PF1", **kwargs):
    kwargs.setdefault("name", f"공연 {event_id}")
    return PerformanceItem(id=event_id, **kwargs)


class TestPriceScore(unittest.TestCase):
    def test_free_markers(self):
        self.assertEqual(price_score(make_event(price_guidance="무료")), 100)
        self.assertEqual(price_score(make_event(price_guidance="전석 무료 (사전예약)")), 100)
        self.assertEqual(price_score(make_event(price_guidance="FREE")), 100)
        self.assertEqual(price_score(make_event(price_guidance="0원")), 100)
        self.assertEqual(price_score(make_event(price_guidance="0")), 100)

    def test_price_bands(self):
        cases = [
            ("전석 5,000원", 80),
            ("R석 10000원", 60),
            ("S석 20,000원, R석 30,000원", 40),
            ("전석 50,000원", 20),
            ("VIP석 150,000원", 10),
        ]
        for text, expected in cases:
            with self.subTest(text=text):
                self.assertEqual(price_score(make_event(price_guidance=text)), expected)

    def test_minimum_token_is_used(self):
        event = make_event(price_guidance="VIP석 120,000원, R석 90,000원, 학생 8,000원")
        self.assertEqual(price_score(event), 60)

    def test_no_numeric_token(self):
        self.assertEqual(price_score(make_event(price_guidance="")), 0)
        self.assertEqual(price_score(make_event(price_guidance="현장 문의")), 0)


class TestDateScore(unittest.TestCase):
    target = ("20250110", "20250120")

    def test_no_target_is_neutral(self):
        event = make_event(start_date="2025.01.01", end_date="2025.01.02")
        self.assertEqual(date_score(event, None), 50)

    def test_contained(self):
        event = make_event(start_date="2025.01.12", end_date="2025.01.15")
        self.assertEqual(date_score(event, self.target), 100)

    def test_overlap(self):
        event = make_event(start_date="2025.01.01", end_date="2025.01.11")
        self.assertEqual(date_score(event, self.target), 70)

    def test_distance_bands(self):
        cases = [
            ("2025.01.03", "2025.01.05", 50),  # 7일 전
            ("2025.01.22", "2025.01.30", 30),  # 12일 후
            ("2024.12.27", "2025.01.01", 30),  # 14일 전
            ("2025.02.05", "2025.02.10", 10),  # 26일 후
            ("2025.03.01", "2025.03.10", 0),
        ]
        for start, end, expected in cases:
            with self.subTest(start=start):
                event = make_event(start_date=start, end_date=end)
                self.assertEqual(date_score(event, self.target), expected)

    def test_unparseable_event_dates(self):
        event = make_event(start_date="미정", end_date="")
        self.assertEqual(date_score(event, self.target), 0)


class TestGenreScore(unittest.TestCase):
    def test_no_target_is_neutral(self):
        self.assertEqual(genre_score(make_event(genre_name="연극"), None), 50)

    def test_event_without_genre(self):
        self.assertEqual(genre_score(make_event(genre_name=""), "AAAA"), 0)

    def test_exact_match(self):
        self.assertEqual(genre_score(make_event(genre_name="뮤지컬"), "GGGA"), 100)

    def test_substring_match(self):
        self.assertEqual(genre_score(make_event(genre_name="서양음악(클래식)"), "CCCA"), 100)
        self.assertEqual(genre_score(make_event(genre_name="클래식"), "CCCA"), 90)

    def test_similar_pair(self):
        self.assertEqual(genre_score(make_event(genre_name="연극"), "GGGA"), 60)
        self.assertEqual(genre_score(make_event(genre_name="서커스/마술"), "EEEA"), 60)

    def test_unrelated(self):
        self.assertEqual(genre_score(make_event(genre_name="대중음악"), "AAAA"), 0)


class TestLocationScore(unittest.TestCase):
    def test_no_target_is_neutral(self):
        self.assertEqual(location_score(make_event(area="서울특별시"), None), 50)

    def test_district_match(self):
        event = make_event(area="서울특별시 강남구")
        self.assertEqual(location_score(event, "1168"), 100)

    def test_district_falls_back_to_province(self):
        event = make_event(area="서울특별시")
        self.assertEqual(location_score(event, "1168"), 60)

    def test_province_full_and_short_names(self):
        self.assertEqual(location_score(make_event(area="서울특별시"), "11"), 60)
        self.assertEqual(location_score(make_event(area="서울"), "11"), 60)

    def test_other_province(self):
        self.assertEqual(location_score(make_event(area="부산광역시"), "11"), 0)

    def test_unknown_codes_never_match(self):
        self.assertEqual(location_score(make_event(area="어딘가"), "99"), 0)
        self.assertEqual(location_score(make_event(area=""), "9999"), 0)


class TestPopularityScore(unittest.TestCase):
    def test_default(self):
        self.assertEqual(popularity_score(make_event()), 50)

    def test_supplied_value(self):
        self.assertEqual(popularity_score(make_event(popularity=87.5)), 87.5)

    def test_clamped(self):
        self.assertEqual(popularity_score(make_event(popularity=180)), 100)
        self.assertEqual(popularity_score(make_event(popularity=-5)), 0)


class TestWeightedTotal(unittest.TestCase):
    def setUp(self):
        self.breakdown = ScoreBreakdown(price=100, date=70, genre=60, location=0, popularity=90)

    def test_count_contributes_nothing(self):
        self.assertEqual(dimension_score(self.breakdown, SearchPriority.COUNT), 0)

    def test_free_event_weights(self):
        # 가격 40 + 날짜 30 + 장르 20 + 위치 10
        expected = 0.4 * 100 + 0.3 * 70 + 0.2 * 60 + 0.1 * 0
        self.assertAlmostEqual(weighted_total(self.breakdown, FREE_EVENT_PRIORITIES), expected)

    def test_trending_weights(self):
        # 인기도 40 + 개수 30(0) + 장르 20 + 날짜 10
        expected = 0.4 * 90 + 0.2 * 60 + 0.1 * 70
        self.assertAlmostEqual(weighted_total(self.breakdown, TRENDING_PRIORITIES), expected)

    def test_unnamed_dimension_ignored(self):
        # 기본 가중치에는 가격이 없음
        cheap = ScoreBreakdown(price=100, date=0, genre=0, location=0, popularity=0)
        self.assertEqual(weighted_total(cheap, DEFAULT_PRIORITIES), 0)


class TestScoreCalculator(unittest.TestCase):
    def setUp(self):
        self.calculator = ScoreCalculator()
        self.criteria = ScoreCriteria(
            target_date=("20250110", "20250120"),
            target_location="11",
            target_genre="GGGA",
        )
        self.events = [
            make_event("PF1", genre_name="연극", area="부산광역시",
                       start_date="2025.03.01", end_date="2025.03.02"),
            make_event("PF2", genre_name="뮤지컬", area="서울특별시",
                       start_date="2025.01.11", end_date="2025.01.12"),
            make_event("PF3", genre_name="뮤지컬", area="서울특별시",
                       start_date="2025.01.01", end_date="2025.01.15"),
            make_event("PF4", genre_name="뮤지컬", area="서울특별시",
                       start_date="2025.01.11", end_date="2025.01.12"),
        ]

    def test_sorted_descending(self):
        scored = self.calculator.score_and_sort(self.events, DEFAULT_PRIORITIES, self.criteria)
        totals = [score.total for score in scored]

        self.assertEqual(totals, sorted(totals, reverse=True))
        self.assertEqual(scored[-1].event.id, "PF1")

    def test_ties_keep_input_order(self):
        scored = self.calculator.score_and_sort(self.events, DEFAULT_PRIORITIES, self.criteria)
        ids = [score.event.id for score in scored]

        self.assertEqual(ids[:2], ["PF2", "PF4"])

    def test_scores_within_bounds(self):
        events = self.events + [
            make_event("PF5", price_guidance="무료", popularity=250),
            make_event("PF6", price_guidance="VIP 300,000원", popularity=-10),
        ]
        for priorities in (DEFAULT_PRIORITIES, FREE_EVENT_PRIORITIES, TRENDING_PRIORITIES):
            for score in self.calculator.score_and_sort(events, priorities, self.criteria):
                for value in score.breakdown.to_dict().values():
                    self.assertGreaterEqual(value, 0)
                    self.assertLessEqual(value, 100)
                self.assertGreaterEqual(score.total, 0)
                self.assertLessEqual(score.total, 100)

    def test_idempotent(self):
        first = self.calculator.score_and_sort(self.events, DEFAULT_PRIORITIES, self.criteria)
        second = self.calculator.score_and_sort(self.events, DEFAULT_PRIORITIES, self.criteria)

        self.assertEqual(first, second)

    def test_empty_input(self):
        self.assertEqual(self.calculator.score_and_sort([], DEFAULT_PRIORITIES, self.criteria), [])


if __name__ == "__main__":
    unittest.main()
