import unittest

from core.query_analyzer import (
    analyze,
    determine_priorities,
    has_narrow_date_range,
    resolve_min_count,
)
from models.analysis import (
    DEFAULT_PRIORITIES,
    FREE_EVENT_PRIORITIES,
    NARROW_DATE_PRIORITIES,
    TRENDING_PRIORITIES,
    PriorityWeights,
    QueryKeywords,
    SearchPriority,
)
from models.search_params import SearchMode


class TestPriorityAssignment(unittest.TestCase):
    def test_free_events_prioritize_price(self):
        analysis = analyze("free-events", {"genreCode": "AAAA"})

        self.assertEqual(analysis.priorities, FREE_EVENT_PRIORITIES)
        self.assertEqual(analysis.priorities.first, SearchPriority.PRICE)
        self.assertTrue(analysis.keywords.is_free)
        self.assertFalse(analysis.keywords.is_trending)

    def test_trending_prioritizes_popularity(self):
        analysis = analyze("trending", {})

        self.assertEqual(analysis.priorities, TRENDING_PRIORITIES)
        self.assertEqual(analysis.priorities.first, SearchPriority.POPULARITY)
        self.assertEqual(analysis.priorities.second, SearchPriority.COUNT)

    def test_five_day_span_prioritizes_date(self):
        analysis = analyze(
            "by-location",
            {"genreCode": "GGGA", "startDate": "20250101", "endDate": "20250106"},
        )

        self.assertTrue(analysis.keywords.has_date_keyword)
        self.assertEqual(analysis.priorities.first, SearchPriority.DATE)
        self.assertEqual(analysis.priorities, NARROW_DATE_PRIORITIES)

    def test_long_span_uses_default(self):
        analysis = analyze(
            "by-location",
            {"genreCode": "GGGA", "startDate": "20250101", "endDate": "20250131"},
        )

        self.assertFalse(analysis.keywords.has_date_keyword)
        self.assertEqual(analysis.priorities, DEFAULT_PRIORITIES)
        self.assertEqual(analysis.priorities.second, SearchPriority.LOCATION)

    def test_free_wins_over_narrow_dates(self):
        analysis = analyze(
            SearchMode.FREE_EVENTS,
            {"genreCode": "AAAA", "startDate": "20250101", "endDate": "20250102"},
        )

        self.assertTrue(analysis.keywords.has_date_keyword)
        self.assertEqual(analysis.priorities, FREE_EVENT_PRIORITIES)

    def test_tool_name_alias(self):
        analysis = analyze("get_trending_performances", {})
        self.assertEqual(analysis.priorities, TRENDING_PRIORITIES)

    def test_rule_order(self):
        both = QueryKeywords(is_free=True, is_trending=True, has_date_keyword=True)
        self.assertEqual(determine_priorities(both), FREE_EVENT_PRIORITIES)

        trending = QueryKeywords(is_trending=True, has_date_keyword=True)
        self.assertEqual(determine_priorities(trending), TRENDING_PRIORITIES)


class TestNarrowDateRange(unittest.TestCase):
    def test_seven_days_is_narrow(self):
        self.assertTrue(has_narrow_date_range({"startDate": "20250101", "endDate": "20250108"}))

    def test_eight_days_is_not_narrow(self):
        self.assertFalse(has_narrow_date_range({"startDate": "20250101", "endDate": "20250109"}))

    def test_dotted_dates(self):
        self.assertTrue(has_narrow_date_range({"start_date": "2025.01.01", "end_date": "2025.01.03"}))

    def test_missing_or_invalid_dates(self):
        self.assertFalse(has_narrow_date_range({"startDate": "20250101"}))
        self.assertFalse(has_narrow_date_range({"startDate": "2025-13-01", "endDate": "20250102"}))
        self.assertFalse(has_narrow_date_range({"startDate": "abc", "endDate": "def"}))


class TestMinCount(unittest.TestCase):
    def test_default_is_three(self):
        self.assertEqual(resolve_min_count(None), 3)
        self.assertEqual(analyze("trending", {}).min_count, 3)

    def test_positive_limit(self):
        self.assertEqual(resolve_min_count(7), 7)
        self.assertEqual(resolve_min_count("5"), 5)

    def test_non_positive_or_invalid_limit(self):
        self.assertEqual(resolve_min_count(0), 3)
        self.assertEqual(resolve_min_count(-2), 3)
        self.assertEqual(resolve_min_count("many"), 3)
        self.assertEqual(resolve_min_count(True), 3)
        self.assertEqual(resolve_min_count(float("inf")), 3)


class TestAnalyzeIsTotal(unittest.TestCase):
    def test_none_params(self):
        analysis = analyze("by-location", None)

        self.assertEqual(analysis.priorities, DEFAULT_PRIORITIES)
        self.assertIsNone(analysis.parsed_params.genre_code)
        self.assertEqual(analysis.min_count, 3)

    def test_unknown_mode(self):
        analysis = analyze("nonsense", {"genreCode": "AAAA"})
        self.assertEqual(analysis.priorities, DEFAULT_PRIORITIES)

    def test_non_mapping_params(self):
        analysis = analyze("free-events", ["not", "a", "mapping"])
        self.assertEqual(analysis.priorities, FREE_EVENT_PRIORITIES)

    def test_parameters_copied_verbatim(self):
        analysis = analyze(
            "by-location",
            {
                "genreCode": "GGGA",
                "startDate": "20250101",
                "endDate": "20250131",
                "sidoCode": "11",
                "gugunCode": "1168",
                "limit": 4,
            },
        )
        parsed = analysis.parsed_params

        self.assertEqual(parsed.genre_code, "GGGA")
        self.assertEqual(parsed.start_date, "20250101")
        self.assertEqual(parsed.end_date, "20250131")
        self.assertEqual(parsed.sido_code, "11")
        self.assertEqual(parsed.gugun_code, "1168")
        self.assertEqual(parsed.min_count, 4)
        self.assertEqual(parsed.target_location, "1168")
        self.assertEqual(parsed.target_date, ("20250101", "20250131"))
        self.assertTrue(analysis.keywords.has_count_keyword)


class TestPriorityWeights(unittest.TestCase):
    def test_missing_fourth_goes_to_count(self):
        weights = PriorityWeights(
            first=SearchPriority.PRICE,
            second=SearchPriority.DATE,
            third=SearchPriority.GENRE,
        )

        self.assertEqual(weights.slots()[3], (SearchPriority.COUNT, 0.1))
        self.assertAlmostEqual(weights.weight_of(SearchPriority.COUNT), 0.1)
        self.assertEqual(weights.weight_of(SearchPriority.POPULARITY), 0)

    def test_duplicate_priorities_rejected(self):
        with self.assertRaises(ValueError):
            PriorityWeights(
                first=SearchPriority.DATE,
                second=SearchPriority.DATE,
                third=SearchPriority.GENRE,
            )

    def test_weights_sum_to_one(self):
        for weights in (
            FREE_EVENT_PRIORITIES,
            TRENDING_PRIORITIES,
            NARROW_DATE_PRIORITIES,
            DEFAULT_PRIORITIES,
        ):
            self.assertAlmostEqual(sum(weight for _, weight in weights.slots()), 1.0)


if __name__ == "__main__":
    unittest.main()
