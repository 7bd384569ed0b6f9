import unittest

from models.search_params import SearchMode, SearchRequest, get_param
from utils.exceptions import InvalidParamsError


class TestSearchMode(unittest.TestCase):
    def test_values_and_aliases(self):
        self.assertIs(SearchMode.resolve("by-location"), SearchMode.BY_LOCATION)
        self.assertIs(SearchMode.resolve(" Free-Events "), SearchMode.FREE_EVENTS)
        self.assertIs(SearchMode.resolve("search_events_by_location"), SearchMode.BY_LOCATION)
        self.assertIs(SearchMode.resolve("filter_free_events"), SearchMode.FREE_EVENTS)
        self.assertIs(SearchMode.resolve("get_trending_performances"), SearchMode.TRENDING)
        self.assertIs(SearchMode.resolve(SearchMode.TRENDING), SearchMode.TRENDING)

    def test_unknown(self):
        self.assertIsNone(SearchMode.resolve("unknown"))
        self.assertIsNone(SearchMode.resolve(None))
        with self.assertRaises(InvalidParamsError) as ctx:
            SearchMode.parse("unknown")
        self.assertEqual(ctx.exception.field, "mode")

    def test_genre_requirement(self):
        self.assertTrue(SearchMode.BY_LOCATION.requires_genre)
        self.assertTrue(SearchMode.FREE_EVENTS.requires_genre)
        self.assertFalse(SearchMode.TRENDING.requires_genre)


class TestGetParam(unittest.TestCase):
    def test_snake_and_camel_keys(self):
        self.assertEqual(get_param({"genre_code": "AAAA"}, "genre_code"), "AAAA")
        self.assertEqual(get_param({"genreCode": "AAAA"}, "genre_code"), "AAAA")

    def test_blank_is_missing(self):
        self.assertIsNone(get_param({"genreCode": "   "}, "genre_code"))
        self.assertIsNone(get_param(None, "genre_code"))


class TestSearchRequest(unittest.TestCase):
    def test_valid_request(self):
        request = SearchRequest.from_params(
            "by-location",
            {
                "genreCode": "ggga",
                "startDate": "2025.01.01",
                "endDate": "20250131",
                "sidoCode": "11",
                "gugunCode": "1168",
                "limit": "5",
            },
        )

        self.assertIs(request.mode, SearchMode.BY_LOCATION)
        self.assertEqual(request.genre_code, "GGGA")
        self.assertEqual(request.start_date, "20250101")
        self.assertEqual(request.region_code, "1168")
        self.assertEqual(request.limit, 5)
        self.assertEqual(
            request.to_params(),
            {
                "genre_code": "GGGA",
                "start_date": "20250101",
                "end_date": "20250131",
                "sido_code": "11",
                "gugun_code": "1168",
                "limit": 5,
            },
        )

    def test_trending_without_anything(self):
        request = SearchRequest.from_params("trending", None)

        self.assertIsNone(request.genre_code)
        self.assertIsNone(request.region_code)
        self.assertEqual(request.to_params(), {})

    def test_free_events_dates_optional(self):
        request = SearchRequest.from_params("free-events", {"genreCode": "AAAA"})
        self.assertIsNone(request.start_date)

    def test_rejections(self):
        cases = [
            ("by-location", {"startDate": "20250101", "endDate": "20250102"}, "genreCode"),
            ("free-events", {}, "genreCode"),
            ("by-location", {"genreCode": "AAAA", "endDate": "20250102"}, "startDate"),
            ("by-location", {"genreCode": "AAAA", "startDate": "20250101"}, "endDate"),
            ("by-location", {"genreCode": "AAAA", "startDate": "2025011", "endDate": "20250102"}, "startDate"),
            ("by-location", {"genreCode": "AAAA", "startDate": "20250105", "endDate": "20250102"}, "startDate"),
            ("trending", {"sidoCode": "seoul"}, "sidoCode"),
            ("trending", {"gugunCode": "11"}, "gugunCode"),
        ]
        for mode, params, field in cases:
            with self.subTest(params=params):
                with self.assertRaises(InvalidParamsError) as ctx:
                    SearchRequest.from_params(mode, params)
                self.assertEqual(ctx.exception.field, field)

    def test_non_mapping_params(self):
        with self.assertRaises(InvalidParamsError):
            SearchRequest.from_params("trending", ["limit", 3])

    def test_unusable_limit_falls_back_to_default(self):
        for limit in (0, -2, "many", 2.5, True):
            with self.subTest(limit=limit):
                request = SearchRequest.from_params("trending", {"limit": limit})
                self.assertIsNone(request.limit)
                self.assertNotIn("limit", request.to_params())

    def test_large_limit_kept(self):
        request = SearchRequest.from_params("trending", {"limit": 500})
        self.assertEqual(request.limit, 500)

    def test_integral_float_limit(self):
        request = SearchRequest.from_params("trending", {"limit": 4.0})
        self.assertEqual(request.limit, 4)


if __name__ == "__main__":
    unittest.main()
