import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from config.settings import ApiSettings, SearchSettings, Settings


class TestSettingsClamping(unittest.TestCase):
    def test_api_bounds(self):
        api = ApiSettings(timeout=0, max_retries=99, requests_per_minute=10, burst_limit=50)

        self.assertEqual(api.timeout, 15)
        self.assertEqual(api.max_retries, 10)
        self.assertEqual(api.burst_limit, 10)

    def test_base_url_trailing_slash(self):
        api = ApiSettings(base_url="http://example.com/openApi/restful/")
        self.assertEqual(api.base_url, "http://example.com/openApi/restful")

    def test_search_bounds(self):
        search = SearchSettings(fanout_workers=0, result_cap=1000, level4_genre_cap=0, free_window_days=999)

        self.assertEqual(search.fanout_workers, 1)
        self.assertEqual(search.result_cap, 100)
        self.assertEqual(search.level4_genre_cap, 1)
        self.assertEqual(search.free_window_days, 365)


class TestSettingsPersistence(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "settings.json"

    def tearDown(self):
        self._tmp.cleanup()

    @patch.dict(os.environ, {}, clear=True)
    def test_save_excludes_api_key(self):
        settings = Settings(api=ApiSettings(api_key="secret"), search=SearchSettings(fanout_workers=2))
        settings.save(self.path)

        data = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertNotIn("api_key", data["api"])

        loaded = Settings.load(self.path)
        self.assertEqual(loaded.search.fanout_workers, 2)
        self.assertFalse(loaded.api.has_api_key)

    @patch.dict(os.environ, {}, clear=True)
    def test_missing_file_uses_defaults(self):
        settings = Settings.load(self.path)
        self.assertEqual(settings.search.fanout_workers, 4)

    @patch.dict(os.environ, {}, clear=True)
    def test_broken_file_uses_defaults(self):
        self.path.write_text("{not json", encoding="utf-8")

        settings = Settings.load(self.path)

        self.assertEqual(settings.api.timeout, 15)

    def test_env_overrides(self):
        env = {
            "KOPIS_API_KEY": " key-from-env ",
            "KOPIS_TIMEOUT": "30",
            "KOPIS_FANOUT_WORKERS": "64",
            "KOPIS_LOG_LEVEL": "DEBUG",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings.load(self.path)

        self.assertEqual(settings.api.api_key, "key-from-env")
        self.assertEqual(settings.api.timeout, 30)
        self.assertEqual(settings.search.fanout_workers, 16)
        self.assertEqual(settings.logging.level, "DEBUG")

    def test_invalid_env_value_ignored(self):
        with patch.dict(os.environ, {"KOPIS_TIMEOUT": "soon"}, clear=True):
            settings = Settings.load(self.path)

        self.assertEqual(settings.api.timeout, 15)


if __name__ == "__main__":
    unittest.main()
