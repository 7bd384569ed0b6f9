import unittest

from kopis.rate_limiter import NoOpRateLimiter, RateLimiter


class TestRateLimiter(unittest.TestCase):
    def setUp(self):
        # 평균 간격 1초
        self.limiter = RateLimiter(requests_per_minute=60, burst_limit=3)

    def test_burst_limit_clamped(self):
        limiter = RateLimiter(requests_per_minute=5, burst_limit=50)
        self.assertEqual(limiter.burst_limit, 5)

    def test_first_request_passes(self):
        self.assertEqual(self.limiter._calculate_wait_time(100.0), 0.0)

    def test_within_burst(self):
        self.limiter.timestamps.extend([100.0, 100.1])
        self.assertEqual(self.limiter._calculate_wait_time(100.2), 0.0)

    def test_burst_exceeded(self):
        self.limiter.timestamps.extend([100.0, 100.1, 100.2])

        wait = self.limiter._calculate_wait_time(100.5)

        self.assertAlmostEqual(wait, 2.5)

    def test_minute_window(self):
        limiter = RateLimiter(requests_per_minute=2, burst_limit=1)
        limiter.timestamps.extend([20.0, 30.0])

        self.assertAlmostEqual(limiter._calculate_wait_time(65.0), 15.0)

    def test_acquire_and_stats(self):
        limiter = RateLimiter(requests_per_minute=600, burst_limit=5)

        for _ in range(3):
            self.assertTrue(limiter.acquire(timeout=1))

        stats = limiter.get_stats()
        self.assertEqual(stats["total_requests"], 3)
        self.assertEqual(stats["current_window_size"], 3)

        limiter.reset()
        self.assertEqual(limiter.get_stats()["total_requests"], 0)

    def test_acquire_timeout(self):
        self.limiter.timestamps.extend([1e12, 1e12, 1e12])
        self.assertFalse(self.limiter.acquire(timeout=0.01))

    def test_noop(self):
        limiter = NoOpRateLimiter()
        for _ in range(1000):
            self.assertTrue(limiter.acquire())
        self.assertEqual(limiter.get_stats()["total_requests"], 1000)


if __name__ == "__main__":
    unittest.main()
