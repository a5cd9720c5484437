"""Unit tests for app.services.throttle.LoginThrottle (sliding window)."""

import unittest

from app.services.throttle import LoginThrottle


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestLoginThrottle(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.throttle = LoginThrottle(max_attempts=3, window_seconds=60, clock=self.clock)

    def test_blocks_after_max_attempts(self) -> None:
        results = [self.throttle.hit("1.2.3.4") for _ in range(4)]
        self.assertEqual(results, [True, True, True, False])

    def test_keys_are_independent(self) -> None:
        for _ in range(3):
            self.throttle.hit("1.2.3.4")
        self.assertTrue(self.throttle.hit("5.6.7.8"))

    def test_window_slides(self) -> None:
        for _ in range(3):
            self.throttle.hit("1.2.3.4")
        self.clock.now += 59
        self.assertFalse(self.throttle.hit("1.2.3.4"))
        self.clock.now += 1
        self.assertTrue(self.throttle.hit("1.2.3.4"))

    def test_expired_keys_are_evicted(self) -> None:
        for i in range(10_000):
            self.throttle.hit(f"10.0.{i // 256}.{i % 256}")
        self.assertEqual(len(self.throttle), 10_000)
        self.clock.now += 3600
        self.assertTrue(self.throttle.hit("192.0.2.1"))
        self.assertEqual(len(self.throttle), 1)

    def test_rotating_keys_do_not_accumulate(self) -> None:
        for i in range(500):
            self.throttle.hit(f"key-{i}")
            self.clock.now += 1
        self.assertLessEqual(len(self.throttle), 2 * 60)

    def test_reset(self) -> None:
        for _ in range(3):
            self.throttle.hit("1.2.3.4")
        self.throttle.reset("1.2.3.4")
        self.assertTrue(self.throttle.hit("1.2.3.4"))


if __name__ == "__main__":
    unittest.main()
