"""Tests for confetti bursts and the blessing pig."""

import random

from src.services.celebration import (
    BLESSING_PALETTE,
    BlessingTracker,
    Burst,
    blessing_burst,
    completion_burst,
    money_shower,
)


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class TestBurst:
    def test_options_include_only_set_fields(self):
        options = Burst(particle_count=10, spread=45, origin_x=0.2, origin_y=0.3).to_options()
        assert options["particleCount"] == 10
        assert options["origin"] == {"x": 0.2, "y": 0.3}
        assert "angle" not in options
        assert "gravity" not in options

    def test_completion_burst(self):
        (burst,) = completion_burst()
        assert burst.particle_count == 200
        assert burst.spread == 100
        assert burst.origin_y == 0.6

    def test_blessing_burst(self):
        (burst,) = blessing_burst()
        assert burst.particle_count == 100
        assert (burst.origin_x, burst.origin_y) == (0.5, 0.85)
        assert burst.colors == BLESSING_PALETTE


class TestMoneyShower:
    def test_pulses_every_50ms_for_3_seconds(self):
        bursts = money_shower(rng=random.Random(3))
        delays = [b.delay_ms for b in bursts]
        assert delays[0] == 50
        assert delays[-1] < 3000
        assert all(b - a == 50 for a, b in zip(delays, delays[1:]))

    def test_randomized_within_ranges(self):
        for burst in money_shower(rng=random.Random(5)):
            assert 55 <= burst.angle <= 125
            assert 50 <= burst.spread <= 70
            assert 0.1 <= burst.origin_x <= 0.9
            assert burst.origin_y == 0
            options = burst.to_options()
            assert options["shapes"] == ["circle"]
            assert options["gravity"] == 1.2
            assert options["scalar"] == 1.2

    def test_custom_duration(self):
        assert len(money_shower(duration_ms=500, interval_ms=100)) == 4


class TestBlessingTracker:
    def test_single_press_does_nothing(self):
        tracker = BlessingTracker(clock=FakeClock())
        assert tracker.press() is None
        assert tracker.count == 0
        assert not tracker.overlay_visible()

    def test_slow_presses_are_not_a_double_click(self):
        clock = FakeClock()
        tracker = BlessingTracker(double_click_window=0.6, clock=clock)
        tracker.press()
        clock.advance(1.0)
        assert tracker.press() is None
        assert tracker.count == 0

    def test_two_double_clicks_in_quick_succession(self):
        clock = FakeClock()
        tracker = BlessingTracker(blessing_duration=2.5, double_click_window=0.6, clock=clock)

        fired = []
        for _ in range(2):
            tracker.press()
            clock.advance(0.2)
            fired.append(tracker.press())
            clock.advance(0.3)

        assert tracker.count == 2
        assert all(bursts == blessing_burst() for bursts in fired)
        assert tracker.overlay_visible()

        clock.advance(2.5)
        assert not tracker.overlay_visible()

    def test_overlay_timer_restarts_on_each_blessing(self):
        clock = FakeClock()
        tracker = BlessingTracker(blessing_duration=2.5, clock=clock)
        tracker.double_click()
        clock.advance(2.0)
        tracker.double_click()
        clock.advance(2.0)
        assert tracker.overlay_visible()
