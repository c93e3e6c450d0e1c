"""Unit tests for the collection scheduler."""

from unittest.mock import patch

import pytest

from budelb.commons.exceptions import KubernetesException
from budelb.metrics_collector.scheduler import CollectionScheduler


class FakeTime:
    """Virtual clock advanced by cycles and sleeps."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []
        self.starts = []

    def clock(self):
        return self.now

    async def sleep(self, delay):
        self.sleeps.append(delay)
        self.now += delay

    def cycle_taking(self, duration):
        async def collect():
            self.starts.append(self.now)
            self.now += duration

        return collect


@pytest.mark.parametrize(
    "elapsed, expected",
    [(0.0, 60.0), (10.0, 50.0), (59.5, 0.5), (60.0, 0.0), (75.0, 0.0)],
)
def test_compute_delay(elapsed, expected):
    scheduler = CollectionScheduler(lambda: None, interval=60)
    assert scheduler.compute_delay(elapsed) == pytest.approx(expected)


@pytest.mark.asyncio
async def test_short_cycles_start_one_period_apart():
    """Test that the cycle duration is compensated in the sleep."""
    fake = FakeTime()
    scheduler = CollectionScheduler(fake.cycle_taking(10.0), interval=60, clock=fake.clock, sleep=fake.sleep)

    await scheduler.run_forever(max_cycles=4)

    assert fake.starts == [0.0, 60.0, 120.0, 180.0]
    assert fake.sleeps == [50.0, 50.0, 50.0]


@pytest.mark.asyncio
async def test_overrunning_cycle_is_followed_immediately():
    """Test that an overrun leads to zero sleep and no catch-up cycles."""
    fake = FakeTime()
    scheduler = CollectionScheduler(fake.cycle_taking(75.0), interval=60, clock=fake.clock, sleep=fake.sleep)

    await scheduler.run_forever(max_cycles=3)

    assert fake.starts == [0.0, 75.0, 150.0]
    assert fake.sleeps == [0.0, 0.0]


@pytest.mark.asyncio
async def test_run_once_returns_delay():
    fake = FakeTime()
    scheduler = CollectionScheduler(fake.cycle_taking(12.5), interval=30, clock=fake.clock, sleep=fake.sleep)

    assert await scheduler.run_once() == pytest.approx(17.5)
    assert fake.sleeps == []


@pytest.mark.asyncio
async def test_fatal_error_stops_the_loop():
    """Test that a failing cycle propagates instead of being retried."""
    fake = FakeTime()
    calls = 0

    async def collect():
        nonlocal calls
        calls += 1
        raise KubernetesException("cluster unreachable")

    scheduler = CollectionScheduler(collect, interval=60, clock=fake.clock, sleep=fake.sleep)

    with patch("budelb.metrics_collector.scheduler.logger") as mock_logger:
        with pytest.raises(KubernetesException):
            await scheduler.run_forever()

    assert calls == 1
    assert fake.sleeps == []
    # Reported once, by the entrypoint
    mock_logger.exception.assert_not_called()
    mock_logger.error.assert_not_called()
