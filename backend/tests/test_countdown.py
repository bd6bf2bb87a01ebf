import pytest

from playsib.services.game import Countdown


def test_counts_down_and_fires_once():
    c = Countdown(3)
    assert not c.running
    assert c.tick() is False  # inert until started
    c.start()
    assert [c.tick(), c.tick(), c.tick()] == [False, False, True]
    assert c.remaining == 0
    assert not c.running
    # Further ticks never re-fire
    assert c.tick() is False


def test_cancel_stops_and_reset_restores_budget():
    c = Countdown(5)
    c.start()
    c.tick()
    c.cancel()
    assert c.tick() is False
    assert c.remaining == 4
    c.reset()
    assert c.remaining == 5 and not c.running


def test_rejects_empty_budget():
    with pytest.raises(ValueError):
        Countdown(0)
