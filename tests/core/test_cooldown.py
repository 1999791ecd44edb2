from sibyl.core.aggregator import EntityRecord
from sibyl.core.cooldown import CooldownMonitor, CooldownState
from sibyl.core.rolling_window import RollingWindow


def _channel(score: int | None) -> EntityRecord:
    return EntityRecord(id="c1", window=RollingWindow(10), score=score)


def test_single_trigger_across_cooldown_window() -> None:
    monitor = CooldownMonitor(threshold=100, reset_ticks=10)
    record = _channel(150)
    fired = [monitor.observe(record) for _ in range(11)]
    assert fired.count(True) == 1
    assert fired[0] is True
    assert monitor.state_of(record) == CooldownState.ARMED
    assert monitor.observe(record) is True


def test_score_sequence_fires_once_on_first_crossing() -> None:
    monitor = CooldownMonitor(threshold=100, reset_ticks=10)
    record = _channel(None)
    scores = [80, 120, 130, 125, 140, 150, 110, 160, 170, 180, 190, 200]
    fired = []
    for score in scores:
        record.score = score
        fired.append(monitor.observe(record))
    assert fired == [False, True] + [False] * 10


def test_score_equal_to_threshold_does_not_fire() -> None:
    monitor = CooldownMonitor(threshold=100, reset_ticks=3)
    record = _channel(100)
    assert monitor.observe(record) is False
    assert record.cooldown_ticks == 0


def test_cooling_decrements_without_checking() -> None:
    monitor = CooldownMonitor(threshold=100, reset_ticks=3)
    record = _channel(0)
    record.cooldown_ticks = 2
    assert monitor.observe(record) is False
    assert record.cooldown_ticks == 1
    assert monitor.state_of(record) == CooldownState.COOLING
