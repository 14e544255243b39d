from concurrent.futures import ThreadPoolExecutor

import pytest

from notifyy.delivery.gate import DeliveryGate
from notifyy.telemetry import InMemoryTelemetry

from tests.fakes import FakeClock


def _gate(clock: FakeClock, **kwargs: object) -> DeliveryGate:
    return DeliveryGate(clock=clock, **kwargs)


def test_first_send_is_accepted_and_recorded(clock: FakeClock) -> None:
    gate = _gate(clock)
    assert gate.should_send("r1", "Build failed") is True
    history = gate.history("r1")
    assert len(history) == 1
    assert history[0].message == "Build failed"
    assert history[0].sent_at == clock.now


def test_scenarios_build_notifications(clock: FakeClock) -> None:
    gate = _gate(clock)

    # A: empty history
    assert gate.should_send("r1", "Build failed") is True
    assert len(gate.history("r1")) == 1

    # B: same text immediately
    assert gate.should_send("r1", "Build failed") is False
    assert len(gate.history("r1")) == 1

    # C: different text, same tick
    assert gate.should_send("r1", "Build succeeded") is False
    assert len(gate.history("r1")) == 1

    # E: another recipient is independent
    assert gate.should_send("r2", "Build failed") is True

    # D: past the retention window
    clock.advance(3601)
    assert gate.should_send("r1", "Build failed") is True
    history = gate.history("r1")
    assert len(history) == 1
    assert history[0].sent_at == clock.now


def test_duplicate_suppressed_within_window_after_tick(clock: FakeClock) -> None:
    gate = _gate(clock)
    assert gate.should_send("r1", "disk full") is True
    clock.advance(5)
    assert gate.should_send("r1", "disk full") is False
    assert gate.should_send("r1", "disk ok") is True
    assert [r.message for r in gate.history("r1")] == ["disk full", "disk ok"]


def test_record_aged_exactly_the_window_is_retained(clock: FakeClock) -> None:
    gate = _gate(clock)
    gate.should_send("r1", "ping")
    clock.advance(3600)
    assert gate.should_send("r1", "ping") is False
    clock.advance(0.5)
    assert gate.should_send("r1", "ping") is True


def test_throttle_granularity_is_configurable(clock: FakeClock) -> None:
    gate = _gate(clock, tick_seconds=60)
    assert gate.should_send("r1", "one") is True
    clock.advance(30)
    assert gate.should_send("r1", "two") is False
    clock.advance(30)
    assert gate.should_send("r1", "two") is True


def test_sub_second_sends_share_one_tick(clock: FakeClock) -> None:
    gate = _gate(clock)
    gate.should_send("r1", "one")
    clock.advance(0.5)
    assert gate.should_send("r1", "two") is False
    clock.advance(0.5)
    assert gate.should_send("r1", "two") is True


def test_retention_window_is_configurable(clock: FakeClock) -> None:
    gate = _gate(clock, retention_seconds=10)
    gate.should_send("r1", "same")
    clock.advance(11)
    assert gate.should_send("r1", "same") is True
    assert len(gate.history("r1")) == 1


def test_stale_history_behaves_like_empty(clock: FakeClock) -> None:
    gate = _gate(clock)
    gate.should_send("r1", "a")
    clock.advance(2)
    gate.should_send("r1", "b")
    clock.advance(4000)

    assert gate.should_send("r1", "a") is True
    assert len(gate.history("r1")) == 1
    clock.advance(1)
    assert gate.should_send("r1", "b") is True
    assert [r.message for r in gate.history("r1")] == ["a", "b"]


def test_empty_message_is_a_valid_candidate(clock: FakeClock) -> None:
    gate = _gate(clock)
    assert gate.should_send("r1", "") is True
    clock.advance(1)
    assert gate.should_send("r1", "") is False


def test_reset_forgets_all_recipients(clock: FakeClock) -> None:
    gate = _gate(clock)
    gate.should_send("r1", "x")
    gate.should_send("r2", "x")
    assert len(gate) == 2
    gate.reset()
    assert len(gate) == 0
    assert gate.should_send("r1", "x") is True


def test_suppressions_are_counted_by_reason(clock: FakeClock) -> None:
    telemetry = InMemoryTelemetry()
    gate = _gate(clock, telemetry=telemetry)
    gate.should_send("r1", "x")
    gate.should_send("r1", "y")
    clock.advance(1)
    gate.should_send("r1", "x")

    assert telemetry.get_counter("gate_accepted_total") == 1
    assert telemetry.get_counter("gate_suppressed_total", (("reason", "throttled"),)) == 1
    assert telemetry.get_counter("gate_suppressed_total", (("reason", "duplicate"),)) == 1


def test_concurrent_checks_for_one_recipient_admit_a_single_send(clock: FakeClock) -> None:
    gate = _gate(clock)
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: gate.should_send("r1", "alert"), range(32)))
    assert results.count(True) == 1
    assert len(gate.history("r1")) == 1


@pytest.mark.parametrize("kwargs", [{"retention_seconds": 0}, {"tick_seconds": 0}])
def test_rejects_non_positive_settings(kwargs: dict[str, float]) -> None:
    with pytest.raises(ValueError):
        DeliveryGate(**kwargs)
