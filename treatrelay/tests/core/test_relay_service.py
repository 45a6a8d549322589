"""Unit tests for the relay service.

Tests verify that RelayService composes detection, debouncing and
triggering correctly, using in-memory fakes for the trigger port.
"""

import asyncio

import pytest

from treatrelay.core.debounce import Debouncer
from treatrelay.core.detector import TransferDetector
from treatrelay.core.models import (
    RelayAction,
    RelayOutcome,
    TriggerResult,
    TriggerStatus,
)
from treatrelay.core.ports import TriggerFailedError
from treatrelay.core.relay_service import RelayService
from treatrelay.tests.fakes import FakeClock, FakeTriggerPort

WATCHED = "WATCHED"

MATCHING_PAYLOAD = {
    "events": [{"nativeTransfers": [{"toUserAccount": WATCHED, "amount": 5000}]}]
}
NON_MATCHING_PAYLOAD = {
    "events": [{"nativeTransfers": [{"toUserAccount": "ELSEWHERE", "amount": 5000}]}]
}

# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def trigger() -> FakeTriggerPort:
    return FakeTriggerPort(response={"dispensed": 1})


@pytest.fixture
def service(clock: FakeClock, trigger: FakeTriggerPort) -> RelayService:
    return RelayService(
        detector=TransferDetector(WATCHED),
        debouncer=Debouncer(cooldown_ms=10_000, clock=clock),
        trigger=trigger,
    )


# ============================================================================
# RelayService
# ============================================================================


class TestRelayService:
    """Tests for the detect → debounce → trigger pipeline."""

    @pytest.mark.asyncio
    async def test_no_match_is_ignored(self, service, trigger) -> None:
        outcome = await service.handle_event(NON_MATCHING_PAYLOAD)

        assert outcome == RelayOutcome(action=RelayAction.IGNORED)
        assert trigger.fire_call_count == 0

    @pytest.mark.asyncio
    async def test_malformed_payload_is_ignored(self, service, trigger) -> None:
        outcome = await service.handle_event({"events": "garbage"})

        assert outcome.action is RelayAction.IGNORED
        assert trigger.fire_call_count == 0

    @pytest.mark.asyncio
    async def test_match_fires_trigger(self, service, trigger) -> None:
        outcome = await service.handle_event(MATCHING_PAYLOAD)

        assert outcome.action is RelayAction.TREAT
        assert outcome.trigger_result == TriggerResult.triggered({"dispensed": 1})
        assert trigger.fire_call_count == 1

    @pytest.mark.asyncio
    async def test_second_match_inside_cooldown_is_debounced(
        self, service, trigger, clock
    ) -> None:
        await service.handle_event(MATCHING_PAYLOAD)
        clock.advance(5_000)
        outcome = await service.handle_event(MATCHING_PAYLOAD)

        assert outcome.action is RelayAction.TREAT
        assert outcome.trigger_result is not None
        assert outcome.trigger_result.status is TriggerStatus.DEBOUNCED
        assert outcome.trigger_result.reason == "debounced"
        assert trigger.fire_call_count == 1

    @pytest.mark.asyncio
    async def test_matches_spaced_beyond_cooldown_both_fire(
        self, service, trigger, clock
    ) -> None:
        await service.handle_event(MATCHING_PAYLOAD)
        clock.advance(10_001)
        outcome = await service.handle_event(MATCHING_PAYLOAD)

        assert outcome.trigger_result is not None
        assert outcome.trigger_result.status is TriggerStatus.TRIGGERED
        assert trigger.fire_call_count == 2

    @pytest.mark.asyncio
    async def test_ignored_payload_does_not_consume_cooldown(
        self, service, trigger
    ) -> None:
        await service.handle_event(NON_MATCHING_PAYLOAD)
        outcome = await service.handle_event(MATCHING_PAYLOAD)

        assert outcome.trigger_result == TriggerResult.triggered({"dispensed": 1})
        assert trigger.fire_call_count == 1

    @pytest.mark.asyncio
    async def test_trigger_failure_propagates(self, service, trigger) -> None:
        trigger.should_fail = True
        trigger.fail_status = 503

        with pytest.raises(TriggerFailedError) as exc_info:
            await service.handle_event(MATCHING_PAYLOAD)

        assert exc_info.value.status_code == 503
        assert "trigger failed: 503" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_failed_attempt_still_starts_cooldown(
        self, service, trigger
    ) -> None:
        trigger.should_fail = True
        with pytest.raises(TriggerFailedError):
            await service.handle_event(MATCHING_PAYLOAD)

        trigger.should_fail = False
        outcome = await service.handle_event(MATCHING_PAYLOAD)

        assert outcome.trigger_result == TriggerResult.debounced()
        assert trigger.fire_call_count == 1

    @pytest.mark.asyncio
    async def test_overlapping_requests_fire_once(self, service, trigger) -> None:
        # The first call is still in flight when the second arrives
        trigger.delay_seconds = 0.05

        outcomes = await asyncio.gather(
            service.handle_event(MATCHING_PAYLOAD),
            service.handle_event(MATCHING_PAYLOAD),
        )

        statuses = sorted(o.trigger_result.status.value for o in outcomes if o.trigger_result)
        assert statuses == ["debounced", "triggered"]
        assert trigger.fire_call_count == 1


class TestRelayModels:
    """Tests for relay outcome invariants."""

    def test_ignored_outcome_cannot_carry_result(self) -> None:
        with pytest.raises(ValueError):
            RelayOutcome(action=RelayAction.IGNORED, trigger_result=TriggerResult.debounced())

    def test_treat_outcome_requires_result(self) -> None:
        with pytest.raises(ValueError):
            RelayOutcome(action=RelayAction.TREAT)

    def test_trigger_failed_error_message(self) -> None:
        assert str(TriggerFailedError(500, "boom")) == "trigger failed: 500 boom"
        assert str(TriggerFailedError(404)) == "trigger failed: 404"
        assert str(TriggerFailedError(None, "connection refused")) == (
            "trigger failed: connection refused"
        )
