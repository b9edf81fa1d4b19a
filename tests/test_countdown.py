from datetime import timedelta

import pytest
from pydantic import ValidationError

from shame_engine.countdown import NOT_CONFIGURED_MESSAGE, MomCountdown, MomEmailConfig


def _countdown(clock, **overrides):
    config = MomEmailConfig(mom_email="mom@example.com", user_name="Sam", **overrides)
    return MomCountdown(config, clock)


def test_not_configured_is_inert(clock):
    countdown = MomCountdown(None, clock)
    check = countdown.check_trigger(100)
    assert check.configured is False
    assert not check.should_warn and not check.should_send
    assert countdown.cancel() == NOT_CONFIGURED_MESSAGE
    assert countdown.status().configured is False


def test_disabled_config_counts_as_not_configured(clock):
    countdown = _countdown(clock, enabled=False)
    assert countdown.check_trigger(99).configured is False


def test_below_warning_threshold_is_quiet(clock):
    check = _countdown(clock).check_trigger(84)
    assert not check.should_warn and not check.should_send and check.minutes_remaining == 0


def test_warning_band_warns_without_countdown(clock):
    countdown = _countdown(clock)
    check = countdown.check_trigger(90)
    assert check.should_warn and not check.should_send
    assert check.minutes_remaining == 0
    assert check.warning.startswith("⚠️ WARNING 1")
    assert countdown.status().is_active is False


def test_send_threshold_arms_countdown_then_sends_after_expiry(clock):
    countdown = _countdown(clock)
    start = clock.now()

    armed = countdown.check_trigger(96)
    assert armed.should_warn and armed.minutes_remaining == 5

    clock.advance(minutes=2, seconds=30)
    ticking = countdown.check_trigger(96)
    assert not ticking.should_send and ticking.minutes_remaining == 3

    status = countdown.status()
    assert status.is_active and status.minutes_remaining == 3
    assert status.will_send_at == start + timedelta(minutes=5)

    clock.advance(minutes=3)
    assert countdown.check_trigger(96).should_send


def test_expired_countdown_sends_even_if_score_dropped(clock):
    countdown = _countdown(clock)
    countdown.check_trigger(97)
    clock.advance(minutes=6)
    assert countdown.check_trigger(10).should_send


def test_score_drop_cancels_active_countdown(clock):
    countdown = _countdown(clock)
    countdown.check_trigger(97)
    clock.advance(minutes=1)

    check = countdown.check_trigger(60)
    assert check.cancelled and not check.should_send
    assert countdown.status().is_active is False

    # Warn-band scores past the cancelled countdown's expiry never send or re-arm.
    for _ in range(10):
        clock.advance(minutes=1)
        later = countdown.check_trigger(90)
        assert not later.should_send
        assert later.minutes_remaining == 0
    assert countdown.status().is_active is False


def test_failed_send_keeps_countdown_armed(clock):
    countdown = _countdown(clock)
    countdown.check_trigger(97)
    clock.advance(minutes=5)
    assert countdown.check_trigger(97).should_send
    # No acknowledgement: the next tick asks again.
    clock.advance(minutes=1)
    assert countdown.check_trigger(97).should_send


def test_successful_send_starts_cooldown(clock):
    countdown = _countdown(clock, cooldown_minutes=60)
    countdown.check_trigger(97)
    clock.advance(minutes=5)
    assert countdown.check_trigger(97).should_send
    countdown.record_send_success()

    assert countdown.status().is_active is False
    clock.advance(minutes=59)
    quiet = countdown.check_trigger(100)
    assert not quiet.should_warn and not quiet.should_send

    clock.advance(minutes=1)
    assert countdown.check_trigger(100).should_warn


def test_user_cancel_clears_countdown(clock):
    countdown = _countdown(clock)
    countdown.check_trigger(99)
    assert "CANCELLED" in countdown.cancel()
    assert countdown.status().is_active is False
    # Still above the send line: a fresh countdown starts on the next tick.
    assert countdown.check_trigger(99).minutes_remaining == 5


def test_warning_messages_escalate_to_final(clock):
    countdown = _countdown(clock)
    warnings = [countdown.check_trigger(88).warning for _ in range(5)]
    assert warnings[0].startswith("⚠️ WARNING 1")
    assert warnings[2].startswith("⚠️ WARNING 3")
    assert warnings[3].startswith("⚠️ FINAL WARNING")
    assert warnings[4].startswith("⚠️ FINAL WARNING")
    assert countdown.status().warnings_sent == 5


def test_countdown_duration_comes_from_config(clock):
    countdown = _countdown(clock, countdown_minutes=10)
    assert countdown.check_trigger(99).minutes_remaining == 10


def test_warning_threshold_above_send_threshold_is_rejected():
    with pytest.raises(ValidationError):
        MomEmailConfig(mom_email="mom@example.com", warning_threshold=90, send_threshold=80)


def test_equal_thresholds_are_accepted(clock):
    countdown = _countdown(clock, warning_threshold=90, send_threshold=90)
    assert countdown.check_trigger(90).minutes_remaining == 5
