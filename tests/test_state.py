import math

import pytest

from wormholeindicator.model.settings import TimeConfig
from wormholeindicator.model.state import (
    BootState, BootStateMachine, completion, load_ratio, percent_label,
)


def run(machine, seconds, dt=0.01):
    fired = []
    for _ in range(int(round(seconds / dt))):
        state = machine.advance(dt)
        if state is not None:
            fired.append(state)
    return fired


def test_initial_state_is_loading():
    assert BootStateMachine().state == BootState.LOADING


@pytest.mark.parametrize("blackout,fade,wait", [
    (2.0, 1.0, 0.5),
    (0.0, 0.0, 0.0),
    (0.3, 0.0, 1.2),
])
def test_transitions_fire_in_order_once(blackout, fade, wait):
    machine = BootStateMachine(TimeConfig(blackout=blackout, fade=fade, wait=wait))
    machine.restart()
    assert machine.state == BootState.BLACKOUT

    fired = run(machine, blackout + 5)
    assert fired == [BootState.HOLDING]
    assert machine.state == BootState.HOLDING

    assert machine.begin_fade()
    fired = run(machine, fade + wait + 5)
    assert fired == [BootState.WAITING, BootState.SELF_DESTRUCT]
    assert machine.finished
    assert machine.advance(1.0) is None


def test_holding_has_no_timeout():
    machine = BootStateMachine(TimeConfig(blackout=0.0))
    machine.restart()
    run(machine, 60, dt=0.5)
    assert machine.state == BootState.HOLDING


def test_state_timer_resets_on_transition():
    machine = BootStateMachine(TimeConfig(blackout=1.0))
    machine.restart()
    machine.advance(0.6)
    assert machine.state_timer == pytest.approx(0.6)
    machine.advance(0.6)
    assert machine.state == BootState.HOLDING
    assert machine.state_timer == 0.0
    assert machine.boot_timer == pytest.approx(1.2)


def test_restart_resets_boot_timer():
    machine = BootStateMachine(TimeConfig(blackout=0.0))
    machine.restart()
    machine.advance(3.0)
    machine.restart(TimeConfig(blackout=4.0))
    assert machine.boot_timer == 0.0
    assert machine.state == BootState.BLACKOUT
    assert machine.timing.blackout == 4.0


def test_begin_fade_only_from_content_states():
    machine = BootStateMachine(TimeConfig(fade=1.0))
    machine.restart()
    assert machine.begin_fade()
    assert machine.state == BootState.FADING
    assert not machine.begin_fade()


def test_content_active():
    machine = BootStateMachine(TimeConfig(blackout=0.0))
    assert machine.content_active
    machine.restart()
    assert machine.content_active
    machine.begin_fade()
    assert not machine.content_active


@pytest.mark.parametrize("loaded,included,expected", [
    (0, 10, "0%"),
    (1, 4, "25%"),
    (3, 4, "75%"),
    (10, 10, "100%"),
    (12, 10, "100%"),
    (0, 0, "100%"),
])
def test_percentage_without_hold(loaded, included, expected):
    amount = completion(BootState.HOLDING, 0.0, 0.0, loaded, included)
    assert percent_label(amount) == expected


@pytest.mark.parametrize("loaded,included", [
    (29, 100),
    (57, 100),
    (58, 100),
    (290, 1000),
    (570, 1000),
    (2, 3),
])
def test_percentage_floors_exact_ratio(loaded, included):
    amount = completion(BootState.HOLDING, 0.0, 0.0, loaded, included)
    assert percent_label(amount) == f"{100 * loaded // included}%"


@pytest.mark.parametrize("included", [3, 7, 100, 1000])
def test_percentage_matches_integer_division_for_every_count(included):
    for loaded in range(included + 1):
        amount = completion(BootState.LOADING, 0.0, 0.0, loaded, included)
        assert percent_label(amount) == f"{100 * loaded // included}%"


def test_percentage_with_hold_averages_time_and_assets():
    amount = completion(BootState.HOLDING, 1.0, 4.0, 1, 2)
    assert amount == pytest.approx((0.5 + 0.25) / 2)
    assert percent_label(amount) == "37%"


def test_percentage_hold_rate_is_clamped():
    amount = completion(BootState.HOLDING, 100.0, 4.0, 1, 2)
    assert amount == pytest.approx(0.75)
    assert percent_label(completion(BootState.HOLDING, 100.0, 4.0, 2, 2)) == "100%"


def test_percentage_after_content_phases_is_full():
    assert completion(BootState.FADING, 0.0, 4.0, 0, 10) == 1.0
    assert completion(BootState.WAITING, 0.0, 0.0, 0, 10) == 1.0


def test_load_ratio_bounds():
    assert load_ratio(5, 0) == 1.0
    assert load_ratio(-1, 10) == 0.0
    assert math.isclose(load_ratio(1, 3), 1 / 3)


def test_blackout_alpha_ramps():
    machine = BootStateMachine(TimeConfig(blackout=2.0))
    machine.restart()
    assert machine.blackout_alpha == 0.0
    machine.advance(1.0)
    assert machine.blackout_alpha == pytest.approx(0.5)
    machine.advance(1.0)
    assert machine.blackout_alpha == 1.0


def test_fade_alpha():
    machine = BootStateMachine(TimeConfig(blackout=0.0, fade=2.0, wait=1.0))
    machine.restart()
    assert machine.fade_alpha == 0.0
    machine.begin_fade()
    machine.advance(0.5)
    assert machine.fade_alpha == pytest.approx(0.25)
    machine.advance(1.5)
    assert machine.state == BootState.WAITING
    assert machine.fade_alpha == 1.0


def test_label_alpha_fades_in_on_boot_timer():
    machine = BootStateMachine(TimeConfig(blackout=5.0, label_fade_in=2.0))
    machine.restart()
    machine.advance(0.5)
    assert machine.label_alpha == pytest.approx(0.25)
    machine.advance(2.0)
    assert machine.label_alpha == 1.0
