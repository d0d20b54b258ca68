"""
Boot State Machine
==================
The coarse lifecycle of the loading indicator.

    LOADING -> BLACKOUT -> HOLDING -> (host) -> FADING -> WAITING -> SELF_DESTRUCT

Blackout, fading and waiting end on their own after the configured number
of seconds. Holding has no timeout: it lasts until the host reports that
loading is complete and calls `begin_fade()`.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from wormholeindicator.model.settings import TimeConfig

logger = logging.getLogger(__name__)


class BootState(StrEnum):
    LOADING = "loading"
    BLACKOUT = "blackout"
    HOLDING = "holding"
    FADING = "fading"
    WAITING = "waiting"
    SELF_DESTRUCT = "self-destruct"


# Phases in which worms evolve and new worms are born
CONTENT_STATES = frozenset({BootState.BLACKOUT, BootState.LOADING, BootState.HOLDING})


@dataclass(frozen=True)
class BootStatus:
    state: BootState
    state_timer: float
    loaded: int
    included: int


def _clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(value, hi))


def load_ratio(loaded: int, included: int) -> float:
    """Share of loaded assets; nothing to load counts as done."""
    if included <= 0:
        return 1.0
    return _clamp(loaded / included)


def completion(state: BootState, state_timer: float, hold: float, loaded: int, included: int) -> float:
    """
    Blended completion amount in [0, 1].

    While content is active the asset ratio is averaged with the share of
    hold time spent so far, so the percentage keeps moving even when every
    asset is already there. Later phases always report 1.
    """
    if state not in CONTENT_STATES:
        return 1.0
    ratio = load_ratio(loaded, included)
    if hold <= 0:
        return ratio
    hold_rate = _clamp(state_timer / hold)
    return _clamp((ratio + hold_rate) / 2)


PERCENT_EPSILON = 1e-9          # 29/100 * 100 is 28.999999999999996 in binary floating point


def percent_label(amount: float) -> str:
    percent = min(int(math.floor(_clamp(amount) * 100 + PERCENT_EPSILON)), 100)
    return f"{percent}%"


class BootStateMachine:
    """Owns the boot/state timers and fires each timed transition once."""

    def __init__(self, timing: Optional[TimeConfig] = None) -> None:
        self.timing: TimeConfig = timing or TimeConfig()
        self.state: BootState = BootState.LOADING
        self.boot_timer: float = 0.0
        self.state_timer: float = 0.0

    @property
    def content_active(self) -> bool:
        return self.state in CONTENT_STATES

    @property
    def finished(self) -> bool:
        return self.state == BootState.SELF_DESTRUCT

    def restart(self, timing: Optional[TimeConfig] = None) -> None:
        if timing is not None:
            self.timing = timing
        self.boot_timer = 0.0
        self._enter(BootState.BLACKOUT)

    def _enter(self, state: BootState) -> BootState:
        logger.info(f"Boot state: {self.state} -> {state}")
        self.state = state
        self.state_timer = 0.0
        return state

    def advance(self, dt: float) -> Optional[BootState]:
        """Advance the timers; return the new state if a transition fired."""
        if self.finished:
            return None

        self.boot_timer += dt
        self.state_timer += dt

        if self.state == BootState.BLACKOUT and self.state_timer >= self.timing.blackout:
            return self._enter(BootState.HOLDING)
        if self.state == BootState.FADING and self.state_timer >= self.timing.fade:
            return self._enter(BootState.WAITING)
        if self.state == BootState.WAITING and self.state_timer >= self.timing.wait:
            return self._enter(BootState.SELF_DESTRUCT)
        return None

    def begin_fade(self) -> bool:
        """Host signal that loading is complete."""
        if self.state not in CONTENT_STATES:
            return False
        self._enter(BootState.FADING)
        return True

    # ---- phase alphas ----

    @property
    def blackout_alpha(self) -> float:
        """Backdrop/content opacity; ramps up during blackout."""
        if self.state != BootState.BLACKOUT:
            return 1.0
        if self.timing.blackout <= 0:
            return 0.0
        return _clamp(self.state_timer / self.timing.blackout)

    @property
    def fade_alpha(self) -> float:
        """Opacity of the fade-out overlay drawn on top of the content."""
        if self.state == BootState.FADING:
            if self.timing.fade <= 0:
                return 1.0
            return _clamp(self.state_timer / self.timing.fade)
        if self.state in (BootState.WAITING, BootState.SELF_DESTRUCT):
            return 1.0
        return 0.0

    @property
    def label_alpha(self) -> float:
        if self.timing.label_fade_in <= 0 or self.boot_timer > self.timing.label_fade_in:
            return 1.0
        return _clamp(self.boot_timer / self.timing.label_fade_in)
