"""
Boot Session
============
Glues the state machine, the worm field and the status label together and
exposes the lifecycle hooks the host calls every frame.

Why is this file needed?
------------------------
1. Context: All shared state (host services, alert flags, the alert inbox
   and the active-session slot) lives in a BootContext the host owns and
   passes to every hook. Nothing is global.
2. Single session: `reset()` refuses to start while the context already
   holds an active session; self-destruct releases the slot.
3. Label: The centered label shows the blended completion percentage,
   unless an alert, an alert-over notice or an asset error overrides it.

Classes:
    AlertFlags: The alert override state shared by poller and frame loop.
    BootContext: Host-owned context passed to every hook.
    BootSession: The indicator itself.
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np

from wormholeindicator.model.alerts import (
    ALERT, ALERT_OVER, ALERT_OVER_MESSAGE, AlertRegion, AlertUpdate, alert_message,
)
from wormholeindicator.model.field import WormField
from wormholeindicator.model.host import AssetTracker, Canvas, SoundPlayer, TextAlign
from wormholeindicator.model.segments import FONT_SIZE, Frame
from wormholeindicator.model.settings import BootConfig, BootOptions, SfxCue
from wormholeindicator.model.state import (
    BootState, BootStateMachine, BootStatus, completion, percent_label,
)

logger = logging.getLogger(__name__)

ERROR = "Error"
POWERED_BY = "Powered by Wormhole"
DEVELOPING_WITH = "Developing with Wormhole"
POWERED_BY_NAME = "powered_by"
POWERED_BY_ANCHOR = (0.5, 0.9)
POWERED_BY_FADE_IN = 1.0


@dataclass
class AlertFlags:
    active: bool = False
    over: bool = False
    region: Optional[AlertRegion] = None


@dataclass
class BootContext:
    """
    Everything a session shares with its host.

    `active` is the running session (at most one); `finished` is the last
    session that self-destructed, kept so an alert can boot it again.
    """
    assets: AssetTracker
    options: BootOptions = field(default_factory=BootOptions)
    sound: Optional[SoundPlayer] = None
    on_complete: Optional[Callable[[BootSession], None]] = None
    active: Optional[BootSession] = None
    finished: Optional[BootSession] = None
    alert: AlertFlags = field(default_factory=AlertFlags)
    inbox: deque[AlertUpdate] = field(default_factory=deque)

    def __post_init__(self) -> None:
        self.alert.active = self.alert.active or self.options.alert
        self.alert.over = self.alert.over or self.options.alert_over

    def post(self, update: AlertUpdate) -> None:
        """Queue a poll result; drained by the next `evo()`."""
        self.inbox.append(update)


class BootSession:
    def __init__(self, rng: Optional[np.random.Generator] = None) -> None:
        self.config = BootConfig()
        self.machine = BootStateMachine(self.config.time)
        self.field = WormField(rng)
        self.label = ""
        self.content_color = self.config.color.content
        self._powered_by_spawned = False

    @property
    def state(self) -> BootState:
        return self.machine.state

    # -------------------------------------------------------------------------
    # Lifecycle hooks
    # -------------------------------------------------------------------------

    def reset(self, ctx: BootContext) -> bool:
        """Start a new boot session; False if one is already active."""
        if ctx.active is not None:
            logger.debug("Boot reset ignored: a session is already active.")
            return False

        self.config = ctx.options.build_config()
        self.machine.restart(self.config.time)
        self.field.clear()
        self.label = ""
        self.content_color = self.config.color.content
        self._powered_by_spawned = False

        ctx.active = self
        if ctx.finished is self:
            ctx.finished = None
        logger.info("Boot session started.")
        self._play(ctx, self.config.sfx.boot)
        return True

    def evo(self, ctx: BootContext, dt: float) -> None:
        """Advance one frame by `dt` seconds."""
        self.drain_inbox(ctx)
        if ctx.active is not self:
            return

        if self.machine.advance(dt) == BootState.SELF_DESTRUCT:
            self._self_destruct(ctx)
            return

        if not self.machine.content_active:
            return
        self.field.advance(dt)
        if not self._powered_by_spawned and self.machine.boot_timer > self.config.time.power:
            self._spawn_powered_by(ctx)

    def draw(self, ctx: BootContext, canvas: Canvas) -> None:
        """Render the current frame."""
        if ctx.active is not self:
            return

        self.update_loading_status(ctx)

        base = min(canvas.width, canvas.height)
        alpha = self.machine.blackout_alpha
        frame = Frame(
            x=canvas.rx(0.5),
            y=canvas.ry(0.5),
            base=base,
            alpha=alpha,
            color=self.content_color,
        )

        canvas.clear()
        canvas.save()

        # backdrop fades in during blackout
        canvas.set_alpha(alpha)
        canvas.background(self.config.color.base)

        self.field.render(canvas, frame)

        canvas.set_alpha(alpha * self.machine.label_alpha)
        canvas.set_font(FONT_SIZE * base)
        canvas.set_fill(self.content_color)
        canvas.text(self.label, frame.x, frame.y, TextAlign.CENTER)

        fade = self.machine.fade_alpha
        if fade > 0:
            canvas.set_alpha(fade)
            canvas.background(self.config.color.fade_base)

        canvas.restore()

    def get_status(self, ctx: BootContext) -> BootStatus:
        return BootStatus(
            state=self.machine.state,
            state_timer=self.machine.state_timer,
            loaded=ctx.assets.loaded,
            included=ctx.assets.included,
        )

    def begin_fade(self) -> bool:
        """Host signal that loading is complete: move on to fading."""
        return self.machine.begin_fade()

    def queue_label(self, message: str) -> None:
        self.field.queue_label(message)

    def raise_alert(self, ctx: BootContext, region: Optional[AlertRegion]) -> None:
        """Override the label with the alert; boots again when no session runs."""
        ctx.alert.active = True
        ctx.alert.region = region
        logger.info(f"Air raid alert raised{' in ' + region.display_name if region else ''}.")

        if ctx.active is None:
            self.reset(ctx)
        else:
            ctx.active.replace_powered_message(alert_message(region))

    def alert_is_over(self, ctx: BootContext) -> None:
        ctx.alert.active = False
        ctx.alert.over = True
        logger.info("Air raid alert is over.")
        if ctx.active is None:
            return
        ctx.active.replace_powered_message(ALERT_OVER_MESSAGE)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def drain_inbox(self, ctx: BootContext) -> None:
        while ctx.inbox:
            update = ctx.inbox.popleft()
            if update.alert_now:
                if not ctx.alert.active:
                    self.raise_alert(ctx, update.lead)
            elif ctx.alert.active:
                self.alert_is_over(ctx)

    def completion(self, ctx: BootContext) -> float:
        return completion(
            self.machine.state,
            self.machine.state_timer,
            self.config.time.hold,
            ctx.assets.loaded,
            ctx.assets.included,
        )

    def update_loading_status(self, ctx: BootContext) -> None:
        """Resolve the label text and content color for this frame."""
        colors = self.config.color
        if ctx.options.debug:
            self.content_color = colors.content_debug
        elif ctx.options.test:
            self.content_color = colors.content_test
        else:
            self.content_color = colors.content

        if ctx.alert.active:
            self.label = ALERT
            self.content_color = colors.content_err
        elif ctx.alert.over:
            self.label = ALERT_OVER
            self.content_color = colors.content_ok
        elif ctx.assets.errors:
            if self.label != ERROR:
                logger.warning("Asset loading failed; showing the boot error label.")
                self._play(ctx, self.config.sfx.error)
            self.label = ERROR
            self.content_color = colors.content_err
        else:
            self.label = percent_label(self.completion(ctx))

    def replace_powered_message(self, message: str) -> bool:
        label = self.field.find_label(POWERED_BY_NAME)
        if label is None:
            return False
        label.message = message
        return True

    def _spawn_powered_by(self, ctx: BootContext) -> None:
        if ctx.alert.active:
            message = alert_message(ctx.alert.region)
        elif ctx.options.debug:
            message = DEVELOPING_WITH
        else:
            message = POWERED_BY

        self.field.spawn_label(
            message,
            name=POWERED_BY_NAME,
            anchor=POWERED_BY_ANCHOR,
            fade_in=POWERED_BY_FADE_IN,
        )
        self._powered_by_spawned = True

    def _self_destruct(self, ctx: BootContext) -> None:
        ctx.active = None
        ctx.finished = self
        logger.info("Boot complete.")
        if ctx.on_complete is not None:
            ctx.on_complete(self)

    def _play(self, ctx: BootContext, cue: SfxCue) -> None:
        if ctx.sound is None or not cue.res:
            return
        if not ctx.sound.play(cue.res, self.config.sfx.volume_of(cue)):
            logger.debug(f"Sound '{cue.res}' is not available.")
