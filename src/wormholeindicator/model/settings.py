"""
Boot Settings
=============
Timing thresholds, colors and sound cues of a boot session.

Why is this file needed?
------------------------
1. Defaults: The indicator ships a complete default table, so a host can
   embed it without any configuration at all.
2. Overrides: Hosts tune the defaults through the "boot" block of their
   options file. The block is overlaid onto the defaults with a deep,
   type-preserving merge that ignores unknown keys and mistyped values.
3. Immutability: A built BootConfig is frozen and read-only for the whole
   session. Debug fast-boot produces a new instance instead of mutating.

Classes:
    TimeConfig, ColorConfig, SfxCue, SfxConfig: The nested groups.
    BootConfig: The root of the settings tree.
    BootOptions: Top-level host flags (debug, war, alert, ...).
"""
from __future__ import annotations

import colorsys
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, is_dataclass, replace
from typing import Any, Optional, TypeVar

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


def hsl(hue: float, saturation: float, lightness: float) -> str:
    """Convert a 0..1 HSL triple into a '#rrggbb' color string."""
    r, g, b = colorsys.hls_to_rgb(hue % 1.0, lightness, saturation)
    return "#{:02x}{:02x}{:02x}".format(*(int(round(c * 255)) for c in (r, g, b)))


# -------------------------------------------------------------------------------
# Settings groups
# -------------------------------------------------------------------------------

@dataclass(frozen=True)
class TimeConfig:
    """Durations in seconds."""
    power: float = 1.5                                             # "Powered by" label delay
    hold: float = 3.5                                              # faked progress time
    fade: float = 1.0
    wait: float = 0.5
    blackout: float = 2.0                                          # backdrop fade-in after reset
    label_fade_in: float = field(default=1.0, metadata={"key": "labelFadeIn"})


@dataclass(frozen=True)
class ColorConfig:
    base: str = "#000000"
    content: str = hsl(0.54, 1.0, 0.5)                             # blue
    content_test: str = field(default=hsl(0.17, 1.0, 0.55), metadata={"key": "contentTest"})
    content_err: str = field(default=hsl(0.01, 1.0, 0.55), metadata={"key": "contentErr"})
    content_debug: str = field(default=hsl(0.1, 1.0, 0.5), metadata={"key": "contentDebug"})
    content_ok: str = field(default=hsl(0.39, 0.9, 0.6), metadata={"key": "contentOK"})
    fade_base: str = field(default="#000000", metadata={"key": "fadeBase"})


@dataclass(frozen=True)
class SfxCue:
    """A sound resource key and its volume (None falls back to SfxConfig.vol)."""
    res: str = ""
    vol: Optional[float] = None


@dataclass(frozen=True)
class SfxConfig:
    boot: SfxCue = field(default_factory=lambda: SfxCue(res="boot", vol=0.75))
    error: SfxCue = field(default_factory=lambda: SfxCue(res="bootError", vol=1.0))
    vol: float = 0.75

    def volume_of(self, cue: SfxCue) -> float:
        return cue.vol if cue.vol is not None else self.vol


@dataclass(frozen=True)
class BootConfig:
    time: TimeConfig = field(default_factory=TimeConfig)
    color: ColorConfig = field(default_factory=ColorConfig)
    sfx: SfxConfig = field(default_factory=SfxConfig)

    @classmethod
    def build(cls, overrides: Optional[Mapping[str, Any]] = None) -> BootConfig:
        """Overlay the host's "boot" block onto the defaults."""
        config = cls()
        if overrides:
            config = merge_overrides(config, overrides)
        return config

    def fast_boot(self) -> BootConfig:
        """No hold and an immediate "Powered by" label (debug mode)."""
        return replace(self, time=replace(self.time, hold=0.0, power=0.0))


# -------------------------------------------------------------------------------
# Deep merge
# -------------------------------------------------------------------------------

def _key_of(f) -> str:
    return f.metadata.get("key", f.name)


def _coerce(current: Any, value: Any) -> tuple[bool, Any]:
    """Return (accepted, value) where value has the type of `current`."""
    if isinstance(value, bool) and not isinstance(current, bool):
        return False, None
    if isinstance(current, float) or current is None:
        # optional volumes default to None but take numbers
        if isinstance(value, (int, float)):
            return True, float(value)
        return False, None
    if isinstance(value, type(current)):
        return True, value
    return False, None


def merge_overrides(instance: _T, overrides: Mapping[str, Any]) -> _T:
    """
    Return a copy of the frozen dataclass `instance` with `overrides` applied.

    Nested mappings merge into nested dataclasses. Unknown keys and values
    whose type does not match the default are skipped, so a malformed
    override degrades the visuals instead of failing the boot.
    """
    known = {_key_of(f): f for f in fields(instance)}
    for key in overrides:
        if key not in known:
            logger.debug(f"Ignoring unknown boot setting '{key}'.")

    changes: dict[str, Any] = {}
    for key, f in known.items():
        if key not in overrides:
            continue
        value = overrides[key]
        current = getattr(instance, f.name)

        if is_dataclass(current):
            if isinstance(value, Mapping):
                changes[f.name] = merge_overrides(current, value)
            else:
                logger.debug(f"Ignoring boot setting '{key}': expected a mapping, got {value!r}.")
            continue

        accepted, coerced = _coerce(current, value)
        if accepted:
            changes[f.name] = coerced
        else:
            logger.debug(f"Ignoring boot setting '{key}': {value!r} does not match {current!r}.")

    return replace(instance, **changes) if changes else instance


# -------------------------------------------------------------------------------
# Host flags
# -------------------------------------------------------------------------------

DEFAULT_WAR_ENDPOINT = "http://127.0.0.1:8080/war"


@dataclass
class BootOptions:
    """
    Top-level host options.

    `boot` holds the raw overrides block; it is merged into a BootConfig on
    every session reset.
    """
    debug: bool = False
    slow_boot: bool = False
    test: bool = False
    war: str = ""                                                  # comma-separated region names
    war_endpoint: str = DEFAULT_WAR_ENDPOINT
    alert: bool = False
    alert_over: bool = False
    boot: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> BootOptions:
        boot = data.get("boot")
        war = data.get("war")
        endpoint = data.get("warEndpoint")
        return cls(
            debug=bool(data.get("debug", False)),
            slow_boot=bool(data.get("slowBoot", False)),
            test=bool(data.get("test", False)),
            war=war if isinstance(war, str) else "",
            war_endpoint=endpoint if isinstance(endpoint, str) and endpoint else DEFAULT_WAR_ENDPOINT,
            alert=bool(data.get("alert", False)),
            alert_over=bool(data.get("alertOver", False)),
            boot=dict(boot) if isinstance(boot, Mapping) else {},
        )

    def build_config(self) -> BootConfig:
        config = BootConfig.build(self.boot)
        if self.debug and not self.slow_boot:
            config = config.fast_boot()
        return config
