"""
Wormhole boot indicator: a ring-and-worm loading animation with a
percentage/alert label, driven by a small boot-phase state machine.

Embed it by creating a BootContext for your host services and a
BootSession, then call `reset`, `evo` and `draw` from your frame loop.
"""
from wormholeindicator.model.session import BootContext, BootSession
from wormholeindicator.model.settings import BootConfig, BootOptions
from wormholeindicator.model.state import BootState, BootStatus

__all__ = [
    "BootConfig",
    "BootContext",
    "BootOptions",
    "BootSession",
    "BootState",
    "BootStatus",
]
