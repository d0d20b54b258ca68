"""
The MODEL layer contains the boot indicator's data structures and logic.
It has NO knowledge of Qt widgets. It deals with boot phases, worms,
segments, label resolution and alert payloads, and reaches the host only
through the protocols in `wormholeindicator.model.host`.
"""
