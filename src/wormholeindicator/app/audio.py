"""
Sound Effects
Plays boot cues through QSoundEffect. Resource keys map to .wav files,
by default every file found in the assets/sfx directory keyed by its stem.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

from PySide6.QtCore import QObject, QUrl
from PySide6.QtMultimedia import QSoundEffect

from wormholeindicator.config import SFX_PATH

logger = logging.getLogger(__name__)


def discover_sounds(directory: str = SFX_PATH) -> dict[str, str]:
    if not os.path.isdir(directory):
        return {}
    return {
        os.path.splitext(name)[0]: os.path.join(directory, name)
        for name in sorted(os.listdir(directory))
        if name.lower().endswith(".wav")
    }


class QtSoundPlayer(QObject):
    def __init__(self, sounds: Optional[dict[str, str]] = None, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.sounds: dict[str, str] = discover_sounds() if sounds is None else dict(sounds)
        self._effects: dict[str, QSoundEffect] = {}

    def _effect(self, res: str) -> QSoundEffect:
        effect = self._effects.get(res)
        if effect is None:
            effect = QSoundEffect(self)
            effect.setSource(QUrl.fromLocalFile(self.sounds[res]))
            self._effects[res] = effect
        return effect

    def play(self, res: str, volume: float) -> bool:
        if res not in self.sounds:
            return False
        effect = self._effect(res)
        effect.setVolume(max(0.0, min(volume, 1.0)))
        effect.play()
        logger.debug(f"Playing sound '{res}' at volume {volume:.2f}.")
        return True
