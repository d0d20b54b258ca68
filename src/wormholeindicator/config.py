"""
Configuration & Path Management
===============================
This module resolves resource paths and loads the host options file.

Why is this file needed?
------------------------
1. Abstraction: Sound files and the sample options file are located through
   one helper instead of hardcoded paths.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find assets when the demo is frozen into an executable.
3. Fail soft: A missing or malformed options file never stops the boot; the
   defaults are used and a warning is logged.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    SFX_PATH (str): Absolute path to the sound effects directory.
    DEFAULT_OPTIONS_PATH (str): Absolute path to the sample options file.
    load_options: Read a JSON options file into BootOptions.
"""
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from wormholeindicator.model.settings import BootOptions

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # config.py is in src/wormholeindicator/
    project_root: Path = Path(__file__).parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# Global Constants
ASSETS_PATH: str = get_resource_path("assets")
SFX_PATH: str = os.path.join(ASSETS_PATH, "sfx")
DEFAULT_OPTIONS_PATH: str = os.path.join(ASSETS_PATH, "boot.json")


def load_options(path: Optional[str] = None) -> BootOptions:
    """
    Read the host options file (see assets/boot.json for the layout).

    Returns the default options when the file is missing or unreadable.
    """
    if not path:
        return BootOptions()
    if not os.path.exists(path):
        logger.warning(f"Options file not found at {path}, using defaults.")
        return BootOptions()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read options file '{path}': {e}")
        return BootOptions()

    if not isinstance(data, dict):
        logger.warning(f"Options file '{path}' must contain a JSON object, using defaults.")
        return BootOptions()

    logger.info(f"Loaded options from: {path}")
    return BootOptions.from_mapping(data)
