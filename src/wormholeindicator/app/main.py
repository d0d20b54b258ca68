"""
Run with: python -m wormholeindicator
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from wormholeindicator.app.application import create_app
from wormholeindicator.app.audio import QtSoundPlayer
from wormholeindicator.app.loader import SimulatedAssetLoader
from wormholeindicator.app.widget import BootWidget
from wormholeindicator.config import load_options
from wormholeindicator.controller.alert_poller import AlertPoller
from wormholeindicator.logging_config import level_from_name, setup_logging
from wormholeindicator.model.session import BootContext, BootSession

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wormhole-indicator",
        description="Show the wormhole boot indicator over a simulated asset load.",
    )
    parser.add_argument("--config", help="JSON options file (see assets/boot.json)")
    parser.add_argument("--debug", action="store_true", help="fast boot, debug colors")
    parser.add_argument("--slow-boot", action="store_true", help="keep the hold time in debug mode")
    parser.add_argument("--war", help="comma-separated region names to monitor for air raid alerts")
    parser.add_argument("--war-endpoint", help="URL of the regional alert status service")
    parser.add_argument("--assets", type=int, default=40, help="number of simulated assets")
    parser.add_argument("--fail-at", type=int, default=None, help="simulate a load error at this asset")
    parser.add_argument("--log-level", default="info", help="debug, info, warning or error")
    parser.add_argument("--log-file", default=None, help="also write the log to this file")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the demo application."""
    args = build_parser().parse_args(argv)
    try:
        level = level_from_name(args.log_level)
    except ValueError as e:
        print(e, file=sys.stderr)
        return 2
    setup_logging(level=level, log_file=args.log_file)

    options = load_options(args.config)
    if args.debug:
        options.debug = True
    if args.slow_boot:
        options.slow_boot = True
    if args.war:
        options.war = args.war
    if args.war_endpoint:
        options.war_endpoint = args.war_endpoint

    app = create_app()

    loader = SimulatedAssetLoader(included=args.assets, fail_at=args.fail_at)
    context = BootContext(assets=loader, options=options, sound=QtSoundPlayer())
    widget = BootWidget(context, BootSession())
    widget.setWindowTitle(app.applicationDisplayName())
    widget.resize(960, 600)
    loader.done.connect(widget.update)

    poller = AlertPoller(context, parent=widget)
    app.aboutToQuit.connect(poller.stop)
    if not poller.start():
        # nothing can boot us again, so leave once the indicator is done
        widget.boot_completed.connect(app.quit)

    widget.show()
    widget.start()
    loader.start()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
