"""Command-line entry point for the homeboard dashboard."""

from __future__ import annotations

import argparse
from dataclasses import replace
import signal
import sys

from homeboard.app import EXIT_CONFIG_ERROR, EXIT_FATAL_INIT, Dashboard, configure_logging
from homeboard.config import load_config
from homeboard.errors import FatalInitError


def _exit_on_sigterm(signum: int, frame: object) -> None:
    # Raising SystemExit lets the screen and terminal context managers restore the tty.
    sys.exit(128 + signum)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Terminal home dashboard")
    parser.add_argument(
        "--config",
        default="config/config.yaml",
        help="Path to the YAML config file",
    )
    parser.add_argument(
        "--no-lights",
        action="store_true",
        help="Ignore the hue section and disable light keys",
    )
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ValueError as exc:
        print("config_error", str(exc), file=sys.stderr, flush=True)
        return EXIT_CONFIG_ERROR

    if args.no_lights:
        config = replace(config, hue=None)

    configure_logging(config.log)
    signal.signal(signal.SIGTERM, _exit_on_sigterm)

    try:
        return Dashboard(config).run()
    except FatalInitError as exc:
        print("fatal_init_error", str(exc), file=sys.stderr, flush=True)
        return EXIT_FATAL_INIT
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
