"""
Command-line entry point: watch stdin and alert when it goes stale.
"""

from __future__ import annotations

import argparse
import faulthandler
import logging
import sys
import threading
from pathlib import Path
from typing import BinaryIO, Callable, Optional, Sequence, TextIO

from config import DEFAULT_MESSAGE, ConfigError, StaleConfig
from staleness import __version__
from staleness.monitor import EXIT_CLOCK_ERROR, AlertPolicy, StalenessMonitor, terminate_process
from staleness.output import LineSink
from staleness.reader import InputReader
from utils import LOGGER_NAME, ActivityTracker, ClockError, setup_logging

EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stale", description="Detect when stdout is stale.")
    parser.add_argument(
        "-d",
        "--delay",
        default=None,
        help="Delay in seconds after which the stream is considered stale",
    )
    parser.add_argument(
        "-p", "--passthrough", action="store_true", help="Print the original stream back to stdout"
    )
    parser.add_argument(
        "-m",
        "--message",
        default=None,
        help=f"Customize the stale message (default: {DEFAULT_MESSAGE!r})",
    )
    parser.add_argument(
        "-e", "--exit", default=None, help="Exit with this code when a stale stream is detected"
    )
    parser.add_argument(
        "-n", "--no-rearm", action="store_true", help="Fire at most once; never re-arm detection"
    )
    parser.add_argument("--time-format", default=None, help="strftime pattern for alert timestamps")
    parser.add_argument("--config", default=None, help="Optional YAML config path")
    parser.add_argument("--log-level", default=None, help="Diagnostic log level (stderr)")
    parser.add_argument("--log-dir", default=None, help="Directory for diagnostic log files")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_config(args: argparse.Namespace) -> StaleConfig:
    overrides = {
        "delay": args.delay,
        "passthrough": args.passthrough,
        "message": args.message,
        "exit": args.exit,
        "no_rearm": args.no_rearm,
        "time_format": args.time_format,
        "log_level": args.log_level,
        "log_dir": args.log_dir,
    }
    config_path = Path(args.config) if args.config else None
    return StaleConfig.from_sources(overrides, config_path=config_path)


def main(
    argv: Optional[Sequence[str]] = None,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[TextIO] = None,
    terminate: Callable[[int], None] = terminate_process,
) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args)
    except ConfigError as exc:
        print(f"stale: error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    logger = setup_logging(config.log_dir, config.log_level)
    sink = LineSink(stdout if stdout is not None else sys.stdout)
    try:
        tracker = ActivityTracker()
        monitor = StalenessMonitor(
            tracker,
            config.threshold_ms,
            sink,
            policy=AlertPolicy(
                message=config.message,
                rearm=not config.no_rearm,
                exit_code=config.exit_code,
                time_format=config.time_format,
            ),
            terminate=terminate,
            logger=logger,
        )
        reader = InputReader(tracker, sink=sink, passthrough=config.passthrough, logger=logger)
        logger.info(
            "Watching input; stale after %ss (passthrough=%s, rearm=%s, exit=%s).",
            config.delay_seconds,
            config.passthrough,
            not config.no_rearm,
            config.exit_code,
        )
        with monitor:
            reader.run(stdin if stdin is not None else sys.stdin.buffer)
    except ClockError:
        logger.exception("Clock unavailable; stopping.")
        return EXIT_CLOCK_ERROR
    except KeyboardInterrupt:
        logger.info("Interrupted.")
        return 130
    return 0


def enable_crash_diagnostics() -> None:
    faulthandler.enable(file=sys.stderr, all_threads=True)
    logger = logging.getLogger(LOGGER_NAME)

    def _hook(exc_type, exc, tb):
        logger.critical("Unhandled exception", exc_info=(exc_type, exc, tb))
        sys.__excepthook__(exc_type, exc, tb)

    sys.excepthook = _hook
    if hasattr(threading, "excepthook"):
        def _thread_hook(args):
            logger.critical(
                "Unhandled exception in thread %s",
                args.thread.name if args.thread else "?",
                exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
            )
        threading.excepthook = _thread_hook


def run() -> None:
    """Console-script entry point."""
    enable_crash_diagnostics()
    raise SystemExit(main())
