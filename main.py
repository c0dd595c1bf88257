"""CLI entry point for the EvolveTrade launcher."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import NoReturn, Optional, Sequence

from evolvetrade import __version__
from evolvetrade.config_manager import ConfigError, ConfigManager, LauncherSettings, LoggingSettings
from evolvetrade.engine import DEFAULT_ENTRY_POINT, EngineError, EntryPoint, load_entry_point

logger = logging.getLogger("evolvetrade.cli")

PROG = "evolvetrade"

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


class UsageError(Exception):
    """Raised when the command line cannot be parsed."""

    def __init__(self, message: str, usage: str = "") -> None:
        super().__init__(message)
        self.usage = usage


class InformationalExit(Exception):
    """Raised after help or version text has been printed."""

    def __init__(self, status: int = EXIT_SUCCESS) -> None:
        super().__init__(status)
        self.status = status


class LaunchArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting the interpreter."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message, usage=self.format_usage())

    def exit(self, status: int = 0, message: Optional[str] = None) -> NoReturn:
        if message:
            self._print_message(message, sys.stderr)
        raise InformationalExit(status)


@dataclass(frozen=True)
class LaunchConfig:
    verbose: bool = False


@dataclass
class AppContext:
    manager: ConfigManager
    settings: LauncherSettings


def configure_logging(verbose: bool, settings: Optional[LoggingSettings] = None) -> None:
    settings = settings or LoggingSettings()
    level = logging.DEBUG if verbose else settings.level_number()
    logging.basicConfig(level=level, format=settings.format, stream=sys.stdout)


def build_context() -> AppContext:
    manager = ConfigManager()
    settings = manager.load()
    return AppContext(manager=manager, settings=settings)


def report_error(message: str) -> None:
    print(f"error: {message}", file=sys.stderr)


def build_parser() -> LaunchArgumentParser:
    parser = LaunchArgumentParser(
        prog=PROG,
        description="EvolveTrade - evolutionary trading engine launcher",
        allow_abbrev=False,
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    return parser


def parse_launch_args(argv: Optional[Sequence[str]] = None) -> LaunchConfig:
    args = build_parser().parse_args(argv)
    return LaunchConfig(verbose=args.verbose)


def launch(config: LaunchConfig, runner: Optional[EntryPoint] = None) -> int:
    if runner is None:
        runner = load_entry_point(DEFAULT_ENTRY_POINT)

    logger.debug("Starting orchestration (verbose=%s)", config.verbose)
    try:
        runner(config.verbose)
    except EngineError as exc:
        report_error(str(exc) or exc.__class__.__name__)
        logger.debug("Orchestration failed", exc_info=True)
        return EXIT_FAILURE
    except Exception as exc:  # pylint: disable=broad-except
        report_error(str(exc) or exc.__class__.__name__)
        logger.debug("Unexpected error raised by orchestration", exc_info=True)
        return EXIT_FAILURE

    logger.debug("Orchestration completed")
    return EXIT_SUCCESS


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        config = parse_launch_args(argv)
    except InformationalExit as exc:
        return exc.status
    except UsageError as exc:
        if exc.usage:
            sys.stderr.write(exc.usage)
        print(f"{PROG}: error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    try:
        ctx = build_context()
        configure_logging(config.verbose, ctx.settings.logging)
        runner = load_entry_point(ctx.settings.engine.entry_point)
    except ConfigError as exc:
        report_error(str(exc))
        return EXIT_FAILURE

    return launch(config, runner)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
