"""Orchestration entry point boundary for EvolveTrade."""

from __future__ import annotations

import importlib
import logging
from typing import Callable

from evolvetrade.config_manager import ConfigError, split_entry_point

LOGGER = logging.getLogger(__name__)

EntryPoint = Callable[[bool], object]

DEFAULT_ENTRY_POINT = "evolvetrade.engine:run"


class EngineError(Exception):
    """Raised by an orchestration routine when a run fails."""


def run(verbose: bool) -> None:
    """Default orchestration entry point."""
    LOGGER.info("EvolveTrade engine starting")
    if verbose:
        LOGGER.debug("Verbose output enabled")
    LOGGER.info("EvolveTrade engine finished")


def load_entry_point(path: str) -> EntryPoint:
    """Resolve a ``module:function`` path to the orchestration callable."""
    module_name, attribute = split_entry_point(path)
    if not module_name or not attribute:
        raise ConfigError(f"Entry point must look like 'module:function', got '{path}'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigError(f"Unable to import entry point module '{module_name}': {exc}") from exc

    target = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise ConfigError(f"Entry point '{path}' not found") from exc

    if not callable(target):
        raise ConfigError(f"Entry point '{path}' is not callable")

    LOGGER.debug("Resolved entry point %s", path)
    return target


__all__ = ["DEFAULT_ENTRY_POINT", "EngineError", "EntryPoint", "load_entry_point", "run"]
