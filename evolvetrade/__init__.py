"""EvolveTrade launcher package."""

from .config_manager import ConfigError, ConfigManager, LauncherSettings  # noqa: F401
from .engine import EngineError, load_entry_point, run  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "ConfigManager",
    "EngineError",
    "LauncherSettings",
    "__version__",
    "load_entry_point",
    "run",
]
