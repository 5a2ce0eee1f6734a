"""
Centralized logging configuration using RichHandler.

The server and the command-line scripts share one Rich console, so progress
displays, panels and log records never interleave on separate streams.
"""
import logging
from contextlib import contextmanager
from typing import Iterable, Optional

from rich.logging import RichHandler
from rich.console import Console

# --- Module Level Variables ---
_handler_configured = False
_console = Console()  # Shared console instance

# Third-party loggers and the level they are capped at outside debug mode
NOISY_LOGGERS = {
    "urllib3": logging.WARNING,
    "requests": logging.WARNING,
}


# --- Custom Filter ---
class ModuleBlockerFilter(logging.Filter):
    """Drops records from the given logger-name prefixes while active.

    The app factory blocks per-chapter cache and upstream records while its
    startup progress bars are on screen.
    """
    def __init__(self, name=''):
        super().__init__(name)
        self.blocked_prefixes = ()
        self.blocking_active = False

    def set_blocked_prefixes(self, prefixes: Iterable[str]):
        self.blocked_prefixes = tuple(prefixes)

    def set_blocking(self, active: bool):
        self.blocking_active = active

    @contextmanager
    def blocking(self, prefixes: Optional[Iterable[str]] = None):
        """Block ``prefixes`` (or the configured ones) for the duration of the block."""
        previous = self.blocked_prefixes
        if prefixes is not None:
            self.set_blocked_prefixes(prefixes)
        self.set_blocking(True)
        try:
            yield self
        finally:
            self.set_blocking(False)
            self.blocked_prefixes = previous

    def filter(self, record: logging.LogRecord) -> bool:
        return not (self.blocking_active and record.name.startswith(self.blocked_prefixes))


_module_blocker = ModuleBlockerFilter()


def setup_logging(debug_mode: bool = False, level: Optional[int] = None):
    """
    Configures the root logger with RichHandler. Runs once per process.

    Args:
        debug_mode: DEBUG level with source paths and locals in tracebacks.
        level: Explicit level, overriding the INFO/DEBUG choice.
    """
    global _handler_configured
    if _handler_configured:
        logging.debug("Logger already configured by RichHandler.")
        return

    log_level = level if level is not None else (logging.DEBUG if debug_mode else logging.INFO)
    root_logger = logging.getLogger()

    # Remove any pre-existing handlers (e.g., basicConfig from imports)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    rich_handler = RichHandler(
        console=_console,
        show_time=True,
        show_level=True,
        show_path=debug_mode,
        markup=False,  # verse text and queries are printed verbatim
        rich_tracebacks=True,
        tracebacks_show_locals=debug_mode
    )
    rich_handler.addFilter(_module_blocker)

    root_logger.setLevel(log_level)
    root_logger.addHandler(rich_handler)

    # Werkzeug prints its own request lines
    logging.getLogger("werkzeug").propagate = False
    if not debug_mode:
        for name, cap in NOISY_LOGGERS.items():
            logging.getLogger(name).setLevel(cap)

    _handler_configured = True


def setup_script_logging(verbose: bool = False):
    """Logging for command-line scripts: warnings only unless ``verbose``."""
    setup_logging(debug_mode=verbose, level=None if verbose else logging.WARNING)


def get_console() -> Console:
    """Returns the shared Rich Console instance."""
    return _console


def get_module_blocker_filter() -> ModuleBlockerFilter:
    """Returns the shared module blocking filter instance."""
    return _module_blocker
