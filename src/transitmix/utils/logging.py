"""Simple and elegant logging setup with configurable verbosity."""

import logging
import os
from enum import Enum

from tqdm import tqdm


class LogLevel(Enum):
    """Verbosity levels for Transitmix output."""

    QUIET = 0  # errors only
    NORMAL = 1  # progress and results
    VERBOSE = 2  # plus per-stage details
    DEBUG = 3  # everything


_PYTHON_LEVELS = {
    LogLevel.QUIET: logging.ERROR,
    LogLevel.NORMAL: logging.INFO,
    LogLevel.VERBOSE: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}


class Colors:
    """ANSI color codes for prettier output."""

    CYAN = "\033[36m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    MAGENTA = "\033[35m"
    BLUE = "\033[34m"
    GRAY = "\033[37m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


class Symbols:
    """Unicode symbols for status indicators."""

    CHECK = "✓"
    CROSS = "✗"
    WARNING = "⚠"
    ROCKET = "🚀"
    GEAR = "⚙️"
    PACKAGE = "📦"
    BUS = "🚌"
    CHART = "📊"
    CLOCK = "⏱"


class SimpleFormatter(logging.Formatter):
    """Clean formatter with colors for better readability."""

    def format(self, record):
        color = {
            "DEBUG": Colors.GRAY,
            "INFO": Colors.CYAN,
            "WARNING": Colors.YELLOW,
            "ERROR": Colors.RED,
            "CRITICAL": Colors.RED + Colors.BOLD,
        }.get(record.levelname, Colors.RESET)

        # Use record.getMessage() to include formatting with args
        message = record.getMessage()
        return f"{color}{message}{Colors.RESET}"


class TransitmixLogger:
    """Central registry of loggers sharing one verbosity level."""

    _current_level: LogLevel = LogLevel.NORMAL
    _loggers: dict[str, logging.Logger] = {}

    @classmethod
    def set_level(cls, level: LogLevel) -> None:
        cls._current_level = level
        for logger in cls._loggers.values():
            cls._configure_logger_level(logger, level)

    @classmethod
    def get_level(cls) -> LogLevel:
        return cls._current_level

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if name not in cls._loggers:
            logger = logging.getLogger(name)
            cls._configure_logger_level(logger, cls._current_level)
            cls._loggers[name] = logger
        return cls._loggers[name]

    @classmethod
    def _configure_logger_level(cls, logger: logging.Logger, level: LogLevel) -> None:
        # An effective level exported by setup_logging wins, so that worker
        # processes and late-created loggers agree with the CLI flags.
        env_level = os.environ.get("TRANSITMIX_EFFECTIVE_LOG_LEVEL")
        if env_level:
            try:
                level = LogLevel[env_level.upper()]
            except KeyError:
                pass
        logger.setLevel(_PYTHON_LEVELS[level])

    @classmethod
    def _root(cls) -> logging.Logger:
        return cls.get_logger("transitmix")

    @classmethod
    def progress(cls, message: str, symbol: str = Symbols.GEAR) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls._root().info(f"{Colors.BLUE}{symbol} {message}{Colors.RESET}")

    @classmethod
    def success(cls, message: str, symbol: str = Symbols.CHECK) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls._root().info(f"{Colors.GREEN}{symbol} {message}{Colors.RESET}")

    @classmethod
    def info(cls, message: str) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls._root().info(message)

    @classmethod
    def detail(cls, message: str, indent: str = "  ") -> None:
        if cls._current_level.value >= LogLevel.VERBOSE.value:
            cls._root().info(f"{Colors.GRAY}{indent}{message}{Colors.RESET}")

    @classmethod
    def debug(cls, message: str, logger_name: str = "transitmix") -> None:
        if cls._current_level.value >= LogLevel.DEBUG.value:
            cls.get_logger(logger_name).debug(message)

    @classmethod
    def warning(cls, message: str, symbol: str = Symbols.WARNING) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls._root().warning(f"{Colors.YELLOW}{symbol} {message}{Colors.RESET}")

    @classmethod
    def error(cls, message: str, symbol: str = Symbols.CROSS) -> None:
        cls._root().error(f"{Colors.RED}{symbol} {message}{Colors.RESET}")


THIRD_PARTY_LOGGERS = ("numpy", "pandas", "yaml")


def suppress_third_party_logs() -> None:
    """Keep the loggers of libraries we depend on at WARNING."""
    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging(level: LogLevel | None = None) -> None:
    """Configure clean and simple logging.

    Without an explicit level, ``TRANSITMIX_LOG_LEVEL`` (quiet, normal,
    verbose, debug) is honoured, falling back to NORMAL.
    """
    if level is None:
        env_level = os.environ.get("TRANSITMIX_LOG_LEVEL", "normal").upper()
        level = LogLevel.__members__.get(env_level, LogLevel.NORMAL)

    os.environ["TRANSITMIX_EFFECTIVE_LOG_LEVEL"] = level.name

    root = logging.getLogger()
    root.setLevel(_PYTHON_LEVELS[level])
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    console = logging.StreamHandler()
    console.setFormatter(SimpleFormatter())
    root.addHandler(console)

    suppress_third_party_logs()
    TransitmixLogger.set_level(level)


class ProgressTracker:
    """Simple progress tracking with tqdm, silent in QUIET mode."""

    def __init__(self, steps):
        self.steps = steps
        self.current = 0
        self.pbar = None
        if TransitmixLogger.get_level() != LogLevel.QUIET:
            self.pbar = tqdm(
                total=len(steps),
                desc=f"{Colors.BLUE}{Symbols.ROCKET} Planning Progress{Colors.RESET}",
                bar_format="{desc}: {percentage:3.0f}%|{bar}| {n_fmt}/{total_fmt}",
            )

        self.status_formats = {
            "success": f"{Colors.GREEN}{Symbols.CHECK}",
            "warning": f"{Colors.YELLOW}{Symbols.WARNING}",
            "error": f"{Colors.RED}{Symbols.CROSS}",
            "info": f"{Colors.CYAN}{Symbols.PACKAGE}",
        }

    def advance(self, message=None, status="success"):
        """Advance progress bar and optionally log a message."""
        self.current += 1
        if self.pbar is None:
            return
        if message:
            prefix = self.status_formats.get(status, "")
            self.pbar.write(f"{prefix} {message}{Colors.RESET}")
        self.pbar.update(1)

    def close(self):
        """Clean up progress bar."""
        if self.pbar is None:
            return
        self.pbar.write(f"\n{Colors.GREEN}{Symbols.ROCKET} Planning completed!{Colors.RESET}\n")
        self.pbar.close()


def log_progress(message: str) -> None:
    TransitmixLogger.progress(message, Symbols.GEAR)


def log_success(message: str) -> None:
    TransitmixLogger.success(message, Symbols.CHECK)


def log_info(message: str) -> None:
    TransitmixLogger.info(message)


def log_detail(message: str) -> None:
    TransitmixLogger.detail(message, "  ")


def log_warning(message: str) -> None:
    TransitmixLogger.warning(message, Symbols.WARNING)


def log_error(message: str) -> None:
    TransitmixLogger.error(message, Symbols.CROSS)


def log_debug(message: str, logger_name: str = "transitmix") -> None:
    TransitmixLogger.debug(message, logger_name)
