"""Logging infrastructure with user context."""
import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional

_current_user: ContextVar[Optional[str]] = ContextVar("budgetwise_user", default=None)


def get_home_dir() -> Path:
    """Application home directory (BUDGETWISE_HOME or ~/.budgetwise)."""
    return Path(os.getenv("BUDGETWISE_HOME") or Path.home() / ".budgetwise")


class UserContextFilter(logging.Filter):
    """Add the current user to log records.

    The user lives in a context variable, so concurrent insight requests
    running on one event loop each log their own subject.
    """

    def filter(self, record):
        record.user_id = _current_user.get() or "anonymous"
        return True


class BudgetWiseLogger:
    """Centralized logging manager."""

    def __init__(
        self,
        log_level: str = "INFO",
        max_file_size_mb: int = 10,
        backup_count: int = 30,
        log_dir: Optional[Path] = None
    ):
        self.log_dir = log_dir or get_home_dir() / "logs"
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.log_file = self.log_dir / "service.log"
        self.user_filter = UserContextFilter()

        self.logger = logging.getLogger("budgetwise")
        self.logger.setLevel(getattr(logging, log_level.upper()))
        self.logger.propagate = False

        # Remove existing handlers
        self.logger.handlers.clear()

        file_handler = RotatingFileHandler(
            self.log_file,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.INFO)

        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [user:%(user_id)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

        file_handler.setFormatter(formatter)
        console_handler.setFormatter(formatter)

        file_handler.addFilter(self.user_filter)
        console_handler.addFilter(self.user_filter)

        self.logger.addHandler(file_handler)
        self.logger.addHandler(console_handler)

    def get_logger(self) -> logging.Logger:
        """Get the configured logger."""
        return self.logger


# Global logger instance
_logger_instance: Optional[BudgetWiseLogger] = None


def get_logger(log_level: str = "INFO") -> logging.Logger:
    """Get or create global logger instance."""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = BudgetWiseLogger(log_level)
    return _logger_instance.get_logger()


def configure_logging(log_level: str, max_file_size_mb: int, backup_count: int) -> logging.Logger:
    """Rebuild the global logger from application settings."""
    global _logger_instance
    _logger_instance = BudgetWiseLogger(log_level, max_file_size_mb, backup_count)
    return _logger_instance.get_logger()


def set_user_context(user_id: Optional[str]):
    """Set user context for logging in the current task."""
    _current_user.set(user_id)
