"""
Centralized logging configuration for the Cognitive Memory Engine
==================================================================

Provides standardized logging with:
- Consistent logger instances across all modules
- Structured JSON logging for production
- Correlation IDs tying a ranking or reinforcement call to its caller
- Configurable log levels and formats
"""

import logging
import json
import sys
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, Iterator, Optional
from contextvars import ContextVar
from pathlib import Path

from ..config import ConfigManager, get_config

# Context variable for correlation ID tracking
correlation_id: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)

_RESERVED_RECORD_KEYS = frozenset([
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'message', 'exc_info',
    'exc_text', 'stack_info', 'correlation_id', 'taskName'
])


class CorrelationFilter(logging.Filter):
    """Add correlation ID to log records for request tracing"""

    def filter(self, record):
        record.correlation_id = correlation_id.get() or 'none'
        return True


class StructuredFormatter(logging.Formatter):
    """JSON structured logging formatter for production monitoring"""

    def format(self, record):
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
            'correlation_id': getattr(record, 'correlation_id', 'none')
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        # Extra fields passed through `extra=`
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable console formatter for development"""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record):
        corr_id = getattr(record, 'correlation_id', 'none')
        corr_display = f"[{corr_id[:8]}]" if corr_id != 'none' else ""

        color = self.COLORS.get(record.levelname, '')
        reset = self.COLORS['RESET']
        colored_level = f"{color}{record.levelname:8s}{reset}"

        timestamp = datetime.fromtimestamp(record.created).strftime('%H:%M:%S.%f')[:-3]

        return f"{timestamp} {colored_level} {record.name:30s} {corr_display} {record.getMessage()}"


class LoggingManager:
    """
    Centralized logging configuration manager

    Handles:
    - Logger creation with consistent naming
    - Root handler setup from configuration, on request only
    - Correlation ID management for call tracing
    - Structured vs console output selection

    Creating a manager never touches the root logger. Applications that want
    the engine's handlers call `setup_logging()` once at startup.
    """

    def __init__(self, config: Optional[ConfigManager] = None):
        self.config = config
        self.loggers: Dict[str, logging.Logger] = {}

    def setup_root_logging(self):
        """Replace the root logger's handlers with the configured ones"""
        if self.config is None:
            self.config = get_config()

        log_level_str = self.config.logging.log_level
        log_level = getattr(logging, log_level_str.upper(), logging.INFO)

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.setLevel(log_level)

        correlation_filter = CorrelationFilter()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)

        if self.config.logging.debug_mode:
            console_formatter = ConsoleFormatter()
        else:
            console_formatter = StructuredFormatter()

        console_handler.setFormatter(console_formatter)
        console_handler.addFilter(correlation_filter)
        root_logger.addHandler(console_handler)

        log_file = self.config.logging.log_file
        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_path)
            file_handler.setLevel(log_level)

            # Always use structured format for file output
            file_handler.setFormatter(StructuredFormatter())
            file_handler.addFilter(correlation_filter)
            root_logger.addHandler(file_handler)

    def get_logger(self, name: str) -> logging.Logger:
        """
        Get a standardized logger instance

        Args:
            name: Logger name (typically __name__ from calling module)

        Returns:
            Logger instance; output goes wherever the host routes it
        """
        if name not in self.loggers:
            self.loggers[name] = logging.getLogger(name)

        return self.loggers[name]

    def set_correlation_id(self, corr_id: Optional[str] = None) -> str:
        """
        Set correlation ID for call tracing

        Args:
            corr_id: Optional correlation ID. If None, generates a new UUID

        Returns:
            The correlation ID that was set
        """
        if corr_id is None:
            corr_id = str(uuid.uuid4())

        correlation_id.set(corr_id)
        return corr_id

    def clear_correlation_id(self):
        """Clear the current correlation ID"""
        correlation_id.set(None)

    def get_correlation_id(self) -> Optional[str]:
        """Get the current correlation ID"""
        return correlation_id.get()


# Global logging manager instance
_logging_manager: Optional[LoggingManager] = None


def _get_manager() -> LoggingManager:
    global _logging_manager
    if _logging_manager is None:
        _logging_manager = LoggingManager()
    return _logging_manager


def setup_logging(config: Optional[ConfigManager] = None) -> LoggingManager:
    """
    Install the engine's console and file handlers on the root logger

    Opt-in: importing the package or building a MemoryEngine leaves the
    host's logging alone.

    Usage:
        config = init_config()
        setup_logging(config)
        engine = MemoryEngine(config)

    Args:
        config: Configuration to read LOG_LEVEL, DEBUG_MODE and LOG_FILE from
            (default: the global configuration)

    Returns:
        The logging manager now in use
    """
    global _logging_manager
    _logging_manager = LoggingManager(config)
    _logging_manager.setup_root_logging()
    return _logging_manager


def get_logger(name: str) -> logging.Logger:
    """
    Get a standardized logger instance

    Usage:
        from cognitive_memory.logging import get_logger
        logger = get_logger(__name__)
        logger.info("Ranked memories")

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Logger instance
    """
    return _get_manager().get_logger(name)


def set_correlation_id(corr_id: Optional[str] = None) -> str:
    """
    Set correlation ID for call tracing

    Args:
        corr_id: Optional correlation ID. If None, generates a new UUID

    Returns:
        The correlation ID that was set
    """
    return _get_manager().set_correlation_id(corr_id)


def clear_correlation_id():
    """Clear the current correlation ID"""
    _get_manager().clear_correlation_id()


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID"""
    return _get_manager().get_correlation_id()


@contextmanager
def correlation_scope(corr_id: Optional[str] = None) -> Iterator[str]:
    """
    Context manager that tags every log line inside it with one correlation ID

    Usage:
        with correlation_scope(memory_id):
            engine.reinforce(state, quality)
    """
    old_id = get_correlation_id()
    new_id = set_correlation_id(corr_id)
    try:
        yield new_id
    finally:
        if old_id:
            set_correlation_id(old_id)
        else:
            clear_correlation_id()
