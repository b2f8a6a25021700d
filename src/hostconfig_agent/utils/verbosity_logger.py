"""
Level-filtering logger for hostconfig-agent.

Supports pipe-separated level configuration such as "INFO|ERROR", where only
the listed levels are emitted.
"""

import logging
from typing import Set

DEFAULT_LEVELS = "INFO|WARNING|ERROR|CRITICAL"


def parse_levels(level_config: str) -> Set[int]:
    """Parse "INFO|ERROR" style configuration into logging level constants."""
    enabled_levels = set()
    for level_name in (level_config or "").split("|"):
        level = logging.getLevelName(level_name.strip().upper())
        if isinstance(level, int):
            enabled_levels.add(level)
    return enabled_levels or parse_levels(DEFAULT_LEVELS)


class FlexibleLogger:
    """
    Logger that only emits the levels named in the configuration.

    Examples:
    - "DEBUG" - Only debug messages
    - "INFO|ERROR" - Only info and error messages
    - "INFO|WARNING|ERROR|CRITICAL" - Standard operational logging
    """

    def __init__(self, name: str, config_manager=None):
        self.logger = logging.getLogger(name)
        self.name = name
        level_config = (
            config_manager.get_log_levels() if config_manager else DEFAULT_LEVELS
        )
        self.enabled_levels = parse_levels(level_config)

    def _should_log(self, level: int) -> bool:
        return level in self.enabled_levels

    def debug(self, msg: str, *args, **kwargs):
        """Log debug message if enabled."""
        if self._should_log(logging.DEBUG):
            self.logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        """Log info message if enabled."""
        if self._should_log(logging.INFO):
            self.logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        """Log warning message if enabled."""
        if self._should_log(logging.WARNING):
            self.logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        """Log error message if enabled."""
        if self._should_log(logging.ERROR):
            self.logger.error(msg, *args, **kwargs)

    def critical(self, msg: str, *args, **kwargs):
        """Log critical message if enabled."""
        if self._should_log(logging.CRITICAL):
            self.logger.critical(msg, *args, **kwargs)


def get_logger(name: str, config_manager=None) -> FlexibleLogger:
    """Get a level-filtering logger."""
    return FlexibleLogger(name, config_manager)
