from .logging import LOG_LEVELS, LogMessage, level_at_least

__all__ = ["LOG_LEVELS", "LogMessage", "level_at_least"]
