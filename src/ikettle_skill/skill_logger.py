"""Rich logging setup for the iKettle skill."""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import ClassVar

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

DEFAULT_FORMAT = "[bold blue]%(name)s[/bold blue] - %(message)s"


@dataclass
class LoggerConfig:
    """Configuration for rich logger options."""

    show_time: bool = True
    show_path: bool = False
    rich_tracebacks: bool = True
    console: Console | None = None


class SkillLogger:
    """Logger factory that shares one RichHandler per configuration.

    Handlers are cached behind a lock, so every module logger in the process
    writes through the same console.
    """

    _SKILL_THEME = Theme(
        {
            "logging.level.debug": "cyan",
            "logging.level.info": "green",
            "logging.level.warning": "yellow",
            "logging.level.error": "red bold",
            "logging.level.critical": "red on white bold",
            "repr.str": "magenta",
        }
    )

    _handler_cache: ClassVar[dict[tuple, RichHandler]] = {}
    _cache_lock: ClassVar[threading.Lock] = threading.Lock()

    @classmethod
    def get_logger(
        cls,
        name: str,
        level: int | None = None,
        config: LoggerConfig | None = None,
    ) -> logging.Logger:
        """Return a logger with a cached RichHandler attached.

        Args:
            name: Logger name (typically __name__ from calling module)
            level: Optional log level override, defaults to LOG_LEVEL env var or INFO
            config: Optional LoggerConfig instance for rich formatting options

        Environment Variables:
            LOG_LEVEL: Sets default log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            RICH_NO_COLOR: Set to disable colored output
        """
        if level is None:
            env_level = os.getenv("LOG_LEVEL", "INFO").upper()
            level = getattr(logging, env_level, logging.INFO)

        if config is None:
            config = LoggerConfig()

        logger = logging.getLogger(name)
        logger.setLevel(level)

        # Only configure if not already configured
        if not logger.handlers:
            logger.addHandler(cls._get_cached_handler(config, level))

        return logger

    @classmethod
    def _get_cached_handler(cls, config: LoggerConfig, level: int) -> RichHandler:
        console_key = id(config.console) if config.console is not None else os.getenv("RICH_NO_COLOR")
        handler_key = (console_key, level, config.show_time, config.show_path, config.rich_tracebacks)

        with cls._cache_lock:
            if handler_key not in cls._handler_cache:
                console = config.console or Console(
                    theme=cls._SKILL_THEME,
                    no_color=os.getenv("RICH_NO_COLOR") is not None,
                )
                handler = RichHandler(
                    console=console,
                    show_time=config.show_time,
                    show_path=config.show_path,
                    rich_tracebacks=config.rich_tracebacks,
                    tracebacks_show_locals=level <= logging.DEBUG,
                    markup=True,
                )
                handler.setFormatter(logging.Formatter(fmt=DEFAULT_FORMAT, datefmt="[%X]"))
                cls._handler_cache[handler_key] = handler

            return cls._handler_cache[handler_key]

    @classmethod
    def clear_cache(cls) -> None:
        """Drop cached handlers, mainly for tests."""
        with cls._cache_lock:
            cls._handler_cache.clear()

    @classmethod
    def get_cache_stats(cls) -> dict[str, int]:
        with cls._cache_lock:
            return {"handlers_cached": len(cls._handler_cache)}
