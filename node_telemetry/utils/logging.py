from typing import Any, Optional
from node_telemetry.config.logging import class_color_map, LoggerAdapter
from colorlog import ColoredFormatter, StreamHandler
import logging


class Logger:
    def __init__(self, name: str, type: str, level: str = "info"):
        self.name = name
        self.type = type

        def get_color(type, level):
            return class_color_map.get(type, {}).get(level, "white")

        colors = {
            "DEBUG": get_color(self.type, "DEBUG"),
            "INFO": get_color(self.type, "INFO"),
            "WARNING": get_color(self.type, "WARNING"),
            "ERROR": get_color(self.type, "ERROR"),
            "CRITICAL": get_color(self.type, "CRITICAL"),
        }
        self.formatter = ColoredFormatter(
            "%(asctime)s %(log_color)s%(class_name)s:%(levelname)s%(reset)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors=colors,
            reset=True,
        )

        self._logger = logging.getLogger(f"node_telemetry.{self.name}")
        self._logger.setLevel(getattr(logging, level.upper()))
        self._logger.propagate = False

        # Ensure no duplicate handlers are added
        if not self._logger.handlers:
            handler = StreamHandler()
            handler.setFormatter(self.formatter)
            self._logger.addHandler(handler)

        self.logger = LoggerAdapter(self._logger, {"class_name": self.name})

    def get_logger(self):
        return self._logger

    def child(self, name: str, type: Optional[str] = None) -> "Logger":
        """Create a logger for a sub-component, inheriting this logger's level."""
        level = logging.getLevelName(self._logger.level).lower()
        return Logger(f"{self.name}.{name}", type or self.type, level)

    def log(self, message: str, level: str = "info", exc_info=None):
        self.logger.log(getattr(logging, level.upper()), message, exc_info=exc_info)

    def info(self, message: Any):
        self.logger.info(msg=message)

    def debug(self, message: str):
        self.logger.debug(msg=message)

    def error(self, message: str, exc_info=True):
        self.logger.error(msg=message, exc_info=exc_info)

    def warning(self, message: str, exc_info=None):
        self.logger.warning(msg=message, exc_info=exc_info)

    def critical(self, message: str, exc_info=True):
        self.logger.critical(msg=message, exc_info=exc_info)
