"""
Logging utilities for httpc.
"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from lib.httpc.constants import DIAGNOSTIC_LOGGER_NAME

logger = logging.getLogger(__name__)

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
# Verbose request blocks are multi-line, a prefix on the first line only looks broken
DIAGNOSTIC_LOG_FORMAT = "%(message)s"


def getLogLevelByStr(levelStr: str, default: Optional[int] = None) -> Optional[int]:
    """Get log level by string."""
    level = getattr(logging, str(levelStr).upper(), None)
    if not isinstance(level, int):
        logger.error(f"Invalid log level '{levelStr}'")
        return default
    return level


def _resolveLevel(config: Dict[str, Any], key: str, fallback: int) -> int:
    if key not in config:
        return fallback
    level = getLogLevelByStr(config[key], fallback)
    return fallback if level is None else level


def configureLogger(localLogger: logging.Logger, config: Dict[str, Any], defaultFormat: str = DEFAULT_LOG_FORMAT) -> None:
    """Configure individual logger from config file settings.

    Recognized keys: ``propagate``, ``level``, ``format``, ``console``,
    ``console-level``, ``file``, ``file-level`` and ``rotate``.
    """

    if "propagate" in config:
        localLogger.propagate = bool(config["propagate"])

    if "level" in config:
        logLevel = getLogLevelByStr(config["level"])
        if logLevel is not None:
            localLogger.setLevel(logLevel)

    logLevel = localLogger.getEffectiveLevel()
    formatter = logging.Formatter(config.get("format", defaultFormat))

    # Clear existing handlers to avoid duplicates
    for handler in localLogger.handlers[:]:
        localLogger.removeHandler(handler)

    if config.get("console", False):
        consoleHandler = logging.StreamHandler()
        consoleHandler.setLevel(_resolveLevel(config, "console-level", logLevel))
        consoleHandler.setFormatter(formatter)
        localLogger.addHandler(consoleHandler)
        logger.info(f"Logging {localLogger.name} to console, logLevel: {consoleHandler.level}")

    if "file" in config:
        logFile = config["file"]
        try:
            Path(logFile).parent.mkdir(parents=True, exist_ok=True)

            fileHandler: logging.Handler
            if config.get("rotate", False):
                fileHandler = TimedRotatingFileHandler(
                    filename=logFile,
                    when="midnight",
                    interval=1,
                    backupCount=7,
                    encoding="utf-8",
                )
            else:
                fileHandler = logging.FileHandler(logFile, encoding="utf-8")

            fileHandler.setLevel(_resolveLevel(config, "file-level", logLevel))
            fileHandler.setFormatter(formatter)
            localLogger.addHandler(fileHandler)
            logger.info(f"Logging {localLogger.name} to file: {logFile}, logLevel: {fileHandler.level}")
        except OSError as e:
            logger.error(f"Failed to setup file logging for {localLogger.name}: {e}")


def initLogging(config: Dict[str, Any]) -> None:
    """Configure logging from the [logging] config section.

    The root logger is configured from the section itself, named loggers from
    its ``logger`` sub-tables. The verbose diagnostics logger gets a console
    handler printing bare messages unless it is configured explicitly.
    """
    rootLogger = logging.getLogger()
    rootLogger.setLevel(logging.INFO)

    configureLogger(rootLogger, config)
    logLevel = rootLogger.getEffectiveLevel()

    # httpx logs every request at INFO
    if logLevel < logging.WARNING:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

    logConfigs: Dict[str, Dict[str, Any]] = config.get("logger", {})
    if DIAGNOSTIC_LOGGER_NAME not in logConfigs:
        diagnosticLogger = logging.getLogger(DIAGNOSTIC_LOGGER_NAME)
        configureLogger(
            diagnosticLogger,
            {"level": "INFO", "console": True, "propagate": False},
            defaultFormat=DIAGNOSTIC_LOG_FORMAT,
        )

    for loggerName, loggerConfig in logConfigs.items():
        logger.debug(f"Configuring logger '{loggerName}' with config {loggerConfig}")
        defaultFormat = DIAGNOSTIC_LOG_FORMAT if loggerName == DIAGNOSTIC_LOGGER_NAME else DEFAULT_LOG_FORMAT
        configureLogger(logging.getLogger(loggerName), loggerConfig, defaultFormat=defaultFormat)

    logger.info(f"Logging configured: root level={logLevel}")
