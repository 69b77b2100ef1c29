from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = "polysite"

LEVEL_PREFIXES = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "ERROR",
}

# GitHub Actions workflow commands; INFO is printed as-is.
ACTIONS_COMMANDS = {
    logging.DEBUG: "::debug::",
    logging.WARNING: "::warning::",
    logging.ERROR: "::error::",
    logging.CRITICAL: "::error::",
}


def running_in_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS") is not None


class ConsoleFormatter(logging.Formatter):
    """Formats records as ``[LEVEL] message`` or as workflow commands in CI."""

    def __init__(self, actions: Optional[bool] = None) -> None:
        super().__init__("%(message)s")
        self.actions = running_in_actions() if actions is None else actions

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if self.actions:
            command = ACTIONS_COMMANDS.get(record.levelno, "")
            if command:
                # Workflow commands are single-line; escape the rest.
                message = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
            return f"{command}{message}"
        prefix = LEVEL_PREFIXES.get(record.levelno, "LOG")
        return f"[{prefix}] {message}"


def get_logger(name: str = "") -> logging.Logger:
    if not name:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def setup_logging(verbose: bool = False, log_file: Optional[Path] = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.propagate = False

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.DEBUG if verbose else logging.INFO)
    console.setFormatter(ConsoleFormatter())
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
        logger.addHandler(file_handler)
        logger.debug("Logging to %s", log_file)
    return logger
