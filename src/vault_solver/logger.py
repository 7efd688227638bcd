"""Logging setup shared by the solver CLI and pipeline.

Records go to stderr so the settlement JSON on stdout stays parseable.
"""

import logging
import os
import sys

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chatty at DEBUG; only shown at TRACE.
RPC_LOGGERS = ("web3", "urllib3")


class ColoredFormatter(logging.Formatter):
    """Formatter that paints the level name with an ANSI colour."""

    LEVEL_COLORS = {
        "TRACE": "\033[90m",
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"
    BOLD = "\033[1m"

    def __init__(self, *args, use_color: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelname)
        if not self.use_color or color is None:
            return super().format(record)

        plain = record.levelname
        record.levelname = f"{color}{self.BOLD}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            # other handlers may format the same record
            record.levelname = plain


def resolve_level(log_level: str | None = None) -> int:
    """Map a level name (or LOG_LEVEL from the environment) to a level number.

    Unknown names fall back to INFO.
    """
    name = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if name == "TRACE":
        return TRACE
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(log_level: str | None = None) -> None:
    """Install a single stderr handler on the root logger.

    Colours are used only when stderr is a terminal. At DEBUG the web3 and
    urllib3 loggers are held at WARNING; at TRACE they log everything.
    """
    level = resolve_level(log_level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ColoredFormatter(
            fmt=LOG_FORMAT, datefmt=DATE_FORMAT, use_color=sys.stderr.isatty()
        )
    )
    logging.basicConfig(level=level, handlers=[handler], force=True)

    rpc_level = TRACE if level == TRACE else max(level, logging.WARNING)
    for name in RPC_LOGGERS:
        logging.getLogger(name).setLevel(rpc_level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
