"""
VortexTau Logging Configuration - Color-Coded Console Logs

Provides:
- ColorFormatter: ANSI color-coded log output
- Helper functions: log_request, log_message_in, log_message_out, log_search, log_llm
- setup_logging(): Configure application logging (stdout + optional log file)

Usage:
    from vortextau.logging_config import setup_logging, log_message_in
    setup_logging()
    logger = logging.getLogger(__name__)
    log_message_in(logger, "User question", model="plutus")
"""

import logging
import sys
from pathlib import Path
from typing import Optional

# ANSI color codes
COLORS = {
    "RESET": "\033[0m",
    "BOLD": "\033[1m",
    "DIM": "\033[2m",
    # Event colors
    "REQUEST": "\033[90m",  # Gray - HTTP requests
    "MSG_IN": "\033[96m",  # Cyan - incoming message
    "MSG_OUT": "\033[92m",  # Green - outgoing response
    "SEARCH": "\033[93m",  # Yellow - web search
    "LLM": "\033[94m",  # Blue - LLM operations
    "ERROR": "\033[91m",  # Red - errors
    "WARN": "\033[33m",  # Orange/Yellow - warnings
    "DEBUG": "\033[90m",  # Gray - debug info
}

FILE_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


class ColorFormatter(logging.Formatter):
    """Custom formatter with colors for different log levels."""

    LEVEL_COLORS = {
        logging.DEBUG: COLORS["DEBUG"],
        logging.INFO: COLORS["RESET"],
        logging.WARNING: COLORS["WARN"],
        logging.ERROR: COLORS["ERROR"],
        logging.CRITICAL: COLORS["ERROR"] + COLORS["BOLD"],
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, COLORS["RESET"])

        # Format: timestamp [LEVEL] message (no module name for compactness)
        timestamp = self.formatTime(record, "%H:%M:%S")
        level = record.levelname[:4]

        formatted = (
            f"{COLORS['DIM']}{timestamp}{COLORS['RESET']} "
            f"[{color}{level}{COLORS['RESET']}] "
            f"{record.getMessage()}"
        )

        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)

        return formatted


def setup_logging(level: int | str = logging.INFO, log_file: Optional[str] = None) -> None:
    """Configure colored logging for the application.

    Args:
        level: Root log level (int or level name)
        log_file: Optional path; when set, plain-text records are appended there too
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ColorFormatter())
    handlers: list = [handler]

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(file_handler)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = handlers

    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# =============================================================================
# COLORED LOG HELPER FUNCTIONS
# =============================================================================


def _preview(text: str, limit: int = 80) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def log_request(logger: logging.Logger, method: str, path: str) -> None:
    """Log an incoming HTTP request."""
    logger.info(f"{COLORS['REQUEST']}--- REQUEST{COLORS['RESET']} {method} {path}")


def log_message_in(logger: logging.Logger, message: str, **context) -> None:
    """Log incoming user message.

    Args:
        logger: Logger instance
        message: User message text
        **context: Additional context (model, history, augmented, etc.)
    """
    ctx = " ".join(f"{k}={v}" for k, v in context.items())
    logger.info(f"{COLORS['MSG_IN']}>>> MESSAGE{COLORS['RESET']} {_preview(message)} [{ctx}]")


def log_message_out(logger: logging.Logger, chars: int, fragments: int, status: str = "completed") -> None:
    """Log outgoing streamed response.

    Args:
        logger: Logger instance
        chars: Total characters streamed
        fragments: Number of fragments relayed
        status: Final stream state
    """
    logger.info(
        f"{COLORS['MSG_OUT']}<<< RESPONSE{COLORS['RESET']} "
        f"status={status} fragments={fragments} chars={chars}"
    )


def log_search(logger: logging.Logger, state: str, **context) -> None:
    """Log web search execution.

    Args:
        logger: Logger instance
        state: 'start' or 'end'
        **context: Additional context (query, results, etc.)
    """
    ctx = " ".join(f"{k}={v}" for k, v in context.items()) if context else ""
    if state == "start":
        logger.info(f"{COLORS['SEARCH']}>>> SEARCH{COLORS['RESET']} {ctx}")
    else:
        logger.info(f"{COLORS['SEARCH']}<<< SEARCH{COLORS['RESET']} {ctx}")


def log_llm(
    logger: logging.Logger,
    state: str,
    model: str = "",
    duration: float = 0,
) -> None:
    """Log LLM call.

    Args:
        logger: Logger instance
        state: 'start' or 'end'
        model: Model name
        duration: Call duration in seconds (for end state)
    """
    if state == "start":
        logger.info(f"{COLORS['LLM']}>>> LLM{COLORS['RESET']} calling {model}")
    else:
        logger.info(f"{COLORS['LLM']}<<< LLM{COLORS['RESET']} " f"{model} completed in {duration:.1f}s")
