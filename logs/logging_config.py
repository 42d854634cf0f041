"""
LLM Logging

Central logging setup for the rewriter service:
- Rotating file handlers for requests and errors, plus console output
- Request id tracking through contextvars, injected into every record
- Helpers to log outgoing LLM requests and their responses
"""
import uuid
import logging
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import (
    LOG_DIR,
    LOG_LEVEL,
    LOG_ROTATION,
    LOG_PREVIEW_LENGTH,
    LOG_DATE_FORMAT,
    CONSOLE_FORMAT,
    FILE_FORMAT,
    LOG_FILES,
)

LLM_LOGGER_NAME = "llm"

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


# =========================
# Request Context
# =========================

def generate_request_id() -> str:
    """Generate a unique request ID."""
    return str(uuid.uuid4())


def set_request_id(request_id: Optional[str] = None) -> str:
    """Bind a request id to the current context, generating one if needed."""
    request_id = request_id or generate_request_id()
    _request_id.set(request_id)
    return request_id


def get_request_id() -> Optional[str]:
    return _request_id.get()


class RequestContext:
    """
    Context manager binding a request id for the duration of a block.

    Example:
        with RequestContext() as request_id:
            logger.info("[REWRITE] START")
    """

    def __init__(self, request_id: Optional[str] = None):
        self.request_id = request_id or generate_request_id()
        self._token = None

    def __enter__(self) -> str:
        self._token = _request_id.set(self.request_id)
        return self.request_id

    def __exit__(self, exc_type, exc, tb):
        _request_id.reset(self._token)
        return False


class RequestIdFilter(logging.Filter):
    """Attach the current request id to every record so formats can use it."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get() or "-"
        return True


# =========================
# Setup
# =========================

_configured = False


def setup_llm_logging(log_dir: Optional[Path] = None, level: str = LOG_LEVEL) -> logging.Logger:
    """
    Configure root logging handlers once per process.

    Args:
        log_dir: Directory for log files (defaults to LOG_DIR)
        level: Log level name for console and request files

    Returns:
        The LLM logger
    """
    global _configured
    if _configured:
        return get_llm_logger()

    target_dir = Path(log_dir) if log_dir else LOG_DIR
    target_dir.mkdir(parents=True, exist_ok=True)

    request_filter = RequestIdFilter()
    root = logging.getLogger()
    root.setLevel(level)

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, LOG_DATE_FORMAT))
    console.addFilter(request_filter)
    root.addHandler(console)

    for file_name, min_level in LOG_FILES.values():
        handler = RotatingFileHandler(target_dir / file_name, encoding="utf-8", **LOG_ROTATION)
        if min_level:
            handler.setLevel(min_level)
        handler.setFormatter(logging.Formatter(FILE_FORMAT, LOG_DATE_FORMAT))
        handler.addFilter(request_filter)
        root.addHandler(handler)

    _configured = True
    logger = get_llm_logger()
    logger.info(f"[LOGGING] Initialized | dir={target_dir} | level={level}")
    return logger


def get_llm_logger() -> logging.Logger:
    """Get the shared logger for LLM traffic."""
    return logging.getLogger(LLM_LOGGER_NAME)


# =========================
# Request / Response Logging
# =========================

def _preview(text: str) -> str:
    if len(text) <= LOG_PREVIEW_LENGTH:
        return text
    return text[:LOG_PREVIEW_LENGTH] + "..."


def log_llm_request(model: str, task: str, prompt: str) -> str:
    """
    Log an outgoing LLM request.

    Returns:
        The request id bound to the current context (generated if unset)
    """
    request_id = get_request_id() or set_request_id()
    get_llm_logger().info(
        f"[LLM_REQUEST] model={model} | task={task} | "
        f"prompt_chars={len(prompt)} | preview={_preview(prompt)!r}"
    )
    return request_id


def log_llm_response(
    request_id: str,
    model: str,
    response: str,
    latency_ms: float,
    status: str,
    error_message: Optional[str] = None
) -> None:
    """Log the outcome of an LLM request."""
    logger = get_llm_logger()
    if status == "success":
        logger.info(
            f"[LLM_RESPONSE] request_id={request_id} | model={model} | "
            f"latency_ms={latency_ms:.0f} | response_chars={len(response)} | "
            f"preview={_preview(response)!r}"
        )
    else:
        logger.error(
            f"[LLM_RESPONSE] request_id={request_id} | model={model} | "
            f"latency_ms={latency_ms:.0f} | status={status} | error={error_message}"
        )
