"""
Logs Module

Provides:
- Logging configuration for LLM calls
- Request/Response logging
- Request id tracking
"""

from .logging_config import (
    setup_llm_logging,
    get_llm_logger,
    log_llm_request,
    log_llm_response,
    RequestContext,
    set_request_id,
    get_request_id,
    generate_request_id,
    LOG_DIR,
)

__all__ = [
    "setup_llm_logging",
    "get_llm_logger",
    "log_llm_request",
    "log_llm_response",
    "RequestContext",
    "set_request_id",
    "get_request_id",
    "generate_request_id",
    "LOG_DIR",
]
