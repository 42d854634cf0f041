"""
Rewriter LLM Client

Module-specific LLM client for the rewriter service.
Uses BaseLLMClient with rewriter-specific configuration.
"""

from core import BaseLLMClient, LLMConfig
from .config import (
    REWRITER_API_URL,
    REWRITER_CONNECTION_TIMEOUT,
    REWRITER_CONNECTION_POOL_LIMIT,
)

# Create module-specific configuration
_config = LLMConfig(
    base_url=REWRITER_API_URL,
    timeout=REWRITER_CONNECTION_TIMEOUT,
    pool_limit=REWRITER_CONNECTION_POOL_LIMIT,
    task_name="rewrite"
)

# Create module-specific client instance
_client = BaseLLMClient(_config)


def get_client() -> BaseLLMClient:
    """Shared rewriter client."""
    return _client

