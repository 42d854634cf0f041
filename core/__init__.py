"""
Core Module

Shared infrastructure components for all modules:
- Gemini LLM client base class
- Validators
"""

from .llm_client_base import BaseLLMClient, LLMConfig, extract_text
from .validators import validate_required_field

__all__ = [
    "BaseLLMClient",
    "LLMConfig",
    "extract_text",
    "validate_required_field",
]
