"""
Rewriter Module

Rewrites selected editor text with a Gemini model, using a configured
instruction and few-shot examples.
"""
from .service import router

__all__ = ["router"]
