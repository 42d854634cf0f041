"""
Schemas for the Rewriter service.
"""
from enum import Enum
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field

from .config import (
    HARM_CATEGORIES,
    SAFETY_THRESHOLD,
    MODEL_NAME_PREFIX,
)


# =====================
# Core Types
# =====================

class EffectiveConfig(BaseModel):
    """Configuration resolved for a single rewrite."""
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    api_key: str = Field(..., repr=False, description="Gemini API key")
    model_name: str = Field(..., description="Model used for generation")
    prompt: str = Field(default="", description="Configured instruction")
    examples: Dict[str, str] = Field(
        default_factory=dict,
        description="Few-shot examples, input -> output, replayed in insertion order"
    )
    debug: bool = Field(default=False, description="Log the assembled request")


class RewriteRequest(BaseModel):
    """Request model for rewriting selected text."""
    request_id: Optional[str] = Field(None, description="Request ID for tracking (generated if not provided)")
    text: str = Field(..., description="Selected text to rewrite", min_length=1)
    prompt: Optional[str] = Field(None, description="Instruction for this rewrite only (overrides configured prompt)")


class RequestPayload(BaseModel):
    """Ordered prompt parts sent to the model."""
    parts: List[str] = Field(..., description="instruction/input/output parts in send order")

    def to_generate_body(self) -> Dict[str, Any]:
        """Render the generateContent request body."""
        return {
            "contents": [
                {"role": "user", "parts": [{"text": part} for part in self.parts]}
            ],
            "safetySettings": safety_settings(),
        }


class ModelDescriptor(BaseModel):
    """A catalog entry, name stripped of its "models/" prefix."""
    name: str
    display_name: str = ""
    supported_generation_methods: List[str] = Field(default_factory=list)

    @classmethod
    def from_api(cls, entry: Dict[str, Any]) -> "ModelDescriptor":
        """
        Raises:
            ValueError: If the entry is not a catalog object or has bad field types
        """
        if not isinstance(entry, dict):
            raise ValueError(f"Catalog entry is not an object: {entry!r}")
        name = entry.get("name") or ""
        if not isinstance(name, str):
            raise ValueError(f"Catalog entry name is not text: {name!r}")
        if name.startswith(MODEL_NAME_PREFIX):
            name = name[len(MODEL_NAME_PREFIX):]
        return cls(
            name=name,
            display_name=entry.get("displayName") or "",
            supported_generation_methods=entry.get("supportedGenerationMethods") or [],
        )

    def supports(self, method: str) -> bool:
        return method in set(self.supported_generation_methods)


class SelectionOutcome(str, Enum):
    """Which persistence branch a model selection took."""
    PERSISTED = "persisted"
    SESSION_ONLY = "session_only"
    PERSIST_FAILED = "persist_failed"


def safety_settings() -> List[Dict[str, str]]:
    """All four harm categories at the most permissive threshold."""
    return [
        {"category": category, "threshold": SAFETY_THRESHOLD}
        for category in HARM_CATEGORIES
    ]


# =====================
# API Models
# =====================

class RewriteResponse(BaseModel):
    """Response model for a rewrite."""
    model_config = ConfigDict(protected_namespaces=())

    request_id: str = Field(..., description="Request ID for tracking")
    original_text: str = Field(..., description="Original selected text")
    rewritten_text: str = Field(..., description="Text to put in place of the selection")
    model: str = Field(..., description="Model used")
    status: str = Field(default="completed", description="Processing status")


class ModelListResponse(BaseModel):
    """Models that support rewriting."""
    models: List[str] = Field(..., description="Model names without prefix")
    total: int = Field(..., description="Number of models")


class SelectModelRequest(BaseModel):
    """Request model for choosing a model."""
    model: str = Field(..., description="Model name to use", min_length=1)


class SelectModelResponse(BaseModel):
    """Result of choosing a model."""
    model: str = Field(..., description="Model now in use")
    outcome: SelectionOutcome = Field(..., description="Whether the choice was persisted")
