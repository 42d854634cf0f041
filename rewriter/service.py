"""
Rewriter Service

FastAPI endpoints called by the editor plugin.
"""
import uuid
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException

from .config import (
    DEFAULT_MODEL_NAME,
    DEPRECATED_MODEL_NAME,
    REWRITER_API_KEY_HEADER,
)
from .errors import (
    RewriterError,
    MissingCredential,
    DeprecatedModelSelected,
    CatalogFetchError,
    EmptyCatalog,
    GenerationError,
)
from .runtime import RewriterRuntime, get_runtime
from .schemas import (
    RewriteRequest,
    RewriteResponse,
    ModelListResponse,
    SelectModelRequest,
    SelectModelResponse,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    MissingCredential: 401,
    DeprecatedModelSelected: 409,
    EmptyCatalog: 404,
    CatalogFetchError: 502,
    GenerationError: 502,
}


def to_http_exception(error: RewriterError) -> HTTPException:
    """Map a rewriter error to an HTTP error naming the failing phase."""
    status_code = ERROR_STATUS.get(type(error), 500)
    return HTTPException(status_code=status_code, detail=error.to_detail())


# Create router
router = APIRouter(prefix="/api/rewriter/v1", tags=["Rewriter"])


# =====================
# API Endpoints
# =====================

@router.post("/rewrite", response_model=RewriteResponse)
async def rewrite_endpoint(
    request: RewriteRequest,
    api_key: Optional[str] = Header(None, alias=REWRITER_API_KEY_HEADER),
    runtime: RewriterRuntime = Depends(get_runtime),
):
    """
    Rewrite the selected text.

    **Request Body:**
    - `request_id`: Request ID for tracking (generated if not provided)
    - `text`: Selected text (required)
    - `prompt`: Instruction for this rewrite only (optional)

    **Headers:**
    - `X-Api-Key`: Gemini API key

    **Returns:**
    - `rewritten_text`: Text to replace the selection with
    - `model`: Model used
    """
    # Generate request_id if not provided (fresh request)
    request_id = request.request_id or str(uuid.uuid4())
    request = request.model_copy(update={"request_id": request_id})

    try:
        result = await runtime.orchestrator.run(request, api_key)
    except RewriterError as e:
        logger.error(f"[REWRITE] FAILED | request_id={request_id} | phase={e.phase} | error={e.message}")
        raise to_http_exception(e)

    return RewriteResponse(
        request_id=request_id,
        original_text=request.text,
        rewritten_text=result.text,
        model=result.model,
        status="completed",
    )


@router.get("/models", response_model=ModelListResponse)
async def list_models_endpoint(
    api_key: Optional[str] = Header(None, alias=REWRITER_API_KEY_HEADER),
    runtime: RewriterRuntime = Depends(get_runtime),
):
    """
    List models that can be used for rewriting.

    **Returns:**
    - `models`: Model names without the "models/" prefix
    - `total`: Number of models
    """
    try:
        models = await runtime.selection_flow.list_models(api_key)
    except RewriterError as e:
        logger.error(f"[MODELS] FAILED | phase={e.phase} | error={e.message}")
        raise to_http_exception(e)

    return ModelListResponse(models=models, total=len(models))


@router.put("/model", response_model=SelectModelResponse)
async def select_model_endpoint(
    request: SelectModelRequest,
    runtime: RewriterRuntime = Depends(get_runtime),
):
    """
    Use a model from now on.

    The choice applies to this process immediately; `outcome` tells whether
    it was also saved to the settings store.
    """
    outcome = await runtime.selector.apply_selection(request.model)
    logger.info(f"[MODELS] Selected | model={request.model} | outcome={outcome.value}")
    return SelectModelResponse(model=request.model, outcome=outcome)


@router.get("/config")
async def get_rewriter_config(runtime: RewriterRuntime = Depends(get_runtime)):
    """
    Get the configuration a rewrite would use right now.

    **Returns:**
    - Effective model, prompt and example count, plus the default and
      deprecated model names
    - `backend`: Gemini client settings (URL, timeout, pool size)
    """
    config = runtime.resolver.resolve(api_key="")
    return {
        "model": config.model_name,
        "prompt": config.prompt,
        "example_count": len(config.examples),
        "session_override": runtime.session.model_name,
        "default_model": DEFAULT_MODEL_NAME,
        "deprecated_model": DEPRECATED_MODEL_NAME,
        "backend": runtime.client.get_backend_info(),
    }
