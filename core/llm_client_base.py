"""
Base LLM Client

Async client for the Gemini generative-language REST API.
Each module creates its own instance with its own configuration.

Features:
- Model catalog listing (follows page tokens)
- Content generation from an ordered list of text parts
- Connection pooling per instance
- Request/response logging

Usage:
    # In module's llm_client.py
    from core.llm_client_base import BaseLLMClient, LLMConfig

    config = LLMConfig(
        base_url="https://generativelanguage.googleapis.com/v1beta",
        task_name="rewrite"
    )

    client = BaseLLMClient(config)
    text = await client.generate_text_with_logging(api_key, model, parts, safety_settings)
"""

import time
import asyncio
import aiohttp
from dataclasses import dataclass
from typing import Optional, Dict, Any, List

from logs.logging_config import (
    get_llm_logger,
    log_llm_request,
    log_llm_response,
)

logger = get_llm_logger()

API_KEY_HEADER = "x-goog-api-key"


@dataclass
class LLMConfig:
    """
    Configuration for an LLM client instance.

    Example:
        rewriter_config = LLMConfig(
            base_url="https://generativelanguage.googleapis.com/v1beta",
            timeout=120,
            task_name="rewrite"
        )
    """
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # Connection settings
    timeout: int = 120
    pool_limit: int = 10

    # Catalog page size (server maximum is 1000)
    page_size: int = 100

    # Logging identifier
    task_name: str = "unknown"

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "base_url": self.base_url,
            "timeout": self.timeout,
            "pool_limit": self.pool_limit,
            "page_size": self.page_size,
            "task_name": self.task_name,
        }


class BaseLLMClient:
    """
    Gemini REST client with shared session handling and logging.

    Transport failures and non-2xx responses are raised as RuntimeError
    carrying the server's message; callers translate them into their own
    error types.
    """

    def __init__(self, config: LLMConfig, session: Optional[aiohttp.ClientSession] = None):
        """
        Initialize LLM client with module-specific configuration.

        Args:
            config: LLMConfig with URL and connection settings
            session: Optional pre-built session (tests inject fakes here)
        """
        self.config = config
        self._session = session

        logger.debug(
            f"[{config.task_name.upper()}_LLM] Initialized | url={config.base_url}"
        )

    @property
    def tag(self) -> str:
        return f"{self.config.task_name.upper()}_LLM"

    async def get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session for this instance."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            connector = aiohttp.TCPConnector(
                limit=self.config.pool_limit,
                limit_per_host=self.config.pool_limit
            )
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                connector=connector
            )
            logger.debug(f"[{self.tag}] Session created")
        return self._session

    async def close(self):
        """Close this instance's session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
            logger.debug(f"[{self.tag}] Session closed")

    # =====================
    # Model Catalog
    # =====================

    async def list_models(self, api_key: str) -> List[Dict[str, Any]]:
        """
        Fetch the raw model catalog, following pagination.

        Args:
            api_key: Gemini API key

        Returns:
            List of raw model entries as returned by the server
        """
        url = f"{self.config.base_url}/models"
        models: List[Dict[str, Any]] = []
        page_token: Optional[str] = None

        while True:
            params = {"pageSize": str(self.config.page_size)}
            if page_token:
                params["pageToken"] = page_token

            data = await self._request("GET", url, api_key, params=params, what="Failed to fetch models")
            page = data.get("models") if isinstance(data, dict) else None
            if page is not None and not isinstance(page, list):
                raise RuntimeError(f"Failed to fetch models: unexpected catalog page {type(page).__name__}")
            models.extend(page or [])

            page_token = data.get("nextPageToken") if isinstance(data, dict) else None
            if not page_token:
                break

        logger.debug(f"[{self.tag}] Catalog fetched | entries={len(models)}")
        return models

    # =====================
    # Generation
    # =====================

    async def generate_content(self, api_key: str, model: str, body: Dict[str, Any]) -> str:
        """
        Call generateContent for a model and return the concatenated text.

        Args:
            api_key: Gemini API key
            model: Model name without the "models/" prefix
            body: Request body (contents, safetySettings)

        Returns:
            Generated text
        """
        url = f"{self.config.base_url}/models/{model}:generateContent"
        data = await self._request("POST", url, api_key, json=body, what="Generation failed")
        return extract_text(data)

    async def generate_text_with_logging(
        self,
        api_key: str,
        model: str,
        body: Dict[str, Any],
        task: Optional[str] = None,
    ) -> str:
        """
        Generate text with request/response logging.

        Args:
            api_key: Gemini API key
            model: Model name
            body: generateContent request body
            task: Override task name for logging

        Returns:
            Generated text response
        """
        task_name = task or self.config.task_name
        prompt_text = "\n".join(
            part.get("text", "")
            for content in body.get("contents", [])
            for part in content.get("parts", [])
        )

        request_id = log_llm_request(model=model, task=task_name, prompt=prompt_text)
        start_time = time.time()

        try:
            response = await self.generate_content(api_key, model, body)
        except Exception as e:
            latency_ms = (time.time() - start_time) * 1000
            log_llm_response(
                request_id=request_id,
                model=model,
                response="",
                latency_ms=latency_ms,
                status="error",
                error_message=str(e)
            )
            raise

        latency_ms = (time.time() - start_time) * 1000
        log_llm_response(
            request_id=request_id,
            model=model,
            response=response,
            latency_ms=latency_ms,
            status="success"
        )
        return response

    # =====================
    # Transport
    # =====================

    async def _request(
        self,
        method: str,
        url: str,
        api_key: str,
        what: str,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        headers = {API_KEY_HEADER: api_key}

        logger.debug(f"[{self.tag}] {method} {url}")

        try:
            session = await self.get_session()
            async with session.request(method, url, headers=headers, params=params, json=json) as r:
                if r.status >= 400:
                    message = await _error_message(r)
                    logger.error(f"[{self.tag}] HTTP {r.status} | url={url} | error={message}")
                    raise RuntimeError(f"{what}: {message}")
                try:
                    return await r.json()
                except ValueError as e:
                    logger.error(f"[{self.tag}] Invalid JSON | url={url} | error={e}")
                    raise RuntimeError(f"{what}: invalid JSON response")

        except asyncio.TimeoutError:
            logger.error(f"[{self.tag}] Timeout | url={url}")
            raise RuntimeError(f"{what}: request timed out. Please try again.")

        except aiohttp.ClientError as e:
            logger.error(f"[{self.tag}] Request failed | url={url} | error={e}")
            raise RuntimeError(f"{what}: {e}")

    def get_backend_info(self) -> Dict[str, Any]:
        """Get information about this client's configuration."""
        return self.config.to_dict()


async def _error_message(response: aiohttp.ClientResponse) -> str:
    """Best-effort extraction of the error message from a failed response."""
    try:
        data = await response.json(content_type=None)
        message = data.get("error", {}).get("message")
        if message:
            return message
    except (ValueError, aiohttp.ContentTypeError, AttributeError):
        pass
    return f"{response.status} {response.reason or ''}".strip()


def extract_text(data: Dict[str, Any]) -> str:
    """
    Concatenate the text parts of the first candidate.

    Raises:
        RuntimeError: If the prompt was blocked or no candidate came back
    """
    candidates = data.get("candidates") or []
    if not candidates:
        feedback = data.get("promptFeedback") or {}
        reason = feedback.get("blockReason")
        if reason:
            raise RuntimeError(f"Prompt was blocked: {reason}")
        raise RuntimeError("Model returned no candidates")

    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts)
