"""
Core rewrite flow.

One invocation runs, in order:
    resolve config -> validate model -> assemble prompt -> generate -> replace
and makes at most one remote call. Nothing is written back to the document
unless generation succeeded.
"""
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from core import BaseLLMClient, validate_required_field
from logs.logging_config import RequestContext
from .config import DEPRECATED_MODEL_NAME
from .errors import DeprecatedModelSelected, GenerationError, MissingCredential
from .prompts import assemble_request
from .resolver import ConfigResolver
from .schemas import RewriteRequest

logger = logging.getLogger(__name__)

ReplaceCallback = Callable[[str], Any]
DeprecatedCallback = Callable[[str], Any]


@dataclass(frozen=True)
class RewriteResult:
    text: str
    model: str


async def _maybe_await(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result


class RewriteOrchestrator:
    """Sequences a single rewrite."""

    def __init__(
        self,
        resolver: ConfigResolver,
        client: BaseLLMClient,
        deprecated_model: str = DEPRECATED_MODEL_NAME
    ):
        self.resolver = resolver
        self.client = client
        self.deprecated_model = deprecated_model

    async def run(
        self,
        request: RewriteRequest,
        api_key: Optional[str],
        replace: Optional[ReplaceCallback] = None,
        on_deprecated: Optional[DeprecatedCallback] = None
    ) -> RewriteResult:
        """
        Rewrite the selected text and report the model used.

        Args:
            request: Selected text and optional instruction override
            api_key: Gemini API key
            replace: Called once with the result after a successful generation
            on_deprecated: Called with the model name when the resolved model
                is deprecated, e.g. to offer model selection

        Returns:
            RewriteResult with the generated text and the model that made it

        Raises:
            MissingCredential: No API key
            DeprecatedModelSelected: Resolved model is the retired default
            GenerationError: The model call failed
        """
        with RequestContext(request.request_id) as request_id:
            try:
                validate_required_field(api_key, "API key", "Rewriter")
            except ValueError:
                raise MissingCredential(
                    "Please set the API key first by running 'Rewriter: Set API Key'"
                ) from None

            config = self.resolver.resolve(api_key)

            if config.model_name == self.deprecated_model:
                logger.warning(f"[REWRITE] Deprecated model | request_id={request_id} | model={config.model_name}")
                if on_deprecated is not None:
                    await _maybe_await(on_deprecated(config.model_name))
                raise DeprecatedModelSelected(config.model_name)

            payload = assemble_request(config, request)

            logger.info(
                f"[REWRITE] START | request_id={request_id} | chars={len(request.text)} | "
                f"model={config.model_name} | examples={len(config.examples)}"
            )
            if config.debug:
                logger.debug(f"[REWRITE] Parts | request_id={request_id} | parts={payload.parts}")

            try:
                result = await self.client.generate_text_with_logging(
                    api_key=config.api_key,
                    model=config.model_name,
                    body=payload.to_generate_body(),
                    task="rewrite"
                )
            except Exception as e:
                logger.error(f"[REWRITE] ERROR | request_id={request_id} | error={e}")
                raise GenerationError(f"Rewrite failed: {e}") from e

            logger.info(f"[REWRITE] END | request_id={request_id} | output_chars={len(result)}")

            if replace is not None:
                await _maybe_await(replace(result))

            return RewriteResult(text=result, model=config.model_name)

    async def rewrite(
        self,
        request: RewriteRequest,
        api_key: Optional[str],
        replace: Optional[ReplaceCallback] = None,
        on_deprecated: Optional[DeprecatedCallback] = None
    ) -> str:
        """Rewrite the selected text and return the generated text. See run()."""
        result = await self.run(request, api_key, replace=replace, on_deprecated=on_deprecated)
        return result.text
