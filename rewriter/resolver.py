"""
Configuration resolution.

Model name precedence, highest first:
1. Session override (model chosen during this process)
2. Stored `rewriter.model`
3. DEFAULT_MODEL_NAME
"""
import logging
from typing import Any, Dict

from .config import DEFAULT_MODEL_NAME, REWRITER_DEBUG
from .schemas import EffectiveConfig
from .session import SessionState
from .settings_store import SettingsStore, MODEL_KEY, PROMPT_KEY, EXAMPLES_KEY

logger = logging.getLogger(__name__)


class ConfigResolver:
    """Builds a fresh EffectiveConfig for every rewrite."""

    def __init__(
        self,
        session: SessionState,
        store: SettingsStore,
        default_model: str = DEFAULT_MODEL_NAME,
        debug: bool = REWRITER_DEBUG
    ):
        self.session = session
        self.store = store
        self.default_model = default_model
        self.debug = debug

    def resolve(self, api_key: str) -> EffectiveConfig:
        """
        Compute the effective configuration. Never raises.

        Args:
            api_key: Credential passed through to the result

        Returns:
            EffectiveConfig
        """
        return EffectiveConfig(
            api_key=api_key,
            model_name=self.resolve_model_name(),
            prompt=_as_text(self.store.get(PROMPT_KEY)),
            examples=_as_examples(self.store.get(EXAMPLES_KEY)),
            debug=self.debug,
        )

    def resolve_model_name(self) -> str:
        if self.session.has_override():
            logger.debug(f"[CONFIG] model from session | model={self.session.model_name}")
            return self.session.model_name

        stored = _as_text(self.store.get(MODEL_KEY))
        if stored:
            logger.debug(f"[CONFIG] model from settings | model={stored}")
            return stored

        logger.debug(f"[CONFIG] model from default | model={self.default_model}")
        return self.default_model


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_examples(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    examples = {}
    for source, target in value.items():
        if isinstance(source, str) and isinstance(target, str):
            examples[source] = target
        else:
            logger.warning(f"[CONFIG] Skipping non-text example | input={source!r}")
    return examples
