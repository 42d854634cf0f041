"""
Model selection.

A chosen model always takes effect for the running process first, through
the session override. Persisting it to the settings store is best-effort:
an unregistered key or a failing write leaves the session override in charge.
"""
import inspect
import logging
from typing import Awaitable, Callable, List, Optional, Union

from .catalog import ModelCatalog
from .errors import EmptyCatalog, MissingCredential, PersistenceError
from .schemas import SelectionOutcome
from .session import SessionState
from .settings_store import SettingsStore, ConfigurationTarget, MODEL_KEY

logger = logging.getLogger(__name__)

Chooser = Callable[[List[str]], Union[Optional[str], Awaitable[Optional[str]]]]


class ModelSelector:
    """Applies a model choice to the session and, if possible, the store."""

    def __init__(self, session: SessionState, store: SettingsStore):
        self.session = session
        self.store = store

    async def apply_selection(self, model_name: str) -> SelectionOutcome:
        """
        Use `model_name` from now on and try to persist it.

        Never raises on persistence problems; the outcome says which branch ran.
        """
        self.session.set_model(model_name)

        if self.store.inspect(MODEL_KEY) is None:
            logger.warning(
                f"[SELECT] Setting '{MODEL_KEY}' is not registered. Using session storage only."
            )
            return SelectionOutcome.SESSION_ONLY

        try:
            await self.store.update(MODEL_KEY, model_name, ConfigurationTarget.GLOBAL)
        except Exception as e:
            error = PersistenceError(f"Failed to update configuration persistence: {e}")
            logger.warning(f"[SELECT] {error.message} (using session state) | model={model_name}")
            return SelectionOutcome.PERSIST_FAILED

        # The session override stays set; it keeps winning over stale reads.
        logger.info(f"[SELECT] Model persisted | model={model_name}")
        return SelectionOutcome.PERSISTED


class ModelSelectionFlow:
    """List usable models, let the user pick one, apply the pick."""

    def __init__(self, catalog: ModelCatalog, selector: ModelSelector):
        self.catalog = catalog
        self.selector = selector

    async def list_models(self, api_key: Optional[str]) -> List[str]:
        """
        Raises:
            MissingCredential: No API key
            CatalogFetchError: Catalog request failed
            EmptyCatalog: No model supports rewriting
        """
        if not api_key:
            raise MissingCredential()

        models = await self.catalog.list_rewrite_capable_models(api_key)
        if not models:
            raise EmptyCatalog()
        return models

    async def run(self, api_key: Optional[str], choose: Chooser) -> Optional[str]:
        """
        Run the whole selection.

        Args:
            api_key: Gemini API key
            choose: Picks a name from the list (sync or async); None cancels

        Returns:
            The applied model name, or None if the user cancelled
        """
        models = await self.list_models(api_key)

        selected = choose(models)
        if inspect.isawaitable(selected):
            selected = await selected

        if not selected:
            logger.info("[SELECT] Selection cancelled")
            return None

        await self.selector.apply_selection(selected)
        return selected
