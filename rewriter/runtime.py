"""
Process-wide wiring of the rewriter components.

One SessionState lives for the whole process and is handed to both the
resolver (reader) and the selector (writer).
"""
from dataclasses import dataclass
from typing import Optional

from core import BaseLLMClient
from .catalog import ModelCatalog
from .llm_client import get_client
from .orchestrator import RewriteOrchestrator
from .resolver import ConfigResolver
from .selector import ModelSelectionFlow, ModelSelector
from .session import SessionState
from .settings_store import SettingsStore, create_settings_store


@dataclass
class RewriterRuntime:
    session: SessionState
    store: SettingsStore
    client: BaseLLMClient
    resolver: ConfigResolver
    selector: ModelSelector
    catalog: ModelCatalog
    selection_flow: ModelSelectionFlow
    orchestrator: RewriteOrchestrator

    async def close(self) -> None:
        await self.client.close()
        await self.store.close()


def build_runtime(
    store: Optional[SettingsStore] = None,
    client: Optional[BaseLLMClient] = None,
    session: Optional[SessionState] = None
) -> RewriterRuntime:
    """Assemble the components around one session and one store."""
    session = SessionState() if session is None else session
    store = create_settings_store() if store is None else store
    client = get_client() if client is None else client

    resolver = ConfigResolver(session, store)
    selector = ModelSelector(session, store)
    catalog = ModelCatalog(client)

    return RewriterRuntime(
        session=session,
        store=store,
        client=client,
        resolver=resolver,
        selector=selector,
        catalog=catalog,
        selection_flow=ModelSelectionFlow(catalog, selector),
        orchestrator=RewriteOrchestrator(resolver, client),
    )


_runtime: Optional[RewriterRuntime] = None


def get_runtime() -> RewriterRuntime:
    """Get the process runtime, building it on first use."""
    global _runtime
    if _runtime is None:
        _runtime = build_runtime()
    return _runtime


async def close_runtime() -> None:
    """Close the process runtime. Call this on application shutdown."""
    global _runtime
    if _runtime is not None:
        await _runtime.close()
        _runtime = None
