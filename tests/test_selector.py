import pytest

from rewriter.catalog import ModelCatalog
from rewriter.errors import CatalogFetchError, EmptyCatalog, MissingCredential
from rewriter.resolver import ConfigResolver
from rewriter.schemas import SelectionOutcome
from rewriter.selector import ModelSelectionFlow, ModelSelector
from rewriter.settings_store import MODEL_KEY, PROMPT_KEY

from conftest import FakeClient, MemorySettingsStore


@pytest.mark.asyncio
async def test_selection_persists_and_sets_session(session, store) -> None:
    outcome = await ModelSelector(session, store).apply_selection("gemini-2.5-flash")

    assert outcome is SelectionOutcome.PERSISTED
    assert session.model_name == "gemini-2.5-flash"
    assert store.writes == [(MODEL_KEY, "gemini-2.5-flash")]
    assert store.get(MODEL_KEY) == "gemini-2.5-flash"


@pytest.mark.asyncio
async def test_failed_write_is_swallowed_and_session_still_set(session) -> None:
    store = MemorySettingsStore(fail_writes=True)

    outcome = await ModelSelector(session, store).apply_selection("x")

    assert outcome is SelectionOutcome.PERSIST_FAILED
    assert session.model_name == "x"
    assert store.writes == []


@pytest.mark.asyncio
async def test_unregistered_key_means_session_only(session) -> None:
    store = MemorySettingsStore(schema={PROMPT_KEY: ""})

    outcome = await ModelSelector(session, store).apply_selection("x")

    assert outcome is SelectionOutcome.SESSION_ONLY
    assert session.model_name == "x"
    assert store.writes == []


@pytest.mark.asyncio
async def test_session_stays_set_after_persisting(session, store) -> None:
    resolver = ConfigResolver(session, store)
    await ModelSelector(session, store).apply_selection("chosen")

    # A later stale read of the store must not win over the session choice.
    store._values[MODEL_KEY] = "stale"

    assert session.model_name == "chosen"
    assert resolver.resolve("key").model_name == "chosen"


def make_flow(session, store, client):
    return ModelSelectionFlow(ModelCatalog(client), ModelSelector(session, store))


@pytest.mark.asyncio
async def test_flow_applies_chosen_model(session, store) -> None:
    client = FakeClient(models=[
        {"name": "models/a", "supportedGenerationMethods": ["generateContent"]},
        {"name": "models/b", "supportedGenerationMethods": ["generateContent"]},
    ])
    offered = []

    def choose(models):
        offered.extend(models)
        return models[1]

    selected = await make_flow(session, store, client).run("key", choose)

    assert offered == ["a", "b"]
    assert selected == "b"
    assert session.model_name == "b"


@pytest.mark.asyncio
async def test_flow_accepts_async_chooser(session, store) -> None:
    client = FakeClient(models=[{"name": "models/a", "supportedGenerationMethods": ["generateContent"]}])

    async def choose(models):
        return models[0]

    assert await make_flow(session, store, client).run("key", choose) == "a"
    assert session.model_name == "a"


@pytest.mark.asyncio
async def test_flow_cancel_leaves_session_untouched(session, store) -> None:
    client = FakeClient(models=[{"name": "models/a", "supportedGenerationMethods": ["generateContent"]}])

    assert await make_flow(session, store, client).run("key", lambda models: None) is None
    assert session.model_name is None
    assert store.writes == []


@pytest.mark.asyncio
async def test_flow_empty_catalog_is_distinct_error(session, store) -> None:
    client = FakeClient(models=[{"name": "models/e", "supportedGenerationMethods": ["embedContent"]}])

    with pytest.raises(EmptyCatalog):
        await make_flow(session, store, client).run("key", lambda models: models[0])


@pytest.mark.asyncio
async def test_flow_propagates_catalog_failure(session, store) -> None:
    client = FakeClient(list_error=RuntimeError("Failed to fetch models: 503 Service Unavailable"))

    with pytest.raises(CatalogFetchError):
        await make_flow(session, store, client).run("key", lambda models: models[0])


@pytest.mark.asyncio
async def test_flow_requires_credential(session, store) -> None:
    client = FakeClient()

    with pytest.raises(MissingCredential):
        await make_flow(session, store, client).run("", lambda models: models[0])
    assert client.list_calls == 0
