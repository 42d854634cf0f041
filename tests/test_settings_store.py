import json

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from rewriter.schemas import SelectionOutcome
from rewriter.selector import ModelSelector
from rewriter.session import SessionState
from rewriter.settings_store import (
    ConfigurationTarget,
    FileSettingsStore,
    RedisSettingsStore,
    SettingsFileError,
    create_settings_store,
    MODEL_KEY,
    EXAMPLES_KEY,
)


def test_file_store_reads_existing_settings(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({MODEL_KEY: "gemini-2.5-flash", EXAMPLES_KEY: {"a": "b"}}), encoding="utf-8")

    store = FileSettingsStore(str(path))

    assert store.get(MODEL_KEY) == "gemini-2.5-flash"
    assert store.get(EXAMPLES_KEY) == {"a": "b"}


def test_file_store_missing_file_gives_schema_defaults(tmp_path) -> None:
    store = FileSettingsStore(str(tmp_path / "absent.json"))

    assert store.get(MODEL_KEY) == ""
    assert store.get(EXAMPLES_KEY) == {}
    assert store.get("other.key", "fallback") == "fallback"


def test_file_store_corrupt_file_gives_defaults(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    assert FileSettingsStore(str(path)).get(MODEL_KEY) == ""


def test_inspect_unknown_key_returns_none(tmp_path) -> None:
    store = FileSettingsStore(str(tmp_path / "s.json"))

    assert store.inspect("rewriter.unknown") is None
    inspection = store.inspect(MODEL_KEY)
    assert inspection.key == MODEL_KEY
    assert inspection.default_value == ""


@pytest.mark.asyncio
async def test_file_store_update_writes_and_keeps_other_keys(tmp_path) -> None:
    path = tmp_path / "nested" / "settings.json"
    path.parent.mkdir()
    path.write_text(json.dumps({"editor.fontSize": 14}), encoding="utf-8")
    store = FileSettingsStore(str(path))

    await store.update(MODEL_KEY, "gemini-2.0-flash", ConfigurationTarget.GLOBAL)

    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved == {"editor.fontSize": 14, MODEL_KEY: "gemini-2.0-flash"}
    assert not (path.parent / "settings.json.tmp").exists()
    assert store.get(MODEL_KEY) == "gemini-2.0-flash"


@pytest.mark.asyncio
async def test_file_store_load_picks_up_external_edits(tmp_path) -> None:
    path = tmp_path / "settings.json"
    store = FileSettingsStore(str(path))
    path.write_text(json.dumps({MODEL_KEY: "edited"}), encoding="utf-8")

    await store.load()

    assert store.get(MODEL_KEY) == "edited"


@pytest.mark.asyncio
async def test_update_rejects_unknown_key_and_scope(tmp_path) -> None:
    store = FileSettingsStore(str(tmp_path / "s.json"))

    with pytest.raises(KeyError):
        await store.update("rewriter.unknown", "x")
    with pytest.raises(ValueError):
        await store.update(MODEL_KEY, "x", ConfigurationTarget.WORKSPACE)


@pytest.mark.asyncio
async def test_file_store_update_leaves_unparseable_file_alone(tmp_path) -> None:
    path = tmp_path / "settings.json"
    original = '{"rewriter.prompt": "Fix grammar.", "rewriter.examples": {"teh": "the"},}'
    path.write_text(original, encoding="utf-8")
    store = FileSettingsStore(str(path))

    with pytest.raises(SettingsFileError):
        await store.update(MODEL_KEY, "gemini-2.5-flash")

    assert path.read_text(encoding="utf-8") == original
    assert not (tmp_path / "settings.json.tmp").exists()


@pytest.mark.asyncio
async def test_selection_with_unparseable_file_keeps_file_and_session(tmp_path) -> None:
    path = tmp_path / "settings.json"
    original = '{"rewriter.prompt": "Fix grammar.",}'
    path.write_text(original, encoding="utf-8")
    session = SessionState()

    outcome = await ModelSelector(session, FileSettingsStore(str(path))).apply_selection("gemini-2.5-flash")

    assert outcome is SelectionOutcome.PERSIST_FAILED
    assert session.model_name == "gemini-2.5-flash"
    assert path.read_text(encoding="utf-8") == original


class FakeRedis:
    def __init__(self, data=None) -> None:
        self.data = dict(data or {})
        self.closed = False

    async def hgetall(self, key):
        return dict(self.data.get(key, {}))

    async def hset(self, key, field, value):
        self.data.setdefault(key, {})[field] = value

    async def aclose(self):
        self.closed = True


class DownRedis(FakeRedis):
    async def hgetall(self, key):
        raise RedisConnectionError("Error 111 connecting to localhost:6379. Connection refused.")


@pytest.mark.asyncio
async def test_redis_store_load_and_update() -> None:
    fake = FakeRedis({"rewriter:settings": {
        MODEL_KEY: json.dumps("gemini-2.5-pro"),
        EXAMPLES_KEY: json.dumps({"in": "out"}),
        "rewriter.prompt": "{broken",
    }})
    store = RedisSettingsStore(key="rewriter:settings", client=fake)

    await store.load()
    assert store.get(MODEL_KEY) == "gemini-2.5-pro"
    assert store.get(EXAMPLES_KEY) == {"in": "out"}
    assert store.get("rewriter.prompt") == ""

    await store.update(MODEL_KEY, "gemini-2.0-flash")
    assert json.loads(fake.data["rewriter:settings"][MODEL_KEY]) == "gemini-2.0-flash"
    assert store.get(MODEL_KEY) == "gemini-2.0-flash"

    await store.close()
    assert fake.closed


@pytest.mark.asyncio
async def test_redis_store_load_when_unreachable_uses_defaults() -> None:
    store = RedisSettingsStore(key="rewriter:settings", client=DownRedis())

    await store.load()

    assert store.get(MODEL_KEY) == ""
    assert store.get(EXAMPLES_KEY) == {}


def test_create_settings_store_rejects_unknown_backend() -> None:
    with pytest.raises(ValueError):
        create_settings_store("sqlite")
