from typing import Any, Callable, Dict, List, Optional

import pytest

from rewriter.session import SessionState
from rewriter.settings_store import SettingsStore, SETTINGS_SCHEMA


class MemorySettingsStore(SettingsStore):
    def __init__(
        self,
        values: Optional[Dict[str, Any]] = None,
        schema: Optional[Dict[str, Any]] = None,
        fail_writes: bool = False,
    ) -> None:
        super().__init__(SETTINGS_SCHEMA if schema is None else schema)
        self._values = dict(values or {})
        self.fail_writes = fail_writes
        self.writes: List[tuple] = []

    async def load(self) -> None:
        return None

    async def _write(self, key: str, value: Any) -> None:
        if self.fail_writes:
            raise PermissionError("settings.json is read-only")
        self.writes.append((key, value))


class FakeClient:
    def __init__(
        self,
        models: Optional[List[Dict[str, Any]]] = None,
        reply: str = "",
        list_error: Optional[Exception] = None,
        generate_error: Optional[Exception] = None,
        on_generate: Optional[Callable[[], None]] = None,
    ) -> None:
        self.models = models or []
        self.reply = reply
        self.list_error = list_error
        self.generate_error = generate_error
        self.on_generate = on_generate
        self.list_calls = 0
        self.generate_calls: List[dict] = []
        self.closed = False

    async def list_models(self, api_key: str) -> List[Dict[str, Any]]:
        self.list_calls += 1
        if self.list_error:
            raise self.list_error
        return self.models

    async def generate_text_with_logging(self, api_key: str, model: str, body: dict, task: str = None) -> str:
        self.generate_calls.append({"api_key": api_key, "model": model, "body": body})
        if self.on_generate:
            self.on_generate()
        if self.generate_error:
            raise self.generate_error
        return self.reply

    def get_backend_info(self) -> Dict[str, Any]:
        return {"base_url": "https://example.test/v1beta", "task_name": "rewrite"}

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def session() -> SessionState:
    return SessionState()


@pytest.fixture
def store() -> MemorySettingsStore:
    return MemorySettingsStore()
