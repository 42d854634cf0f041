"""
Settings Store - persisted user settings for the rewriter.

Settings are flat dotted keys, as in an editor's settings.json:

    {
        "rewriter.model": "gemini-2.0-flash",
        "rewriter.prompt": "Fix grammar.",
        "rewriter.examples": {"teh cat": "the cat"}
    }

Reads are synchronous against an in-memory snapshot so configuration
resolution never suspends or fails. Writes are async and may raise; callers
decide whether a failed write matters.

Backends:
- FileSettingsStore: JSON file (default)
- RedisSettingsStore: Redis hash, one JSON-encoded value per key
"""
import json
import logging
from enum import Enum
from pathlib import Path
from dataclasses import dataclass
from typing import Any, Dict, Optional

import aiofiles
import aiofiles.os
import redis.asyncio as redis
from redis.exceptions import RedisError

from config import REDIS_HOST, REDIS_PORT, REDIS_DB
from .config import (
    SETTINGS_SECTION,
    REWRITER_SETTINGS_BACKEND,
    REWRITER_SETTINGS_PATH,
    REWRITER_SETTINGS_KEY,
)

logger = logging.getLogger(__name__)

MODEL_KEY = f"{SETTINGS_SECTION}.model"
PROMPT_KEY = f"{SETTINGS_SECTION}.prompt"
EXAMPLES_KEY = f"{SETTINGS_SECTION}.examples"

# Registered keys and their defaults
SETTINGS_SCHEMA: Dict[str, Any] = {
    MODEL_KEY: "",
    PROMPT_KEY: "",
    EXAMPLES_KEY: {},
}


class ConfigurationTarget(str, Enum):
    """Scope a setting is written to."""
    GLOBAL = "global"
    WORKSPACE = "workspace"


@dataclass
class SettingInspection:
    """What the store knows about a registered key."""
    key: str
    default_value: Any
    global_value: Any = None


class SettingsStore:
    """
    Base settings store with a schema and an in-memory snapshot.

    Subclasses implement load() and _write().
    """

    def __init__(self, schema: Optional[Dict[str, Any]] = None):
        self._schema = dict(SETTINGS_SCHEMA if schema is None else schema)
        self._values: Dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value, else the schema default, else `default`."""
        if key in self._values:
            return self._values[key]
        return self._schema.get(key, default)

    def inspect(self, key: str) -> Optional[SettingInspection]:
        """Describe a key, or None when the key is not registered."""
        if key not in self._schema:
            return None
        return SettingInspection(
            key=key,
            default_value=self._schema[key],
            global_value=self._values.get(key),
        )

    async def update(
        self,
        key: str,
        value: Any,
        target: ConfigurationTarget = ConfigurationTarget.GLOBAL
    ) -> None:
        """
        Persist a value.

        Raises:
            KeyError: If the key is not registered
            ValueError: If the target scope is not supported
            Exception: Whatever the backend raises on write failure
        """
        if key not in self._schema:
            raise KeyError(f"Unknown setting: {key}")
        if target is not ConfigurationTarget.GLOBAL:
            raise ValueError(f"Unsupported configuration target: {target.value}")

        await self._write(key, value)
        self._values[key] = value
        logger.info(f"[SETTINGS] Updated | key={key} | target={target.value}")

    async def load(self) -> None:
        raise NotImplementedError

    async def _write(self, key: str, value: Any) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        pass


class SettingsFileError(ValueError):
    """The settings file exists but is not a JSON object we can rewrite."""


def _parse_settings(text: str, path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SettingsFileError(f"Invalid JSON in settings file {path}: {e}")
    if not isinstance(data, dict):
        raise SettingsFileError(f"Settings file {path} is not a JSON object")
    return data


class FileSettingsStore(SettingsStore):
    """
    Settings kept in a JSON file shared with other tools.

    Reads degrade to defaults on a bad file. Writes never do: a file that
    exists but cannot be parsed is left untouched and the write raises, so
    keys owned by the user are never dropped.
    """

    def __init__(self, path: str = REWRITER_SETTINGS_PATH, schema: Optional[Dict[str, Any]] = None):
        super().__init__(schema)
        self.path = Path(path).expanduser()
        self._values = self._read()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return _parse_settings(f.read(), self.path)
        except (OSError, SettingsFileError) as e:
            logger.warning(f"[SETTINGS] Unreadable settings file, using defaults | path={self.path} | error={e}")
            return {}

    async def _read_strict(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
            text = await f.read()
        return _parse_settings(text, self.path)

    async def load(self) -> None:
        try:
            self._values = await self._read_strict()
        except (OSError, SettingsFileError) as e:
            logger.warning(f"[SETTINGS] Unreadable settings file, using defaults | path={self.path} | error={e}")
            self._values = {}
        logger.debug(f"[SETTINGS] Loaded | path={self.path} | keys={len(self._values)}")

    async def _write(self, key: str, value: Any) -> None:
        data = await self._read_strict()
        data[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(data, indent=2, ensure_ascii=False))
        await aiofiles.os.replace(tmp_path, self.path)


class RedisSettingsStore(SettingsStore):
    """Settings kept in a Redis hash, values JSON-encoded."""

    def __init__(
        self,
        host: str = REDIS_HOST,
        port: int = REDIS_PORT,
        db: int = REDIS_DB,
        key: str = REWRITER_SETTINGS_KEY,
        schema: Optional[Dict[str, Any]] = None,
        client: Optional[redis.Redis] = None
    ):
        super().__init__(schema)
        self._redis = client
        self._host = host
        self._port = port
        self._db = db
        self._key = key

    async def _get_redis(self) -> redis.Redis:
        """Get or create async Redis connection."""
        if self._redis is None:
            self._redis = redis.Redis(
                host=self._host,
                port=self._port,
                db=self._db,
                decode_responses=True
            )
            logger.info(f"[SETTINGS] Redis initialized | host={self._host}:{self._port} | db={self._db}")
        return self._redis

    async def close(self) -> None:
        """Close Redis connection."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    async def load(self) -> None:
        """Refresh the snapshot; an unreachable Redis leaves it empty."""
        try:
            r = await self._get_redis()
            raw = await r.hgetall(self._key)
        except RedisError as e:
            logger.warning(f"[SETTINGS] Redis unavailable, using defaults | redis_key={self._key} | error={e}")
            self._values = {}
            return

        values = {}
        for field, encoded in raw.items():
            try:
                values[field] = json.loads(encoded)
            except json.JSONDecodeError:
                logger.warning(f"[SETTINGS] Skipping undecodable value | key={field}")
        self._values = values
        logger.debug(f"[SETTINGS] Loaded | redis_key={self._key} | keys={len(values)}")

    async def _write(self, key: str, value: Any) -> None:
        r = await self._get_redis()
        await r.hset(self._key, key, json.dumps(value, ensure_ascii=False))


def create_settings_store(backend: str = REWRITER_SETTINGS_BACKEND) -> SettingsStore:
    """Build the configured settings store."""
    if backend == "redis":
        return RedisSettingsStore()
    if backend == "file":
        return FileSettingsStore()
    raise ValueError(f"Unsupported settings backend: {backend}. Use 'file' or 'redis'.")
