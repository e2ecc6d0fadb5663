from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from redis import Redis

from backend.observability import METRICS


SUPPORTED_MODES = {"memory", "local", "redis"}


@dataclass(frozen=True)
class StoreConfig:
    mode: str
    local_dir: Path
    redis_url: str
    redis_prefix: str


def _validate_config(config: StoreConfig) -> None:
    if config.mode not in SUPPORTED_MODES:
        raise RuntimeError("WHEEL_STORE_MODE must be one of 'memory', 'local' or 'redis'.")

    if config.mode == "redis" and not config.redis_url:
        raise RuntimeError("REDIS_URL must be set for redis storage.")


def _config(env: Mapping[str, str] | None = None) -> StoreConfig:
    active_env = os.environ if env is None else env
    config = StoreConfig(
        mode=active_env.get("WHEEL_STORE_MODE", "local").strip().lower(),
        local_dir=Path(active_env.get("WHEEL_STORE_DIR", "storage")).resolve(),
        redis_url=active_env.get("REDIS_URL", "redis://localhost:6379/0").strip(),
        redis_prefix=active_env.get("WHEEL_STORE_PREFIX", "prize-wheel:"),
    )
    _validate_config(config)
    return config


class InMemoryKeyValueStore:
    def __init__(self) -> None:
        self._values: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)

    def ping(self) -> None:
        return None


class FileKeyValueStore:
    """One ``<key>.json`` file per key under a local directory."""

    def __init__(self, local_dir: Path) -> None:
        self._dir = Path(local_dir)

    def _path(self, key: str) -> Path:
        return self._dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        target = self._path(key)
        temp = target.with_suffix(".json.tmp")
        temp.write_text(value, encoding="utf-8")
        temp.replace(target)

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def ping(self) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        probe = self._dir / ".ready"
        probe.write_text("ok", encoding="utf-8")
        probe.unlink(missing_ok=True)


class RedisKeyValueStore:
    def __init__(self, client: Redis, prefix: str = "prize-wheel:") -> None:
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, redis_url: str, prefix: str = "prize-wheel:") -> "RedisKeyValueStore":
        return cls(Redis.from_url(redis_url, decode_responses=True), prefix=prefix)

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        value = self._client.get(self._key(key))
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        self._client.set(self._key(key), value)

    def delete(self, key: str) -> None:
        self._client.delete(self._key(key))

    def ping(self) -> None:
        self._client.ping()


class InstrumentedStore:
    """Counts failed store operations in METRICS and re-raises."""

    def __init__(self, inner) -> None:
        self._inner = inner

    def get(self, key: str) -> Optional[str]:
        try:
            return self._inner.get(key)
        except Exception:
            METRICS.increment_store_failure(key, "read")
            raise

    def set(self, key: str, value: str) -> None:
        try:
            self._inner.set(key, value)
        except Exception:
            METRICS.increment_store_failure(key, "write")
            raise

    def delete(self, key: str) -> None:
        try:
            self._inner.delete(key)
        except Exception:
            METRICS.increment_store_failure(key, "delete")
            raise

    def ping(self) -> None:
        self._inner.ping()


def build_store(env: Mapping[str, str] | None = None) -> InstrumentedStore:
    cfg = _config(env)
    if cfg.mode == "memory":
        inner = InMemoryKeyValueStore()
    elif cfg.mode == "redis":
        inner = RedisKeyValueStore.from_url(cfg.redis_url, prefix=cfg.redis_prefix)
    else:
        inner = FileKeyValueStore(cfg.local_dir)
    return InstrumentedStore(inner)
