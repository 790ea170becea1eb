"""
Typed, read-only view over collected API responses.

The collector stores every call as ``{"data": ..., "err": ...}`` under
``cache[service][operation][region]`` and, for per-resource calls, one level
deeper under the resource id.
"""
from __future__ import annotations

import json
import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

_NO_DATA_MESSAGE = "Unable to obtain data"


class CacheKey(NamedTuple):
    service: str
    operation: str
    region: str
    resource_id: Optional[str] = None

    @property
    def path(self) -> tuple[str, ...]:
        parts = (self.service, self.operation, self.region)
        if self.resource_id is None:
            return parts
        return parts + (self.resource_id,)


class CallResult(BaseModel):
    """One cached API call: carries either data or an error indicator."""

    model_config = ConfigDict(frozen=True)

    data: Any = None
    err: Any = None

    @classmethod
    def from_raw(cls, raw: Any) -> "CallResult":
        if isinstance(raw, Mapping):
            return cls(data=raw.get("data"), err=raw.get("err"))
        return cls(err=f"Malformed cache entry of type {type(raw).__name__}")

    @property
    def failed(self) -> bool:
        return self.err not in (None, False, "")

    @property
    def has_data(self) -> bool:
        return self.data is not None


def describe_error(result: Optional[CallResult]) -> str:
    """Human-readable reason a cached call cannot be used."""
    if result is None or not result.failed:
        return _NO_DATA_MESSAGE
    err = result.err
    if isinstance(err, str):
        return err
    if isinstance(err, Mapping):
        if err.get("message"):
            return str(err["message"])
        if err.get("code"):
            return str(err["code"])
    try:
        return json.dumps(err, default=str)
    except (TypeError, ValueError):
        return repr(err)


class CacheSnapshot:
    """Immutable snapshot of the collector's cache."""

    def __init__(self, raw: Optional[Mapping[str, Any]] = None) -> None:
        self._raw: Mapping[str, Any] = raw or {}

    @classmethod
    def from_file(cls, path: str | Path) -> "CacheSnapshot":
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Cache file {path} must hold a JSON object, got {type(data).__name__}")
        logger.info(f"Loaded cache snapshot from {path} ({len(data)} service(s))")
        return cls(data)

    def entry(self, key: CacheKey) -> Any:
        """Raw cache node at ``key`` or None when any level is missing."""
        node: Any = self._raw
        for part in key.path:
            if not isinstance(node, Mapping) or part not in node:
                return None
            node = node[part]
        return node

    def lookup(self, key: CacheKey) -> Optional[CallResult]:
        raw = self.entry(key)
        if raw is None:
            return None
        return CallResult.from_raw(raw)


class SourceTracker:
    """Records every cache entry a check consults, keyed by its cache path.

    Shared across region workers, so writes go through a lock.
    """

    def __init__(self, snapshot: CacheSnapshot) -> None:
        self._snapshot = snapshot
        self._source: dict[str, Any] = {}
        self._lock = threading.Lock()

    def lookup(self, key: CacheKey) -> Optional[CallResult]:
        raw = self._snapshot.entry(key)
        if raw is None:
            return None
        with self._lock:
            node = self._source
            for part in key.path[:-1]:
                node = node.setdefault(part, {})
            node[key.path[-1]] = raw
        return CallResult.from_raw(raw)

    @property
    def source(self) -> dict[str, Any]:
        with self._lock:
            return dict(self._source)
