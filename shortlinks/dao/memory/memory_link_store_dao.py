"""In-process implementation of the link store

Records are kept JSON-encoded in plain dictionaries, so every read returns a
fresh copy and only JSON-compatible data can be stored (same constraint as Redis).

Atomicity is provided by one lock per key. Operations touching several keys
acquire their locks in sorted order, so callers working on unrelated keys never
block each other.

Classes:
    MemoryLinkStoreDAO:
        Thread-safe in-memory store, used by tests and local runs.

Example:
    >>> store = MemoryLinkStoreDAO().open()
    >>> store.put_if_absent('codes:promo', {'link_id': '1'})
    True
    >>> store.put_if_absent('codes:promo', {'link_id': '2'})
    False
    >>> store.close()
"""

import json
import threading
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any, Optional

from beartype import beartype

from shortlinks.dao.base import LinkStoreBaseDAO
from shortlinks.dao.exceptions import StoreClosedError


class MemoryLinkStoreDAO(LinkStoreBaseDAO):
    """Thread-safe in-process link store.

    Attributes:
        name (str):
            Label used in error messages (handy when a test uses several stores).
    """

    def __init__(self, name: str = 'memory'):
        self.name = name
        self._records: dict[str, str] = {}
        self._lists: dict[str, list[str]] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._open = False

    def open(self) -> 'MemoryLinkStoreDAO':
        self._open = True
        return self

    def close(self) -> None:
        self._open = False

    @beartype
    def get(self, key: str) -> Optional[dict[str, Any]]:
        self._ensure_open('get', key)
        raw = self._records.get(key)
        return None if raw is None else json.loads(raw)

    @beartype
    def put(self, key: str, record: dict[str, Any]) -> None:
        self._ensure_open('put', key)
        encoded = json.dumps(record)
        with self._locked(key):
            self._records[key] = encoded

    @beartype
    def put_if_absent(self, key: str, record: dict[str, Any]) -> bool:
        self._ensure_open('put_if_absent', key)
        encoded = json.dumps(record)
        with self._locked(key):
            if key in self._records or key in self._lists:
                return False
            self._records[key] = encoded
            return True

    @beartype
    def delete(self, key: str) -> bool:
        self._ensure_open('delete', key)
        with self._locked(key):
            deleted_record = self._records.pop(key, None) is not None
            deleted_list = self._lists.pop(key, None) is not None
        return deleted_record or deleted_list

    @beartype
    def scan(self, prefix: str, predicate: Optional[Callable[[dict[str, Any]], bool]] = None) -> list[dict[str, Any]]:
        self._ensure_open('scan', prefix)
        records = [json.loads(raw) for key, raw in list(self._records.items()) if key.startswith(prefix)]
        if predicate is None:
            return records
        return [record for record in records if predicate(record)]

    @beartype
    def compare_and_swap(
        self,
        key: str,
        expected: dict[str, Any],
        new: dict[str, Any],
        appends: Optional[Sequence[tuple[str, dict[str, Any]]]] = None,
    ) -> bool:
        self._ensure_open('compare_and_swap', key)
        appends = appends or []
        encoded = json.dumps(new)
        encoded_items = [(list_key, json.dumps(item)) for list_key, item in appends]

        with self._locked(key, *(list_key for list_key, _ in appends)):
            current = self._records.get(key)
            if current is None or json.loads(current) != expected:
                return False
            self._records[key] = encoded
            for list_key, item in encoded_items:
                self._lists.setdefault(list_key, []).append(item)
            return True

    @beartype
    def get_list(self, key: str) -> list[dict[str, Any]]:
        self._ensure_open('get_list', key)
        with self._locked(key):
            items = list(self._lists.get(key, []))
        return [json.loads(item) for item in items]

    @contextmanager
    def _locked(self, *keys: str) -> Iterator[None]:
        with self._locks_guard:
            locks = [self._locks.setdefault(key, threading.Lock()) for key in sorted(set(keys))]
        for lock in locks:
            lock.acquire()
        try:
            yield
        finally:
            for lock in reversed(locks):
                lock.release()

    def _ensure_open(self, operation: str, key: str) -> None:
        if not self._open:
            raise StoreClosedError(f"Store '{self.name}' is not open.", operation=operation, key=key)
