"""Abstract base class for link store data access objects (DAOs).

This class establishes a consistent contract for the key/record store backing
the short link engine, regardless of the underlying storage mechanism
(e.g., in-process memory, Redis).

Responsibilities:
    - Store, retrieve and delete JSON-compatible records by key.
    - Provide the atomic primitives the engine relies on: put-if-absent for
      short code reservation and compare-and-swap (with list appends) for
      click accounting and expiry flips.
    - Expose an explicit lifecycle (open/close) instead of an implicit global.
    - Standardize error handling across data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from shortlinks.dao import MemoryLinkStoreDAO

        >>> with MemoryLinkStoreDAO() as store:
        ...     store.put('links:1', {'id': '1', 'clicks': 0})
        ...     store.compare_and_swap(
        ...         'links:1',
        ...         expected={'id': '1', 'clicks': 0},
        ...         new={'id': '1', 'clicks': 1},
        ...         appends=[('events:1', {'source': 'direct'})],
        ...     )
        True

        >>> store.get_list('events:1')
        [{'source': 'direct'}]
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any, Optional


class LinkStoreBaseDAO(ABC):
    """Interface for link store data access objects (DAOs).

    Methods:
        open() -> LinkStoreBaseDAO:
            Acquire the underlying resources. Returns self.

        close() -> None:
            Release the underlying resources. Idempotent.

        get(key: str) -> dict | None:
            Return the record stored under key, or None.

        put(key: str, record: dict) -> None:
            Store (or overwrite) a record.

        put_if_absent(key: str, record: dict) -> bool:
            Atomically store a record only if key is unused. True if stored.

        delete(key: str) -> bool:
            Delete a key (record or list). True if something was deleted.

        scan(prefix: str, predicate: Callable | None) -> list[dict]:
            Return all records whose key starts with prefix and satisfy predicate.

        compare_and_swap(key, expected, new, appends) -> bool:
            Atomically replace the record under key with new, if it currently equals
            expected, and push every (list_key, item) in appends onto its list.
            False if the current record differs (nothing is written).

        get_list(key: str) -> list[dict]:
            Return all items of the list stored under key, in append order.

    Every operation raises DataStoreError on storage failures and StoreClosedError
    when the store is not open.

    Subclassing:
        Datastore-specific implementations (e.g., MemoryLinkStoreDAO or
        RedisLinkStoreDAO) must extend this class and implement all
        abstract methods.
    """

    def __enter__(self) -> 'LinkStoreBaseDAO':
        return self.open()

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    @abstractmethod
    def open(self) -> 'LinkStoreBaseDAO':
        """Acquire connections or other resources and mark the store usable.

        Returns:
            LinkStoreBaseDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If the data store cannot be reached.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release resources. Calling close() on a closed store is a no-op."""
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[dict[str, Any]]:
        """Retrieve a record by key.

        Args:
            key (str):
                Fully namespaced record key.

        Returns:
            dict | None: The stored record, or None if the key doesn't exist.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def put(self, key: str, record: dict[str, Any]) -> None:
        pass

    @abstractmethod
    def put_if_absent(self, key: str, record: dict[str, Any]) -> bool:
        """Store a record only if the key has never been written (or was deleted).

        Args:
            key (str):
                Fully namespaced record key.

            record (dict):
                JSON-compatible record.

        Returns:
            bool: True if the record was stored, False if the key was already in use.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        pass

    @abstractmethod
    def scan(self, prefix: str, predicate: Optional[Callable[[dict[str, Any]], bool]] = None) -> list[dict[str, Any]]:
        """Return all records stored under keys starting with prefix.

        NOTE: Only plain records are returned; lists (see get_list) are skipped.
        NOTE: The order of returned records is unspecified.

        Args:
            prefix (str):
                Key prefix, e.g. 'app:prod:links:'.

            predicate (Optional[Callable[[dict], bool]]):
                Optional filter applied to every record.

        Returns:
            list[dict]: Matching records.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def compare_and_swap(
        self,
        key: str,
        expected: dict[str, Any],
        new: dict[str, Any],
        appends: Optional[Sequence[tuple[str, dict[str, Any]]]] = None,
    ) -> bool:
        """Atomically swap a record and append to lists, if the record is unchanged.

        Args:
            key (str):
                Key of the record to swap.

            expected (dict):
                The record the caller read. The swap only happens if the stored
                record still equals it.

            new (dict):
                The record to store.

            appends (Optional[Sequence[tuple[str, dict]]]):
                (list_key, item) pairs pushed in the same atomic unit.

        Returns:
            bool: True if swapped, False if the record changed (or vanished) meanwhile.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get_list(self, key: str) -> list[dict[str, Any]]:
        pass
