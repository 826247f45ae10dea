"""Data Access Object (DAO) implementation of the link store in Redis

This module provides a Redis-based implementation of LinkStoreBaseDAO.
Records are stored as JSON strings; lists (e.g. click events) as Redis lists
of JSON strings.

Responsibilities:
    - Store, retrieve, scan and delete JSON records;
    - Reserve keys atomically (SET NX);
    - Swap records optimistically (WATCH/MULTI/EXEC) together with list appends;
    - Translate Redis failures into appropriate DAO exceptions.

Classes:
    RedisLinkStoreDAO:
        DAO for storing and retrieving link store records in a Redis datastore.

Example:
    >>> from shortlinks.dao.redis import RedisLinkStoreDAO

    >>> with RedisLinkStoreDAO(redis_host='localhost') as store:
    ...     store.put_if_absent('app:dev:codes:promo', {'link_id': '4f2a9c'})
    True
"""

import json
from collections.abc import Callable, Sequence
from typing import Any, Optional

import redis
from beartype import beartype

from shortlinks.dao.base import LinkStoreBaseDAO
from shortlinks.dao.redis.mixins import RedisClientMixin
from shortlinks.dao.redis.helpers import handle_redis_connection_error


# Number of keys requested per SCAN/MGET round trip
SCAN_BATCH_SIZE = 500


class RedisLinkStoreDAO(RedisClientMixin, LinkStoreBaseDAO):
    """Redis-based Data Access Object (DAO) for link store records

    This class implements the LinkStoreBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.

    Methods:
        get(key) -> dict | None:                        GET
        put(key, record) -> None:                       SET
        put_if_absent(key, record) -> bool:             SET NX
        delete(key) -> bool:                            DEL
        scan(prefix, predicate) -> list[dict]:          SCAN MATCH <prefix>* + MGET
        compare_and_swap(key, expected, new, appends):  WATCH/GET/MULTI/SET/RPUSH/EXEC
        get_list(key) -> list[dict]:                    LRANGE 0 -1

    Every method raises DataStoreError on connectivity issues with Redis
    and StoreClosedError when used before open().
    """

    @handle_redis_connection_error
    @beartype
    def get(self, key: str) -> Optional[dict[str, Any]]:
        raw = self.redis.get(key)
        return None if raw is None else json.loads(raw)

    @handle_redis_connection_error
    @beartype
    def put(self, key: str, record: dict[str, Any]) -> None:
        self.redis.set(key, json.dumps(record))

    @handle_redis_connection_error
    @beartype
    def put_if_absent(self, key: str, record: dict[str, Any]) -> bool:
        """Reserve a key with SET NX

        Example:
            >>> dao.put_if_absent('codes:promo', {'link_id': '1'})
            True
            >>> dao.put_if_absent('codes:promo', {'link_id': '2'})
            False
        """
        return bool(self.redis.set(key, json.dumps(record), nx=True))

    @handle_redis_connection_error
    @beartype
    def delete(self, key: str) -> bool:
        return self.redis.delete(key) > 0

    @handle_redis_connection_error
    @beartype
    def scan(self, prefix: str, predicate: Optional[Callable[[dict[str, Any]], bool]] = None) -> list[dict[str, Any]]:
        """Collect all records stored under keys starting with prefix

        NOTE: SCAN may return a key more than once; duplicates are dropped.
        NOTE: MGET returns nil for non-string keys (e.g. lists) and for keys deleted
              between SCAN and MGET; both are skipped.
        """
        keys = list(dict.fromkeys(self.redis.scan_iter(match=f'{prefix}*', count=SCAN_BATCH_SIZE)))

        records = []
        for start in range(0, len(keys), SCAN_BATCH_SIZE):
            for raw in self.redis.mget(keys[start : start + SCAN_BATCH_SIZE]):
                if raw is None:
                    continue
                record = json.loads(raw)
                if predicate is None or predicate(record):
                    records.append(record)
        return records

    @handle_redis_connection_error
    @beartype
    def compare_and_swap(
        self,
        key: str,
        expected: dict[str, Any],
        new: dict[str, Any],
        appends: Optional[Sequence[tuple[str, dict[str, Any]]]] = None,
    ) -> bool:
        """Optimistically swap a record and append list items in one transaction

        NOTE: WATCH makes EXEC fail if any other client modifies the record between
              our GET and EXEC. Lists are only ever appended to under a swap of their
              owning record, so watching the record alone is sufficient:

              (client 1): WATCH links:<id>; GET links:<id>  => clicks: 4
              (client 2): WATCH links:<id>; GET links:<id>  => clicks: 4
              (client 2): MULTI; SET links:<id> clicks: 5; RPUSH events:<id> ...; EXEC  => OK
              (client 1): MULTI; SET links:<id> clicks: 5; RPUSH events:<id> ...; EXEC  => WatchError

              Client 1 reports False and re-reads, so no increment is ever lost.

        Example:
            >>> dao.compare_and_swap('links:1', {'clicks': 0}, {'clicks': 1}, [('events:1', {'source': 'direct'})])
            True
        """
        with self.redis.pipeline(transaction=True) as pipe:
            try:
                pipe.watch(key)
                raw = pipe.get(key)
                if raw is None or json.loads(raw) != expected:
                    return False

                pipe.multi()
                pipe.set(key, json.dumps(new))
                for list_key, item in appends or []:
                    pipe.rpush(list_key, json.dumps(item))
                pipe.execute()
            except redis.exceptions.WatchError:
                return False
        return True

    @handle_redis_connection_error
    @beartype
    def get_list(self, key: str) -> list[dict[str, Any]]:
        return [json.loads(item) for item in self.redis.lrange(key, 0, -1)]
