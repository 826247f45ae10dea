"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).
        Carries the failed operation and key so callers can decide whether to retry.

    StoreClosedError:
        Raised when an operation is attempted on a store that is not open.

    ConcurrentUpdateError:
        Raised when a compare-and-swap keeps losing against concurrent writers.

Example:
    >>> from shortlinks.dao.exceptions import DataStoreError
    >>> raise DataStoreError("Can't connect to Redis at localhost:6379/0.", operation='get', key='links:abc')
    Traceback (most recent call last):
        ...
    shortlinks.dao.exceptions.DataStoreError: Can't connect to Redis at localhost:6379/0.
"""

from shortlinks.exceptions import ShortLinksError


class DAOError(ShortLinksError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.

    Attributes:
        operation (str | None): store operation that failed (e.g. 'compare_and_swap').
        key (str | None): key the operation targeted, if any.
    """

    error_code = 'dao:data_store_error'

    def __init__(self, message: str = '', *, operation: str | None = None, key: str | None = None):
        super().__init__(message)
        self.operation = operation
        self.key = key


class StoreClosedError(DataStoreError):
    """Exception raised when a store is used before open() or after close()."""

    error_code = 'dao:store_closed_error'


class ConcurrentUpdateError(DataStoreError):
    """Exception raised when a record could not be swapped due to persistent contention."""

    error_code = 'dao:concurrent_update_error'
