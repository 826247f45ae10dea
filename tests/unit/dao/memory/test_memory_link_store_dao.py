"""Unit tests for the MemoryLinkStoreDAO

Test coverage includes:

1. Lifecycle
   - Operations on a store that isn't open raise StoreClosedError.
   - Context manager opens and closes the store; data survives reopening.

2. Records
   - get/put/delete behave as a key-value store and return copies.
   - put_if_absent only stores unused keys.
   - scan filters by prefix and predicate.
   - Invalid argument types raise Beartype errors.

3. Compare-and-swap
   - Swaps only when the stored record equals the expected one.
   - Appends list items in the same atomic unit.
   - Concurrent increments never lose an update.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest
from beartype.roar import BeartypeCallHintParamViolation

from shortlinks.dao import MemoryLinkStoreDAO
from shortlinks.dao.exceptions import StoreClosedError


# -------------------------------
# 1. Lifecycle
# -------------------------------


def test_closed_store_raises_store_closed_error():
    store = MemoryLinkStoreDAO(name='closed')

    with pytest.raises(StoreClosedError, match="Store 'closed' is not open.") as exc_info:
        store.get('links:1')

    assert exc_info.value.operation == 'get'
    assert exc_info.value.key == 'links:1'


def test_context_manager_opens_and_closes_store():
    store = MemoryLinkStoreDAO()

    with store as opened:
        assert opened is store
        opened.put('links:1', {'id': '1'})

    with pytest.raises(StoreClosedError):
        store.put('links:2', {'id': '2'})

    # Data survives reopening the same instance
    with store:
        assert store.get('links:1') == {'id': '1'}


# -------------------------------
# 2. Records
# -------------------------------


def test_put_get_delete(store):
    store.put('links:1', {'id': '1', 'clicks': 0})

    assert store.get('links:1') == {'id': '1', 'clicks': 0}
    assert store.delete('links:1') is True
    assert store.get('links:1') is None
    assert store.delete('links:1') is False


def test_get_returns_copy(store):
    store.put('links:1', {'id': '1', 'clicks': 0})

    record = store.get('links:1')
    record['clicks'] = 99

    assert store.get('links:1') == {'id': '1', 'clicks': 0}


def test_put_if_absent(store):
    assert store.put_if_absent('codes:promo', {'link_id': '1'}) is True
    assert store.put_if_absent('codes:promo', {'link_id': '2'}) is False
    assert store.get('codes:promo') == {'link_id': '1'}


def test_scan_filters_by_prefix_and_predicate(store):
    store.put('links:1', {'id': '1', 'scope': 'a'})
    store.put('links:2', {'id': '2', 'scope': 'b'})
    store.put('codes:abc', {'link_id': '1'})

    assert sorted(record['id'] for record in store.scan('links:')) == ['1', '2']
    assert store.scan('links:', predicate=lambda record: record['scope'] == 'b') == [{'id': '2', 'scope': 'b'}]
    assert store.scan('events:') == []


def test_delete_removes_lists(store):
    store.put('links:1', {'id': '1'})
    store.compare_and_swap('links:1', {'id': '1'}, {'id': '1'}, appends=[('events:1', {'n': 1})])

    assert store.delete('events:1') is True
    assert store.get_list('events:1') == []


def test_invalid_argument_types(store):
    with pytest.raises(BeartypeCallHintParamViolation):
        store.put('links:1', ['not', 'a', 'dict'])

    with pytest.raises(BeartypeCallHintParamViolation):
        store.get(42)


# -------------------------------
# 3. Compare-and-swap
# -------------------------------


def test_compare_and_swap_succeeds_on_expected_record(store):
    store.put('links:1', {'id': '1', 'clicks': 0})

    swapped = store.compare_and_swap(
        'links:1',
        {'id': '1', 'clicks': 0},
        {'id': '1', 'clicks': 1},
        appends=[('events:1', {'source': 'direct'})],
    )

    assert swapped is True
    assert store.get('links:1') == {'id': '1', 'clicks': 1}
    assert store.get_list('events:1') == [{'source': 'direct'}]


def test_compare_and_swap_fails_on_stale_record(store):
    store.put('links:1', {'id': '1', 'clicks': 5})

    swapped = store.compare_and_swap(
        'links:1',
        {'id': '1', 'clicks': 4},
        {'id': '1', 'clicks': 5},
        appends=[('events:1', {'source': 'direct'})],
    )

    assert swapped is False
    assert store.get('links:1') == {'id': '1', 'clicks': 5}
    assert store.get_list('events:1') == []


def test_compare_and_swap_fails_on_missing_record(store):
    assert store.compare_and_swap('links:404', {'id': '404'}, {'id': '404', 'clicks': 1}) is False
    assert store.get('links:404') is None


def test_concurrent_compare_and_swap_loses_no_update(store):
    store.put('links:1', {'id': '1', 'clicks': 0})

    def increment(n):
        while True:
            current = store.get('links:1')
            new = {'id': '1', 'clicks': current['clicks'] + 1}
            if store.compare_and_swap('links:1', current, new, appends=[('events:1', {'n': n})]):
                return

    with ThreadPoolExecutor(max_workers=8) as executor:
        list(executor.map(increment, range(200)))

    assert store.get('links:1')['clicks'] == 200
    assert sorted(item['n'] for item in store.get_list('events:1')) == list(range(200))
