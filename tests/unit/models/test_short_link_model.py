"""Unit tests for ShortLinkModel

Test coverage includes:

1. Expiry
   - Links without expires_at never expire.
   - A link is expired at and after expires_at.

2. Immutable transitions
   - with_click() and deactivated() return new models, leaving the original untouched.

3. Record conversion
   - to_record() serializes datetimes as ISO 8601 strings.
   - from_record() restores an equal model and applies defaults for missing fields.
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, UTC

import pytest

from shortlinks.models import ShortLinkModel


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def created_at():
    return datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def link(created_at):
    return ShortLinkModel(
        id='4f2a9c',
        original_url='https://example.com/article/123',
        short_code='promo',
        custom=True,
        created_at=created_at,
        expires_at=created_at + timedelta(days=7),
        scope='user-1',
    )


# -------------------------------
# 1. Expiry
# -------------------------------


def test_link_without_expiry_never_expires(link, created_at):
    forever = ShortLinkModel(id='1', original_url='https://example.com', short_code='abc', custom=False, created_at=created_at)
    assert not forever.is_expired(created_at + timedelta(days=365 * 100))


def test_link_expires_at_expiry_timestamp(link, created_at):
    assert not link.is_expired(created_at + timedelta(days=7) - timedelta(microseconds=1))
    assert link.is_expired(created_at + timedelta(days=7))
    assert link.is_expired(created_at + timedelta(days=8))


# -------------------------------
# 2. Immutable transitions
# -------------------------------


def test_with_click_returns_new_model(link):
    clicked = link.with_click().with_click()

    assert clicked.clicks == 2
    assert link.clicks == 0
    assert clicked.id == link.id


def test_deactivated_returns_new_model(link):
    inactive = link.deactivated()

    assert inactive.is_active is False
    assert link.is_active is True


def test_model_is_frozen(link):
    with pytest.raises(FrozenInstanceError):
        link.clicks = 10


# -------------------------------
# 3. Record conversion
# -------------------------------


def test_to_record(link):
    assert link.to_record() == {
        'id': '4f2a9c',
        'original_url': 'https://example.com/article/123',
        'short_code': 'promo',
        'custom': True,
        'created_at': '2026-03-01T12:00:00+00:00',
        'expires_at': '2026-03-08T12:00:00+00:00',
        'clicks': 0,
        'is_active': True,
        'scope': 'user-1',
    }


def test_from_record_restores_model(link):
    assert ShortLinkModel.from_record(link.with_click().to_record()) == link.with_click()


def test_from_record_applies_defaults():
    link = ShortLinkModel.from_record(
        {
            'id': '1',
            'original_url': 'https://example.com',
            'short_code': 'abc123',
            'created_at': '2026-03-01T12:00:00+00:00',
        }
    )

    assert link.custom is False
    assert link.expires_at is None
    assert link.clicks == 0
    assert link.is_active is True
    assert link.scope is None
