from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class ShortLinkModel:
    """Represent a short link and its usage counter.

    Attributes:
        id (str):
            Opaque unique identifier assigned at creation.
        original_url (str):
            The absolute target address the short code redirects to.
        short_code (str):
            The unique resolvable key. Never reused once assigned.
        custom (bool):
            True if the short code was supplied by the caller.
        created_at (datetime):
            Creation timestamp (UTC).
        expires_at (Optional[datetime]):
            End-of-validity timestamp (UTC). None means the link never expires.
        clicks (int):
            Number of recorded click events.
        is_active (bool):
            False once the link expired. Never flips back to True.
        scope (Optional[str]):
            Opaque visibility tag (e.g. owner id) the link was created under.

    Example:
        >>> from datetime import datetime, UTC
        >>> link = ShortLinkModel(
        ...     id='4f2a9c',
        ...     original_url='https://example.com/article/123',
        ...     short_code='promo',
        ...     custom=True,
        ...     created_at=datetime(2026, 1, 1, tzinfo=UTC),
        ... )
        >>> link.clicks
        0
        >>> link.with_click().clicks
        1
    """

    id: str
    original_url: str
    short_code: str
    custom: bool
    created_at: datetime
    expires_at: Optional[datetime] = None
    clicks: int = 0
    is_active: bool = True
    scope: Optional[str] = None

    def is_expired(self, now: datetime) -> bool:
        """Return True if the link's validity has lapsed at `now`."""
        return self.expires_at is not None and self.expires_at <= now

    def with_click(self) -> 'ShortLinkModel':
        return replace(self, clicks=self.clicks + 1)

    def deactivated(self) -> 'ShortLinkModel':
        return replace(self, is_active=False)

    def to_record(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'original_url': self.original_url,
            'short_code': self.short_code,
            'custom': self.custom,
            'created_at': self.created_at.isoformat(),
            'expires_at': None if self.expires_at is None else self.expires_at.isoformat(),
            'clicks': self.clicks,
            'is_active': self.is_active,
            'scope': self.scope,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> 'ShortLinkModel':
        expires_at = record.get('expires_at')
        return cls(
            id=record['id'],
            original_url=record['original_url'],
            short_code=record['short_code'],
            custom=bool(record.get('custom', False)),
            created_at=datetime.fromisoformat(record['created_at']),
            expires_at=None if expires_at is None else datetime.fromisoformat(expires_at),
            clicks=int(record.get('clicks', 0)),
            is_active=bool(record.get('is_active', True)),
            scope=record.get('scope'),
        )
