"""Short link lifecycle: create, lookup (with lazy expiry), list and remove

State machine of a link:

    Active --(lookup after expires_at)--> Expired (is_active=False, record kept)
    Active --(remove)--> Deleted (record and click events removed)
    Expired --(remove)--> Deleted

No transition ever re-enters Active. The short code reservation outlives the
link, so a deleted link's code is never handed out again.

Classes:
    LinkSnapshot:
        A looked-up link together with the raw record and key it was read from.
    LinkRegistry:
        Owns link records in the link store.

Example:
    >>> registry = LinkRegistry(store, keys, generator)
    >>> link = registry.create('https://example.com/spring', custom_code='spring', expiration_days=30)
    >>> registry.lookup('spring').original_url
    'https://example.com/spring'
    >>> registry.remove(link.id)
    >>> registry.lookup('spring')
    Traceback (most recent call last):
        ...
    shortlinks.exceptions.LinkNotFoundError: Short link with code 'spring' not found or has expired.
"""

import logging
import re
import uuid
from datetime import datetime, timedelta, UTC
from typing import Any, NamedTuple, Optional
from urllib.parse import urlparse

from beartype import beartype

from shortlinks.constants import Defaults
from shortlinks.dao.base import LinkStoreBaseDAO
from shortlinks.dao.exceptions import ConcurrentUpdateError
from shortlinks.engine.code_generator import CodeGenerator
from shortlinks.engine.key_schema import LinkKeySchema
from shortlinks.exceptions import InvalidExpirationError, InvalidUrlError, LinkNotFoundError
from shortlinks.models import ShortLinkModel


logger = logging.getLogger(__name__)

URL_SCHEME_PATTERN = re.compile(r'[A-Za-z][A-Za-z0-9+.-]*')


class LinkSnapshot(NamedTuple):
    link: ShortLinkModel
    key: str
    record: dict[str, Any]


class LinkRegistry:
    """Create, resolve, list and remove short links.

    Attributes:
        store (LinkStoreBaseDAO):
            Store holding link records.
        keys (LinkKeySchema):
            Key schema for link, code and event keys.
        generator (CodeGenerator):
            Used to validate/reserve custom codes and generate new ones.
        max_cas_retries (int):
            Attempts at flipping an expired link before reporting contention.
    """

    def __init__(
        self,
        store: LinkStoreBaseDAO,
        keys: LinkKeySchema,
        generator: CodeGenerator,
        max_cas_retries: int = Defaults.MAX_CAS_RETRIES,
    ):
        self.store = store
        self.keys = keys
        self.generator = generator
        self.max_cas_retries = max_cas_retries

    @beartype
    def create(
        self,
        original_url: str,
        custom_code: Optional[str] = None,
        expiration_days: Optional[int] = None,
        scope: Optional[str] = None,
    ) -> ShortLinkModel:
        """Create a new short link.

        Validation happens before any state is touched, so a rejected request
        leaves the store unchanged.

        Args:
            original_url (str):
                Absolute target address.
            custom_code (Optional[str]):
                Caller-chosen short code. A random code is generated when None.
            expiration_days (Optional[int]):
                Days until the link expires. Zero or negative values create an
                already-expired link. None means the link never expires.
            scope (Optional[str]):
                Opaque visibility tag (e.g. owner id) recorded on the link.

        Returns:
            ShortLinkModel: the stored link.

        Raises:
            InvalidUrlError:
                If original_url isn't a well-formed absolute URL.
            CodeValidationError:
                If custom_code is malformed.
            InvalidExpirationError:
                If expiration_days puts the expiry out of the supported date range.
            CodeTakenError:
                If custom_code was ever used before.
            CodeSpaceExhaustedError:
                If no unused code could be generated.
            DataStoreError:
                If the store fails.
        """
        validate_url(original_url)
        if custom_code is not None:
            self.generator.validate_custom_code(custom_code)
        created_at = datetime.now(UTC)
        expires_at = expiry_date(created_at, expiration_days)

        link_id = uuid.uuid4().hex
        if custom_code is not None:
            self.generator.reserve(custom_code, link_id=link_id)
            short_code = custom_code
        else:
            short_code = self.generator.generate(link_id=link_id)

        link = ShortLinkModel(
            id=link_id,
            original_url=original_url,
            short_code=short_code,
            custom=custom_code is not None,
            created_at=created_at,
            expires_at=expires_at,
            scope=scope,
        )
        self.store.put(self.keys.link_key(link_id), link.to_record())

        logger.info(
            'Created short link.',
            extra={'linkId': link_id, 'shortcode': short_code, 'custom': link.custom, 'expiresAt': link.to_record()['expires_at']},
        )
        return link

    @beartype
    def lookup(self, short_code: str) -> ShortLinkModel:
        """Resolve an active link by its exact, case-sensitive short code.

        NOTE: if the link is still marked active but its expiry has passed, this call
              marks it inactive in the store before reporting it as not found.

        Raises:
            LinkNotFoundError:
                If the code is unknown, its link was deleted, or the link expired.
            DataStoreError:
                If the store fails.
        """
        return self.snapshot(short_code).link

    @beartype
    def snapshot(self, short_code: str) -> LinkSnapshot:
        """Same as lookup(), also returning the raw record and its key for compare-and-swap callers."""
        reservation = self.store.get(self.keys.code_key(short_code))
        if reservation is None or reservation.get('link_id') is None:
            raise LinkNotFoundError(f"Short link with code '{short_code}' not found or has expired.")

        key = self.keys.link_key(reservation['link_id'])
        for _ in range(self.max_cas_retries):
            record = self.store.get(key)
            if record is None:
                raise LinkNotFoundError(f"Short link with code '{short_code}' not found or has expired.")

            link = ShortLinkModel.from_record(record)
            if not link.is_active:
                raise LinkNotFoundError(f"Short link with code '{short_code}' not found or has expired.")
            if not link.is_expired(datetime.now(UTC)):
                return LinkSnapshot(link=link, key=key, record=record)

            if self.store.compare_and_swap(key, record, link.deactivated().to_record()):
                logger.info('Short link expired; marked inactive.', extra={'linkId': link.id, 'shortcode': short_code})
                raise LinkNotFoundError(f"Short link with code '{short_code}' not found or has expired.")

        raise ConcurrentUpdateError(
            f"Could not mark short link '{short_code}' as expired after {self.max_cas_retries} attempts.",
            operation='compare_and_swap',
            key=key,
        )

    @beartype
    def get(self, link_id: str) -> ShortLinkModel:
        """Fetch a link by id, active or not, without applying expiry.

        Raises:
            LinkNotFoundError:
                If no link with this id exists (never created or removed).
        """
        record = self.store.get(self.keys.link_key(link_id))
        if record is None:
            raise LinkNotFoundError(f"Short link with id '{link_id}' not found.")
        return ShortLinkModel.from_record(record)

    @beartype
    def list_links(self, scope: Optional[str] = None) -> list[ShortLinkModel]:
        """Return links visible in scope (all links if scope is None), newest first."""
        records = self.store.scan(
            self.keys.links_prefix(),
            predicate=None if scope is None else (lambda record: record.get('scope') == scope),
        )
        links = [ShortLinkModel.from_record(record) for record in records]
        return sorted(links, key=lambda link: (link.created_at, link.id), reverse=True)

    @beartype
    def remove(self, link_id: str) -> None:
        """Delete a link and its click events. The short code stays reserved.

        Raises:
            LinkNotFoundError:
                If the link doesn't exist, including when it was already removed.
        """
        if not self.store.delete(self.keys.link_key(link_id)):
            raise LinkNotFoundError(f"Short link with id '{link_id}' not found.")
        self.store.delete(self.keys.events_key(link_id))

        logger.info('Removed short link.', extra={'linkId': link_id})


def expiry_date(created_at: datetime, expiration_days: Optional[int]) -> Optional[datetime]:
    """Return created_at shifted by expiration_days, or None for a link that never expires.

    Raises:
        InvalidExpirationError:
            If the resulting date falls outside what datetime can represent.
    """
    if expiration_days is None:
        return None
    try:
        return created_at + timedelta(days=expiration_days)
    except OverflowError as e:
        raise InvalidExpirationError(f'Expiration of {expiration_days} days is out of range.') from e


def validate_url(url: str) -> None:
    """Raise InvalidUrlError unless url is an absolute URL with a scheme and a network location.

    Example:
        >>> validate_url('https://example.com/page?id=1')
        >>> validate_url('example.com')
        Traceback (most recent call last):
            ...
        shortlinks.exceptions.InvalidUrlError: Invalid URL provided: 'example.com'.
    """
    if not isinstance(url, str) or not url or any(character.isspace() for character in url):
        raise InvalidUrlError(f'Invalid URL provided: {url!r}.')

    try:
        components = urlparse(url)
        components.port  # raises ValueError on malformed ports
    except ValueError as e:
        raise InvalidUrlError(f'Invalid URL provided: {url!r}.') from e

    if not URL_SCHEME_PATTERN.fullmatch(components.scheme) or not components.netloc or not components.hostname:
        raise InvalidUrlError(f'Invalid URL provided: {url!r}.')
