"""Click accounting for short links

A click is recorded as one atomic unit: the link's `clicks` counter is
incremented and one ClickEventModel is appended to the link's event list in
the same compare-and-swap. Concurrent clicks on the same code therefore never
lose an increment, and the counter always equals the number of stored events.

Classes:
    ClickRecorder:
        Records visits against links resolved through LinkRegistry.

Example:
    >>> recorder = ClickRecorder(store, keys, registry)
    >>> recorder.record('spring', source='google.com', country='Germany', device='Mobile').clicks
    1
"""

import logging
from datetime import datetime, UTC

from beartype import beartype

from shortlinks.constants import Defaults
from shortlinks.dao.base import LinkStoreBaseDAO
from shortlinks.dao.exceptions import ConcurrentUpdateError
from shortlinks.engine.key_schema import LinkKeySchema
from shortlinks.engine.link_registry import LinkRegistry
from shortlinks.models import ClickContext, ClickEventModel, ShortLinkModel


logger = logging.getLogger(__name__)


class ClickRecorder:
    def __init__(
        self,
        store: LinkStoreBaseDAO,
        keys: LinkKeySchema,
        registry: LinkRegistry,
        max_retries: int = Defaults.MAX_CAS_RETRIES,
    ):
        self.store = store
        self.keys = keys
        self.registry = registry
        self.max_retries = max_retries

    @beartype
    def record(
        self,
        short_code: str,
        source: str = '',
        country: str = '',
        device: str = '',
        user_agent: str = '',
    ) -> ShortLinkModel:
        """Record one visit of a short code.

        The link is resolved with LinkRegistry.snapshot() first, so expiry is
        enforced. On a lost compare-and-swap the link is resolved again (it may
        have expired or been removed meanwhile) and the click is retried.

        Args:
            short_code (str):
                Exact, case-sensitive short code.
            source, country, device, user_agent (str):
                Opaque click context supplied by the calling layer.

        Returns:
            ShortLinkModel: the link with its updated click counter.

        Raises:
            LinkNotFoundError:
                If the code doesn't resolve to an active link. Nothing is recorded.
            ConcurrentUpdateError:
                If the click kept losing against concurrent writers.
            DataStoreError:
                If the store fails.
        """
        context = ClickContext(source=source, country=country, device=device, user_agent=user_agent)

        for attempt in range(1, self.max_retries + 1):
            snapshot = self.registry.snapshot(short_code)
            link = snapshot.link.with_click()
            event = ClickEventModel.from_context(link.id, datetime.now(UTC), context)

            swapped = self.store.compare_and_swap(
                snapshot.key,
                snapshot.record,
                link.to_record(),
                appends=[(self.keys.events_key(link.id), event.to_record())],
            )
            if swapped:
                logger.debug('Recorded click.', extra={'linkId': link.id, 'shortcode': short_code, 'clicks': link.clicks})
                return link

            logger.debug('Lost click update race; retrying.', extra={'shortcode': short_code, 'attempt': attempt})

        raise ConcurrentUpdateError(
            f"Could not record click for short link '{short_code}' after {self.max_retries} attempts.",
            operation='compare_and_swap',
            key=self.keys.code_key(short_code),
        )

    @beartype
    def record_context(self, short_code: str, context: ClickContext) -> ShortLinkModel:
        return self.record(
            short_code,
            source=context.source,
            country=context.country,
            device=context.device,
            user_agent=context.user_agent,
        )
