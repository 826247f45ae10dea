"""On-demand usage analytics over stored links and click events

Every figure is derived from the ShortLinkModel and ClickEventModel records
actually present in the store; nothing is estimated or synthesized. The
aggregator never writes.

Views:
    summary       - total links, total clicks, active links
    top_links     - most clicked links with their newest click events
    click_history - clicks per UTC calendar day over a trailing window, zero-filled
    breakdown     - clicks per source / country / device / hour of day
    report        - all of the above, computed from one read of the store

Example:
    >>> aggregator = AnalyticsAggregator(store, keys, registry)
    >>> aggregator.summary()
    LinkSummary(total_urls=3, total_clicks=25, active_urls=2)
    >>> aggregator.breakdown(dimension=ClickDimension.DEVICE)
    {'Mobile': 15, 'Desktop': 10}
"""

import logging
from collections import Counter
from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta, UTC
from typing import Optional

from beartype import beartype

from shortlinks.constants import Defaults
from shortlinks.dao.base import LinkStoreBaseDAO
from shortlinks.engine.key_schema import LinkKeySchema
from shortlinks.engine.link_registry import LinkRegistry
from shortlinks.models import (
    AnalyticsReport,
    ClickDimension,
    ClickEventModel,
    HistoryPoint,
    LinkSummary,
    ShortLinkModel,
    TopLink,
)


logger = logging.getLogger(__name__)


class AnalyticsAggregator:
    """Read-only analytics over the links visible in a scope.

    Attributes:
        store (LinkStoreBaseDAO):
            Store holding links and click events.
        keys (LinkKeySchema):
            Key schema for event lists.
        registry (LinkRegistry):
            Used to list the links visible in a scope.
    """

    def __init__(self, store: LinkStoreBaseDAO, keys: LinkKeySchema, registry: LinkRegistry):
        self.store = store
        self.keys = keys
        self.registry = registry

    @beartype
    def summary(self, scope: Optional[str] = None) -> LinkSummary:
        return summarize(self.registry.list_links(scope))

    @beartype
    def top_links(
        self,
        scope: Optional[str] = None,
        n: int = Defaults.TOP_LINKS,
        recent: int = Defaults.RECENT_CLICKS,
    ) -> list[TopLink]:
        """Return the n most clicked links, ties broken by newest creation first.

        Each entry carries its `recent` newest click events (newest first) and
        the number of events left out.
        """
        return rank_top_links(self.registry.list_links(scope), self._events, n=n, recent=recent)

    @beartype
    def click_history(self, scope: Optional[str] = None, window_days: int = Defaults.HISTORY_WINDOW_DAYS) -> list[HistoryPoint]:
        """Return clicks per UTC day over the trailing window_days (today included), oldest first.

        Days without clicks are reported with 0.
        """
        return bucket_by_day(self._all_events(self.registry.list_links(scope)), window_days)

    @beartype
    def breakdown(self, scope: Optional[str] = None, dimension: ClickDimension = ClickDimension.SOURCE) -> dict[str | int, int]:
        """Count clicks per category of a dimension.

        Categories without clicks are absent; events with an empty value for the
        dimension are not counted. hour_of_day categories are ints 0-23 (UTC).
        """
        return count_by(self._all_events(self.registry.list_links(scope)), dimension)

    @beartype
    def report(
        self,
        scope: Optional[str] = None,
        n: int = Defaults.TOP_LINKS,
        recent: int = Defaults.RECENT_CLICKS,
        window_days: int = Defaults.HISTORY_WINDOW_DAYS,
    ) -> AnalyticsReport:
        """Compute every analytics view from a single read of the store."""
        links = self.registry.list_links(scope)
        events_by_link = {link.id: self._events(link.id) for link in links}
        events = [event for link_events in events_by_link.values() for event in link_events]

        logger.debug('Computed analytics report.', extra={'scope': scope, 'links': len(links), 'events': len(events)})
        return AnalyticsReport(
            summary=summarize(links),
            top_links=rank_top_links(links, events_by_link.__getitem__, n=n, recent=recent),
            click_history=bucket_by_day(events, window_days),
            breakdowns={dimension: count_by(events, dimension) for dimension in ClickDimension},
        )

    def _events(self, link_id: str) -> list[ClickEventModel]:
        return [ClickEventModel.from_record(record) for record in self.store.get_list(self.keys.events_key(link_id))]

    def _all_events(self, links: Iterable[ShortLinkModel]) -> list[ClickEventModel]:
        return [event for link in links for event in self._events(link.id)]


def summarize(links: list[ShortLinkModel]) -> LinkSummary:
    return LinkSummary(
        total_urls=len(links),
        total_clicks=sum(link.clicks for link in links),
        active_urls=sum(1 for link in links if link.is_active),
    )


def rank_top_links(
    links: list[ShortLinkModel],
    events_of: Callable[[str], list[ClickEventModel]],
    n: int,
    recent: int,
) -> list[TopLink]:
    if n < 0 or recent < 0:
        raise ValueError(f'n and recent must be non-negative (given values: n={n}, recent={recent}).')

    ranked = sorted(links, key=lambda link: (link.clicks, link.created_at, link.id), reverse=True)[:n]

    top = []
    for link in ranked:
        events = events_of(link.id)
        newest = list(reversed(events[-recent:])) if recent else []
        top.append(TopLink(link=link, recent_clicks=newest, remaining_clicks=len(events) - len(newest)))
    return top


def bucket_by_day(events: Iterable[ClickEventModel], window_days: int) -> list[HistoryPoint]:
    if not 1 <= window_days <= Defaults.MAX_HISTORY_WINDOW_DAYS:
        raise ValueError(f'window_days must be between 1 and {Defaults.MAX_HISTORY_WINDOW_DAYS} (given value: {window_days}).')

    today = datetime.now(UTC).date()
    first_day = today - timedelta(days=window_days - 1)

    clicks_per_day: Counter[date] = Counter()
    for event in events:
        day = event.timestamp.astimezone(UTC).date()
        if first_day <= day <= today:
            clicks_per_day[day] += 1

    return [
        HistoryPoint(date=day, clicks=clicks_per_day[day])
        for day in (first_day + timedelta(days=offset) for offset in range(window_days))
    ]


def count_by(events: Iterable[ClickEventModel], dimension: ClickDimension) -> dict[str | int, int]:
    counts: Counter[str | int] = Counter()
    for event in events:
        if dimension is ClickDimension.HOUR_OF_DAY:
            counts[event.timestamp.astimezone(UTC).hour] += 1
            continue

        category = getattr(event, str(dimension))
        if category:
            counts[category] += 1
    return dict(counts.most_common())
