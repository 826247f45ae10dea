from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import Any

from shortlinks.models.short_link_model import ShortLinkModel
from shortlinks.models.click_event_model import ClickEventModel


class ClickDimension(StrEnum):
    """Dimensions click events can be broken down by."""

    SOURCE = 'source'
    COUNTRY = 'country'
    DEVICE = 'device'
    HOUR_OF_DAY = 'hour_of_day'


# fmt: off
@dataclass(frozen=True)
class LinkSummary:
    total_urls: int     # Number of visible links
    total_clicks: int   # Sum of clicks across visible links
    active_urls: int    # Number of visible links still marked active

    def to_dict(self) -> dict[str, Any]:
        return {
            'total_urls': self.total_urls,
            'total_clicks': self.total_clicks,
            'active_urls': self.active_urls,
        }


@dataclass(frozen=True)
class HistoryPoint:
    date: date          # UTC calendar day
    clicks: int         # Clicks recorded during that day

    def to_dict(self) -> dict[str, Any]:
        return {'date': self.date.isoformat(), 'clicks': self.clicks}


@dataclass(frozen=True)
class TopLink:
    link: ShortLinkModel
    recent_clicks: list[ClickEventModel] = field(default_factory=list)  # Newest first
    remaining_clicks: int = 0                                           # Events not included in recent_clicks

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.link.to_record(),
            'recent_clicks': [event.to_record() for event in self.recent_clicks],
            'remaining_clicks': self.remaining_clicks,
        }
# fmt: on


@dataclass(frozen=True)
class AnalyticsReport:
    """All analytics views for one scope, computed from the same snapshot."""

    summary: LinkSummary
    top_links: list[TopLink]
    click_history: list[HistoryPoint]
    breakdowns: dict[ClickDimension, dict[str | int, int]]

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.summary.to_dict(),
            'top_links': [entry.to_dict() for entry in self.top_links],
            'click_history': [point.to_dict() for point in self.click_history],
            'breakdowns': {
                str(dimension): {str(category): count for category, count in counts.items()}
                for dimension, counts in self.breakdowns.items()
            },
        }
