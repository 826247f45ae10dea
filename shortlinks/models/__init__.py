from shortlinks.models.short_link_model import ShortLinkModel
from shortlinks.models.click_event_model import ClickEventModel, ClickContext
from shortlinks.models.analytics_model import ClickDimension, LinkSummary, HistoryPoint, TopLink, AnalyticsReport


__all__ = [
    'ShortLinkModel',
    'ClickEventModel',
    'ClickContext',
    'ClickDimension',
    'LinkSummary',
    'HistoryPoint',
    'TopLink',
    'AnalyticsReport',
]
