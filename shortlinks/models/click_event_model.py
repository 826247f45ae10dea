from dataclasses import dataclass
from datetime import datetime
from typing import Any


# fmt: off
@dataclass(frozen=True)
class ClickContext:
    source: str = ''        # Referrer category, e.g. 'direct' or 'google.com'
    country: str = ''       # Country derived upstream from the network origin
    device: str = ''        # Device class derived upstream from client metadata
    user_agent: str = ''    # Raw User-Agent header
# fmt: on


@dataclass(frozen=True)
class ClickEventModel:
    """One recorded resolution of a short code.

    Attributes:
        link_id (str):
            Id of the ShortLinkModel the click was recorded against.
        timestamp (datetime):
            When the click was recorded (UTC).
        source, country, device, user_agent (str):
            Opaque click context supplied by the calling layer.
    """

    link_id: str
    timestamp: datetime
    source: str = ''
    country: str = ''
    device: str = ''
    user_agent: str = ''

    @classmethod
    def from_context(cls, link_id: str, timestamp: datetime, context: ClickContext) -> 'ClickEventModel':
        return cls(
            link_id=link_id,
            timestamp=timestamp,
            source=context.source,
            country=context.country,
            device=context.device,
            user_agent=context.user_agent,
        )

    def to_record(self) -> dict[str, Any]:
        return {
            'link_id': self.link_id,
            'timestamp': self.timestamp.isoformat(),
            'source': self.source,
            'country': self.country,
            'device': self.device,
            'user_agent': self.user_agent,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> 'ClickEventModel':
        return cls(
            link_id=record['link_id'],
            timestamp=datetime.fromisoformat(record['timestamp']),
            source=record.get('source', ''),
            country=record.get('country', ''),
            device=record.get('device', ''),
            user_agent=record.get('user_agent', ''),
        )
