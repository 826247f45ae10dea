"""Facade wiring the short link engine over one injected link store

Example:
    >>> from shortlinks.dao import MemoryLinkStoreDAO
    >>> from shortlinks.engine import LinkEngine
    >>> from shortlinks.models import ClickContext

    >>> with MemoryLinkStoreDAO() as store:
    ...     engine = LinkEngine(store, prefix='shortlinks:local')
    ...     link = engine.registry.create('https://example.com', custom_code='home')
    ...     engine.resolve('home', ClickContext(source='direct'))
    'https://example.com'
"""

import random
from typing import Any, Optional

from shortlinks.dao.base import LinkStoreBaseDAO
from shortlinks.engine.analytics_aggregator import AnalyticsAggregator
from shortlinks.engine.click_recorder import ClickRecorder
from shortlinks.engine.code_generator import CodeGenerator
from shortlinks.engine.key_schema import LinkKeySchema
from shortlinks.engine.link_registry import LinkRegistry
from shortlinks.engine.settings import EngineSettings
from shortlinks.models import ClickContext


class LinkEngine:
    """Own the engine components sharing one store and key schema.

    The store's lifecycle (open/close) stays with the caller.

    Attributes:
        store (LinkStoreBaseDAO): injected store.
        settings (EngineSettings): engine tunables.
        keys (LinkKeySchema): key schema for the given prefix.
        generator (CodeGenerator)
        registry (LinkRegistry)
        recorder (ClickRecorder)
        analytics (AnalyticsAggregator)
    """

    def __init__(
        self,
        store: LinkStoreBaseDAO,
        settings: Optional[EngineSettings] = None,
        prefix: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.settings = EngineSettings() if settings is None else settings
        self.keys = LinkKeySchema(prefix=prefix)

        self.generator = CodeGenerator(
            store,
            self.keys,
            rng=rng,
            length=self.settings.code_length,
            max_attempts=self.settings.max_generation_attempts,
        )
        self.registry = LinkRegistry(store, self.keys, self.generator, max_cas_retries=self.settings.max_cas_retries)
        self.recorder = ClickRecorder(store, self.keys, self.registry, max_retries=self.settings.max_cas_retries)
        self.analytics = AnalyticsAggregator(store, self.keys, self.registry)

    @classmethod
    def from_config(cls, store: LinkStoreBaseDAO, app_config: dict[str, Any], prefix: Optional[str] = None) -> 'LinkEngine':
        """Build an engine from a lambda configuration (see load_config()) over an opened store."""
        return cls(store, settings=EngineSettings.from_config(app_config.get('engine')), prefix=prefix)

    def resolve(self, short_code: str, context: Optional[ClickContext] = None) -> str:
        """Record a click and return the target address to redirect to.

        Raises:
            LinkNotFoundError:
                If the code is unknown or expired (deliberately indistinguishable).
        """
        link = self.recorder.record_context(short_code, context or ClickContext())
        return link.original_url
