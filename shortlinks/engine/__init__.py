from shortlinks.engine.key_schema import LinkKeySchema
from shortlinks.engine.settings import EngineSettings
from shortlinks.engine.code_generator import CodeGenerator
from shortlinks.engine.link_registry import LinkRegistry, LinkSnapshot, validate_url
from shortlinks.engine.click_recorder import ClickRecorder
from shortlinks.engine.analytics_aggregator import AnalyticsAggregator
from shortlinks.engine.link_engine import LinkEngine


__all__ = [
    'LinkKeySchema',
    'EngineSettings',
    'CodeGenerator',
    'LinkRegistry',
    'LinkSnapshot',
    'validate_url',
    'ClickRecorder',
    'AnalyticsAggregator',
    'LinkEngine',
]
