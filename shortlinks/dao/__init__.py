from shortlinks.dao.base import LinkStoreBaseDAO
from shortlinks.dao.memory import MemoryLinkStoreDAO
from shortlinks.dao.redis import RedisLinkStoreDAO
from shortlinks.dao.factory import store_from_config


__all__ = [
    'LinkStoreBaseDAO',
    'MemoryLinkStoreDAO',
    'RedisLinkStoreDAO',
    'store_from_config',
]
