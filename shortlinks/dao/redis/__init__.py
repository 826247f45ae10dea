from shortlinks.dao.redis.redis_link_store_dao import RedisLinkStoreDAO
from shortlinks.dao.redis.mixins import RedisClientMixin


__all__ = [
    'RedisLinkStoreDAO',
    'RedisClientMixin',
]
