from shortlinks.dao.memory.memory_link_store_dao import MemoryLinkStoreDAO


__all__ = ['MemoryLinkStoreDAO']
