from shortlinks.dao.base.link_store_base_dao import LinkStoreBaseDAO


__all__ = ['LinkStoreBaseDAO']
