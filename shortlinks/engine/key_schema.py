import functools
from collections.abc import Callable


__all__ = ['LinkKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class LinkKeySchema:
    """Provide standardized store keys for links, code reservations and click events.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "shortlinks:prod" or "shortlinks:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_key(self, link_id: str) -> str:
        return f'links:{link_id}'

    @prefix_key
    def links_prefix(self) -> str:
        return 'links:'

    @prefix_key
    def code_key(self, short_code: str) -> str:
        return f'codes:{short_code}'

    @prefix_key
    def events_key(self, link_id: str) -> str:
        return f'events:{link_id}'
