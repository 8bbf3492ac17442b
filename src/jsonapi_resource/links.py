import collections.abc
import typing
from collections import OrderedDict

from .exceptions import InvalidLinkSpecError
from .interfaces import Fetcher
from .models import LinkProducer, LinksSpec
from .serde.models import Link


class LinkResolver:
    """
    Turns a links declaration into a ``links`` mapping for a given object.

    A declaration is either the name of an attribute (or method) of the object
    that yields the whole mapping, or a mapping of link relation names to
    producers.  A producer is a callable taking the object, or the name of an
    attribute (or method) of the object.
    """

    fetcher: Fetcher

    def resolve(
        self, obj: typing.Any, links: LinksSpec, key: typing.Optional[typing.Callable[[str], str]] = None
    ) -> "OrderedDict[str, Link]":
        if isinstance(links, str):
            value = self.fetcher.select(obj, links)
            if not isinstance(value, collections.abc.Mapping):
                raise InvalidLinkSpecError(value)
            items: typing.Iterable[typing.Tuple[str, Link]] = value.items()
        elif isinstance(links, collections.abc.Mapping):
            items = ((name, self.resolve_link(obj, producer)) for name, producer in links.items())
        else:
            raise InvalidLinkSpecError(links)
        if key is None:
            return OrderedDict(items)
        return OrderedDict((key(name), link) for name, link in items)

    def resolve_link(self, obj: typing.Any, producer: LinkProducer) -> Link:
        if callable(producer) or isinstance(producer, str):
            return self.fetcher.select(obj, producer)
        raise InvalidLinkSpecError(producer)

    def __init__(self, fetcher: Fetcher):
        self.fetcher = fetcher
