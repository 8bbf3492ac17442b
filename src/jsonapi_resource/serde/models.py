"""
Classes in :py:mod:`jsonapi_resource.serde.models` are abstract representation of JSON:API document elements.

Optional members set to :py:const:`None` are left out of the rendered document,
which is how a member that is not there is told apart from an empty one
(``"attributes": {}``) or an explicit ``null`` (``"data": null``).
"""

import dataclasses
import datetime
import decimal
import typing
import uuid
from collections import OrderedDict

URL = str

Link = typing.Union[URL, typing.Mapping[str, typing.Any], None]
"""
A link is either a URL string or a link object (``{"href": ..., "meta": ...}``).
"""

LinksRepr = typing.Mapping[str, Link]
"""
A ``links`` node: a mapping of link relation names to links.
"""

MetaRepr = typing.Mapping[str, typing.Any]


@dataclasses.dataclass
class Repr:
    """
    The base class for any model objects.
    """


@dataclasses.dataclass(init=False)
class NodeRepr(Repr):
    """
    :py:class:`NodeRepr` is an abstract base for classes containing ``meta`` and ``links`` nodes.
    """

    meta: typing.Optional[MetaRepr] = None
    links: typing.Optional[LinksRepr] = None

    def __init__(
        self,
        *,
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[MetaRepr] = None,
    ):
        """
        :param Optional[LinksRepr] links: a mapping of link relation names to links.
        :param Optional[Mapping[str, Any]] meta: a dictionary containing user-defined information.
        """
        self.links = links
        self.meta = meta


@dataclasses.dataclass(init=False)
class ResourceIdRepr(Repr):
    """
    Instances of :py:class:`ResourceIdRepr` represent `Resource Identifier Objects <https://jsonapi.org/format/#document-resource-identifier-objects>`_
    """

    type: str
    id: str

    def __init__(self, *, type: str, id: str):
        """
        :param str type: a value for ``type`` property.
        :param str id: a value for ``id`` property.
        """
        self.type = type
        self.id = id


@dataclasses.dataclass(init=False)
class LinkageRepr(NodeRepr):
    """
    :py:class:`LinkageRepr` represents a relationship object holding a `Resource Linkage <https://jsonapi.org/format/#document-resource-object-linkage>`_

    A :py:const:`None` inside a to-many ``data`` stands for an entry that could not be identified.
    """

    data: typing.Union[None, ResourceIdRepr, typing.Sequence[typing.Optional[ResourceIdRepr]]] = None

    def __init__(
        self,
        *,
        data: typing.Union[
            None, ResourceIdRepr, typing.Sequence[typing.Optional[ResourceIdRepr]]
        ],
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[MetaRepr] = None,
    ):
        """
        :param Union[None, ResourceIdRepr, Sequence[ResourceIdRepr]] data: a value for ``data`` property.
        :param Optional[LinksRepr] links: a value for ``links`` property.
        :param Optional[Mapping[str, Any]] meta: a dictionary containing user-defined information.
        """
        super().__init__(links=links, meta=meta)
        self.data = data


AttributeScalar = typing.Union[
    datetime.datetime, datetime.date, decimal.Decimal, uuid.UUID, str, int, float, bytes, None
]
AttributeValue = typing.Union[
    typing.Sequence[typing.Any],
    typing.Mapping[str, typing.Any],
    AttributeScalar,
]


@dataclasses.dataclass(init=False)
class ResourceRepr(NodeRepr):
    """
    :py:class:`ResourceRepr` class represents a `Resource Object <https://jsonapi.org/format/#document-resource-objects>`_.
    """

    type: str
    id: str
    attributes: typing.Optional[typing.Mapping[str, AttributeValue]] = None
    relationships: typing.Optional[typing.Mapping[str, LinkageRepr]] = None

    def __getitem__(self, name):
        assert self.attributes is not None
        return self.attributes[name]

    @property
    def identifier(self) -> ResourceIdRepr:
        return ResourceIdRepr(type=self.type, id=self.id)

    def __init__(
        self,
        *,
        type: str,
        id: str,
        attributes: typing.Optional[typing.Iterable[typing.Tuple[str, AttributeValue]]] = None,
        relationships: typing.Optional[typing.Iterable[typing.Tuple[str, LinkageRepr]]] = None,
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[MetaRepr] = None,
    ):
        """
        :param str type: a value for ``type`` property.
        :param str id: a value for ``id`` property.
        :param Optional[Iterable[Tuple[str, AttributeValue]]] attributes: a sequence of tuples each of which represents a key-value pair of an attribute.
        :param Optional[Iterable[Tuple[str, LinkageRepr]]] relationships: a sequence of tuples each of which represent a key-value pair of a relationship.
        :param Optional[LinksRepr] links: a value for ``links`` property.
        :param Optional[Mapping[str, Any]] meta: a dictionary containing user-defined information.
        """
        super().__init__(links=links, meta=meta)
        self.type = type
        self.id = id
        self.attributes = OrderedDict(attributes) if attributes is not None else None
        self.relationships = OrderedDict(relationships) if relationships is not None else None


@dataclasses.dataclass(init=False)
class DocumentReprBase(NodeRepr):
    included: typing.Optional[typing.Sequence[ResourceRepr]] = None

    def __init__(
        self,
        *,
        included: typing.Optional[typing.Sequence[ResourceRepr]] = None,
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[MetaRepr] = None,
    ):
        """
        :param Optional[Sequence[ResourceRepr]] included: a sequence of :py:class:`ResourceRepr`.
        :param Optional[LinksRepr] links: a value for ``links`` property.
        :param Optional[Mapping[str, Any]] meta: a dictionary containing user-defined information.
        """
        super().__init__(links=links, meta=meta)
        self.included = tuple(included) if included is not None else None


@dataclasses.dataclass(init=False)
class SingletonDocumentRepr(DocumentReprBase):
    data: typing.Optional[ResourceRepr] = None

    def __init__(
        self,
        *,
        data: ResourceRepr,
        included: typing.Optional[typing.Sequence[ResourceRepr]] = None,
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[MetaRepr] = None,
    ):
        """
        :param ResourceRepr data: a ResourceRepr object.
        :param Optional[Sequence[ResourceRepr]] included: a sequence of :py:class:`ResourceRepr`.
        :param Optional[LinksRepr] links: a value for ``links`` property.
        :param Optional[Mapping[str, Any]] meta: a dictionary containing user-defined information.
        """
        super().__init__(included=included, links=links, meta=meta)
        self.data = data


@dataclasses.dataclass(init=False)
class CollectionDocumentRepr(DocumentReprBase):
    data: typing.Sequence[ResourceRepr] = ()

    def __init__(
        self,
        *,
        data: typing.Sequence[ResourceRepr],
        included: typing.Optional[typing.Sequence[ResourceRepr]] = None,
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[MetaRepr] = None,
    ):
        """
        :param Sequence[ResourceRepr] data: a sequence of ResourceRepr objects.
        :param Optional[Sequence[ResourceRepr]] included: a sequence of :py:class:`ResourceRepr`.
        :param Optional[LinksRepr] links: a value for ``links`` property.
        :param Optional[Mapping[str, Any]] meta: a dictionary containing user-defined information.
        """
        super().__init__(included=included, links=links, meta=meta)
        self.data = tuple(data)


DocumentRepr = typing.Union[SingletonDocumentRepr, CollectionDocumentRepr]
