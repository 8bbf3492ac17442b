import abc
import typing
from collections import OrderedDict

from .models import (
    AttributeValue,
    CollectionDocumentRepr,
    DocumentRepr,
    LinkageRepr,
    LinksRepr,
    MetaRepr,
    Repr,
    ResourceIdRepr,
    ResourceRepr,
    SingletonDocumentRepr,
)


class ReprBuilder(metaclass=abc.ABCMeta):
    parent: typing.Optional["ReprBuilder"] = None
    meta: typing.Optional[MetaRepr]

    @abc.abstractmethod
    def __call__(self) -> Repr:
        ...  # pragma: nocover

    def __init__(self, parent: typing.Optional["ReprBuilder"] = None):
        self.parent = parent
        self.meta = None


class NodeReprBuilder(ReprBuilder):
    links: typing.Optional[LinksRepr] = None

    def __init__(self, parent: typing.Optional["ReprBuilder"] = None):
        super().__init__(parent)
        self.links = None


class ResourceIdReprBuilder(ReprBuilder):
    type: typing.Optional[str] = None
    id: typing.Optional[str] = None

    def set_type(self, type: str):
        self.type = type

    def set_id(self, id: str):
        self.id = id

    def __call__(self) -> ResourceIdRepr:
        assert self.type is not None
        assert self.id is not None
        return ResourceIdRepr(type=self.type, id=self.id)

    def __init__(self, parent: typing.Optional[ReprBuilder] = None):
        super().__init__(parent)


class LinkageReprBuilder(NodeReprBuilder, metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def __call__(self) -> LinkageRepr:
        ...  # pragma: nocover


class ToManyRelReprBuilder(LinkageReprBuilder):
    data: typing.List[typing.Optional[ResourceIdReprBuilder]]

    def next(self) -> ResourceIdReprBuilder:
        builder = ResourceIdReprBuilder(self)
        self.data.append(builder)
        return builder

    def skip(self) -> None:
        """
        Adds a ``null`` entry for a related object that cannot be identified.
        """
        self.data.append(None)

    def __call__(self) -> LinkageRepr:
        return LinkageRepr(
            data=tuple(b() if b is not None else None for b in self.data),
            links=self.links,
            meta=self.meta,
        )

    def __init__(self, parent: typing.Optional[ReprBuilder] = None):
        super().__init__(parent)
        self.data = []


class ToOneRelReprBuilder(LinkageReprBuilder):
    data: typing.Optional[ResourceIdReprBuilder]

    def set(self) -> ResourceIdReprBuilder:
        self.data = builder = ResourceIdReprBuilder(self)
        return builder

    def __call__(self) -> LinkageRepr:
        return LinkageRepr(
            data=self.data() if self.data is not None else None,
            links=self.links,
            meta=self.meta,
        )

    def __init__(self, parent: typing.Optional[ReprBuilder] = None):
        super().__init__(parent)
        self.data = None


class ResourceReprBuilder(NodeReprBuilder):
    type: typing.Optional[str] = None
    id: typing.Optional[str] = None
    attributes: typing.Optional["OrderedDict[str, AttributeValue]"]
    relationships: typing.Optional["OrderedDict[str, LinkageReprBuilder]"]

    def set_type(self, type: str):
        self.type = type

    def set_id(self, id: str):
        self.id = id

    def declare_attributes(self) -> None:
        """
        Makes ``attributes`` appear in the result even if no attribute gets added.
        """
        if self.attributes is None:
            self.attributes = OrderedDict()

    def declare_relationships(self) -> None:
        """
        Makes ``relationships`` appear in the result even if no relationship gets added.
        """
        if self.relationships is None:
            self.relationships = OrderedDict()

    def add_attribute(self, name: str, value: AttributeValue):
        self.declare_attributes()
        assert self.attributes is not None
        self.attributes[name] = value

    def next_to_many_relationship(self, name: str) -> ToManyRelReprBuilder:
        self.declare_relationships()
        assert self.relationships is not None
        rel = self.relationships.get(name)
        if rel is not None:
            if not isinstance(rel, ToManyRelReprBuilder):
                raise TypeError("specified relationship is not a to-many relationship")
        else:
            self.relationships[name] = rel = ToManyRelReprBuilder(self)
        return typing.cast(ToManyRelReprBuilder, rel)

    def next_to_one_relationship(self, name: str) -> ToOneRelReprBuilder:
        self.declare_relationships()
        assert self.relationships is not None
        rel = self.relationships.get(name)
        if rel is not None:
            if not isinstance(rel, ToOneRelReprBuilder):
                raise TypeError("specified relationship is not a to-one relationship")
        else:
            self.relationships[name] = rel = ToOneRelReprBuilder(self)
        return typing.cast(ToOneRelReprBuilder, rel)

    def __call__(self) -> ResourceRepr:
        assert self.type is not None
        assert self.id is not None
        return ResourceRepr(
            type=self.type,
            id=self.id,
            links=self.links,
            meta=self.meta,
            attributes=(
                tuple((k, v) for k, v in self.attributes.items())
                if self.attributes is not None
                else None
            ),
            relationships=(
                tuple((k, v()) for k, v in self.relationships.items())
                if self.relationships is not None
                else None
            ),
        )

    def __init__(self, parent: typing.Optional[ReprBuilder] = None):
        super().__init__(parent)
        self.attributes = None
        self.relationships = None


class DocumentReprBuilder(NodeReprBuilder, metaclass=abc.ABCMeta):
    included: typing.Optional[typing.List[ResourceReprBuilder]]

    def declare_included(self) -> None:
        """
        Makes ``included`` appear in the result even if nothing gets included.
        """
        if self.included is None:
            self.included = []

    def next_included(self) -> ResourceReprBuilder:
        self.declare_included()
        assert self.included is not None
        b = ResourceReprBuilder(self)
        self.included.append(b)
        return b

    def _build_included(self) -> typing.Optional[typing.Sequence[ResourceRepr]]:
        if self.included is None:
            return None
        return tuple(r() for r in self.included)

    @abc.abstractmethod
    def __call__(self) -> DocumentRepr:
        ...  # pragma: nocover

    def __init__(self):
        super().__init__(None)
        self.included = None


class CollectionDocumentReprBuilder(DocumentReprBuilder):
    data: typing.List[ResourceReprBuilder]

    def next(self) -> ResourceReprBuilder:
        builder = ResourceReprBuilder(self)
        self.data.append(builder)
        return builder

    def __call__(self) -> CollectionDocumentRepr:
        return CollectionDocumentRepr(
            data=tuple(b() for b in self.data),
            links=self.links,
            meta=self.meta,
            included=self._build_included(),
        )

    def __init__(self):
        super().__init__()
        self.data = []


class SingletonDocumentReprBuilder(DocumentReprBuilder):
    data: ResourceReprBuilder

    def __call__(self) -> SingletonDocumentRepr:
        return SingletonDocumentRepr(
            data=self.data(),
            links=self.links,
            meta=self.meta,
            included=self._build_included(),
        )

    def __init__(self):
        super().__init__()
        self.data = ResourceReprBuilder(self)
