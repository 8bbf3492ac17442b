import copy
import dataclasses
import typing
from collections import OrderedDict

from .conditions import ALWAYS, Predicate

Selector = typing.Union[str, typing.Callable[[typing.Any], typing.Any]]
"""
Either the name of an attribute (or mapping key) of the object, or a callable
that takes the object.
"""

LinkProducer = typing.Union[str, typing.Callable[[typing.Any], typing.Any]]
LinksSpec = typing.Union[str, typing.Mapping[str, LinkProducer]]
KeyTransform = typing.Union[str, typing.Callable[[str], str]]

RESERVED_KEYS = ("id", "type")


@dataclasses.dataclass(frozen=True)
class Identifier:
    type: str
    id: str


@dataclasses.dataclass(frozen=True)
class PlainAttribute:
    selector: Selector


@dataclasses.dataclass(frozen=True)
class Association:
    """
    A relationship to other resource(s).

    :param str name: the declared name, matched against ``include`` request names.
    :param Selector selector: how the related object(s) are fetched.
    :param target: the resource class for the related objects, its name, a :py:class:`Deferred` yielding it, or :py:const:`None`.
    :param Optional[str] nesting: the module the association was declared in; string targets are looked up there first.
    :param meta: a callable taking the object and returning the relationship's ``meta``.
    :param links: the relationship's links (see :py:class:`~jsonapi_resource.links.LinkResolver`).
    """

    name: str
    selector: Selector
    target: typing.Any = None
    nesting: typing.Optional[str] = None
    meta: typing.Optional[typing.Callable[[typing.Any], typing.Any]] = None
    links: typing.Optional[LinksSpec] = None


@dataclasses.dataclass(frozen=True)
class ConditionalField:
    inner: typing.Union[PlainAttribute, Association]
    condition: Predicate


FieldSpec = typing.Union[PlainAttribute, Association, ConditionalField]


def unwrap(
    spec: FieldSpec,
) -> typing.Tuple[typing.Union[PlainAttribute, Association], Predicate]:
    """
    Splits a field spec into the underlying attribute or association and its condition.
    """
    if isinstance(spec, ConditionalField):
        return spec.inner, spec.condition
    return spec, ALWAYS


class ResourceDescriptor:
    """
    A :py:class:`ResourceDescriptor` holds the per-class configuration of a resource.

    It is built once when a resource class is declared.  Subclasses get a copy
    via :py:meth:`clone`, so changes to one never leak into the other.
    """

    name: str
    """
    The name of the declaring class.
    """
    key: typing.Optional[str]
    """
    The declared base key, from which the type is derived when no type override is given.
    """
    id_field: typing.Optional[Selector]
    type_override: typing.Union[None, str, typing.Callable[[typing.Any], str]]
    meta_builder: typing.Optional[typing.Callable[[typing.Any], typing.Any]]
    transform_keys: KeyTransform
    nesting: typing.Optional[str]
    _links: "OrderedDict[str, LinkProducer]"
    _fields: "OrderedDict[str, FieldSpec]"

    @property
    def links(self) -> typing.Mapping[str, LinkProducer]:
        return self._links

    @property
    def fields(self) -> typing.Mapping[str, FieldSpec]:
        """
        The ordered field table.
        """
        return self._fields

    def plain_attributes(self) -> typing.Iterator[typing.Tuple[str, FieldSpec]]:
        for key, spec in self._fields.items():
            inner, _ = unwrap(spec)
            if isinstance(inner, PlainAttribute) and key not in RESERVED_KEYS:
                yield key, spec

    def associations(self) -> typing.Iterator[typing.Tuple[str, FieldSpec]]:
        for key, spec in self._fields.items():
            inner, _ = unwrap(spec)
            if isinstance(inner, Association):
                yield key, spec

    @property
    def has_attributes(self) -> bool:
        return any(True for _ in self.plain_attributes())

    @property
    def has_relationships(self) -> bool:
        return any(True for _ in self.associations())

    def add_field(self, key: str, spec: FieldSpec) -> None:
        self._fields[key] = spec

    def add_link(self, name: str, producer: LinkProducer) -> None:
        self._links[name] = producer

    def clone(self, name: typing.Optional[str] = None) -> "ResourceDescriptor":
        retval = copy.copy(self)
        if name is not None:
            retval.name = name
        retval._links = OrderedDict(self._links)
        retval._fields = OrderedDict(self._fields)
        return retval

    def __repr__(self) -> str:
        return f"ResourceDescriptor({self.name!r}, fields={list(self._fields)!r})"

    def __init__(
        self,
        name: str,
        key: typing.Optional[str] = None,
        id_field: typing.Optional[Selector] = None,
        type_override: typing.Union[None, str, typing.Callable[[typing.Any], str]] = None,
        meta_builder: typing.Optional[typing.Callable[[typing.Any], typing.Any]] = None,
        links: typing.Iterable[typing.Tuple[str, LinkProducer]] = (),
        fields: typing.Iterable[typing.Tuple[str, FieldSpec]] = (),
        transform_keys: KeyTransform = "none",
        nesting: typing.Optional[str] = None,
    ) -> None:
        self.name = name
        self.key = key
        self.id_field = id_field
        self.type_override = type_override
        self.meta_builder = meta_builder
        self.transform_keys = transform_keys
        self.nesting = nesting
        self._links = OrderedDict(links)
        self._fields = OrderedDict(fields)
