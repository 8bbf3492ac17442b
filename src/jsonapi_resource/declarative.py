"""
Declarative interface for defining resources.

Synopsis
--------

.. code-block:: python

   from jsonapi_resource.declarative import Attr, Resource, has_many

   class UserResource(Resource):
       class Meta:
           links = {"self": lambda user: f"/users/{user.id}"}

       name = Attr()
       email = Attr(condition=lambda user: user.email_public)
       posts = has_many("PostResource")

   class PostResource(Resource):
       title = Attr()

   UserResource(user, params={"include": "posts"}).serializable_hash()
"""

import collections.abc
import dataclasses
import logging
import typing
import weakref
from collections import OrderedDict

from .conditions import (
    ALWAYS,
    AlwaysType,
    MethodCondition,
    NoArgCondition,
    ObjectCondition,
    Predicate,
    RelatedCondition,
)
from .config import DEFAULT_CONFIG, Config
from .defaults import build_document_builder, build_key_transformer, build_renderer
from .deferred import Deferred
from .exceptions import InvalidConditionError, InvalidDeclarationError
from .inflector import TRANSFORMS
from .interfaces import KeyTransformer, ResourceInstance
from .models import Association as AssociationSpec
from .models import (
    ConditionalField,
    FieldSpec,
    KeyTransform,
    LinkProducer,
    LinksSpec,
    PlainAttribute,
    ResourceDescriptor,
    Selector,
)
from .serde.models import DocumentRepr
from .serde.types import JSONValue, MutableJSONObject
from .serde.utils import english_enumerate
from .utils import is_collection

logger = logging.getLogger(__name__)


class UnspecifiedType:
    _singleton: typing.ClassVar[typing.Optional["UnspecifiedType"]] = None

    def __bool__(self):
        return False

    def __repr__(self):
        return "UNSPECIFIED"

    def __new__(cls) -> "UnspecifiedType":
        if cls._singleton is None:
            cls._singleton = object.__new__(cls)
        return cls._singleton


UNSPECIFIED = UnspecifiedType()

T = typing.TypeVar("T")


def maybe_unspecified(maybe: typing.Union[UnspecifiedType, T], default: T) -> T:
    return typing.cast(T, maybe) if maybe is not UNSPECIFIED else default


Condition = typing.Union[None, str, typing.Callable[..., typing.Any], Predicate]
"""
A condition as written in a declaration: a predicate, the name of a method of
the resource, or a callable taking the object.
"""


@dataclasses.dataclass
class Attr:
    selector: typing.Union[UnspecifiedType, Selector] = UNSPECIFIED
    key: typing.Union[UnspecifiedType, str] = UNSPECIFIED
    condition: Condition = None


@dataclasses.dataclass
class Association:
    target: typing.Any = None
    selector: typing.Union[UnspecifiedType, Selector] = UNSPECIFIED
    key: typing.Union[UnspecifiedType, str] = UNSPECIFIED
    condition: Condition = None
    meta: typing.Optional[typing.Callable[[typing.Any], typing.Any]] = None
    links: typing.Optional[LinksSpec] = None


one = many = has_one = has_many = Association


@dataclasses.dataclass
class Meta:
    type: typing.Union[UnspecifiedType, None, str, typing.Callable[[typing.Any], str]] = UNSPECIFIED
    key: typing.Union[UnspecifiedType, None, str] = UNSPECIFIED
    id: typing.Union[UnspecifiedType, None, Selector] = UNSPECIFIED
    meta: typing.Union[
        UnspecifiedType, None, typing.Callable[[typing.Any], typing.Any]
    ] = UNSPECIFIED
    links: typing.Mapping[str, LinkProducer] = dataclasses.field(default_factory=dict)
    transform_keys: typing.Union[UnspecifiedType, KeyTransform] = UNSPECIFIED
    config: typing.Union[UnspecifiedType, Config] = UNSPECIFIED
    attributes: typing.Sequence[str] = ()


def handle_meta(meta: typing.Type) -> Meta:
    attrs = {k: v for k, v in vars(meta).items() if not k.startswith("__")}
    known = {f.name for f in dataclasses.fields(Meta)}
    unknown = sorted(k for k in attrs if k not in known)
    if unknown:
        raise InvalidDeclarationError(f"unknown Meta option(s): {english_enumerate(unknown)}")

    links = attrs.get("links", {})
    if not isinstance(links, collections.abc.Mapping):
        raise InvalidDeclarationError(f"Meta.links must be a mapping, got {links!r}")
    attributes = attrs.get("attributes", ())
    if isinstance(attributes, str) or not all(isinstance(a, str) for a in attributes):
        raise InvalidDeclarationError(
            f"Meta.attributes must be a sequence of names, got {attributes!r}"
        )
    transform_keys = attrs.get("transform_keys", UNSPECIFIED)
    if isinstance(transform_keys, str) and transform_keys not in TRANSFORMS:
        raise InvalidDeclarationError(
            f"unknown key transform {transform_keys!r} "
            f"(expected {english_enumerate(list(TRANSFORMS), conj=', or ')})"
        )
    config = attrs.get("config", UNSPECIFIED)
    if config is not UNSPECIFIED and not isinstance(config, Config):
        raise InvalidDeclarationError(f"Meta.config must be a Config, got {config!r}")

    return Meta(
        type=attrs.get("type", UNSPECIFIED),
        key=attrs.get("key", UNSPECIFIED),
        id=attrs.get("id", UNSPECIFIED),
        meta=attrs.get("meta", UNSPECIFIED),
        links=links,
        transform_keys=transform_keys,
        config=config,
        attributes=attributes,
    )


_predicate_types = (AlwaysType, NoArgCondition, ObjectCondition, RelatedCondition, MethodCondition)


def as_predicate(condition: Condition, name: typing.Optional[str] = None) -> Predicate:
    """
    Converts a condition as written in a declaration into a predicate.
    A bare callable is taken as an :py:class:`ObjectCondition`; other shapes
    have to be given explicitly.
    """
    if condition is None:
        return ALWAYS
    if isinstance(condition, _predicate_types):
        return condition
    if isinstance(condition, str):
        return MethodCondition(condition)
    if callable(condition):
        return ObjectCondition(condition)
    raise InvalidConditionError(condition, name)


def build_field(name: str, decl: typing.Union[Attr, Association], nesting: str) -> FieldSpec:
    inner: typing.Union[PlainAttribute, AssociationSpec]
    selector = maybe_unspecified(decl.selector, name)
    if isinstance(decl, Attr):
        inner = PlainAttribute(selector=selector)
    else:
        inner = AssociationSpec(
            name=name,
            selector=selector,
            target=decl.target,
            nesting=nesting,
            meta=decl.meta,
            links=decl.links,
        )
    predicate = as_predicate(decl.condition, name)
    if predicate is ALWAYS:
        return inner
    return ConditionalField(inner=inner, condition=predicate)


_resources: "weakref.WeakValueDictionary[str, typing.Type[Resource]]" = (
    weakref.WeakValueDictionary()
)
_resources_by_name: "weakref.WeakValueDictionary[str, typing.Type[Resource]]" = (
    weakref.WeakValueDictionary()
)


def register_resource(resource_class: typing.Type["Resource"]) -> None:
    _resources[f"{resource_class.__module__}.{resource_class.__qualname__}"] = resource_class
    _resources_by_name[resource_class.__name__] = resource_class


def lookup_resource(name: str, nesting: typing.Optional[str] = None) -> typing.Type["Resource"]:
    """
    Finds a resource class by name: relative to ``nesting`` first, then as a
    fully qualified name, then by the bare class name (the most recently
    declared one wins).
    """
    retval = None
    if nesting is not None:
        retval = _resources.get(f"{nesting}.{name}")
    if retval is None:
        retval = _resources.get(name)
    if retval is None:
        retval = _resources_by_name.get(name)
    if retval is None:
        raise InvalidDeclarationError(f"no resource named {name!r}")
    return retval


def declare(resource_class: typing.Type["Resource"]) -> None:
    outer, _, _ = resource_class.__qualname__.rpartition(".")
    nesting = f"{resource_class.__module__}.{outer}" if outer else resource_class.__module__
    descr = resource_class.descriptor.clone(name=resource_class.__name__)
    descr.nesting = nesting

    meta_class = vars(resource_class).get("Meta")
    if meta_class is not None:
        meta = handle_meta(meta_class)
        if meta.type is not UNSPECIFIED:
            descr.type_override = meta.type
        if meta.key is not UNSPECIFIED:
            descr.key = meta.key
        if meta.id is not UNSPECIFIED:
            descr.id_field = meta.id
        if meta.meta is not UNSPECIFIED:
            descr.meta_builder = meta.meta
        if meta.transform_keys is not UNSPECIFIED:
            descr.transform_keys = meta.transform_keys
        for name, producer in meta.links.items():
            descr.add_link(name, producer)
        for name in meta.attributes:
            descr.add_field(name, PlainAttribute(selector=name))
        if meta.config is not UNSPECIFIED:
            resource_class._config = meta.config

    for name, value in list(vars(resource_class).items()):
        if isinstance(value, (Attr, Association)):
            descr.add_field(
                maybe_unspecified(value.key, name), build_field(name, value, nesting)
            )
            delattr(resource_class, name)

    resource_class.descriptor = descr
    register_resource(resource_class)
    logger.debug("declared %r", descr)


class Resource(ResourceInstance):
    """
    The base class for resources.  Subclasses declare fields as class
    attributes and options in an inner ``Meta`` class; an instance wraps the
    object (or collection of objects) to serialize.

    :param Any obj: an object, or a collection of objects.
    :param Optional[Mapping[str, Any]] params: per-call parameters; ``params["include"]`` names the relationships to include.
    :param Any within: an opaque value handed unchanged to the resources of related objects.
    :param Optional[Mapping[str, Any]] meta: the top-level ``meta`` of the document.
    :param Optional[Mapping[str, Any]] links: the top-level ``links`` of the document.
    :param Optional[Config] config: overrides the configuration given in ``Meta.config``.
    """

    descriptor: typing.ClassVar[ResourceDescriptor] = ResourceDescriptor("Resource")
    _config: typing.ClassVar[typing.Optional[Config]] = None

    object: typing.Any
    params: typing.Mapping[str, typing.Any]
    within: typing.Any
    meta: typing.Optional[typing.Mapping[str, typing.Any]]
    config: Config
    key_transformer: KeyTransformer
    _objects: typing.Sequence[typing.Any]
    _is_collection: bool
    _links: "OrderedDict[str, LinkProducer]"
    _document_links: typing.Optional["OrderedDict[str, typing.Any]"]

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        declare(cls)

    @property
    def links(self) -> typing.Mapping[str, LinkProducer]:
        return self._links

    @property
    def document_links(self) -> typing.Optional[typing.Mapping[str, typing.Any]]:
        return self._document_links

    @property
    def is_collection(self) -> bool:
        return self._is_collection

    @property
    def objects(self) -> typing.Sequence[typing.Any]:
        return self._objects

    def transform_key(self, key: str) -> str:
        return self.key_transformer.transform_key(key, self.descriptor.transform_keys)

    def resolve_target(self, assoc: AssociationSpec) -> typing.Optional[typing.Type["Resource"]]:
        target = assoc.target
        if isinstance(target, Deferred):
            target = target()
        if target is None:
            return None
        if isinstance(target, str):
            target = lookup_resource(target, assoc.nesting)
        if not (isinstance(target, type) and issubclass(target, Resource)):
            raise InvalidDeclarationError(
                f"target of association {assoc.name} is not a resource: {target!r}"
            )
        return target

    def related(self, resource_class: typing.Type[ResourceInstance], target: typing.Any) -> "Resource":
        return typing.cast(typing.Type[Resource], resource_class)(
            target, params=self.params, within=self.within, config=self.config
        )

    def to_repr(self) -> DocumentRepr:
        """
        Builds the document without rendering it.
        """
        return build_document_builder(self.config).build(self)

    def serializable_hash(self) -> MutableJSONObject:
        """
        Builds the whole document as JSON-ready values.
        """
        return build_renderer(self.config)(self.to_repr())

    def to_h(self) -> JSONValue:
        """
        Builds only the primary data of the document as JSON-ready values.
        """
        return build_renderer(self.config).render_data(self.to_repr())

    def _cased(self, name: str) -> str:
        return self.transform_key(name) if self.config.inferring else name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.object!r})"

    def __init__(
        self,
        obj: typing.Any,
        params: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        within: typing.Any = None,
        meta: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        links: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        config: typing.Optional[Config] = None,
    ):
        if type(self) is Resource:
            raise TypeError("Resource must be subclassed")
        self.object = obj
        self.params = params if params is not None else {}
        self.within = within
        self.meta = meta
        if config is None:
            config = self._config if self._config is not None else DEFAULT_CONFIG
        self.config = config
        self.key_transformer = build_key_transformer(config)
        self._is_collection = is_collection(obj)
        self._objects = list(obj) if self._is_collection else [obj]
        self._links = OrderedDict(
            (self._cased(name), producer) for name, producer in self.descriptor.links.items()
        )
        self._document_links = (
            OrderedDict((self._cased(name), link) for name, link in links.items())
            if links is not None
            else None
        )
