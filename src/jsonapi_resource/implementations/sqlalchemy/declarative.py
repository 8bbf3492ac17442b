"""
jsonapi_resource.implementations.sqlalchemy.declarative module contains a
facade that derives resources from SQLAlchemy-mapped classes.

Synopsis
--------

.. code-block:: python

   import sqlalchemy as sa
   from sqlalchemy import orm
   from jsonapi_resource.implementations.sqlalchemy import declarative_with_defaults

   Base = orm.declarative_base()
   decl = declarative_with_defaults()

   @decl
   class Foo(Base):
       __tablename__ = "foos"

       id = sa.Column(sa.Integer(), primary_key=True, nullable=False)
       col1 = sa.Column(sa.Integer(), nullable=False)
       bars = orm.relationship("Bar")

   @decl
   class Bar(Base):
       __tablename__ = "bars"

       id = sa.Column(sa.Integer(), primary_key=True, nullable=False)
       foo_id = sa.Column(sa.Integer(), sa.ForeignKey("foos.id"))

   decl.configure()

   doc = decl.build_serde_single(foo, params={"include": ["bars"]})

"""
import logging
import typing
from collections import OrderedDict

from sqlalchemy import orm  # type: ignore

from ...config import DEFAULT_CONFIG, Config
from ...declarative import Association, Attr, Resource
from ...defaults import build_renderer
from ...deferred import Deferred
from ...serde.models import DocumentRepr
from ...serde.types import MutableJSONObject
from .defaults import (
    DefaultStringMarshallerImpl,
    IdentityBuilder,
    StringMarshaller,
    default_extract_properties,
    extract_resource_key,
)

logger = logging.getLogger(__name__)

ExtractPropertiesFn = typing.Callable[
    [orm.Mapper], typing.Iterable[orm.interfaces.MapperProperty]
]


class Declarative:
    """
    The facade class that creates a resource class for each registered
    SQLAlchemy-mapped class.

    The type of a derived resource is the table name, its id is built from the
    primary key, its attributes are the non-key columns, and every ORM
    relationship becomes an association whose target is the resource of the
    related class.  A ``Meta`` inner class of the mapped class may override any
    option a resource ``Meta`` accepts; ``Meta.attributes`` narrows the columns
    exposed.
    """

    _resources: typing.Dict[typing.Type, typing.Type[Resource]]
    _instrumented_classes: typing.List[typing.Type]
    identity_builder: IdentityBuilder
    config: typing.Optional[Config]
    _extract_properties_fn: ExtractPropertiesFn

    def _configure_instrumented_class(self, sa_mapper: orm.Mapper) -> typing.Type[Resource]:
        class_ = sa_mapper.class_
        if class_ in self._resources:
            return self._resources[class_]

        meta_attrs: typing.Dict[str, typing.Any] = {
            "key": extract_resource_key(sa_mapper),
            "id": self.identity_builder,
        }
        if self.config is not None:
            meta_attrs["config"] = self.config
        meta_class = getattr(class_, "Meta", None)
        if meta_class is not None:
            meta_attrs.update(
                (k, v) for k, v in vars(meta_class).items() if not k.startswith("__")
            )
        exposed = meta_attrs.pop("attributes", None)

        ns: "OrderedDict[str, typing.Any]" = OrderedDict()
        for prop in self._extract_properties_fn(sa_mapper):
            if isinstance(prop, orm.RelationshipProperty):
                ns[prop.key] = Association(
                    target=Deferred(self._query_resource_by_class, prop.mapper.class_)
                )
            elif exposed is None or prop.key in exposed:
                ns[prop.key] = Attr()

        ns["Meta"] = type("Meta", (), meta_attrs)
        ns["__module__"] = class_.__module__
        ns["__qualname__"] = f"{class_.__qualname__}Resource"
        resource_class = typing.cast(
            typing.Type[Resource], type(f"{class_.__name__}Resource", (Resource,), dict(ns))
        )
        self._resources[class_] = resource_class
        logger.debug("derived %s from %s", resource_class.__name__, class_.__name__)
        return resource_class

    def _query_resource_by_class(self, class_: typing.Type) -> typing.Type[Resource]:
        return self._configure_instrumented_class(orm.class_mapper(class_))

    def _do_configure(self):
        for c in self._instrumented_classes:
            self._configure_instrumented_class(orm.class_mapper(c))

    def resource_for(self, class_: typing.Type) -> typing.Type[Resource]:
        """
        Returns the resource class derived from the given mapped class.
        """
        return self._query_resource_by_class(class_)

    def build_serde_single(self, native: typing.Any, **kwargs: typing.Any) -> DocumentRepr:
        """
        Builds a document from a single mapped object.

        :param Any native: an SQLAlchemy-instrumented object to serialize.
        :param kwargs: passed to the resource (``params``, ``within``, ``meta``, ``links``, ``config``).
        :return: the document representation.
        """
        return self.resource_for(type(native))(native, **kwargs).to_repr()

    def build_serde_collection(
        self, native_: typing.Type, natives: typing.Iterable[typing.Any], **kwargs: typing.Any
    ) -> DocumentRepr:
        """
        Builds a document from a collection of mapped objects.

        :param Type[Any] native_: an SQLAlchemy-instrumented class.
        :param Iterable[Any] natives: the objects to serialize.
        :return: the document representation.
        """
        return self.resource_for(native_)(list(natives), **kwargs).to_repr()

    def render(self, doc: DocumentRepr) -> MutableJSONObject:
        return build_renderer(self.config if self.config is not None else DEFAULT_CONFIG)(doc)

    def configure(self, skip_configure_mappers=False) -> None:
        if not skip_configure_mappers:
            orm.configure_mappers()
        self._do_configure()

    T = typing.TypeVar("T")

    def __call__(self, instrumented_class: typing.Type[T]) -> typing.Type[T]:
        self._instrumented_classes.append(instrumented_class)
        return instrumented_class

    def __init__(
        self,
        identity_builder: IdentityBuilder,
        config: typing.Optional[Config] = None,
        extract_properties_fn: ExtractPropertiesFn = default_extract_properties,
    ):
        self._resources = {}
        self._instrumented_classes = []
        self.identity_builder = identity_builder
        self.config = config
        self._extract_properties_fn = extract_properties_fn


default_marshaller = DefaultStringMarshallerImpl()


def declarative_with_defaults(
    marshaller: typing.Optional[StringMarshaller] = None,
    config: typing.Optional[Config] = None,
    extract_properties_fn: ExtractPropertiesFn = default_extract_properties,
) -> Declarative:
    return Declarative(
        identity_builder=IdentityBuilder(marshaller or default_marshaller),
        config=config,
        extract_properties_fn=extract_properties_fn,
    )
