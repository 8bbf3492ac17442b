import collections.abc
import logging
import typing

from .conditions import ConditionEvaluator
from .deferred import Deferred
from .identifiers import IdentifierResolver
from .inflector import singularize
from .interfaces import Fetcher, ResourceInstance
from .links import LinkResolver
from .models import Association, Identifier, unwrap
from .serde.builders import ResourceIdReprBuilder, ResourceReprBuilder
from .utils import is_collection

logger = logging.getLogger(__name__)


class AttributeProjector:
    fetcher: Fetcher
    evaluator: ConditionEvaluator

    def project(
        self, resource: ResourceInstance, obj: typing.Any, builder: ResourceReprBuilder
    ) -> None:
        """
        Adds the plain attributes of ``obj`` to ``builder`` in declaration order,
        leaving out those whose condition does not hold.
        """
        builder.declare_attributes()
        for key, spec in resource.descriptor.plain_attributes():
            attr, condition = unwrap(spec)
            value = Deferred(self.fetcher.fetch, obj, attr)
            if not self.evaluator.evaluate(resource, obj, value, condition, key):
                continue
            builder.add_attribute(resource.transform_key(key), value())

    def __init__(self, fetcher: Fetcher, evaluator: ConditionEvaluator):
        self.fetcher = fetcher
        self.evaluator = evaluator


class RelationshipBuilder:
    """
    Builds the ``relationships`` member of a resource object.

    Related objects are reduced to resource identifiers; nothing else of them
    is serialized here.
    """

    fetcher: Fetcher
    evaluator: ConditionEvaluator
    identifier_resolver: IdentifierResolver
    link_resolver: LinkResolver
    inferring: bool

    def build(
        self, resource: ResourceInstance, obj: typing.Any, builder: ResourceReprBuilder
    ) -> None:
        builder.declare_relationships()
        for key, spec in resource.descriptor.associations():
            inner, condition = unwrap(spec)
            assoc = typing.cast(Association, inner)
            related = Deferred(self.fetcher.fetch, obj, assoc)
            if not self.evaluator.evaluate(resource, obj, related, condition, key):
                continue
            self.build_relationship(
                resource, obj, resource.transform_key(key), assoc, related(), builder
            )

    def build_relationship(
        self,
        resource: ResourceInstance,
        obj: typing.Any,
        key: str,
        assoc: Association,
        value: typing.Any,
        builder: ResourceReprBuilder,
    ) -> None:
        if is_collection(value):
            to_many = builder.next_to_many_relationship(key)
            for item in value:
                identifier = self.identify(resource, assoc, item)
                if identifier is None:
                    to_many.skip()
                else:
                    self._populate(to_many.next(), identifier)
            rel: typing.Any = to_many
        else:
            rel = builder.next_to_one_relationship(key)
            identifier = self.identify(resource, assoc, value)
            if identifier is not None:
                self._populate(rel.set(), identifier)

        if assoc.meta is not None:
            rel.meta = assoc.meta(obj)
        if assoc.links is not None:
            rel.links = self.link_resolver.resolve(
                obj, assoc.links, resource.transform_key if self.inferring else None
            )

    def identify(
        self, resource: ResourceInstance, assoc: Association, item: typing.Any
    ) -> typing.Optional[Identifier]:
        """
        Computes the identifier of a related object, or returns :py:const:`None`
        if it cannot be identified.
        """
        if item is None:
            return None
        if isinstance(item, ResourceInstance):
            return self.identifier_resolver.resolve(item.descriptor, item.object)
        if isinstance(item, collections.abc.Mapping) and (
            item.get("id") is None or str(item["id"]) == ""
        ):
            logger.debug(
                "no id in related item of %s.%s", resource.descriptor.name, assoc.name
            )
            return None

        target = resource.resolve_target(assoc)
        if isinstance(item, collections.abc.Mapping):
            type_ = item.get("type")
            if type_ is None or str(type_) == "":
                type_ = (
                    self.identifier_resolver.resolve_type(target.descriptor, item)
                    if target is not None
                    else self.default_type(resource, assoc)
                )
            return Identifier(type=str(type_), id=str(item["id"]))
        if target is not None:
            return self.identifier_resolver.resolve(target.descriptor, item)
        return Identifier(
            type=self.default_type(resource, assoc),
            id=self.identifier_resolver.resolve_id(item, resource_name=resource.descriptor.name),
        )

    def default_type(self, resource: ResourceInstance, assoc: Association) -> str:
        type_ = singularize(assoc.name)
        if self.inferring:
            type_ = resource.transform_key(type_)
        return type_

    def _populate(self, builder: ResourceIdReprBuilder, identifier: Identifier) -> None:
        builder.set_type(identifier.type)
        builder.set_id(identifier.id)

    def __init__(
        self,
        fetcher: Fetcher,
        evaluator: ConditionEvaluator,
        identifier_resolver: IdentifierResolver,
        link_resolver: LinkResolver,
        inferring: bool = False,
    ):
        self.fetcher = fetcher
        self.evaluator = evaluator
        self.identifier_resolver = identifier_resolver
        self.link_resolver = link_resolver
        self.inferring = inferring
