import logging
import typing

from .conditions import ConditionEvaluator
from .deferred import Deferred
from .exceptions import UnknownIncludeTargetError
from .identifiers import IdentifierResolver
from .interfaces import Fetcher, ResourceInstance
from .links import LinkResolver
from .models import Association, FieldSpec, Identifier, unwrap
from .projection import AttributeProjector, RelationshipBuilder
from .serde.builders import (
    CollectionDocumentReprBuilder,
    DocumentReprBuilder,
    ResourceReprBuilder,
    SingletonDocumentReprBuilder,
)
from .utils import is_collection

logger = logging.getLogger(__name__)


class ResourceAssembler:
    """
    Assembles a single resource object: ``type``, ``id``, ``attributes``,
    ``relationships``, ``meta`` and ``links``, in that order.

    ``attributes`` and ``relationships`` appear only if the resource declares at
    least one field of that kind; ``meta`` only if a meta builder is declared;
    ``links`` only if resource links are declared.
    """

    identifier_resolver: IdentifierResolver
    attribute_projector: AttributeProjector
    relationship_builder: RelationshipBuilder
    link_resolver: LinkResolver

    def assemble(
        self, resource: ResourceInstance, obj: typing.Any, builder: ResourceReprBuilder
    ) -> None:
        descr = resource.descriptor
        identifier = self.identifier_resolver.resolve(descr, obj)
        builder.set_type(identifier.type)
        builder.set_id(identifier.id)
        if descr.has_attributes:
            self.attribute_projector.project(resource, obj, builder)
        if descr.has_relationships:
            self.relationship_builder.build(resource, obj, builder)
        if descr.meta_builder is not None:
            builder.meta = descr.meta_builder(obj)
        if resource.links:
            builder.links = self.link_resolver.resolve(obj, resource.links)

    def __init__(
        self,
        identifier_resolver: IdentifierResolver,
        attribute_projector: AttributeProjector,
        relationship_builder: RelationshipBuilder,
        link_resolver: LinkResolver,
    ):
        self.identifier_resolver = identifier_resolver
        self.attribute_projector = attribute_projector
        self.relationship_builder = relationship_builder
        self.link_resolver = link_resolver


class IncludedResourcesCollector:
    """
    Fills the ``included`` member of a document with the objects reachable
    through the requested relationships.

    Related objects are serialized with the association's target resource,
    sharing ``params`` and ``within`` with the including resource.  Objects of
    associations without a target are included as bare identifiers.
    """

    fetcher: Fetcher
    evaluator: ConditionEvaluator
    assembler: ResourceAssembler
    relationship_builder: RelationshipBuilder
    deduplicate: bool
    strict: bool

    def collect(
        self,
        resource: ResourceInstance,
        names: typing.Sequence[str],
        builder: DocumentReprBuilder,
    ) -> None:
        builder.declare_included()
        seen: typing.Set[Identifier] = set()
        if self.deduplicate:
            seen.update(self._data_identifiers(builder))

        for name in names:
            found = self.find_association(resource, name)
            if found is None:
                continue
            key, spec = found
            inner, condition = unwrap(spec)
            assoc = typing.cast(Association, inner)
            for obj in resource.objects:
                related = Deferred(self.fetcher.fetch, obj, assoc)
                if not self.evaluator.evaluate(resource, obj, related, condition, key):
                    continue
                value = related()
                for item in value if is_collection(value) else (value,):
                    self._include(resource, assoc, item, builder, seen)

    def find_association(
        self, resource: ResourceInstance, name: str
    ) -> typing.Optional[typing.Tuple[str, FieldSpec]]:
        """
        Looks up an association by its field key or its declared name.
        """
        descr = resource.descriptor
        for key, spec in descr.associations():
            assoc, _ = unwrap(spec)
            if key == name or typing.cast(Association, assoc).name == name:
                return key, spec
        if self.strict:
            raise UnknownIncludeTargetError(
                descr.name, name, [key for key, _ in descr.associations()]
            )
        logger.debug("%s has no relationship named %r; not included", descr.name, name)
        return None

    def _include(
        self,
        resource: ResourceInstance,
        assoc: Association,
        item: typing.Any,
        builder: DocumentReprBuilder,
        seen: typing.Set[Identifier],
    ) -> None:
        if item is None:
            return
        if self.deduplicate:
            identifier = self.relationship_builder.identify(resource, assoc, item)
            if identifier is not None:
                if identifier in seen:
                    logger.debug("%r already present; not included again", identifier)
                    return
                seen.add(identifier)

        if isinstance(item, ResourceInstance):
            self.assembler.assemble(item, item.object, builder.next_included())
            return
        target = resource.resolve_target(assoc)
        if target is not None:
            self.assembler.assemble(resource.related(target, item), item, builder.next_included())
            return
        identifier = self.relationship_builder.identify(resource, assoc, item)
        if identifier is None:
            return
        included = builder.next_included()
        included.set_type(identifier.type)
        included.set_id(identifier.id)

    def _data_identifiers(self, builder: DocumentReprBuilder) -> typing.Iterator[Identifier]:
        if isinstance(builder, CollectionDocumentReprBuilder):
            data: typing.Sequence[ResourceReprBuilder] = builder.data
        elif isinstance(builder, SingletonDocumentReprBuilder):
            data = (builder.data,)
        else:
            data = ()
        for b in data:
            if b.type is not None and b.id is not None:
                yield Identifier(type=b.type, id=b.id)

    def __init__(
        self,
        fetcher: Fetcher,
        evaluator: ConditionEvaluator,
        assembler: ResourceAssembler,
        relationship_builder: RelationshipBuilder,
        deduplicate: bool = False,
        strict: bool = False,
    ):
        self.fetcher = fetcher
        self.evaluator = evaluator
        self.assembler = assembler
        self.relationship_builder = relationship_builder
        self.deduplicate = deduplicate
        self.strict = strict
