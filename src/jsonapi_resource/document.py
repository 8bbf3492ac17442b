import collections.abc
import typing

from .assembler import IncludedResourcesCollector, ResourceAssembler
from .interfaces import ResourceInstance
from .serde.builders import (
    CollectionDocumentReprBuilder,
    DocumentReprBuilder,
    SingletonDocumentReprBuilder,
)
from .serde.models import DocumentRepr


def requested_includes(params: typing.Mapping[str, typing.Any]) -> typing.List[str]:
    """
    Reads the relationship names to include from ``params["include"]``, which
    is either a sequence of names or a comma-separated string.
    """
    include = params.get("include")
    if not include:
        return []
    if isinstance(include, str):
        names: typing.Iterable[typing.Any] = include.split(",")
    elif isinstance(include, collections.abc.Iterable):
        names = include
    else:
        names = [include]
    return [n for n in (str(n).strip() for n in names) if n]


class DocumentBuilder:
    """
    Builds the top-level document: ``data``, then ``meta``, ``included`` and
    ``links`` when there is something to put in them.
    """

    assembler: ResourceAssembler
    collector: IncludedResourcesCollector

    def build(self, resource: ResourceInstance) -> DocumentRepr:
        builder: DocumentReprBuilder
        if resource.is_collection:
            builder = collection_builder = CollectionDocumentReprBuilder()
            for obj in resource.objects:
                self.assembler.assemble(resource, obj, collection_builder.next())
        else:
            builder = singleton_builder = SingletonDocumentReprBuilder()
            self.assembler.assemble(resource, resource.object, singleton_builder.data)

        if resource.meta is not None:
            builder.meta = resource.meta
        names = requested_includes(resource.params)
        if names:
            self.collector.collect(resource, names, builder)
        if resource.document_links is not None:
            builder.links = resource.document_links
        return builder()

    def __init__(self, assembler: ResourceAssembler, collector: IncludedResourcesCollector):
        self.assembler = assembler
        self.collector = collector
