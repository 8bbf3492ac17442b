import collections.abc
import inspect
import logging
import typing

from .assembler import IncludedResourcesCollector, ResourceAssembler
from .conditions import ConditionEvaluator
from .config import Config
from .document import DocumentBuilder
from .exceptions import InvalidDeclarationError
from .identifiers import IdentifierResolver
from .inflector import TRANSFORMS
from .interfaces import Fetcher, KeyTransformer
from .links import LinkResolver
from .models import Association, KeyTransform, PlainAttribute, Selector
from .projection import AttributeProjector, RelationshipBuilder
from .serde.renderer import ReprRenderer

logger = logging.getLogger(__name__)


class DefaultFetcherImpl(Fetcher):
    """
    Reads mapping items by key and everything else by attribute.
    Methods found by name are called with no arguments; callables given as
    selectors are called with the object.
    """

    def select(self, target: typing.Any, selector: Selector) -> typing.Any:
        if callable(selector):
            return selector(target)
        if isinstance(target, collections.abc.Mapping):
            return target[selector]
        value = getattr(target, selector)
        if inspect.ismethod(value):
            value = value()
        return value

    def fetch(
        self, target: typing.Any, spec: typing.Union[PlainAttribute, Association]
    ) -> typing.Any:
        return self.select(target, spec.selector)


class DefaultKeyTransformerImpl(KeyTransformer):
    def transform_key(self, key: str, transform: KeyTransform) -> str:
        if callable(transform):
            return transform(key)
        try:
            fn = TRANSFORMS[transform]
        except KeyError:
            raise InvalidDeclarationError(f"unknown key transform: {transform!r}")
        return fn(key)


def build_fetcher(config: Config) -> Fetcher:
    return config.fetcher if config.fetcher is not None else DefaultFetcherImpl()


def build_key_transformer(config: Config) -> KeyTransformer:
    return (
        config.key_transformer
        if config.key_transformer is not None
        else DefaultKeyTransformerImpl()
    )


def build_renderer(config: Config) -> ReprRenderer:
    return ReprRenderer(
        render_decimal_as_str=config.render_decimal_as_str,
        assume_naive_timezone_as=config.assume_naive_timezone_as,
    )


def build_document_builder(config: Config) -> DocumentBuilder:
    """
    Wires up the serialization pipeline for the given configuration.
    """
    fetcher = build_fetcher(config)
    key_transformer = build_key_transformer(config)
    evaluator = ConditionEvaluator()
    identifier_resolver = IdentifierResolver(
        fetcher=fetcher,
        key_transformer=key_transformer,
        inferring=config.inferring,
    )
    link_resolver = LinkResolver(fetcher=fetcher)
    relationship_builder = RelationshipBuilder(
        fetcher=fetcher,
        evaluator=evaluator,
        identifier_resolver=identifier_resolver,
        link_resolver=link_resolver,
        inferring=config.inferring,
    )
    assembler = ResourceAssembler(
        identifier_resolver=identifier_resolver,
        attribute_projector=AttributeProjector(fetcher=fetcher, evaluator=evaluator),
        relationship_builder=relationship_builder,
        link_resolver=link_resolver,
    )
    collector = IncludedResourcesCollector(
        fetcher=fetcher,
        evaluator=evaluator,
        assembler=assembler,
        relationship_builder=relationship_builder,
        deduplicate=config.deduplicate_included,
        strict=config.strict_includes,
    )
    logger.debug("built document builder for %r", config)
    return DocumentBuilder(assembler=assembler, collector=collector)
