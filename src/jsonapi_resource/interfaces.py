"""
Interfaces for the collaborators the serialization pipeline depends on.
Default implementations live in :py:mod:`jsonapi_resource.defaults`.
"""
import abc
import typing

from .models import Association, KeyTransform, PlainAttribute, ResourceDescriptor, Selector


class Fetcher(metaclass=abc.ABCMeta):
    """
    A :py:class:`Fetcher` reads values out of the objects being serialized.
    """

    @abc.abstractmethod
    def select(self, target: typing.Any, selector: Selector) -> typing.Any:
        """
        Applies a selector to the target object.

        :param Any target: the object to read from.
        :param Selector selector: an attribute name, a mapping key, or a callable taking the object.
        :return: the selected value.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def fetch(
        self, target: typing.Any, spec: typing.Union[PlainAttribute, Association]
    ) -> typing.Any:
        """
        Fetches the value of a declared field from the target object.

        :param Any target: the object to read from.
        :param spec: the field declaration.
        :return: the attribute value, or the related object(s) for an association.
        """
        ...  # pragma: nocover


class KeyTransformer(metaclass=abc.ABCMeta):
    """
    A :py:class:`KeyTransformer` converts keys to the naming convention a resource asks for.
    """

    @abc.abstractmethod
    def transform_key(self, key: str, transform: KeyTransform) -> str:
        """
        :param str key: the key as declared.
        :param KeyTransform transform: the name of a casing (``"lower_camel"``, ``"dash"``, ...) or a callable.
        :return: the transformed key.
        """
        ...  # pragma: nocover


class ResourceInstance(metaclass=abc.ABCMeta):
    """
    The per-call state of a resource being serialized, as seen by the pipeline.
    """

    object: typing.Any
    params: typing.Mapping[str, typing.Any]
    within: typing.Any
    meta: typing.Optional[typing.Mapping[str, typing.Any]]

    @property
    @abc.abstractmethod
    def descriptor(self) -> ResourceDescriptor:
        ...  # pragma: nocover

    @property
    @abc.abstractmethod
    def links(self) -> typing.Mapping[str, typing.Any]:
        """
        The resource-level link producers, with their names already key-cased.
        """
        ...  # pragma: nocover

    @property
    @abc.abstractmethod
    def document_links(self) -> typing.Optional[typing.Mapping[str, typing.Any]]:
        """
        The links given for the top-level document, if any.
        """
        ...  # pragma: nocover

    @property
    @abc.abstractmethod
    def is_collection(self) -> bool:
        ...  # pragma: nocover

    @property
    @abc.abstractmethod
    def objects(self) -> typing.Sequence[typing.Any]:
        """
        The objects to serialize; a single object is returned as a one-element sequence.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def transform_key(self, key: str) -> str:
        ...  # pragma: nocover

    @abc.abstractmethod
    def resolve_target(self, assoc: Association) -> typing.Optional[typing.Type["ResourceInstance"]]:
        """
        Resolves the resource class for the objects on the other side of an association.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def related(
        self, resource_class: typing.Type["ResourceInstance"], target: typing.Any
    ) -> "ResourceInstance":
        """
        Creates an instance of ``resource_class`` for a related object, sharing
        this instance's ``params``, ``within`` and configuration.
        """
        ...  # pragma: nocover
