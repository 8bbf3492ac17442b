import typing

from .exceptions import MissingIdentifierError
from .inflector import infer_resource_key
from .interfaces import Fetcher, KeyTransformer, ResourceInstance
from .models import Identifier, ResourceDescriptor, Selector


class IdentifierResolver:
    """
    Computes the ``(type, id)`` pair of an object serialized by a resource.

    The type comes from the resource's type override (a string, or a callable
    taking the object), else from its declared key, else it is inferred from the
    resource class name.  When ``inferring`` is set the type additionally goes
    through the resource's key casing.
    """

    fetcher: Fetcher
    key_transformer: KeyTransformer
    inferring: bool

    def resolve(self, descr: ResourceDescriptor, obj: typing.Any) -> Identifier:
        if isinstance(obj, ResourceInstance):
            return self.resolve(obj.descriptor, obj.object)
        return Identifier(
            type=self.resolve_type(descr, obj),
            id=self.resolve_id(obj, descr.id_field, descr.name),
        )

    def resolve_type(self, descr: ResourceDescriptor, obj: typing.Any) -> str:
        type_override = descr.type_override
        if callable(type_override):
            type_ = type_override(obj)
        elif type_override is not None:
            type_ = type_override
        elif descr.key is not None:
            type_ = descr.key
        else:
            type_ = infer_resource_key(descr.name)
        if type_ is None or str(type_) == "":
            raise MissingIdentifierError(descr.name, obj)
        return self.cased(str(type_), descr.transform_keys)

    def resolve_id(
        self,
        obj: typing.Any,
        id_field: typing.Optional[Selector] = None,
        resource_name: str = "",
    ) -> str:
        try:
            value = self.fetcher.select(obj, "id" if id_field is None else id_field)
        except (AttributeError, KeyError) as e:
            raise MissingIdentifierError(resource_name, obj) from e
        if value is None or str(value) == "":
            raise MissingIdentifierError(resource_name, obj)
        return str(value)

    def cased(self, name: str, transform) -> str:
        if not self.inferring:
            return name
        return self.key_transformer.transform_key(name, transform)

    def __init__(self, fetcher: Fetcher, key_transformer: KeyTransformer, inferring: bool = False):
        self.fetcher = fetcher
        self.key_transformer = key_transformer
        self.inferring = inferring
