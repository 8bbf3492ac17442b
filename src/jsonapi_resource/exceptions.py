import abc
import typing

from .serde.utils import english_enumerate


class JSONAPIResourceException(Exception, metaclass=abc.ABCMeta):
    @property
    @abc.abstractmethod
    def message(self) -> str:
        ...  # pragma: nocover

    def __str__(self):
        return self.message


class InvalidDeclarationError(JSONAPIResourceException):
    _message: str

    @property
    def message(self) -> str:
        return self._message

    def __init__(self, message: str):
        super().__init__(message)
        self._message = message


class MissingIdentifierError(JSONAPIResourceException):
    resource_name: str
    target: typing.Any

    @property
    def message(self) -> str:
        return f'no identifier available for {self.target!r} in "{self.resource_name}"'

    def __init__(self, resource_name: str, target: typing.Any):
        super().__init__(resource_name, target)
        self.resource_name = resource_name
        self.target = target


class InvalidConditionError(JSONAPIResourceException):
    condition: typing.Any
    name: typing.Optional[str]

    @property
    def message(self) -> str:
        if self.name is None:
            return f"unsupported condition: {self.condition!r}"
        return f"unsupported condition for field ({self.name}): {self.condition!r}"

    def __init__(self, condition: typing.Any, name: typing.Optional[str] = None):
        super().__init__(condition, name)
        self.condition = condition
        self.name = name


class InvalidLinkSpecError(JSONAPIResourceException):
    links: typing.Any

    @property
    def message(self) -> str:
        return f"unknown link format: {self.links!r}"

    def __init__(self, links: typing.Any):
        super().__init__(links)
        self.links = links


class UnknownIncludeTargetError(JSONAPIResourceException):
    resource_name: str
    name: str
    known_names: typing.Sequence[str]

    @property
    def message(self) -> str:
        known = english_enumerate(self.known_names, conj=", or ")
        return (
            f'no relationship named "{self.name}" in "{self.resource_name}"'
            f"{' (expected ' + known + ')' if known else ''}"
        )

    def __init__(self, resource_name: str, name: str, known_names: typing.Sequence[str] = ()):
        super().__init__(resource_name, name)
        self.resource_name = resource_name
        self.name = name
        self.known_names = known_names
