"""
Conditions decide, per object, whether a conditionally declared field appears
in the output.

The shape of a condition is picked when the field is declared:

* :py:data:`ALWAYS` - the field is always present.
* :py:class:`NoArgCondition` - ``fn()``
* :py:class:`ObjectCondition` - ``fn(obj)``
* :py:class:`RelatedCondition` - ``fn(obj, related_value)``; the related value
  is fetched before the condition runs.
* :py:class:`MethodCondition` - calls the named zero-argument method on the
  resource instance being serialized.
"""

import dataclasses
import typing

from .deferred import Deferred
from .exceptions import InvalidConditionError


class AlwaysType:
    _singleton: typing.ClassVar[typing.Optional["AlwaysType"]] = None

    def __repr__(self):
        return "ALWAYS"

    def __new__(cls) -> "AlwaysType":
        if cls._singleton is None:
            cls._singleton = object.__new__(cls)
        return cls._singleton


ALWAYS = AlwaysType()


@dataclasses.dataclass(frozen=True)
class NoArgCondition:
    fn: typing.Callable[[], typing.Any]


@dataclasses.dataclass(frozen=True)
class ObjectCondition:
    fn: typing.Callable[[typing.Any], typing.Any]


@dataclasses.dataclass(frozen=True)
class RelatedCondition:
    fn: typing.Callable[[typing.Any, typing.Any], typing.Any]


@dataclasses.dataclass(frozen=True)
class MethodCondition:
    name: str


Predicate = typing.Union[
    AlwaysType,
    NoArgCondition,
    ObjectCondition,
    RelatedCondition,
    MethodCondition,
]


class ConditionEvaluator:
    def evaluate(
        self,
        resource: typing.Any,
        obj: typing.Any,
        related: Deferred[typing.Any],
        predicate: Predicate,
        name: typing.Optional[str] = None,
    ) -> bool:
        """
        Evaluates ``predicate`` against ``obj``.

        :param Any resource: the resource instance being serialized; :py:class:`MethodCondition` is looked up on it.
        :param Any obj: the object being serialized.
        :param Deferred related: yields the field's value; only called for :py:class:`RelatedCondition`.
        :param Predicate predicate: the condition.
        :param Optional[str] name: the field name, used in error messages.
        :return: :py:const:`True` if the field is to be included.
        """
        if predicate is ALWAYS:
            return True
        elif isinstance(predicate, NoArgCondition):
            return bool(predicate.fn())
        elif isinstance(predicate, ObjectCondition):
            return bool(predicate.fn(obj))
        elif isinstance(predicate, RelatedCondition):
            return bool(predicate.fn(obj, related()))
        elif isinstance(predicate, MethodCondition):
            method = getattr(resource, predicate.name, None)
            if method is None or not callable(method):
                raise InvalidConditionError(predicate, name)
            return bool(method())
        raise InvalidConditionError(predicate, name)
