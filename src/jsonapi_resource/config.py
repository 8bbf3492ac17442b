import dataclasses
import datetime
import typing

if typing.TYPE_CHECKING:
    from .interfaces import Fetcher, KeyTransformer  # noqa: F401


@dataclasses.dataclass(frozen=True)
class Config:
    """
    Settings that apply to a whole serialization call.

    A resource picks its configuration from the ``config`` argument given to it,
    then from ``Meta.config`` of its class, then falls back to :py:data:`DEFAULT_CONFIG`.
    """

    inferring: bool = False
    """
    When set, inferred types and link relation names go through the resource's key casing.
    """

    deduplicate_included: bool = False
    """
    When set, resources already present in ``data`` or earlier in ``included`` are not included again.
    """

    strict_includes: bool = False
    """
    When set, an ``include`` name that matches no relationship raises
    :py:class:`~jsonapi_resource.exceptions.UnknownIncludeTargetError` instead of being skipped.
    """

    fetcher: typing.Optional["Fetcher"] = None
    key_transformer: typing.Optional["KeyTransformer"] = None

    render_decimal_as_str: bool = True
    assume_naive_timezone_as: typing.Optional[datetime.tzinfo] = None


DEFAULT_CONFIG = Config()
