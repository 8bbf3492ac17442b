from .conditions import (  # noqa
    ALWAYS,
    MethodCondition,
    NoArgCondition,
    ObjectCondition,
    RelatedCondition,
)
from .config import Config  # noqa
from .declarative import (  # noqa
    Association,
    Attr,
    Resource,
    has_many,
    has_one,
    many,
    one,
)
from .deferred import Deferred  # noqa
from .exceptions import (  # noqa
    InvalidConditionError,
    InvalidDeclarationError,
    InvalidLinkSpecError,
    JSONAPIResourceException,
    MissingIdentifierError,
    UnknownIncludeTargetError,
)
