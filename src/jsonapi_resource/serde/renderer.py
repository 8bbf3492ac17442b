"""
:py:mod:`jsonapi_resource.serde.renderer` module contains a set of classes in charge of rendering internal representation of JSON:API document to JSON-ready values.

Synopsis
--------

.. code-block:: python

   import json

   from jsonapi_resource.serde.renderer import ReprRenderer

   renderer = ReprRenderer()

   internal_repr = SingletonDocumentRepr(
       data=ResourceRepr(
           type="foos",
           id="1",
           attributes=[
               ("a", 1),
               ("b", 2),
           ],
           relationships=[
               (
                   "items",
                   LinkageRepr(
                       links={"related": "/foos/1/items"},
                       data=[
                           ResourceIdRepr(type="bars", id="1"),
                           ResourceIdRepr(type="bars", id="2"),
                       ],
                   ),
               ),
           ],
       ),
       links={"self": "/foos/1"},
   )

   print(json.dumps(renderer(internal_repr)))

"""

import base64
import collections.abc
import datetime
import decimal
import enum
import typing
import uuid
from collections import OrderedDict

from .models import (
    AttributeValue,
    CollectionDocumentRepr,
    DocumentReprBase,
    LinkageRepr,
    LinksRepr,
    MetaRepr,
    Repr,
    ResourceIdRepr,
    ResourceRepr,
    SingletonDocumentRepr,
)
from .types import JSONScalar, JSONValue, MutableJSONObject
from .utils import JSONPointer


class TZLocalizer(typing.Protocol):
    def localize(self, dt: datetime.datetime) -> datetime.datetime:
        ...  # pragma: nocover


class ReprRendererContext:
    parent: typing.Optional["ReprRendererContext"]
    path: JSONPointer
    anchor: typing.Optional[Repr]

    def __truediv__(self, component: str) -> "ReprRendererContext":
        return self.replace(path=(self.path / component))

    def __or__(self, anchor: Repr) -> "ReprRendererContext":
        return self.replace(anchor=anchor)

    def __getitem__(self, index: int) -> "ReprRendererContext":
        return self.replace(path=(self.path[index]))

    def replace(
        self, *, anchor: typing.Optional[Repr] = None, path: typing.Optional[JSONPointer] = None
    ):
        anchor = self.anchor if anchor is None else anchor
        path = self.path if path is None else path
        return ReprRendererContext(parent=self, anchor=anchor, path=path)

    def __init__(
        self,
        parent: typing.Optional["ReprRendererContext"],
        anchor: typing.Optional[Repr] = None,
        path: typing.Optional[JSONPointer] = None,
    ):
        self.parent = parent
        self.anchor = anchor
        self.path = JSONPointer() if path is None else path


class ReprRenderer:
    _render_decimal_as_str: bool = True
    _assume_naive_timezone_as: typing.Optional[datetime.tzinfo] = None

    def _dict_factory(self, items: typing.Iterable[typing.Tuple[str, typing.Any]]):
        return OrderedDict(items)

    def _render_datetime(
        self: "ReprRenderer", ctx: ReprRendererContext, repr_: AttributeValue
    ) -> JSONScalar:
        _repr = typing.cast(datetime.datetime, repr_)
        if _repr.tzinfo is None:
            if self._assume_naive_timezone_as is None:
                raise ValueError(f"{ctx.path}: naive datetime {_repr}")
            else:
                if hasattr(self._assume_naive_timezone_as, "localize"):
                    _repr = typing.cast(TZLocalizer, self._assume_naive_timezone_as).localize(_repr)
                else:
                    _repr = _repr.replace(tzinfo=self._assume_naive_timezone_as)
        return _repr.astimezone(datetime.timezone.utc).isoformat()

    def _render_date(
        self: "ReprRenderer", ctx: ReprRendererContext, repr_: AttributeValue
    ) -> JSONScalar:
        _repr = typing.cast(datetime.date, repr_)
        return _repr.isoformat()

    def _render_decimal(
        self: "ReprRenderer", ctx: ReprRendererContext, repr_: AttributeValue
    ) -> JSONScalar:
        _repr = typing.cast(decimal.Decimal, repr_)
        return str(_repr) if self._render_decimal_as_str else float(_repr)

    def _render_bytes(
        self: "ReprRenderer", ctx: ReprRendererContext, repr_: AttributeValue
    ) -> JSONScalar:
        return base64.b64encode(typing.cast(bytes, repr_)).decode("ascii")

    def _render_enum(
        self: "ReprRenderer", ctx: ReprRendererContext, repr_: AttributeValue
    ) -> JSONValue:
        return self._render_value(ctx, typing.cast(enum.Enum, repr_).value)

    def _render_uuid(
        self: "ReprRenderer", ctx: ReprRendererContext, repr_: AttributeValue
    ) -> JSONScalar:
        return str(repr_)

    def _render_passthrough(
        self: "ReprRenderer", ctx: ReprRendererContext, repr_: AttributeValue
    ) -> JSONScalar:
        return typing.cast(JSONScalar, repr_)

    _supported_types: typing.ClassVar[typing.Dict[type, typing.Callable]] = {
        datetime.datetime: _render_datetime,
        datetime.date: _render_date,
        decimal.Decimal: _render_decimal,
        bytes: _render_bytes,
        enum.Enum: _render_enum,
        uuid.UUID: _render_uuid,
        str: _render_passthrough,
        int: _render_passthrough,
        float: _render_passthrough,
        bool: _render_passthrough,
        None.__class__: _render_passthrough,
    }

    def _render_scalar(self, ctx: ReprRendererContext, repr_: AttributeValue) -> JSONValue:
        # fast pass
        r = self._supported_types.get(type(repr_))
        if r is not None:
            return r(self, ctx, repr_)

        for type_, r in self._supported_types.items():
            if isinstance(repr_, type_):
                return r(self, ctx, repr_)

        raise TypeError(f"{ctx.path}: unsupported type {repr_!r}")

    def _render_value(self, ctx: ReprRendererContext, repr_: typing.Any) -> JSONValue:
        if isinstance(repr_, collections.abc.Mapping):
            return self._dict_factory(
                (str(k), self._render_value(ctx / str(k), v)) for k, v in repr_.items()
            )
        elif isinstance(repr_, (str, bytes)):
            return self._render_scalar(ctx, repr_)
        elif isinstance(repr_, (collections.abc.Sequence, collections.abc.Set)):
            return [self._render_value(ctx[i], v) for i, v in enumerate(repr_)]
        return self._render_scalar(ctx, repr_)

    def _render_meta(self, ctx: ReprRendererContext, repr_: MetaRepr) -> JSONValue:
        return self._render_value(ctx, repr_)

    def _render_links(self, ctx: ReprRendererContext, repr_: LinksRepr) -> MutableJSONObject:
        return self._dict_factory(
            (rel, self._render_value(ctx / rel, link)) for rel, link in repr_.items()
        )

    def _render_resource_link(
        self, ctx: ReprRendererContext, repr_: typing.Optional[ResourceIdRepr]
    ) -> typing.Optional[MutableJSONObject]:
        if repr_ is None:
            return None
        return self._dict_factory((("type", repr_.type), ("id", repr_.id)))

    def _render_relationship(
        self, ctx: ReprRendererContext, repr_: LinkageRepr
    ) -> MutableJSONObject:
        retval: MutableJSONObject = self._dict_factory(())
        if isinstance(repr_.data, collections.abc.Sequence):
            retval["data"] = [
                self._render_resource_link((ctx / "data")[i] | repr_, item)
                for i, item in enumerate(repr_.data)
            ]
        else:
            retval["data"] = self._render_resource_link((ctx / "data") | repr_, repr_.data)
        if repr_.meta is not None:
            retval["meta"] = self._render_meta((ctx / "meta") | repr_, repr_.meta)
        if repr_.links is not None:
            retval["links"] = self._render_links((ctx / "links") | repr_, repr_.links)
        return retval

    def _render_resource(self, ctx: ReprRendererContext, repr_: ResourceRepr) -> MutableJSONObject:
        retval: MutableJSONObject = self._dict_factory(
            (
                ("type", repr_.type),
                ("id", repr_.id),
            )
        )
        if repr_.attributes is not None:
            new_ctx = (ctx / "attributes") | repr_
            retval["attributes"] = self._dict_factory(
                (k, self._render_value(new_ctx / k, v)) for k, v in repr_.attributes.items()
            )
        if repr_.relationships is not None:
            new_ctx = (ctx / "relationships") | repr_
            retval["relationships"] = self._dict_factory(
                (k, self._render_relationship(new_ctx / k, v))
                for k, v in repr_.relationships.items()
            )
        if repr_.meta is not None:
            retval["meta"] = self._render_meta((ctx / "meta") | repr_, repr_.meta)
        if repr_.links is not None:
            retval["links"] = self._render_links((ctx / "links") | repr_, repr_.links)
        return retval

    def _populate_document_common(
        self, target: MutableJSONObject, ctx: ReprRendererContext, repr_: DocumentReprBase
    ) -> None:
        if repr_.meta is not None:
            target["meta"] = self._render_meta((ctx / "meta") | repr_, repr_.meta)
        if repr_.included is not None:
            new_ctx = (ctx / "included") | repr_
            target["included"] = [
                self._render_resource(new_ctx[i], r) for i, r in enumerate(repr_.included)
            ]
        if repr_.links is not None:
            target["links"] = self._render_links((ctx / "links") | repr_, repr_.links)

    def _render_singleton_document(
        self, ctx: ReprRendererContext, repr_: SingletonDocumentRepr
    ) -> MutableJSONObject:
        retval: MutableJSONObject = self._dict_factory(())
        assert repr_.data is not None
        retval["data"] = self._render_resource((ctx / "data") | repr_, repr_.data)
        self._populate_document_common(retval, ctx, repr_)
        return retval

    def _render_collection_document(
        self, ctx: ReprRendererContext, repr_: CollectionDocumentRepr
    ) -> MutableJSONObject:
        retval: MutableJSONObject = self._dict_factory(())
        retval["data"] = [
            self._render_resource((ctx / "data")[i] | repr_, item)
            for i, item in enumerate(repr_.data)
        ]
        self._populate_document_common(retval, ctx, repr_)
        return retval

    def render_data(
        self, repr_: typing.Union[SingletonDocumentRepr, CollectionDocumentRepr]
    ) -> JSONValue:
        """
        Renders only the primary data of the document.
        """
        return self(repr_)["data"]

    def __call__(
        self, repr_: typing.Union[SingletonDocumentRepr, CollectionDocumentRepr]
    ) -> MutableJSONObject:
        ctx = ReprRendererContext(None)
        if isinstance(repr_, SingletonDocumentRepr):
            return self._render_singleton_document(ctx, repr_)
        elif isinstance(repr_, CollectionDocumentRepr):
            return self._render_collection_document(ctx, repr_)
        else:
            raise AssertionError("never get here")

    def __init__(
        self,
        render_decimal_as_str: bool = True,
        assume_naive_timezone_as: typing.Optional[datetime.tzinfo] = None,
    ):
        self._render_decimal_as_str = render_decimal_as_str
        self._assume_naive_timezone_as = assume_naive_timezone_as
