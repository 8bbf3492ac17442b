import typing


def _escape(component: str) -> str:
    return component.replace("~", "~0").replace("/", "~1")


class JSONPointer:
    """
    An immutable `JSON Pointer <https://tools.ietf.org/html/rfc6901>`_ used to
    tell where in a document a value is being rendered.

    .. code-block:: python

       JSONPointer() / "data" / "attributes"  # "/data/attributes"
       (JSONPointer() / "data")[0]            # "/data/0"
    """

    components: typing.Tuple[str, ...]

    def __truediv__(self, component: str) -> "JSONPointer":
        return JSONPointer(self.components + (component,))

    def __getitem__(self, index: int) -> "JSONPointer":
        return JSONPointer(self.components + (str(index),))

    def __eq__(self, other: typing.Any) -> bool:
        if isinstance(other, JSONPointer):
            return self.components == other.components
        elif isinstance(other, str):
            return str(self) == other
        return NotImplemented

    def __hash__(self):
        return hash(self.components)

    def __str__(self):
        return "".join("/" + _escape(c) for c in self.components)

    def __repr__(self):
        return f"JSONPointer({str(self)!r})"

    def __init__(self, components: typing.Iterable[str] = ()):
        self.components = tuple(components)
