import collections.abc
import typing


def is_collection(value: typing.Any) -> bool:
    """
    Tells whether ``value`` is to be treated as a collection of objects rather
    than a single one.  Sequences, sets and iterators are collections; strings,
    bytes, mappings and other iterable objects are single objects.
    """
    if isinstance(value, (str, bytes, bytearray, collections.abc.Mapping)):
        return False
    return isinstance(
        value,
        (collections.abc.Sequence, collections.abc.Set, collections.abc.Iterator),
    )
