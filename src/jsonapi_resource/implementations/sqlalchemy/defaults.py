import abc
import datetime
import typing

import sqlalchemy as sa  # type: ignore
from sqlalchemy import orm  # type: ignore

NULL_COMPONENT = "@null@"


class StringMarshaller(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def to_str(self, column: sa.Column, value: typing.Any) -> str:
        ...  # pragma: nocover


epoch = datetime.datetime(1970, 1, 1, 0, 0, 0, tzinfo=datetime.timezone.utc)


class DefaultStringMarshallerImpl(StringMarshaller):
    def to_str(self, column: sa.Column, value: typing.Any) -> str:
        py_type = column.type.python_type
        assert isinstance(value, py_type), f"{type(value)} != {py_type}"
        if issubclass(py_type, datetime.datetime):
            return str((value.astimezone(datetime.timezone.utc) - epoch).total_seconds())
        elif issubclass(py_type, datetime.date):
            return value.strftime("%Y-%m-%d")
        elif issubclass(py_type, datetime.time):
            return value.strftime("%H:%M:%S")
        else:
            return str(value)


class IdentityBuilder:
    """
    Builds the resource id of a mapped object from its primary key: the
    marshalled values of the primary key columns joined by a space, with
    ``@null@`` standing for missing components.
    """

    marshaller: StringMarshaller

    def __call__(self, native: typing.Any) -> typing.Optional[str]:
        sa_mapper = orm.object_mapper(native)
        pkey_pairs = [
            (col, getattr(native, sa_mapper.get_property_by_column(col).key))
            for col in sa_mapper.primary_key
        ]
        if all(v is None for _, v in pkey_pairs):
            return None
        return " ".join(
            self.marshaller.to_str(col, v) if v is not None else NULL_COMPONENT
            for col, v in pkey_pairs
        )

    def __init__(self, marshaller: StringMarshaller):
        self.marshaller = marshaller


def extract_resource_key(sa_mapper: orm.Mapper) -> str:
    tables = list(sa_mapper.tables)
    if len(tables) != 1:
        raise RuntimeError(
            f"SQLAlchemy mapper is associated to multiple tables: "
            f'{", ".join(table.name for table in tables)}'
        )
    return tables[0].name


def is_key_column(col: sa.Column) -> bool:
    return bool(col.primary_key) or any(
        col.key in c.column_keys for c in col.table.foreign_key_constraints
    )


def default_extract_properties(
    sa_mapper: orm.Mapper,
) -> typing.Iterator[orm.interfaces.MapperProperty]:
    """
    Yields the mapped properties that become fields: plain columns (primary and
    foreign key columns excluded) and relationships.
    """
    for attr in sa_mapper.attrs:
        if isinstance(attr, orm.ColumnProperty):
            if isinstance(attr.expression, sa.Column) and is_key_column(attr.expression):
                continue
        elif not isinstance(attr, orm.RelationshipProperty):
            continue
        yield attr
