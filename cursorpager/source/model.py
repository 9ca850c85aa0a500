from __future__ import annotations

from collections import abc
from typing import Optional

import sqlalchemy as sa
import sqlalchemy.orm

from cursorpager.sainfo.columns import resolve_column_by_name
from cursorpager.sainfo.names import split_column_name
from cursorpager.sainfo.primary_key import primary_key_names
from cursorpager.sort import DEFAULT_IDENTIFIER, SortSpec
from cursorpager.typing import SAModel, SAModelOrAlias, SAInstance

from .base import QuerySource


class ModelSource(QuerySource):
    """ Query source: SqlAlchemy ORM model

    Rows are model instances. Must be executed with a Session.

    Example:
        ModelSource(User, sa.select(User).order_by(User.created_at.desc()), load=['articles'])
    """
    # The model to load
    Model: SAModel

    # Relationships to eager-load
    load: tuple[str, ...]

    def __init__(self, Model: SAModel, stmt: Optional[sa.sql.Select] = None, *, load: abc.Iterable[str] = ()):
        super().__init__(stmt if stmt is not None else sa.select(Model))
        self.Model = Model
        self.load = tuple(load)

    __slots__ = 'Model', 'load'

    def default_identifier(self) -> str:
        pk_names = primary_key_names(self.Model)
        return pk_names[0] if pk_names else DEFAULT_IDENTIFIER

    def resolve_column(self, name: str) -> sa.orm.QueryableAttribute:
        return resolve_column_by_name(self.row_key(name), self.Model, where='cursor')

    def row_key(self, name: str) -> str:
        return split_column_name(name)[1]

    def wrap(self, inner: sa.sql.Select, sort: SortSpec) -> sa.sql.Select:
        # SELECT pagination.* FROM (...) AS pagination ORDER BY pagination.<column>
        # The sub-query rows are loaded as instances of the model
        subquery = inner.subquery('pagination')
        Alias = sa.orm.aliased(self.Model, subquery)
        column = resolve_column_by_name(self.row_key(sort.column), Alias, where='cursor')
        return (
            sa.select(Alias)
            .order_by(sort.order_by(column))
            .options(*self.loader_options(Alias))
        )

    def finalize(self, stmt: sa.sql.Select) -> sa.sql.Select:
        return stmt.options(*self.loader_options(self.Model))

    def loader_options(self, Model: SAModelOrAlias) -> list:
        """ Get loader options that eager-load relationships """
        return [
            sa.orm.selectinload(getattr(Model, relation_name))
            for relation_name in self.load
        ]

    def execute(self, executor: sa.orm.Session, stmt: sa.sql.Select) -> list[SAInstance]:
        return list(executor.execute(stmt).scalars())

    def serialize_row(self, row: SAInstance) -> dict:
        data = instance_to_dict(row)

        # Include eager-loaded relationships
        for relation_name in self.load:
            value = getattr(row, relation_name)
            if value is None:
                data[relation_name] = None
            elif isinstance(value, abc.Iterable):
                data[relation_name] = [instance_to_dict(item) for item in value]
            else:
                data[relation_name] = instance_to_dict(value)

        return data


def instance_to_dict(instance: SAInstance) -> dict:
    """ Get column attributes of an instance as a dict """
    mapper = sa.inspect(instance).mapper
    return {
        attr.key: getattr(instance, attr.key)
        for attr in mapper.column_attrs
    }
