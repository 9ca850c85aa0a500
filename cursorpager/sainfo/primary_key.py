from functools import cache

import sqlalchemy as sa
import sqlalchemy.orm


@cache
def primary_key_names(Model: type) -> tuple[str, ...]:
    """ Get the list of primary key attribute names """
    mapper = sa.orm.class_mapper(Model)
    return tuple(mapper.get_property_by_column(c).key for c in mapper.primary_key)


def table_primary_key_names(table: sa.sql.FromClause) -> tuple[str, ...]:
    """ Get the list of primary key column names of a table """
    return tuple(c.key for c in getattr(table, 'primary_key', ()))
