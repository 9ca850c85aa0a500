from typing import Union

import sqlalchemy as sa

from cursorpager.typing import SAModelOrAlias
from .models import unaliased_class


def model_name(Model: SAModelOrAlias) -> str:
    """ Get the name of the Model for this class """
    # We can't do `Model.__name__` because we can be given a type of an aliased class
    return unaliased_class(Model).__name__


def selectable_name(selectable: Union[sa.sql.FromClause, sa.sql.Select]) -> str:
    """ Get a human-readable name of a table or a statement, for error reporting """
    return getattr(selectable, 'name', None) or type(selectable).__name__


def split_column_name(name: str) -> tuple[str, str]:
    """ Split a possibly qualified column name into (table name, column name)

    Example:
        'users.id' -> ('users', 'id')
        'id' -> ('', 'id')
    """
    table_name, _, column_name = name.rpartition('.')
    return table_name, column_name
