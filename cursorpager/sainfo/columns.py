from __future__ import annotations

import datetime
import decimal
import uuid
from typing import Any

import sqlalchemy as sa
from sqlalchemy import TypeDecorator
from sqlalchemy.orm import ColumnProperty, MapperProperty, QueryableAttribute

from cursorpager.sainfo.names import model_name
from cursorpager.typing import SAModelOrAlias, SAAttribute
from cursorpager import exc


def resolve_column_by_name(field_name: str, Model: SAModelOrAlias, *, where: str) -> QueryableAttribute:
    # As simple as it looks, this code invokes __getattr__() on sa.orm.AliasedClass which adapts the SQL expression
    # to make sure it uses the proper aliased name in queries
    try:
        attribute = getattr(Model, field_name)
    except AttributeError as e:
        raise exc.InvalidColumnError(model_name(Model), field_name, where=where) from e

    # Check that it actually is a column
    if not is_column_property(attribute):
        raise exc.InvalidColumnError(model_name(Model), field_name, where=where)

    # Done
    return attribute


def is_column_property(attribute: SAAttribute):
    return (
        isinstance(attribute, (QueryableAttribute, MapperProperty)) and
        isinstance(attribute.property, ColumnProperty)
    )


def get_column_type(column: sa.sql.ColumnElement) -> sa.types.TypeEngine:
    """ Get column's SQL type """
    if isinstance(column.type, TypeDecorator):
        # Type decorators wrap other types, so we have to handle them carefully
        return column.type.impl
    else:
        return column.type


def coerce_column_value(column: sa.sql.ColumnElement, value: Any) -> Any:
    """ Convert a value decoded from JSON into the Python type of the column

    Cursors carry dates, times, UUIDs and decimals as strings.
    Comparing a DATETIME column to a string works in some databases but not in others, so we restore the type.

    Raises:
        ValueError: the value does not fit the column type
    """
    type_ = get_column_type(column.expression)

    # NOTE: DateTime is not a subclass of Date in SqlAlchemy, but check it first anyway
    if isinstance(type_, sa.DateTime):
        return datetime.datetime.fromisoformat(_text_value(value, type_))
    elif isinstance(type_, sa.Date):
        return datetime.date.fromisoformat(_text_value(value, type_))
    elif isinstance(type_, sa.Time):
        return datetime.time.fromisoformat(_text_value(value, type_))
    elif isinstance(type_, sa.Uuid) and type_.as_uuid:
        return uuid.UUID(_text_value(value, type_))
    elif isinstance(type_, sa.Numeric) and type_.asdecimal:
        try:
            return decimal.Decimal(str(value))
        except decimal.InvalidOperation as e:
            raise ValueError(f'Not a decimal: {value!r}') from e
    else:
        return value


def _text_value(value: Any, type_: sa.types.TypeEngine) -> str:
    # Text is the only representation we produce for these types
    if not isinstance(value, str):
        raise ValueError(f'Expected a string for {type_!r}, got {type(value).__name__}')
    return value
