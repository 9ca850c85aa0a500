""" Sort resolution: choose the column to paginate with, and its direction """

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, NamedTuple

import sqlalchemy as sa
from sqlalchemy.sql import operators
from sqlalchemy.sql.elements import UnaryExpression

from cursorpager import exc
from cursorpager.sainfo.names import split_column_name


logger = logging.getLogger(__name__)


# The conventional name of the identifier column, when nothing better is known
DEFAULT_IDENTIFIER = 'id'


class SortingDirection(Enum):
    ASC = '+'
    DESC = '-'


class OrderClause(NamedTuple):
    """ One ORDER BY clause of a query """
    # Column name
    column: str

    # Sorting direction
    direction: SortingDirection


@dataclass(frozen=True)
class SortSpec:
    """ The column used for pagination, and its natural sorting direction """
    # Column name. May be qualified: "table.column"
    column: str

    # Is the natural order descending? ("inverted" sort)
    descending: bool

    __slots__ = 'column', 'descending'

    def order_by(self, column: sa.sql.ColumnElement, *, reverse: bool = False) -> sa.sql.ColumnElement:
        """ Make a sorting expression for the column: natural order, or the reverse of it """
        if self.descending != reverse:
            return column.desc()
        else:
            return column.asc()

    def op(self, *, points_to_next: bool) -> str:
        """ Get the comparison operator that selects rows beyond the boundary in the given direction """
        ascending_forward = points_to_next != self.descending
        return '>' if ascending_forward else '<'


def resolve_sort(order_clauses: list[OrderClause], explicit_column: Optional[str], default_column: Optional[str], *, strict: bool = False) -> SortSpec:
    """ Choose the pagination column and its direction

    Args:
        order_clauses: ORDER BY clauses the query already has, in order
        explicit_column: The column the user wants to paginate with, if any
        default_column: The identifier column: primary key, if known
        strict: Fail if `explicit_column` is not sorted by the query

    Raises:
        exc.AmbiguousSortColumnError: (only in strict mode)
    """
    # Explicit column: find out how it is sorted
    if explicit_column:
        name = split_column_name(explicit_column)[1]
        clause = next((clause for clause in order_clauses if clause.column == name), None)

        # Not sorted at all? Assume ascending.
        if clause is None and order_clauses:
            if strict:
                raise exc.AmbiguousSortColumnError(explicit_column, [clause.column for clause in order_clauses])
            logger.warning('Cursor column %r is not among the sort columns %r; assuming ascending order',
                           explicit_column, [clause.column for clause in order_clauses])

        spec = SortSpec(
            column=explicit_column,
            descending=clause is not None and clause.direction == SortingDirection.DESC,
        )
    # Sorted query: paginate by the first sort column
    elif order_clauses:
        first = order_clauses[0]
        spec = SortSpec(column=first.column, descending=first.direction == SortingDirection.DESC)
    # Unsorted query: use the identifier
    else:
        spec = SortSpec(column=default_column or DEFAULT_IDENTIFIER, descending=False)

    logger.debug('Paginating by %r (descending=%s)', spec.column, spec.descending)
    return spec


def order_clauses_from_statement(stmt: sa.sql.Select) -> list[OrderClause]:
    """ Read the ORDER BY clauses of an SqlAlchemy statement

    Supports:
    * Columns: `order_by(User.id)`
    * Directions: `order_by(User.id.desc())`, `order_by(sa.desc('id'))`
    * NULLS FIRST/LAST modifiers
    * Labels: `order_by(expr.label('x'))`
    """
    clauses = []
    for element in stmt._order_by_clauses:
        clause = _parse_order_by_element(element)
        if clause is not None:
            clauses.append(clause)
    return clauses


def _parse_order_by_element(element: sa.sql.ColumnElement) -> Optional[OrderClause]:
    direction = SortingDirection.ASC

    # Unwrap: desc(), asc(), nulls_last(), ...
    while isinstance(element, UnaryExpression):
        if element.modifier is operators.desc_op:
            direction = SortingDirection.DESC
        element = element.element

    # Get the name
    name = getattr(element, 'key', None) or getattr(element, 'name', None)
    if name is None and isinstance(getattr(element, 'element', None), str):
        # order_by('column name')
        name = element.element
    if name is None:
        logger.debug('Cannot interpret ORDER BY clause %r; ignoring it', element)
        return None

    return OrderClause(column=name, direction=direction)
