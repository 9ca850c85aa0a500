from __future__ import annotations

from collections import abc

import sqlalchemy as sa

from cursorpager import exc
from cursorpager.sainfo.names import selectable_name, split_column_name
from cursorpager.sainfo.primary_key import table_primary_key_names
from cursorpager.sort import DEFAULT_IDENTIFIER, SortSpec
from cursorpager.typing import SARowDict, SAExecutor

from .base import QuerySource


class RawSource(QuerySource):
    """ Query source: SqlAlchemy Core statement

    Rows are returned as dicts.

    Example:
        RawSource(sa.select(users).where(users.c.active == True).order_by(users.c.created_at.desc()))
    """

    def default_identifier(self) -> str:
        froms = self.stmt.get_final_froms()

        # A single table: use its primary key. Otherwise, just use the conventional name
        if len(froms) == 1 and not isinstance(froms[0], sa.sql.expression.Join):
            pk_names = table_primary_key_names(froms[0])
            if pk_names:
                return pk_names[0]
        return DEFAULT_IDENTIFIER

    def resolve_column(self, name: str) -> sa.sql.ColumnElement:
        table_name, column_name = split_column_name(name)

        # Qualified name: "table.column". Look it up in the table
        if table_name:
            for from_ in iter_tables(self.stmt.get_final_froms()):
                if getattr(from_, 'name', None) == table_name and column_name in from_.c:
                    return from_.c[column_name]
        # Unqualified name: look it up among the selected columns
        elif column_name in self.stmt.selected_columns:
            return self.stmt.selected_columns[column_name]

        raise exc.InvalidColumnError(selectable_name(self._first_from()), name, where='cursor')

    def row_key(self, name: str) -> str:
        column = self.resolve_column(name)

        # The boundary value is read from the rows: the column must be selected
        for key, selected in self.stmt.selected_columns.items():
            if selected is column or selected.shares_lineage(column):
                return key

        raise exc.InvalidColumnError(selectable_name(self._first_from()), name, where='select')

    def wrap(self, inner: sa.sql.Select, sort: SortSpec) -> sa.sql.Select:
        # SELECT pagination.* FROM (...) AS pagination ORDER BY pagination.<column>
        subquery = inner.subquery('pagination')
        return (
            sa.select(subquery)
            .order_by(sort.order_by(subquery.c[self.row_key(sort.column)]))
        )

    def execute(self, executor: SAExecutor, stmt: sa.sql.Select) -> list[SARowDict]:
        return [dict(row) for row in executor.execute(stmt).mappings()]

    def serialize_row(self, row: SARowDict) -> dict:
        return dict(row)

    def _first_from(self):
        froms = self.stmt.get_final_froms()
        return froms[0] if froms else self.stmt


def iter_tables(froms: abc.Iterable[sa.sql.FromClause]) -> abc.Iterator[sa.sql.FromClause]:
    """ Iterate over FROM clauses, looking into JOINs """
    for from_ in froms:
        if isinstance(from_, sa.sql.expression.Join):
            yield from iter_tables([from_.left, from_.right])
        else:
            yield from_
