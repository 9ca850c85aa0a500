""" Tools for testing """

from .recreate_tables import created_tables, create_tables, drop_tables
from .table_data import insert
from .query_logger import QueryCounter, QueryLogger, ExpectedQueryCounter

from .stmt_text import stmt2sql
