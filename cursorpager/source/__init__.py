""" Query sources: the queries to paginate

* RawSource: SqlAlchemy Core statement, rows as dicts
* ModelSource: SqlAlchemy ORM model, rows as instances
"""

from .base import QuerySource
from .raw import RawSource
from .model import ModelSource
