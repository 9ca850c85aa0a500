from collections import abc
from typing import Any, Union

import sqlalchemy as sa
import sqlalchemy.orm


# Annotation for SqlAlchemy models
SAModel = type

# Annotation for SqlAlchemy models or aliased classes
SAModelOrAlias = Union[SAModel, sa.orm.util.AliasedClass]

# Annotation for SqlAlchemy instances (objects)
SAInstance = object

# Annotation for dict rows (result rows returned as dicts)
SARowDict = dict

# A row of the page: a dict (Core queries) or a model instance (ORM queries)
Row = Union[SARowDict, SAInstance]

# Something that can run a statement: a Connection or a Session
SAExecutor = Union[sa.engine.Connection, sa.orm.Session]

# Scalar value of the cursor column: int, str, datetime, ...
Scalar = Any

# Query parameters: a mapping, or a list of (name, value) pairs to support repeated names
QueryParams = Union[abc.Mapping[str, Any], abc.Iterable[tuple[str, Any]]]

# An SqlAlchemy attribute
# That is, the instrumented attribute you get when accessing <model>.<attribute>
SAAttribute = Union[sa.orm.attributes.InstrumentedAttribute, sa.orm.interfaces.MapperProperty]  # type: ignore[name-defined]
