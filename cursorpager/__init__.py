__version__ = __import__('importlib.metadata').metadata.version('cursorpager')

from .paginator import CursorPaginator, PageLinks
from .settings import PagerSettings
from .source import QuerySource, RawSource, ModelSource
from .cursor import Cursor, CursorDirection
from .fetcher import Page, PageFetcher
from .sort import SortSpec, OrderClause, SortingDirection, resolve_sort

from . import exc
