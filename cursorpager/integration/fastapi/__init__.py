from .page_request import page_request, PageRequest
from .errors import install_exception_handlers
