import logging

import fastapi
from fastapi.responses import JSONResponse

from cursorpager import exc


logger = logging.getLogger(__name__)


def install_exception_handlers(app: fastapi.FastAPI):
    """ Report pagination errors as HTTP errors

    * MalformedCursorError: 400 Bad Request. The client has sent a broken cursor
    * QueryExecutionError: 500 Internal Server Error
    """
    app.add_exception_handler(exc.MalformedCursorError, malformed_cursor_handler)
    app.add_exception_handler(exc.QueryExecutionError, query_execution_error_handler)


async def malformed_cursor_handler(request: fastapi.Request, e: exc.MalformedCursorError) -> JSONResponse:
    return JSONResponse(status_code=400, content={'detail': str(e)})


async def query_execution_error_handler(request: fastapi.Request, e: exc.QueryExecutionError) -> JSONResponse:
    logger.exception('Page query failed', exc_info=e)
    return JSONResponse(status_code=500, content={'detail': 'Failed to load the page'})
