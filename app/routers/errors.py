import logging

from fastapi import APIRouter, Request

from app.errors import server_error_problem
from app.middleware import UNHANDLED_EXCEPTION_KEY

logger = logging.getLogger(__name__)

router = APIRouter(tags=["errors"])


@router.get("/error", include_in_schema=False)
async def error(request: Request):
    """
    Log the unhandled exception stored by ``ExceptionHandlerMiddleware``
    (if any) and return a generic 500 problem-details body.
    """
    exc = getattr(request.state, UNHANDLED_EXCEPTION_KEY, None)
    if exc is not None:
        logger.error("Unhandled exception occurred and is being logged as error")
        logger.error("Error: %s", exc, exc_info=exc)
    return server_error_problem()
