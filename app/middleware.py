import logging
import time
from contextvars import ContextVar

from sqlalchemy import event
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.config import settings

logger = logging.getLogger(__name__)

# Request state key under which the fallback stores the unhandled exception.
UNHANDLED_EXCEPTION_KEY = "unhandled_exception"

# ---------------------------------------------------------------------------
# Per-request context variable
# ---------------------------------------------------------------------------

query_count_var: ContextVar[int] = ContextVar("query_count", default=0)


def install_query_counter(engine) -> None:
    """
    Register a ``before_cursor_execute`` event listener on *engine* that
    increments the per-request ``query_count_var`` for every SQL statement.

    Must be called once per engine (production engine in ``database.py``,
    test engine in ``conftest.py``).
    """
    sync_engine = engine.sync_engine

    @event.listens_for(sync_engine, "before_cursor_execute")
    def _count_query(conn, cursor, statement, parameters, context, executemany):
        query_count_var.set(query_count_var.get() + 1)


# ---------------------------------------------------------------------------
# Middleware (pure ASGI - avoids BaseHTTPMiddleware ContextVar isolation)
# ---------------------------------------------------------------------------

class RequestResponseLoggingMiddleware:
    """
    Pure ASGI middleware that traces every HTTP exchange.

    Logs the incoming method, path and headers, then the outgoing status
    and (up to ``settings.LOG_BODY_LIMIT`` bytes of) the response body
    together with the elapsed time and SQL query count.  The body is
    streamed to the client unchanged while a copy is kept for the log line.

    Two diagnostic headers are added to every response:

    - ``X-Response-Time-Ms``: wall-clock time until the response started.
    - ``X-Query-Count``: SQL statements executed so far during the request,
      counted by the engine listener registered by ``install_query_counter``.
    """

    def __init__(self, app: ASGIApp, body_limit: int | None = None) -> None:
        self.app = app
        self.body_limit = settings.LOG_BODY_LIMIT if body_limit is None else body_limit

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = {k.decode("latin-1"): v.decode("latin-1") for k, v in scope.get("headers", [])}
        logger.info("Incoming request: %s %s %s", scope["method"], scope["path"], headers)

        # Reset the per-request counter.
        query_count_var.set(0)
        start = time.perf_counter()
        status_code = 500
        body = bytearray()

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                duration_ms = round((time.perf_counter() - start) * 1000, 2)
                response_headers = list(message.get("headers", []))
                response_headers.append((b"x-response-time-ms", str(duration_ms).encode()))
                response_headers.append((b"x-query-count", str(query_count_var.get()).encode()))
                message["headers"] = response_headers
            elif message["type"] == "http.response.body":
                if len(body) < self.body_limit:
                    body.extend(message.get("body", b"")[: self.body_limit - len(body)])
                if not message.get("more_body", False):
                    logger.info(
                        "Outgoing response: %s %s (%.2f ms, %d queries)",
                        status_code,
                        body.decode("utf-8", errors="replace"),
                        (time.perf_counter() - start) * 1000,
                        query_count_var.get(),
                    )
            await send(message)

        await self.app(scope, receive, send_wrapper)


class ExceptionHandlerMiddleware:
    """
    Production fallback for exceptions that escape the application.

    The failed request is re-executed as ``GET <error_path>`` with the
    exception stored in the request state under ``UNHANDLED_EXCEPTION_KEY``,
    so the error endpoint decides what is logged and returned.  If the
    response had already started, the exception is re-raised untouched.
    """

    # Connection-level keys carried over to the re-executed request.
    _PRESERVED_KEYS = (
        "type", "asgi", "http_version", "scheme", "server", "client",
        "root_path", "headers", "app", "extensions",
    )

    def __init__(self, app: ASGIApp, error_path: str = "/error") -> None:
        self.app = app
        self.error_path = error_path

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            if response_started:
                raise
            error_scope = {key: scope[key] for key in self._PRESERVED_KEYS if key in scope}
            error_scope.update(
                method="GET",
                path=self.error_path,
                raw_path=self.error_path.encode(),
                query_string=b"",
                state={**scope.get("state", {}), UNHANDLED_EXCEPTION_KEY: exc},
            )
            await self.app(error_scope, receive, send)
