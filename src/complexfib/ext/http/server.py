"""HTTP surface for the Fibonacci pipeline.

Endpoints:
    GET  /fibonacci?number=<input>
    POST /fibonacci            {"number": "<input>"}

Responses are JSON: 200 ``{"input", "result"}``, 400 ``{"error"}`` and 404
``{"error": "Not found"}`` for every other method/path.

Example:
    >>> app = create_app()
    >>> uvicorn.run(app, host="0.0.0.0", port=8080)
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from complexfib.foundation.config import FibSettings, get_settings
from complexfib.foundation.errors import ErrorResponse
from complexfib.io.cache import connect_cache
from complexfib.pipeline import CacheAside, Outcome, RequestPipeline
from complexfib.runtime.concurrency import ThreadPool
from complexfib.runtime.observability import configure_logging, get_logger

if TYPE_CHECKING:
    from complexfib.io.cache import FibCache
    from complexfib.pipeline import Evaluator

log = get_logger("complexfib.server")

NOT_FOUND = "Not found"
METHODS = ("GET", "POST")

# Sentinel: resolve the cache from settings at startup
_FROM_SETTINGS: object = object()


def _respond(outcome: Outcome) -> JSONResponse:
    return JSONResponse(outcome.body(), status_code=outcome.status_code)


async def fibonacci(request: Request) -> JSONResponse:
    log.debug("received request", method=request.method, path=request.url.path)
    if request.method not in METHODS:
        # Starlette adds HEAD to GET routes
        raise HTTPException(status_code=404)
    pipeline: RequestPipeline = request.app.state.pipeline
    if request.method == "POST":
        return _respond(await pipeline.handle_body(await request.body()))
    return _respond(await pipeline.handle_query(request.query_params))


async def not_found(request: Request, exc: HTTPException) -> JSONResponse:
    log.warning("invalid request path", method=request.method, path=request.url.path)
    return JSONResponse(ErrorResponse(error=NOT_FOUND).model_dump(), status_code=404)


def create_app(
    settings: FibSettings | None = None,
    *,
    cache: FibCache | None | object = _FROM_SETTINGS,
    pool: ThreadPool | None = None,
    evaluator: Evaluator | None = None,
) -> Starlette:
    """Build the ASGI application.

    Args:
        settings: Configuration (defaults to environment via get_settings())
        cache: Cache to use; None runs uncached; omitted connects per settings
        pool: Thread pool to use; omitted creates one sized from settings
        evaluator: Replacement evaluator (tests)
    """
    settings = settings or get_settings()

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        configure_logging(settings.logging.format, settings.logging.level)
        log.info("starting fibonacci service")

        owns_pool = pool is None
        workers = pool or ThreadPool(max_workers=settings.server.workers)
        log.debug("created worker pool", workers=workers.max_workers)

        owns_cache = cache is _FROM_SETTINGS
        active: FibCache | None = (
            await connect_cache(settings.cache, workers) if owns_cache else cache  # type: ignore[assignment]
        )

        kwargs = {"evaluator": evaluator} if evaluator is not None else {}
        orchestrator = CacheAside(
            active, workers, ttl=settings.cache.ttl, prefix=settings.cache.key_prefix, **kwargs,
        )
        app.state.orchestrator = orchestrator
        app.state.pipeline = RequestPipeline(orchestrator, workers)

        log.info("send POST requests to /fibonacci with JSON", example='{"number": "a b"}')
        log.info("or GET requests to /fibonacci", example="/fibonacci?number=a+b")
        try:
            yield
        finally:
            log.info("stopping fibonacci service")
            if owns_cache and active is not None:
                await active.close()
                log.info("cache connection closed")
            if owns_pool:
                workers.shutdown(wait=False, cancel_futures=True)
                log.info("worker pool shut down")

    return Starlette(
        routes=[Route("/fibonacci", fibonacci, methods=list(METHODS))],
        exception_handlers={404: not_found, 405: not_found},
        lifespan=lifespan,
    )


def main() -> None:
    """Console entry point: serve on the configured host and port."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.logging.format, settings.logging.level)
    log.info("starting HTTP server", host=settings.server.host, port=settings.server.port)
    uvicorn.run(create_app(settings), host=settings.server.host, port=settings.server.port)


if __name__ == "__main__":
    main()
