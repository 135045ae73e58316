"""FastAPI application for the searcher service.

Note: Rate limiting and TLS are intentionally not implemented at the application
level. They belong to the infrastructure layer (reverse proxy / load balancer).
"""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from searcher.api.endpoints import router
from searcher.reference import get_default_service
from searcher.service import SearcherService

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("SEARCHER_HOST", "0.0.0.0")
PORT = int(os.environ.get("SEARCHER_PORT", "8000"))
DEBUG = os.environ.get("SEARCHER_DEBUG", "false").lower() in ("true", "1", "yes")

# Deadline for each backend call in seconds. Unset means no deadline.
_timeout_env = os.environ.get("SEARCHER_SERVICE_TIMEOUT")
SERVICE_TIMEOUT = float(_timeout_env) if _timeout_env else None

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = int(os.environ.get("SEARCHER_MAX_REQUEST_SIZE", str(1024 * 1024)))

UNKNOWN_ROUTE = "unknown route"


def create_app(
    service: SearcherService,
    *,
    service_timeout: float | None = None,
    max_request_size: int = MAX_REQUEST_SIZE,
) -> FastAPI:
    """Build the HTTP app around one shared backend instance.

    Args:
        service: Backend that makes every bid and bundle decision
        service_timeout: Optional deadline in seconds for each backend call
        max_request_size: Bodies with a larger Content-Length get a 413

    Returns:
        The FastAPI application
    """
    app = FastAPI(
        title="MEV Searcher API",
        description="Bid and bundle submission for block-space auctions",
        version="0.1.0",
    )
    app.state.service = service
    app.state.service_timeout = service_timeout

    @app.middleware("http")
    async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
        """Reject requests with body larger than max_request_size."""
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > max_request_size:
            return JSONResponse(status_code=413, content={"detail": "Request too large"})
        return await call_next(request)

    @app.exception_handler(StarletteHTTPException)
    async def unknown_route(request: Request, exc: StarletteHTTPException) -> Response:
        """Unmatched paths and methods both answer 404 "unknown route"."""
        if exc.status_code in (404, 405):
            return PlainTextResponse(UNKNOWN_ROUTE, status_code=404)
        return await http_exception_handler(request, exc)

    @app.get("/healthcheck")
    async def healthcheck() -> Response:
        """Liveness check. Never touches the backend."""
        return Response(status_code=200)

    app.include_router(router)
    return app


app = create_app(get_default_service(), service_timeout=SERVICE_TIMEOUT)


@dataclass
class SearcherServer:
    """Handle on a server started by serve().

    Attributes:
        server: The uvicorn server
        task: The task running it. Awaiting it waits for shutdown.
    """

    server: uvicorn.Server
    task: asyncio.Task[None]

    @property
    def started(self) -> bool:
        return self.server.started

    async def wait_started(self, timeout: float = 5.0) -> None:
        """Wait until the server is accepting connections.

        Raises:
            TimeoutError: If the server did not start within timeout
            RuntimeError: If the server task exited before starting
        """
        async with asyncio.timeout(timeout):
            while not self.server.started:
                if self.task.done():
                    raise RuntimeError("server exited before starting")
                await asyncio.sleep(0.01)

    async def shutdown(self) -> None:
        """Ask the server to exit and wait for it."""
        self.server.should_exit = True
        await self.task


def serve(
    service: SearcherService,
    host: str = HOST,
    port: int = PORT,
    *,
    service_timeout: float | None = SERVICE_TIMEOUT,
) -> SearcherServer:
    """Start serving a backend in the running event loop.

    Args:
        service: Backend implementation
        host: Address to bind
        port: Port to bind
        service_timeout: Optional deadline in seconds for each backend call

    Returns:
        A handle on the running server task
    """
    config = uvicorn.Config(
        create_app(service, service_timeout=service_timeout),
        host=host,
        port=port,
        log_level="info",
    )
    server = uvicorn.Server(config)
    task = asyncio.create_task(server.serve())
    logger.info("searcher_serving", host=host, port=port)
    return SearcherServer(server=server, task=task)


def run() -> None:
    """Run the searcher API server with the reference backend.

    Configuration via environment variables:
    - SEARCHER_HOST: Host to bind to (default: 0.0.0.0)
    - SEARCHER_PORT: Port to bind to (default: 8000)
    - SEARCHER_DEBUG: Enable debug/reload mode (default: false)
    - SEARCHER_SERVICE_TIMEOUT: Deadline per backend call in seconds (default: none)
    - SEARCHER_MAX_REQUEST_SIZE: Maximum body size in bytes (default: 1 MB)
    - SEARCHER_MIN_TIP: Minimum tip for the reference backend (default: 0)
    - SEARCHER_ISSUE_TOKENS: Whether the reference backend issues auth tokens (default: true)
    - SEARCHER_MAX_TOKENS: Outstanding tokens the reference backend keeps (default: 10000)
    """
    uvicorn.run(
        "searcher.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
