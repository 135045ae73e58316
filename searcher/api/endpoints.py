"""API endpoints for the searcher service."""

import asyncio
from collections.abc import Awaitable
from typing import Annotated, TypeVar

import structlog
from fastapi import APIRouter, Depends, Path, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from searcher.models.requests import BidRequest, SignedBundleRequest
from searcher.models.responses import ApiResponse, BidResponse, BundleResponse
from searcher.models.types import AuthToken
from searcher.service import SearcherService

logger = structlog.get_logger()

router = APIRouter()

# Fixed body for backend failures. Error details stay in the server log.
INTERNAL_ERROR = "internal error"

# Only the shape is checked here; whether the token is known is up to the backend
AuthTokenPath = Annotated[
    AuthToken,
    Path(description="Auth token issued with the accepted bid (32 bytes hex)"),
]

T = TypeVar("T")


def get_service(request: Request) -> SearcherService:
    """Dependency provider for the backend instance.

    Override this in tests to inject a fake backend:
        app.dependency_overrides[get_service] = lambda: fake_service

    Returns:
        The service shared by every request to this app.
    """
    return request.app.state.service


def get_service_timeout(request: Request) -> float | None:
    """Per-call deadline in seconds for backend calls, or None for no deadline."""
    return request.app.state.service_timeout


def envelope_response(envelope: ApiResponse) -> JSONResponse:
    """Answer 200 with the enveloped outcome.

    Negative business results (Decline, TipTooLow, ...) go through here too.
    """
    return JSONResponse(status_code=200, content=envelope.model_dump(mode="json"))


def internal_error_response() -> PlainTextResponse:
    """Answer 500 with the fixed opaque body."""
    return PlainTextResponse(INTERNAL_ERROR, status_code=500)


async def _call_service(call: Awaitable[T], timeout: float | None) -> T:
    if timeout is None:
        return await call
    return await asyncio.wait_for(call, timeout=timeout)


@router.post("/bid", response_model=ApiResponse[BidResponse])
async def bid(
    bid_request: BidRequest,
    service: SearcherService = Depends(get_service),
    timeout: float | None = Depends(get_service_timeout),
) -> Response:
    """Submit a bid for transaction inclusion.

    Error Handling:
        - Invalid request schema: Returns 422 Validation Error (Pydantic)
        - Backend exception or deadline: Logs error, returns 500 "internal error"
        - Backend returns something other than a bid outcome: same as an exception
    """
    try:
        response = await _call_service(service.bid(bid_request), timeout)
        envelope = ApiResponse[BidResponse](response=response)
    except TimeoutError:
        logger.error("service_timeout", operation="bid", timeout_seconds=timeout)
        return internal_error_response()
    except Exception:
        logger.exception("bid_error")
        return internal_error_response()

    logger.info("responding_to_bid", response=str(response))
    return envelope_response(envelope)


@router.post("/accept/{auth}", response_model=ApiResponse[BundleResponse])
async def bundle_with_auth(
    auth: AuthTokenPath,
    bundle_request: SignedBundleRequest,
    service: SearcherService = Depends(get_service),
    timeout: float | None = Depends(get_service_timeout),
) -> Response:
    """Submit a signed transaction, presenting the auth token from the bid."""
    return await _bundle(service, bundle_request, auth, timeout)


@router.post("/accept", response_model=ApiResponse[BundleResponse])
async def bundle_without_auth(
    bundle_request: SignedBundleRequest,
    service: SearcherService = Depends(get_service),
    timeout: float | None = Depends(get_service_timeout),
) -> Response:
    """Submit a signed transaction without an auth token."""
    return await _bundle(service, bundle_request, None, timeout)


async def _bundle(
    service: SearcherService,
    bundle_request: SignedBundleRequest,
    auth: AuthToken | None,
    timeout: float | None,
) -> Response:
    try:
        response = await _call_service(service.bundle(bundle_request, auth), timeout)
        envelope = ApiResponse[BundleResponse](response=response)
    except TimeoutError:
        logger.error("service_timeout", operation="bundle", timeout_seconds=timeout)
        return internal_error_response()
    except Exception:
        logger.exception("bundle_error", has_auth=auth is not None)
        return internal_error_response()

    logger.info("responding_to_bundle", response=str(response), has_auth=auth is not None)
    return envelope_response(envelope)
