"""Unit tests for API error handling."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from searcher.api.main import create_app
from searcher.models.requests import BidRequest, SignedBundleRequest
from searcher.models.responses import Accept, BidResponse, BundleResponse, Bundled, Decline
from searcher.models.types import AuthToken
from tests.helpers import TOKEN, make_bid_payload, make_bundle_payload
from tests.helpers.fakes import ExplodingSearcher, MockSearcher


class TestBackendExceptionHandling:
    """Backend failures become an opaque 500."""

    @pytest.mark.parametrize(
        ("path", "payload"),
        [
            ("/bid", make_bid_payload()),
            ("/accept", make_bundle_payload()),
            (f"/accept/{TOKEN}", make_bundle_payload()),
        ],
    )
    def test_backend_error_returns_opaque_500(self, exploding_client, path, payload):
        response = exploding_client.post(path, json=payload)

        assert response.status_code == 500
        assert response.text == "internal error"

    @pytest.mark.parametrize("path", ["/bid", "/accept"])
    def test_error_text_not_leaked(self, exploding_client, path):
        payload = make_bid_payload() if path == "/bid" else make_bundle_payload()

        response = exploding_client.post(path, json=payload)

        assert ExplodingSearcher.SECRET not in response.text
        assert "hunter2" not in str(response.headers)
        assert "RuntimeError" not in response.text

    def test_one_backend_call_per_request(self, exploding_client, exploding_searcher):
        """Failures are not retried."""
        exploding_client.post("/bid", json=make_bid_payload())
        assert exploding_searcher.calls == 1

    def test_server_keeps_serving_after_error(self, exploding_client):
        exploding_client.post("/bid", json=make_bid_payload())
        response = exploding_client.get("/healthcheck")
        assert response.status_code == 200


class TestOffContractOutcomes:
    """A backend returning something outside its variant set is a backend failure."""

    @pytest.mark.parametrize(
        ("service", "path", "payload"),
        [
            (MockSearcher(bid_response=Bundled()), "/bid", make_bid_payload()),
            (MockSearcher(bundle_response=Decline()), "/accept", make_bundle_payload()),
            (
                MockSearcher(bundle_response=Accept(tip=1, block=2)),
                f"/accept/{TOKEN}",
                make_bundle_payload(),
            ),
        ],
        ids=["bid-gets-bundled", "bundle-gets-decline", "authed-bundle-gets-accept"],
    )
    def test_wrong_variant_returns_opaque_500(self, service, path, payload):
        response = TestClient(create_app(service)).post(path, json=payload)

        assert response.status_code == 500
        assert response.text == "internal error"

    def test_none_returns_opaque_500(self):
        class NoneSearcher(MockSearcher):
            async def bid(self, request: BidRequest) -> BidResponse:
                return None  # type: ignore[return-value]

        response = TestClient(create_app(NoneSearcher())).post("/bid", json=make_bid_payload())

        assert response.status_code == 500
        assert response.text == "internal error"


class TestServiceTimeout:
    """Optional per-call deadline around backend calls."""

    class SlowSearcher:
        """Backend slower than any deadline under test."""

        async def bid(self, request: BidRequest) -> BidResponse:
            await asyncio.sleep(10)
            raise AssertionError("deadline should have expired")

        async def bundle(
            self, request: SignedBundleRequest, auth: AuthToken | None
        ) -> BundleResponse:
            await asyncio.sleep(10)
            raise AssertionError("deadline should have expired")

    @pytest.mark.parametrize("path", ["/bid", "/accept"])
    def test_deadline_expiry_returns_500(self, path):
        app = create_app(self.SlowSearcher(), service_timeout=0.05)
        payload = make_bid_payload() if path == "/bid" else make_bundle_payload()

        with TestClient(app) as client:
            response = client.post(path, json=payload)

        assert response.status_code == 500
        assert response.text == "internal error"

    def test_no_deadline_by_default(self, mock_searcher):
        app = create_app(mock_searcher)
        assert app.state.service_timeout is None


class TestMalformedBodies:
    """Decode failures are client errors and never reach the backend."""

    def test_invalid_json(self, client, mock_searcher):
        response = client.post(
            "/bid",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 422
        assert mock_searcher.bid_calls == []

    def test_missing_body(self, client, mock_searcher):
        response = client.post("/bid")

        assert response.status_code == 422
        assert mock_searcher.bid_calls == []

    def test_bid_missing_tip(self, client, mock_searcher):
        payload = make_bid_payload()
        del payload["tip"]

        response = client.post("/bid", json=payload)

        assert response.status_code == 422
        assert "detail" in response.json()
        assert mock_searcher.bid_calls == []

    def test_tip_out_of_range(self, client, mock_searcher):
        response = client.post("/bid", json=make_bid_payload(tip=str(2**255)))

        assert response.status_code == 422
        assert mock_searcher.bid_calls == []

    def test_bundle_missing_raw_tx(self, client, mock_searcher):
        response = client.post(f"/accept/{TOKEN}", json={"tip": "1"})

        assert response.status_code == 422
        assert mock_searcher.bundle_calls == []

    def test_bundle_body_not_an_object(self, client, mock_searcher):
        response = client.post("/accept", json=["rawTx", "0x"])

        assert response.status_code == 422
        assert mock_searcher.bundle_calls == []
