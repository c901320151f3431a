"""Tests for GET /api/channel."""

import pytest
from fastapi.testclient import TestClient

from packages.core.errors import (
    AccountTerminatedError,
    PermanentProviderError,
    ResolutionCancelledError,
    SubscriptionsPrivateError,
    TransientProviderError,
)
from tests.utils.fakes import GOOGLE_ID, FakeChannelProvider, make_record, make_result


@pytest.mark.unit
def test_resolves_handle(client: TestClient, provider: FakeChannelProvider) -> None:
    provider.script("lookup_by_handle", "Google", make_result(make_record()))

    response = client.get("/api/channel", params={"q": "@Google"})

    assert response.status_code == 200
    body = response.json()
    assert body["error"] is None
    data = body["data"]
    assert data["channel_id"] == GOOGLE_ID
    assert data["handle"] == "google"
    assert data["redirect"] is False
    assert data["partial"] is False
    assert data["provenance"]["kind"] == "handle"
    assert data["statistics"]["subscriber_count"] == 13_400_000


@pytest.mark.unit
def test_type_parameter_forces_kind(client: TestClient, provider: FakeChannelProvider) -> None:
    provider.script("lookup_by_username", "Google", make_result(make_record()))

    response = client.get("/api/channel", params={"q": "Google", "type": "username"})

    assert response.status_code == 200
    assert provider.calls[0] == ("lookup_by_username", "Google")


@pytest.mark.unit
def test_unknown_type_is_invalid_input(client: TestClient) -> None:
    response = client.get("/api/channel", params={"q": "Google", "type": "nickname"})

    assert response.status_code == 400
    assert response.json()["error"]["kind"] == "invalid_input"


@pytest.mark.unit
def test_missing_query_is_invalid_input(client: TestClient) -> None:
    response = client.get("/api/channel")

    assert response.status_code == 400
    assert response.json() == {
        "data": None,
        "error": {"kind": "invalid_input", "message": "Invalid request parameters: query.q"},
    }


@pytest.mark.unit
def test_blank_query_is_invalid_input(client: TestClient, provider: FakeChannelProvider) -> None:
    response = client.get("/api/channel", params={"q": "   "})

    assert response.status_code == 400
    assert response.json()["error"]["kind"] == "invalid_input"
    assert provider.calls == []


@pytest.mark.unit
def test_not_found(client: TestClient) -> None:
    response = client.get("/api/channel", params={"q": "@NoSuchChannelAnywhere"})

    assert response.status_code == 404
    assert response.json()["error"]["kind"] == "not_found"


@pytest.mark.unit
def test_terminated_channel_is_gone(client: TestClient, provider: FakeChannelProvider) -> None:
    provider.subscriptions = AccountTerminatedError("suspended")

    response = client.get("/api/channel", params={"q": GOOGLE_ID})

    assert response.status_code == 410
    assert response.json()["error"] == {
        "kind": "account_terminated",
        "message": "This channel has been terminated",
    }


@pytest.mark.unit
def test_all_candidates_failing_is_503(client: TestClient, provider: FakeChannelProvider) -> None:
    provider.script("lookup_by_id", GOOGLE_ID, TransientProviderError("reset"))

    response = client.get("/api/channel", params={"q": GOOGLE_ID})

    assert response.status_code == 503
    assert response.json()["error"]["kind"] == "all_candidates_failed"


@pytest.mark.unit
def test_permanent_failure_is_502(client: TestClient, provider: FakeChannelProvider) -> None:
    provider.script("lookup_by_handle", "Google", PermanentProviderError("quota exhausted"))

    response = client.get("/api/channel", params={"q": "@Google"})

    assert response.status_code == 502
    assert response.json()["error"]["kind"] == "permanent_provider_failure"


@pytest.mark.unit
def test_cancelled_resolution_is_499(client: TestClient, provider: FakeChannelProvider) -> None:
    provider.script("lookup_by_handle", "Google", ResolutionCancelledError("cancelled"))

    response = client.get("/api/channel", params={"q": "@Google"})

    assert response.status_code == 499
    assert response.json()["error"]["kind"] == "cancelled"


@pytest.mark.unit
def test_partial_enrichment_still_succeeds(
    client: TestClient, provider: FakeChannelProvider
) -> None:
    provider.script("lookup_by_handle", "Google", make_result(make_record()))
    provider.subscriptions = SubscriptionsPrivateError("private")

    response = client.get("/api/channel", params={"q": "@Google"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["partial"] is True
    assert data["subscriptions"] == {"unavailable": True, "reason": "private"}
    assert data["diagnostics"] == ["subscriptions unavailable: private"]


@pytest.mark.unit
def test_request_id_is_echoed(client: TestClient, provider: FakeChannelProvider) -> None:
    provider.script("lookup_by_handle", "Google", make_result(make_record()))

    response = client.get(
        "/api/channel", params={"q": "@Google"}, headers={"X-Request-ID": "req-42"}
    )

    assert response.headers["X-Request-ID"] == "req-42"
