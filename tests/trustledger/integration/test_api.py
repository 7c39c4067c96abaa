"""Integration tests for the TrustLedger API via TestClient."""

import inspect

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from trustledger.api import register_error_handlers, routers
from trustledger.api.routes import broadcast_trust_score


@pytest.fixture()
def client():
    app = FastAPI()
    for router in routers:
        app.include_router(router)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def ledger(client):
    """Initialized ledger with one product registered over HTTP."""
    assert client.post("/access/initialize", json={"admin": "acct-admin"}).status_code == 201
    for role, account in (("ProductManager", "acct-manager"), ("Broadcaster", "acct-broadcaster")):
        response = client.post("/access/roles", json={"caller": "acct-admin", "role": role, "account": account})
        assert response.status_code == 201
    response = client.post(
        "/products", json={"caller": "acct-manager", "product_id": "prod-api", "vendor": "acct-vendor"}
    )
    assert response.status_code == 201
    return client


def _post_review(client, transaction_id="tx-1", rating=80, reviewer="acct-alice", product_id="prod-api"):
    return client.post(
        f"/products/{product_id}/reviews",
        json={"reviewer": reviewer, "transaction_id": transaction_id, "rating": rating},
    )


class TestAccessAPI:
    def test_double_initialize_conflicts(self, ledger):
        response = ledger.post("/access/initialize", json={"admin": "acct-other"})
        assert response.status_code == 409
        assert response.json()["error"] == "AlreadyExists"

    def test_grant_requires_admin(self, ledger):
        response = ledger.post(
            "/access/roles", json={"caller": "acct-alice", "role": "Broadcaster", "account": "acct-alice"}
        )
        assert response.status_code == 403
        assert response.json()["error"] == "Unauthorized"

    def test_pause_blocks_reviews(self, ledger):
        assert ledger.put("/access/pause", json={"caller": "acct-admin"}).status_code == 200
        response = _post_review(ledger)
        assert response.status_code == 423
        assert response.json()["error"] == "PausedState"

        assert ledger.put("/access/unpause", json={"caller": "acct-admin"}).status_code == 200
        assert _post_review(ledger).status_code == 201

    def test_revoke(self, ledger):
        response = ledger.put(
            "/access/roles/revoke",
            json={"caller": "acct-admin", "role": "Broadcaster", "account": "acct-broadcaster"},
        )
        assert response.status_code == 200


class TestProductAPI:
    def test_read_product(self, ledger):
        response = ledger.get("/products/prod-api")
        assert response.status_code == 200
        data = response.json()
        assert data["vendor"] == "acct-vendor"
        assert data["is_active"] is True
        assert data["total_reviews"] == 0

    def test_unknown_product_404(self, ledger):
        response = ledger.get("/products/prod-missing")
        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    def test_exists(self, ledger):
        assert ledger.get("/products/prod-api/exists").json()["exists"] is True
        assert ledger.get("/products/prod-missing/exists").json()["exists"] is False

    @pytest.mark.parametrize(
        "body",
        [
            {"caller": "acct-manager", "vendor": "acct-vendor"},
            {"caller": "acct-manager", "product_id": "", "vendor": "acct-vendor"},
            {"caller": "acct-manager", "product_id": "prod-new"},
            {"caller": "acct-manager", "product_id": "prod-new", "vendor": ""},
        ],
    )
    def test_missing_ids_400(self, ledger, body):
        response = ledger.post("/products", json=body)
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidInput"
        assert ledger.get("/products/prod-new/exists").json()["exists"] is False

    def test_duplicate_409(self, ledger):
        response = ledger.post(
            "/products", json={"caller": "acct-manager", "product_id": "prod-api", "vendor": "acct-vendor"}
        )
        assert response.status_code == 409

    def test_deactivate(self, ledger):
        response = ledger.put("/products/prod-api/active", json={"caller": "acct-vendor", "is_active": False})
        assert response.status_code == 200
        assert ledger.get("/products/prod-api").json()["is_active"] is False


class TestReviewAPI:
    def test_post_review(self, ledger):
        response = _post_review(ledger)
        assert response.status_code == 201
        assert response.json()["review_id"] == 0

    def test_read_review(self, ledger):
        _post_review(ledger)
        response = ledger.get("/reviews/0")
        assert response.status_code == 200
        assert response.json()["rating"] == 80
        assert response.json()["transaction_id"] == "tx-1"

    def test_missing_review_404(self, ledger):
        assert ledger.get("/reviews/5").status_code == 404

    def test_count(self, ledger):
        _post_review(ledger, transaction_id="tx-1")
        _post_review(ledger, transaction_id="tx-2")
        assert ledger.get("/reviews/count").json() == {"count": 2}

    def test_list_product_reviews(self, ledger):
        _post_review(ledger, transaction_id="tx-1", rating=10)
        _post_review(ledger, transaction_id="tx-2", rating=20)
        reviews = ledger.get("/products/prod-api/reviews").json()["reviews"]
        assert [r["rating"] for r in reviews] == [10, 20]

    def test_transaction_usage(self, ledger):
        _post_review(ledger)
        assert ledger.get("/transactions/tx-1").json() == {"transaction_id": "tx-1", "spent": True, "review_id": 0}
        assert ledger.get("/transactions/tx-2").json()["spent"] is False

    def test_reused_transaction_409(self, ledger):
        _post_review(ledger)
        response = _post_review(ledger, reviewer="acct-bob", rating=50)
        assert response.status_code == 409
        assert response.json()["error"] == "AlreadyUsed"

    def test_rating_out_of_range_400(self, ledger):
        response = _post_review(ledger, rating=101)
        assert response.status_code == 400
        assert response.json()["error"] == "OutOfRange"

    def test_vendor_review_403(self, ledger):
        response = _post_review(ledger, reviewer="acct-vendor")
        assert response.status_code == 403


class TestTrustScoreAPI:
    def test_score_after_reviews(self, ledger):
        _post_review(ledger, transaction_id="tx-1", rating=80)
        _post_review(ledger, transaction_id="tx-2", rating=60, reviewer="acct-bob")
        data = ledger.get("/products/prod-api/trust-score").json()
        assert data["total_reviews"] == 2
        assert data["average_rating"] == 7000

    def test_unknown_product_404(self, ledger):
        assert ledger.get("/products/prod-missing/trust-score").status_code == 404

    def test_batch(self, ledger):
        _post_review(ledger)
        response = ledger.post("/trust-scores/batch", json={"product_ids": ["prod-api", "prod-missing"]})
        scores = response.json()["scores"]
        assert scores[0]["average_rating"] == 8000
        assert scores[1] == {
            "product_id": "prod-missing",
            "total_reviews": 0,
            "average_rating": 0,
            "last_updated": None,
        }

    def test_history(self, ledger):
        _post_review(ledger, transaction_id="tx-1", rating=80)
        _post_review(ledger, transaction_id="tx-2", rating=60)
        entries = ledger.get("/products/prod-api/trust-score/history").json()["entries"]
        assert [e["average_rating"] for e in entries] == [8000, 7000]


class TestBroadcastAPI:
    def _broadcast(self, client):
        return client.post(
            "/products/prod-api/broadcasts",
            json={"caller": "acct-broadcaster", "destination_domain": 10, "destination_address": "0xdest"},
        )

    def test_broadcast_without_reviews_400(self, ledger):
        response = self._broadcast(ledger)
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidInput"

    def test_broadcast_and_read_back(self, ledger):
        _post_review(ledger)
        response = self._broadcast(ledger)
        assert response.status_code == 201
        message_id = response.json()["message_id"]

        data = ledger.get(f"/broadcasts/{message_id}").json()
        assert data["average_rating"] == 8000
        assert data["total_reviews"] == 1
        assert data["payload"].startswith("0x")
        assert data["snapshot"]["product_id"] == "prod-api"
        assert data["snapshot"]["average_rating"] == 8000
        assert data["snapshot"]["total_reviews"] == 1

    def test_broadcast_route_runs_in_threadpool(self):
        assert not inspect.iscoroutinefunction(broadcast_trust_score)

    def test_gateway_failure_502(self, ledger):
        _post_review(ledger)
        response = ledger.post("/broadcasts/gateway/configure", json={"should_succeed": False})
        assert response.status_code == 200
        assert response.json()["gateway"] == "FakeGateway"

        response = self._broadcast(ledger)
        assert response.status_code == 502
        assert response.json()["error"] == "RemoteSendFailure"

    def test_configure_forbidden_in_production(self, ledger, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "production")
        response = ledger.post("/broadcasts/gateway/configure", json={"should_succeed": False})
        assert response.status_code == 403
